from app.flow.sessions import SessionStore
from app.parsing.entry import parse_entry


def test_create_get_pop():
    store = SessionStore()

    session = store.create(1, parse_entry("100 кофе"))

    assert store.get(1) is session
    assert 1 in store
    assert store.pop(1) is session
    assert store.get(1) is None
    assert store.pop(1) is None


def test_new_entry_replaces_previous_session():
    store = SessionStore()
    store.create(1, parse_entry("100 кофе"))
    store.get(1).category = "Еда"

    session = store.create(1, parse_entry("200 такси USD"))

    assert len(store) == 1
    assert store.get(1) is session
    assert session.category is None
    assert session.amount == 200


def test_sessions_are_per_user():
    store = SessionStore()
    store.create(1, parse_entry("100 кофе"))
    store.create(2, parse_entry("300 обед"))

    assert store.get(1).title == "кофе"
    assert store.get(2).title == "обед"


def test_discard_only_removes_the_same_session():
    store = SessionStore()
    old = store.create(1, parse_entry("100 кофе"))
    new = store.create(1, parse_entry("200 такси"))

    assert store.discard(old) is False
    assert store.get(1) is new
    assert store.discard(new) is True
    assert store.get(1) is None
