import threading

import pytest

from app.catalog import load_catalog
from app.db.repository import LocalLedger
from app.models import fields
from app.models.schemas import Option, ResolvedDate, Session


@pytest.fixture
def ledger(tmp_path):
    ledger = LocalLedger(str(tmp_path / "ledger.json"))
    yield ledger
    ledger.db.close()


@pytest.mark.anyio
async def test_catalog_from_local_schema(ledger):
    ledger.set_select_options(fields.CATEGORY, [Option(id="c1", name="Еда", color_tag="green")])
    ledger.set_select_options(fields.SUBCATEGORY, [Option(id="s1", name="Кафе", color_tag="green")])
    ledger.set_select_options(fields.ACCOUNT, [Option(id="a1", name="Карта")])

    catalog = await load_catalog(ledger)

    assert catalog.categories == (Option(id="c1", name="Еда", color_tag="green"),)
    assert catalog.subcategories_for(catalog.categories[0])[0].name == "Кафе"
    assert catalog.accounts[0].color_tag == "default"


@pytest.mark.anyio
async def test_setting_options_again_replaces_them(ledger):
    ledger.set_select_options(fields.ACCOUNT, [Option(id="a1", name="Карта")])
    ledger.set_select_options(fields.ACCOUNT, [Option(id="a2", name="Наличные")])

    catalog = await load_catalog(ledger)

    assert [o.name for o in catalog.accounts] == ["Наличные"]


@pytest.mark.anyio
async def test_create_stores_record(ledger):
    session = Session(
        user_id=1,
        amount=12.5,
        title="кофе",
        currency="GEL",
        category="Еда",
        subcategory="Кафе",
        account="Карта",
    )
    resolved = ResolvedDate(iso_date="2025-01-01", month_name="Январь", year="2025")

    await ledger.create(session, resolved)

    [record] = ledger.get_all()
    assert record.title == "кофе"
    assert record.currency == "GEL"
    assert record.month == "Январь"
    assert record.status == "Оплачено"


@pytest.mark.anyio
async def test_incomplete_session_is_never_written(ledger):
    session = Session(user_id=1, amount=1, title="x", currency="RUB", category="Еда")
    resolved = ResolvedDate(iso_date="2025-01-01", month_name="Январь", year="2025")

    with pytest.raises(ValueError):
        await ledger.create(session, resolved)

    assert ledger.get_all() == []


@pytest.mark.anyio
async def test_create_writes_off_the_event_loop(ledger):
    threads = []
    insert = ledger.records.insert

    def recording_insert(document):
        threads.append(threading.current_thread())
        return insert(document)

    ledger.records.insert = recording_insert
    session = Session(
        user_id=1, amount=5, title="чай", currency="RUB",
        category="Еда", subcategory="Кафе", account="Карта",
    )
    resolved = ResolvedDate(iso_date="2025-01-01", month_name="Январь", year="2025")

    await ledger.create(session, resolved)

    assert threads and threads[0] is not threading.current_thread()
    assert ledger.get_all()[0].title == "чай"
