import pytest

from app.errors import SinkError
from app.flow.controller import SelectionFlowController
from app.models.schemas import ExpenseRecord, Option, OptionCatalog, ResolvedDate, Session
from app.sink import build_record


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class FakeSink:
    """Record sink that keeps records in memory and can be told to fail."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.records: list[ExpenseRecord] = []

    async def create(self, session: Session, resolved_date: ResolvedDate) -> ExpenseRecord:
        if self.fail:
            raise SinkError()
        record = build_record(session, resolved_date)
        self.records.append(record)
        return record


@pytest.fixture
def catalog() -> OptionCatalog:
    return OptionCatalog(
        categories=(
            Option(id="c1", name="Еда", color_tag="green"),
            Option(id="c2", name="Транспорт", color_tag="blue"),
            Option(id="c3", name="Прочее", color_tag="gray"),
        ),
        subcategories=(
            Option(id="s1", name="Продукты", color_tag="green"),
            Option(id="s2", name="Такси", color_tag="blue"),
            Option(id="s3", name="Кафе", color_tag="green"),
            Option(id="s4", name="Метро", color_tag="blue"),
        ),
        accounts=(
            Option(id="a1", name="Наличные", color_tag="default"),
            Option(id="a2", name="Карта", color_tag="yellow"),
        ),
    )


@pytest.fixture
def sink() -> FakeSink:
    return FakeSink()


@pytest.fixture
def controller(catalog, sink) -> SelectionFlowController:
    return SelectionFlowController(catalog, sink)


@pytest.fixture
def failing_sink() -> FakeSink:
    return FakeSink(fail=True)
