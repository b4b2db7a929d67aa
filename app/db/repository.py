from typing import Any

from anyio import to_thread
from tinydb import Query, TinyDB

from app.errors import SinkError
from app.models.schemas import ExpenseRecord, Option, ResolvedDate, Session
from app.sink import build_record


class LocalLedger:
    """Local stand-in for the Notion table, stored in a TinyDB JSON file.

    The "schema" table holds one document per property in the same shape the
    Notion API returns, so the catalog loader reads both the same way.
    """

    def __init__(self, db_path: str = "expense_ledger.json"):
        self.db = TinyDB(db_path)
        self.schema = self.db.table("schema")
        self.records = self.db.table("records")

    def set_select_options(self, name: str, options: list[Option]) -> None:
        Prop = Query()
        self.schema.upsert(
            {
                "name": name,
                "type": "select",
                "select": {
                    "options": [
                        {"id": o.id, "name": o.name, "color": o.color_tag} for o in options
                    ]
                },
            },
            Prop.name == name,
        )

    async def retrieve_schema(self) -> dict[str, Any]:
        return {doc["name"]: dict(doc) for doc in self.schema.all()}

    async def create(self, session: Session, resolved_date: ResolvedDate) -> ExpenseRecord:
        record = build_record(session, resolved_date)
        try:
            # TinyDB writes the whole file; keep that off the event loop.
            await to_thread.run_sync(self.records.insert, record.model_dump(mode="json"))
        except (OSError, ValueError) as e:
            raise SinkError() from e
        return record

    def get_all(self) -> list[ExpenseRecord]:
        return [ExpenseRecord(**doc) for doc in self.records.all()]

    async def aclose(self) -> None:
        self.db.close()
