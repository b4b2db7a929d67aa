from typing import Any

import httpx
from loguru import logger
from notion_client import AsyncClient
from notion_client.errors import HTTPResponseError, RequestTimeoutError

from app.errors import SinkError
from app.models import fields
from app.models.schemas import ExpenseRecord, ResolvedDate, Session
from app.sink import build_record


def _select(name: str) -> dict:
    return {"select": {"name": name}}


def record_properties(record: ExpenseRecord) -> dict[str, Any]:
    """Notion page properties for one expense row."""
    return {
        fields.DATE: {"date": {"start": record.date}},
        fields.MONTH: _select(record.month),
        fields.YEAR: _select(record.year),
        fields.TITLE: {"title": [{"text": {"content": record.title}}]},
        fields.CATEGORY: _select(record.category),
        fields.SUBCATEGORY: _select(record.subcategory),
        fields.AMOUNT: {"number": record.amount},
        fields.CURRENCY: _select(record.currency),
        fields.ACCOUNT: _select(record.account),
        fields.OPERATION_TYPE: _select(record.operation_type),
        fields.STATUS: _select(record.status),
    }


class NotionExpenseTable:
    """Schema source and record sink backed by a Notion database."""

    def __init__(self, client: AsyncClient, database_id: str):
        self.client = client
        self.database_id = database_id

    @classmethod
    def from_settings(cls, api_key: str, database_id: str, notion_version: str) -> "NotionExpenseTable":
        return cls(AsyncClient(auth=api_key, notion_version=notion_version), database_id)

    async def retrieve_schema(self) -> dict[str, Any]:
        db = await self.client.databases.retrieve(database_id=self.database_id)
        return db.get("properties", {})

    async def create(self, session: Session, resolved_date: ResolvedDate) -> ExpenseRecord:
        record = build_record(session, resolved_date)
        try:
            page = await self.client.pages.create(
                parent={"database_id": self.database_id},
                properties=record_properties(record),
            )
        except (HTTPResponseError, RequestTimeoutError, httpx.HTTPError) as e:
            logger.exception("Notion page creation failed")
            raise SinkError() from e
        logger.debug("Created Notion page {}", page.get("id"))
        return record

    async def aclose(self) -> None:
        await self.client.aclose()
