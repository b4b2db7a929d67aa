from fastapi import HTTPException, Request

from app.config import Settings, get_settings
from app.db.notion import NotionExpenseTable
from app.db.repository import LocalLedger
from app.flow.controller import SelectionFlowController


def build_table(settings: Settings) -> NotionExpenseTable | LocalLedger:
    """Schema source and record sink for the configured backend."""
    if settings.backend == "local":
        return LocalLedger(settings.local_db_path)
    return NotionExpenseTable.from_settings(
        settings.notion_api_key, settings.notion_db_id, settings.notion_version
    )


settings = get_settings()

table = build_table(settings)


def get_controller(request: Request) -> SelectionFlowController:
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise HTTPException(status_code=503, detail="Catalog is not loaded yet")
    return controller
