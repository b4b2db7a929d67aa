from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from app.deps import get_controller
from app.errors import ParseFailure, SelectionNotFound
from app.flow.callbacks import decode_callback
from app.flow.controller import SelectionFlowController
from app.models.schemas import (
    OptionCatalog,
    ParsedEntry,
    ParseRequest,
    Reply,
    SelectionRequest,
    Session,
)
from app.parsing.entry import parse_entry

router = APIRouter()


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/catalog", response_model=OptionCatalog)
def get_catalog(controller: SelectionFlowController = Depends(get_controller)):
    return controller.catalog


@router.post("/parse", response_model=ParsedEntry)
def parse_message(request: ParseRequest):
    logger.info("Parsing message: {}", request.message)
    try:
        return parse_entry(request.message)
    except ParseFailure as e:
        raise HTTPException(status_code=400, detail=str(e))


# Routes that touch sessions are coroutines so they share the event loop with the bot.
@router.post("/sessions/{user_id}/entries", response_model=Reply)
async def start_entry(
    user_id: int,
    request: ParseRequest,
    controller: SelectionFlowController = Depends(get_controller),
):
    try:
        return controller.start(user_id, request.message)
    except ParseFailure as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/sessions/{user_id}/selections", response_model=Reply)
async def choose_option(
    user_id: int,
    request: SelectionRequest,
    controller: SelectionFlowController = Depends(get_controller),
):
    try:
        selection = decode_callback(request.callback_data)
        return await controller.choose(user_id, selection)
    except SelectionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/sessions/{user_id}", response_model=Session)
async def get_session(user_id: int, controller: SelectionFlowController = Depends(get_controller)):
    session = controller.session(user_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.delete("/sessions/{user_id}")
async def cancel_session(user_id: int, controller: SelectionFlowController = Depends(get_controller)):
    if not controller.cancel(user_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"detail": "Session cancelled"}
