"""Game API endpoints."""

import logging
from fastapi import APIRouter, Depends, HTTPException, Header
from typing import Annotated

from api.presenter import outcome_to_response, snapshot_to_response
from api.schemas import ActionRequest, OutcomeResponse, RoundResponse, SessionResponse
from api.session import TableSession, extract_session_id, get_session_store

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_table(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> TableSession:
    """Resolve the signed session header to a live table."""
    raw_id = extract_session_id(session_id)
    if raw_id is None:
        raise HTTPException(status_code=401, detail="Invalid session token")

    table = get_session_store().get(raw_id)
    if table is None:
        raise HTTPException(status_code=404, detail="Session not found or expired")
    return table


Table = Annotated[TableSession, Depends(get_table)]


@router.post("/new")
async def new_game() -> SessionResponse:
    """Open a new table."""
    token, table = get_session_store().create()
    logger.info("Opened table %s", table.session_id)
    return SessionResponse(session_id=token)


@router.get("/state")
async def get_state(table: Table) -> RoundResponse:
    """Get current round state."""
    return snapshot_to_response(table.game.snapshot(), table)


@router.post("/action")
async def table_action(request: ActionRequest, table: Table) -> RoundResponse:
    """
    Execute a table action.

    Hit and stand outside the player's turn, and deal while a round is in
    progress, return the unchanged state.
    """
    actions = {
        "deal": table.deal,
        "hit": table.hit,
        "stand": table.stand,
        "restart": table.restart,
    }
    snapshot = actions[request.action]()
    return snapshot_to_response(snapshot, table)


@router.get("/outcome")
async def get_outcome(table: Table) -> OutcomeResponse | None:
    """Get the outcome of the resolved round, or null."""
    return outcome_to_response(table.game.get_outcome())


@router.delete("/session", status_code=204)
async def end_session(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> None:
    """Close a table."""
    raw_id = extract_session_id(session_id)
    if raw_id is None or not get_session_store().delete(raw_id):
        raise HTTPException(status_code=404, detail="Session not found")
