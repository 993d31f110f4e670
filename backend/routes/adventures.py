"""Adventure listing: a session's game states with status and progress summary."""

from fastapi import APIRouter

from backend import storage
from questlog.adventures import summarize_adventure

router = APIRouter()


@router.get("/sessions/{session_id}/adventures")
async def list_adventures(session_id: str):
    """Adventures of a session, most recently played first."""
    return [summarize_adventure(gs) for gs in storage.list_game_states(session_id)]
