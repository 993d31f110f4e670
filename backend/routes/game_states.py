"""Game state endpoints: create, look up, update, and record choices."""

from fastapi import APIRouter, HTTPException

from backend import storage
from questlog.progress import record_choice, record_visited_scenario

from .models import CreateGameState, RecordChoiceBody, UpdateGameState

router = APIRouter()


@router.post("/game-states", status_code=201)
async def create_game_state(body: CreateGameState):
    """Start a game state; invalid or legacy progress data is healed."""
    return storage.create_game_state(
        body.session_id, body.story_id, body.current_node_id, body.progress_data
    )


@router.get("/game-states")
async def find_game_state(session_id: str, story_id: str | None = None):
    """Most recent game state for a session (and story, if given)."""
    game_state = storage.find_game_state(session_id, story_id)
    if not game_state:
        raise HTTPException(404, "Game state not found")
    return game_state


@router.get("/game-states/{game_state_id}")
async def get_game_state(game_state_id: str):
    game_state = storage.get_game_state(game_state_id)
    if not game_state:
        raise HTTPException(404, "Game state not found")
    return game_state


@router.put("/game-states/{game_state_id}")
async def update_game_state(game_state_id: str, body: UpdateGameState):
    """Move to another node, optionally replacing the progress data."""
    updated = storage.update_game_state(game_state_id, body.current_node_id, body.progress_data)
    if not updated:
        raise HTTPException(404, "Game state not found")
    return updated


@router.delete("/game-states/{game_state_id}")
async def delete_game_state(game_state_id: str):
    if not storage.delete_game_state(game_state_id):
        raise HTTPException(404, "Game state not found")
    return {"ok": True}


@router.post("/game-states/{game_state_id}/choices")
async def make_choice(game_state_id: str, body: RecordChoiceBody):
    """Record a choice, mark both nodes visited, and move to the next node."""
    game_state = storage.get_game_state(game_state_id)
    if not game_state:
        raise HTTPException(404, "Game state not found")
    progress = record_visited_scenario(game_state.progress_data, body.node_id)
    progress = record_choice(
        progress, body.node_id, body.choice_id, body.choice_text, body.next_node_id
    )
    progress = record_visited_scenario(progress, body.next_node_id)
    return storage.save_game_state(
        game_state.model_copy(update={
            "current_node_id": body.next_node_id,
            "progress_data": progress,
        })
    )
