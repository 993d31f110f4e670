"""Game state file storage (one serialized GameState per file)."""

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from questlog.progress import create_initial_progress_data, ensure_progress_data
from questlog.serialization import (
    DeserializationError,
    GameState,
    deserialize_game_state,
    serialize_game_state,
)

from .core import game_states_dir, is_safe_id

logger = logging.getLogger(__name__)


def _game_state_path(game_state_id: str) -> Path | None:
    if not is_safe_id(game_state_id):
        return None
    return game_states_dir() / f"{game_state_id}.json"


def _write(game_state: GameState) -> None:
    path = game_states_dir() / f"{game_state.id}.json"
    path.write_text(serialize_game_state(game_state))
    logger.debug("wrote game state id=%s node=%s", game_state.id, game_state.current_node_id)


def create_game_state(
    session_id: str,
    story_id: str,
    current_node_id: str,
    progress_data: Any = None,
) -> GameState:
    """Start a game state. Fresh progress if none given, healed progress otherwise."""
    if progress_data is None:
        progress = create_initial_progress_data(session_id)
    else:
        progress = ensure_progress_data(progress_data)
    now = datetime.now(timezone.utc)
    game_state = GameState(
        id=uuid.uuid4().hex,
        session_id=session_id,
        story_id=story_id,
        current_node_id=current_node_id,
        progress_data=progress,
        created_at=now,
        updated_at=now,
    )
    _write(game_state)
    return game_state


def get_game_state(game_state_id: str) -> GameState | None:
    """Load a game state by id. Returns None if missing."""
    path = _game_state_path(game_state_id)
    if path is None or not path.is_file():
        return None
    return deserialize_game_state(path.read_text())


def list_game_states(session_id: str) -> list[GameState]:
    """All game states of a session, most recently updated first.

    Files that cannot be decoded are logged and skipped.
    """
    results = []
    for path in sorted(game_states_dir().glob("*.json")):
        try:
            game_state = deserialize_game_state(path.read_text())
        except DeserializationError as exc:
            logger.warning("Skipping unreadable game state file %s: %s", path.name, exc)
            continue
        if game_state.session_id == session_id:
            results.append(game_state)
    epoch = datetime.min.replace(tzinfo=timezone.utc)
    results.sort(key=lambda gs: gs.updated_at or gs.created_at or epoch, reverse=True)
    return results


def find_game_state(session_id: str, story_id: str | None = None) -> GameState | None:
    """Most recently updated game state of a session, optionally for one story."""
    for game_state in list_game_states(session_id):
        if story_id is None or game_state.story_id == story_id:
            return game_state
    return None


def save_game_state(game_state: GameState) -> GameState:
    """Persist ``game_state`` with a fresh ``updated_at``. Returns the stored copy."""
    stored = game_state.model_copy(update={
        "progress_data": ensure_progress_data(game_state.progress_data),
        "updated_at": datetime.now(timezone.utc),
    })
    _write(stored)
    return stored


def update_game_state(
    game_state_id: str, current_node_id: str, progress_data: Any = None
) -> GameState | None:
    """Move a game state to another node, optionally replacing its progress."""
    game_state = get_game_state(game_state_id)
    if game_state is None:
        return None
    update: dict[str, Any] = {"current_node_id": current_node_id}
    if progress_data is not None:
        update["progress_data"] = ensure_progress_data(progress_data)
    return save_game_state(game_state.model_copy(update=update))


def delete_game_state(game_state_id: str) -> bool:
    path = _game_state_path(game_state_id)
    if path is None or not path.is_file():
        return False
    path.unlink()
    return True
