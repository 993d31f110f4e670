"""GameState envelope and its text form.

A GameState wraps one adventure's progress with the ids storage needs. The
envelope heals its ``progress_data`` on construction, so invalid or legacy
progress never raises here. Decoding drops envelope fields it cannot read.
Only text that cannot be encoded, or that is not a JSON object, raises.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from questlog.models import ProgressData, Timestamp
from questlog.progress import ensure_progress_data

logger = logging.getLogger(__name__)


class GameStateError(Exception):
    """Base class for game state encoding failures."""


class SerializationError(GameStateError):
    pass


class DeserializationError(GameStateError):
    pass


class GameState(BaseModel):
    """Stored record of one session's run through one story."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    session_id: str | None = None
    story_id: str | None = None
    current_node_id: str | None = None
    progress_data: ProgressData = Field(default=None, validate_default=True)
    created_at: Timestamp | None = None
    updated_at: Timestamp | None = None

    @field_validator("progress_data", mode="before")
    @classmethod
    def _heal_progress_data(cls, value: Any) -> ProgressData:
        return ensure_progress_data(value)


def _progress_payload(progress: Any) -> dict[str, Any]:
    return ensure_progress_data(progress).model_dump(mode="json", by_alias=True)


def serialize_game_state(game_state: GameState | Mapping[str, Any]) -> str:
    """Encode a game state as JSON text.

    Raises:
        SerializationError: If the envelope holds a value JSON cannot encode.
    """
    try:
        if isinstance(game_state, GameState):
            payload = game_state.model_dump(mode="json", by_alias=True)
        else:
            payload = dict(game_state)
            payload["progress_data"] = _progress_payload(payload.get("progress_data"))
            for key, value in payload.items():
                if isinstance(value, datetime):
                    payload[key] = value.isoformat()
        return json.dumps(payload)
    except (TypeError, ValueError) as exc:
        logger.error("Error serializing game state: %s", exc)
        raise SerializationError("Failed to serialize game state") from exc


def deserialize_game_state(text: str | bytes) -> GameState:
    """Decode JSON text into a GameState, healing its progress data.

    Envelope fields of the wrong type are dropped with a warning; missing ones
    stay None.

    Raises:
        DeserializationError: If the text is not JSON or not a JSON object.
    """
    try:
        payload = json.loads(text)
    except (TypeError, ValueError) as exc:
        logger.error("Error deserializing game state: %s", exc)
        raise DeserializationError("Failed to deserialize game state") from exc

    if not isinstance(payload, dict):
        raise DeserializationError(
            f"Serialized game state must be a JSON object, got {type(payload).__name__}"
        )

    try:
        return GameState.model_validate(payload)
    except ValidationError as exc:
        unreadable = {str(err["loc"][0]) for err in exc.errors() if err["loc"]}
    logger.warning("Dropping unreadable game state fields: %s", ", ".join(sorted(unreadable)))
    return GameState.model_validate(
        {key: value for key, value in payload.items() if key not in unreadable}
    )
