"""Pydantic request/response models for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field

from questlog.models import PartyConfiguration


class CreateGameState(BaseModel):
    session_id: str
    story_id: str
    current_node_id: str
    progress_data: dict[str, Any] | None = None


class UpdateGameState(BaseModel):
    current_node_id: str
    progress_data: dict[str, Any] | None = None


class RecordChoiceBody(BaseModel):
    node_id: str
    choice_id: str
    choice_text: str = ""
    next_node_id: str


class SavePartyBody(BaseModel):
    party_name: str = Field(min_length=1)
    party: PartyConfiguration
