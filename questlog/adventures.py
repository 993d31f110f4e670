"""Adventure summaries: one line per game state for a session's listing."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from questlog.models import Record, Timestamp, utcnow
from questlog.progress import get_gameplay_duration, get_total_choices_made
from questlog.serialization import GameState

ABANDONED_AFTER_DAYS = 7

AdventureStatus = Literal["active", "completed", "abandoned"]


class ProgressSummary(Record):
    total_choices: int
    scenes_explored: int
    play_time: int  # minutes


class Adventure(BaseModel):
    """A game state as shown in an adventure list."""

    id: str | None
    session_id: str | None
    story_id: str | None
    title: str
    status: AdventureStatus
    started_at: Timestamp
    last_played_at: Timestamp
    current_node_id: str | None
    progress_summary: ProgressSummary


def adventure_status(last_played_at: datetime, now: datetime | None = None) -> AdventureStatus:
    """``abandoned`` once more than a week of whole days has passed, else ``active``."""
    elapsed = (now or utcnow()) - last_played_at
    return "abandoned" if elapsed.days > ABANDONED_AFTER_DAYS else "active"


def summarize_adventure(game_state: GameState, now: datetime | None = None) -> Adventure:
    now = now or utcnow()
    progress = game_state.progress_data
    started_at = game_state.created_at or now
    last_played_at = game_state.updated_at or game_state.created_at or now
    return Adventure(
        id=game_state.id,
        session_id=game_state.session_id,
        story_id=game_state.story_id,
        title=f"Adventure {(game_state.id or '')[-8:]}",
        status=adventure_status(last_played_at, now),
        started_at=started_at,
        last_played_at=last_played_at,
        current_node_id=game_state.current_node_id,
        progress_summary=ProgressSummary(
            total_choices=get_total_choices_made(progress),
            scenes_explored=len(progress.visited_scenarios),
            play_time=get_gameplay_duration(progress),
        ),
    )
