"""Progress data: creation, copy-on-write updates, validation, and migration.

Every update returns a new ProgressData and leaves its input alone.

Stored progress comes in three shapes, all accepted:

  current  all six required fields present, version == CURRENT_VERSION
  partial  has a version but some fields missing, empty, or unreadable
  legacy   no version at all; a free-form bag of stats from before saves
           were versioned

ensure_progress_data() is the one entry point for anything read from or
written to storage: it validates, and migrates on failure, so callers only
ever see the current shape. Nothing here raises on bad stored data; entries
that cannot be read are dropped and logged.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, JsonValue, ValidationError

from questlog.migrations import PROGRESS_MIGRATIONS
from questlog.models import (
    CURRENT_VERSION,
    ChoiceRecord,
    GameplayStats,
    InventoryItem,
    PartyConfiguration,
    PlayerStat,
    ProgressData,
    utcnow,
)
from questlog.party import migrate_party_configuration

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = (
    "visited_scenarios",
    "choice_history",
    "inventory",
    "player_stats",
    "gameplay_stats",
    "version",
)

LEGACY_SESSION = "legacy-migration"
MIGRATED_SESSION = "migrated"


# ---------------------------------------------------------------------------
# Creation and updates
# ---------------------------------------------------------------------------


def create_initial_progress_data(session_id: str) -> ProgressData:
    return ProgressData(
        gameplay_stats=GameplayStats(
            start_time=utcnow(),
            total_choices_made=0,
            current_play_session=session_id,
        ),
        version=CURRENT_VERSION,
    )


def record_choice(
    progress: ProgressData,
    node_id: str,
    choice_id: str,
    choice_text: str,
    next_node_id: str,
) -> ProgressData:
    """Append a choice to the history and bump the choice counter.

    Node ids are not checked against the story graph.
    """
    choice = ChoiceRecord(
        node_id=node_id,
        choice_id=choice_id,
        choice_text=choice_text,
        next_node_id=next_node_id,
        timestamp=utcnow(),
    )
    stats = progress.gameplay_stats
    return progress.model_copy(update={
        "choice_history": [*progress.choice_history, choice],
        "gameplay_stats": stats.model_copy(
            update={"total_choices_made": stats.total_choices_made + 1}
        ),
    })


def record_visited_scenario(progress: ProgressData, node_id: str) -> ProgressData:
    if node_id in progress.visited_scenarios:
        return progress
    return progress.model_copy(
        update={"visited_scenarios": [*progress.visited_scenarios, node_id]}
    )


def add_inventory_item(
    progress: ProgressData,
    item_id: str,
    name: str,
    quantity: int = 1,
    description: str | None = None,
) -> ProgressData:
    """Add ``quantity`` of an item.

    An item already held keeps its name and description; only the quantity
    grows. Adding nothing leaves the inventory as it is.
    """
    if quantity < 0:
        raise ValueError(f"quantity must not be negative, got {quantity}")
    if quantity == 0:
        return progress

    inventory = dict(progress.inventory)
    existing = inventory.get(item_id)
    if existing is not None:
        inventory[item_id] = existing.model_copy(
            update={"quantity": existing.quantity + quantity}
        )
    else:
        inventory[item_id] = InventoryItem(
            name=name,
            quantity=quantity,
            acquired_at=utcnow(),
            description=description,
        )
    return progress.model_copy(update={"inventory": inventory})


def remove_inventory_item(
    progress: ProgressData, item_id: str, quantity: int = 1
) -> ProgressData:
    """Take ``quantity`` of an item away. The entry goes once it reaches zero."""
    if quantity < 0:
        raise ValueError(f"quantity must not be negative, got {quantity}")

    existing = progress.inventory.get(item_id)
    if existing is None:
        return progress

    inventory = dict(progress.inventory)
    if existing.quantity <= quantity:
        del inventory[item_id]
    else:
        inventory[item_id] = existing.model_copy(
            update={"quantity": existing.quantity - quantity}
        )
    return progress.model_copy(update={"inventory": inventory})


def update_player_stat(progress: ProgressData, name: str, value: JsonValue) -> ProgressData:
    """Overwrite a stat. A stat name is not tied to one value type."""
    stats = dict(progress.player_stats)
    stats[name] = PlayerStat(value=value, last_updated=utcnow())
    return progress.model_copy(update={"player_stats": stats})


# ---------------------------------------------------------------------------
# Validation and migration
# ---------------------------------------------------------------------------


def _alias(name: str) -> str:
    return ProgressData.model_fields[name].alias or name


def _has_field(data: Mapping[str, Any], name: str) -> bool:
    return _alias(name) in data or name in data


def _read_field(data: Mapping[str, Any], name: str) -> Any:
    alias = _alias(name)
    if alias in data:
        return data[alias]
    return data.get(name)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_version(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def validate_progress_data(candidate: Any) -> bool:
    """Shallow structural check.

    Looks at the six required top-level fields only; nested records are not
    inspected. Accepts a ProgressData or a raw mapping with either camelCase
    or snake_case keys.
    """
    if isinstance(candidate, ProgressData):
        return candidate.version > 0
    if not isinstance(candidate, Mapping):
        return False
    if not all(_has_field(candidate, name) for name in _REQUIRED_FIELDS):
        return False

    if not _is_sequence(_read_field(candidate, "visited_scenarios")):
        return False
    if not _is_sequence(_read_field(candidate, "choice_history")):
        return False
    for name in ("inventory", "player_stats", "gameplay_stats"):
        if not isinstance(_read_field(candidate, name), Mapping):
            return False

    version = _read_field(candidate, "version")
    return _is_version(version) and version > 0


def _migrate_legacy(candidate: Any) -> ProgressData:
    logger.info("Migrating legacy progress data to version %d", CURRENT_VERSION)
    progress = create_initial_progress_data(LEGACY_SESSION)
    if not isinstance(candidate, Mapping):
        return progress

    now = utcnow()
    entries = {key: {"value": value, "last_updated": now} for key, value in candidate.items()}
    stats = _read_keyed_records(entries, PlayerStat, "legacy stat")
    return progress.model_copy(update={"player_stats": stats})


def _read_records(entries: Any, model: type[BaseModel], label: str) -> list:
    records = []
    for index, entry in enumerate(entries):
        try:
            records.append(model.model_validate(entry))
        except ValidationError as exc:
            logger.warning("Dropping unreadable %s entry %d (%d errors)", label, index, exc.error_count())
    return records


def _read_keyed_records(entries: Mapping[str, Any], model: type[BaseModel], label: str) -> dict:
    records = {}
    for key, entry in entries.items():
        if model is PlayerStat and not isinstance(entry, Mapping):
            entry = {"value": entry}
        try:
            records[str(key)] = model.model_validate(entry)
        except ValidationError as exc:
            logger.warning("Dropping unreadable %s entry %r (%d errors)", label, key, exc.error_count())
    return records


def _read_gameplay_stats(raw: Mapping[str, Any]) -> GameplayStats:
    try:
        return GameplayStats.model_validate(raw)
    except ValidationError:
        logger.warning("Unreadable gameplay stats, starting a fresh block")
        return GameplayStats(current_play_session=MIGRATED_SESSION)


def _read_party(raw: Any) -> PartyConfiguration | None:
    if raw is None:
        return None
    try:
        party = raw if isinstance(raw, PartyConfiguration) else PartyConfiguration.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Dropping unreadable party configuration (%d errors)", exc.error_count())
        return None
    return migrate_party_configuration(party)


def _fill_required_fields(candidate: Mapping[str, Any]) -> dict[str, Any]:
    """Return a snake_case copy with missing, empty, or mistyped fields defaulted."""
    data = {name: _read_field(candidate, name) for name in _REQUIRED_FIELDS}
    data["party"] = _read_field(candidate, "party") or None

    for name in ("visited_scenarios", "choice_history"):
        if not data[name] or not _is_sequence(data[name]):
            data[name] = []
    for name in ("inventory", "player_stats"):
        if not data[name] or not isinstance(data[name], Mapping):
            data[name] = {}
    if not data["gameplay_stats"] or not isinstance(data["gameplay_stats"], Mapping):
        data["gameplay_stats"] = {
            "start_time": utcnow(),
            "total_choices_made": 0,
            "current_play_session": MIGRATED_SESSION,
        }
    return data


def migrate_progress_data(candidate: Any) -> ProgressData:
    """Upgrade any stored progress to the current shape.

    Legacy data (not a mapping, or no version key) becomes a fresh record
    whose player stats hold every top-level key of the old bag. Anything with
    a version has its missing fields defaulted, runs through the progress
    migration chain, and is stamped with the current version.
    """
    if isinstance(candidate, ProgressData):
        party = _read_party(candidate.party)
        return candidate.model_copy(update={"version": CURRENT_VERSION, "party": party})

    if not isinstance(candidate, Mapping) or not _has_field(candidate, "version"):
        return _migrate_legacy(candidate)

    stored_version = _read_field(candidate, "version")
    if not _is_version(stored_version):
        stored_version = 0
    if stored_version < CURRENT_VERSION:
        logger.info("Migrating progress data from version %s to %d", stored_version, CURRENT_VERSION)

    data = PROGRESS_MIGRATIONS.apply(_fill_required_fields(candidate), int(stored_version))

    visited = [str(node_id) for node_id in data["visited_scenarios"]]
    return ProgressData(
        visited_scenarios=list(dict.fromkeys(visited)),
        choice_history=_read_records(data["choice_history"], ChoiceRecord, "choice history"),
        inventory=_read_keyed_records(data["inventory"], InventoryItem, "inventory"),
        player_stats=_read_keyed_records(data["player_stats"], PlayerStat, "player stat"),
        party=_read_party(data["party"]),
        gameplay_stats=_read_gameplay_stats(data["gameplay_stats"]),
        version=CURRENT_VERSION,
    )


def ensure_progress_data(candidate: Any) -> ProgressData:
    """Return ``candidate`` as current-version ProgressData, healing it if needed."""
    if isinstance(candidate, ProgressData) and candidate.version == CURRENT_VERSION:
        return candidate
    if not validate_progress_data(candidate):
        logger.warning("Invalid progress data detected, migrating")
    return migrate_progress_data(candidate)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def has_visited_scenario(progress: ProgressData, node_id: str) -> bool:
    return node_id in progress.visited_scenarios


def has_inventory_item(progress: ProgressData, item_id: str, min_quantity: int = 1) -> bool:
    item = progress.inventory.get(item_id)
    return item is not None and item.quantity >= min_quantity


def get_player_stat(progress: ProgressData, name: str) -> JsonValue | None:
    stat = progress.player_stats.get(name)
    return stat.value if stat is not None else None


def get_total_choices_made(progress: ProgressData) -> int:
    return progress.gameplay_stats.total_choices_made


def get_game_start_time(progress: ProgressData) -> datetime:
    return progress.gameplay_stats.start_time


def get_gameplay_duration(progress: ProgressData) -> int:
    """Whole minutes since the game started, measured now."""
    elapsed = utcnow() - progress.gameplay_stats.start_time
    return int(elapsed.total_seconds() // 60)
