"""Saved party storage (standalone parties, grouped per session)."""

import hashlib
from datetime import datetime, timezone
from pathlib import Path

from questlog.models import PartyConfiguration, SavedParty
from questlog.party import (
    InvalidPartyError,
    migrate_party_configuration,
    validate_party_configuration,
)

from .core import is_safe_id, parties_dir, slugify


def _session_key(session_id: str) -> str:
    """Directory name for a session; distinct sessions never share one."""
    if is_safe_id(session_id):
        return session_id
    return "~" + hashlib.sha256(session_id.encode("utf-8")).hexdigest()


def _session_dir(session_id: str) -> Path:
    return parties_dir() / _session_key(session_id)


def _party_path(session_id: str, party_id: str) -> Path | None:
    if not is_safe_id(party_id):
        return None
    return _session_dir(session_id) / f"{party_id}.json"


def _load(path: Path) -> SavedParty:
    saved = SavedParty.model_validate_json(path.read_text())
    return saved.model_copy(update={"party": migrate_party_configuration(saved.party)})


def list_saved_parties(session_id: str) -> list[SavedParty]:
    """Saved parties of a session, newest first. Returns [] if none exist."""
    session_dir = _session_dir(session_id)
    if not session_dir.is_dir():
        return []
    parties = [_load(path) for path in sorted(session_dir.glob("*.json"))]
    parties = [saved for saved in parties if saved.session_id == session_id]
    parties.sort(key=lambda saved: saved.created_at, reverse=True)
    return parties


def get_saved_party(session_id: str, party_id: str) -> SavedParty | None:
    path = _party_path(session_id, party_id)
    if path is None or not path.is_file():
        return None
    saved = _load(path)
    return saved if saved.session_id == session_id else None


def is_party_name_available(session_id: str, party_name: str) -> bool:
    """Case-insensitive check against the session's saved party names."""
    wanted = party_name.strip().lower()
    return not any(
        saved.party_name.lower() == wanted for saved in list_saved_parties(session_id)
    )


def save_party(
    session_id: str, party: PartyConfiguration, party_name: str
) -> SavedParty | None:
    """Store a party under a name. Returns None if the name is already taken.

    Raises:
        ValueError: If ``party_name`` is blank.
        InvalidPartyError: If the party breaks a composition rule.
    """
    party_name = party_name.strip()
    if not party_name:
        raise ValueError("party_name must be a non-empty string")

    migrated = migrate_party_configuration(party)
    validation = validate_party_configuration(migrated)
    if not validation.is_valid:
        raise InvalidPartyError(validation.errors)

    if not is_party_name_available(session_id, party_name):
        return None

    session_dir = _session_dir(session_id)
    session_dir.mkdir(parents=True, exist_ok=True)
    base_slug = slugify(party_name)
    target_slug = base_slug
    counter = 2
    while (session_dir / f"{target_slug}.json").exists():
        target_slug = f"{base_slug}-{counter}"
        counter += 1

    saved = SavedParty(
        id=target_slug,
        session_id=session_id,
        party_name=party_name,
        party=migrated,
        created_at=datetime.now(timezone.utc),
    )
    (session_dir / f"{target_slug}.json").write_text(
        saved.model_dump_json(by_alias=True, indent=2)
    )
    return saved


def delete_saved_party(session_id: str, party_id: str) -> bool:
    if get_saved_party(session_id, party_id) is None:
        return False
    _party_path(session_id, party_id).unlink()
    return True
