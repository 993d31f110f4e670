"""Party class catalog, party validation, adventure parties, and saved parties."""

from fastapi import APIRouter, HTTPException

from backend import storage
from questlog.catalog import get_available_party_classes
from questlog.models import PartyConfiguration
from questlog.party import (
    InvalidPartyError,
    get_party_configuration,
    migrate_party_configuration,
    set_party_configuration,
    validate_party_configuration,
)

from .models import SavePartyBody

router = APIRouter()


@router.get("/party-classes")
async def list_party_classes():
    """List the classes a party member can take."""
    return get_available_party_classes()


@router.post("/party-configurations/validate")
async def validate_party(party: PartyConfiguration):
    """Check a party against the composition rules and report every problem."""
    return validate_party_configuration(migrate_party_configuration(party))


# ── Adventure party (embedded in a game state) ───────────


@router.get("/game-states/{game_state_id}/party")
async def get_adventure_party(game_state_id: str):
    game_state = storage.get_game_state(game_state_id)
    if not game_state:
        raise HTTPException(404, "Game state not found")
    party = get_party_configuration(game_state.progress_data)
    if party is None:
        raise HTTPException(404, "No party configured")
    return party


@router.put("/game-states/{game_state_id}/party")
async def set_adventure_party(game_state_id: str, party: PartyConfiguration):
    """Set the adventure's party. 400 with the full error list if invalid."""
    game_state = storage.get_game_state(game_state_id)
    if not game_state:
        raise HTTPException(404, "Game state not found")
    try:
        progress = set_party_configuration(game_state.progress_data, party)
    except InvalidPartyError as e:
        raise HTTPException(400, e.errors)
    stored = storage.save_game_state(game_state.model_copy(update={"progress_data": progress}))
    return stored.progress_data.party


# ── Saved parties (standalone, per session) ──────────────


@router.get("/sessions/{session_id}/parties")
async def list_saved_parties(session_id: str):
    return storage.list_saved_parties(session_id)


@router.post("/sessions/{session_id}/parties", status_code=201)
async def save_party(session_id: str, body: SavePartyBody):
    """Save a standalone party under a name unique within the session."""
    try:
        saved = storage.save_party(session_id, body.party, body.party_name)
    except InvalidPartyError as e:
        raise HTTPException(400, e.errors)
    except ValueError as e:
        raise HTTPException(400, str(e))
    if saved is None:
        raise HTTPException(409, "A saved party with this name already exists")
    return saved


@router.get("/sessions/{session_id}/parties/{party_id}")
async def get_saved_party(session_id: str, party_id: str):
    saved = storage.get_saved_party(session_id, party_id)
    if not saved:
        raise HTTPException(404, "Saved party not found")
    return saved


@router.delete("/sessions/{session_id}/parties/{party_id}")
async def delete_saved_party(session_id: str, party_id: str):
    if not storage.delete_saved_party(session_id, party_id):
        raise HTTPException(404, "Saved party not found")
    return {"ok": True}
