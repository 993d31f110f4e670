"""Tests for the demo data seeder."""

from backend import storage
from backend.demo import DEMO_SESSION_ID, DEMO_STORY_ID, create_demo_data


def test_demo_game_state():
    game_state = create_demo_data()
    stored = storage.find_game_state(DEMO_SESSION_ID, DEMO_STORY_ID)
    assert stored.id == game_state.id
    assert stored.current_node_id == "village-square"

    progress = stored.progress_data
    assert progress.visited_scenarios == ["village-gate", "village-square"]
    assert progress.gameplay_stats.total_choices_made == 1
    assert progress.inventory["torch"].quantity == 2
    assert progress.player_stats["reputation"].value == 3
    assert [m.member_class.id for m in progress.party.members] == ["barbarian", "mage", "bard"]


def test_demo_relationships_survive_storage():
    create_demo_data()
    party = storage.find_game_state(DEMO_SESSION_ID).progress_data.party
    thrak, elena, pip = party.members
    assert thrak.relationships[elena.id].type == "rivalry"
    assert elena.relationships[pip.id].strength == 80
    assert thrak.traits["temper"].value == "short"


def test_demo_saved_party():
    create_demo_data()
    saved = storage.list_saved_parties(DEMO_SESSION_ID)
    assert [s.party_name for s in saved] == ["The Barbarian's Party"]


def test_demo_replaces_existing_data():
    create_demo_data()
    create_demo_data()
    assert len(storage.list_game_states(DEMO_SESSION_ID)) == 1
    assert len(storage.list_saved_parties(DEMO_SESSION_ID)) == 1
