"""Tests for game state file storage."""

import json

from backend import storage
from questlog.progress import add_inventory_item, create_initial_progress_data


def test_create_and_get():
    gs = storage.create_game_state("s1", "story", "start")
    assert gs.created_at == gs.updated_at
    assert gs.progress_data.gameplay_stats.current_play_session == "s1"

    loaded = storage.get_game_state(gs.id)
    assert loaded.session_id == "s1"
    assert loaded.story_id == "story"
    assert loaded.current_node_id == "start"
    assert loaded.progress_data == gs.progress_data


def test_file_is_serialized_game_state():
    gs = storage.create_game_state("s1", "story", "start")
    payload = json.loads((storage.game_states_dir() / f"{gs.id}.json").read_text())
    assert payload["id"] == gs.id
    assert "visitedScenarios" in payload["progress_data"]


def test_create_with_legacy_progress():
    gs = storage.create_game_state("s1", "story", "start", {"gold": 40})
    assert storage.get_game_state(gs.id).progress_data.player_stats["gold"].value == 40


def test_get_missing():
    assert storage.get_game_state("nope") is None


def test_get_unsafe_id():
    assert storage.get_game_state("../game-states/x") is None


def test_legacy_file_healed_on_read():
    path = storage.game_states_dir() / "old1.json"
    path.write_text(json.dumps({
        "id": "old1",
        "session_id": "s1",
        "story_id": "story",
        "current_node_id": "cave",
        "progress_data": {"health": 100, "hasKey": True},
    }))
    gs = storage.get_game_state("old1")
    assert gs.progress_data.version == 1
    assert gs.progress_data.player_stats["health"].value == 100
    assert gs.progress_data.player_stats["hasKey"].value is True


def test_update_moves_node():
    gs = storage.create_game_state("s1", "story", "start")
    updated = storage.update_game_state(gs.id, "hall")
    assert updated.current_node_id == "hall"
    assert updated.updated_at >= gs.updated_at
    assert updated.created_at == gs.created_at
    assert storage.get_game_state(gs.id).current_node_id == "hall"


def test_update_replaces_progress():
    gs = storage.create_game_state("s1", "story", "start")
    progress = add_inventory_item(create_initial_progress_data("s1"), "rope", "Rope")
    storage.update_game_state(gs.id, "hall", progress)
    assert storage.get_game_state(gs.id).progress_data.inventory["rope"].name == "Rope"


def test_update_missing():
    assert storage.update_game_state("nope", "hall") is None


def test_save_game_state():
    gs = storage.create_game_state("s1", "story", "start")
    progress = add_inventory_item(gs.progress_data, "rope", "Rope", 2)
    stored = storage.save_game_state(gs.model_copy(update={"progress_data": progress}))
    assert stored.updated_at >= gs.updated_at
    assert storage.get_game_state(gs.id).progress_data.inventory["rope"].quantity == 2


def test_list_and_find():
    first = storage.create_game_state("s1", "story-a", "start")
    second = storage.create_game_state("s1", "story-b", "start")
    storage.create_game_state("s2", "story-a", "start")

    ids = {gs.id for gs in storage.list_game_states("s1")}
    assert ids == {first.id, second.id}
    assert storage.find_game_state("s1", "story-a").id == first.id
    assert storage.find_game_state("s1", "story-c") is None
    assert storage.find_game_state("nobody") is None


def test_find_returns_most_recently_updated():
    first = storage.create_game_state("s1", "story", "start")
    storage.create_game_state("s1", "story", "start")
    storage.update_game_state(first.id, "hall")
    assert storage.find_game_state("s1", "story").id == first.id


def test_delete():
    gs = storage.create_game_state("s1", "story", "start")
    assert storage.delete_game_state(gs.id)
    assert storage.get_game_state(gs.id) is None
    assert not storage.delete_game_state(gs.id)


def test_list_skips_unreadable_files():
    gs = storage.create_game_state("s1", "story", "start")
    (storage.game_states_dir() / "broken.json").write_text("not json")
    (storage.game_states_dir() / "array.json").write_text("[1, 2]")

    assert [found.id for found in storage.list_game_states("s1")] == [gs.id]
    assert storage.find_game_state("s1", "story").id == gs.id


def test_list_includes_files_with_broken_envelope():
    path = storage.game_states_dir() / "odd1.json"
    path.write_text(json.dumps({"id": "odd1", "session_id": "s1", "current_node_id": 7}))
    found = storage.list_game_states("s1")
    assert [gs.id for gs in found] == ["odd1"]
    assert found[0].current_node_id is None
