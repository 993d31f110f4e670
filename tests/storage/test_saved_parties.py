"""Tests for saved party storage."""

import pytest

from backend import storage
from questlog.catalog import find_party_class
from questlog.characters import create_party_member
from questlog.models import PartyConfiguration, PartyMember
from questlog.party import InvalidPartyError, create_party_configuration


def _party(*names):
    return create_party_configuration([create_party_member(name, "rogue") for name in names])


def test_save_and_get():
    saved = storage.save_party("s1", _party("Kira"), "  Night Watch ")
    assert saved.id == "night-watch"
    assert saved.party_name == "Night Watch"
    assert saved.session_id == "s1"

    loaded = storage.get_saved_party("s1", "night-watch")
    assert loaded.party_name == "Night Watch"
    assert loaded.party.members[0].name == "Kira"


def test_name_taken_case_insensitive():
    storage.save_party("s1", _party("Kira"), "Night Watch")
    assert storage.save_party("s1", _party("Vex"), "night watch") is None
    assert not storage.is_party_name_available("s1", "NIGHT WATCH ")
    assert storage.is_party_name_available("s1", "Day Watch")


def test_names_scoped_per_session():
    storage.save_party("s1", _party("Kira"), "Night Watch")
    assert storage.save_party("s2", _party("Kira"), "Night Watch") is not None


def test_slug_collision_gets_counter():
    first = storage.save_party("s1", _party("Kira"), "Band!")
    second = storage.save_party("s1", _party("Vex"), "Band?")
    assert first.id == "band"
    assert second.id == "band-2"


def test_blank_name_rejected():
    with pytest.raises(ValueError):
        storage.save_party("s1", _party("Kira"), "   ")


def test_invalid_party_rejected():
    with pytest.raises(InvalidPartyError) as excinfo:
        storage.save_party("s1", _party("Kira", "Kira"), "Twins")
    assert "Party members must have unique names" in excinfo.value.errors
    assert storage.list_saved_parties("s1") == []


def test_legacy_party_migrated():
    legacy = PartyConfiguration(
        members=[PartyMember(id="m1", name="Old", member_class=find_party_class("priest"))],
    )
    storage.save_party("s1", legacy, "Old Guard")
    party = storage.get_saved_party("s1", "old-guard").party
    assert party.model_version == 1
    assert party.members[0].dynamic_attributes["wisdom"].value == 16


def test_list():
    storage.save_party("s1", _party("Kira"), "Night Watch")
    storage.save_party("s1", _party("Vex"), "Day Watch")
    names = {saved.party_name for saved in storage.list_saved_parties("s1")}
    assert names == {"Night Watch", "Day Watch"}
    assert storage.list_saved_parties("nobody") == []


def test_get_missing():
    assert storage.get_saved_party("s1", "nope") is None
    assert storage.get_saved_party("s1", "../s2/x") is None


def test_delete():
    storage.save_party("s1", _party("Kira"), "Night Watch")
    assert storage.delete_saved_party("s1", "night-watch")
    assert storage.get_saved_party("s1", "night-watch") is None
    assert not storage.delete_saved_party("s1", "night-watch")


def test_sessions_differing_in_case_are_separate():
    storage.save_party("Alice", _party("Kira"), "Heroes")
    assert storage.list_saved_parties("alice") == []
    assert storage.get_saved_party("alice", "heroes") is None
    assert storage.is_party_name_available("alice", "Heroes")
    assert not storage.delete_saved_party("alice", "heroes")
    assert storage.get_saved_party("Alice", "heroes").party_name == "Heroes"


def test_sessions_with_unsafe_ids_are_separate():
    storage.save_party("!!!", _party("Kira"), "Heroes")
    assert storage.list_saved_parties("???") == []
    assert storage.save_party("???", _party("Vex"), "Heroes") is not None
    assert [saved.party.members[0].name for saved in storage.list_saved_parties("!!!")] == ["Kira"]
    assert [saved.party.members[0].name for saved in storage.list_saved_parties("???")] == ["Vex"]
