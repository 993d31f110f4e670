"""Tests for party members and the extensible character model."""

from questlog.catalog import create_extensible_character_class, find_party_class
from questlog.characters import (
    CORE_ATTRIBUTE_MAX,
    CORE_ATTRIBUTE_MIN,
    convert_core_stats_to_attributes,
    create_character_attribute,
    create_party_member,
    get_character_attribute,
    migrate_character_model,
    set_character_attribute,
    set_character_relationship,
    set_character_trait,
)
from questlog.models import CURRENT_CHARACTER_MODEL_VERSION, PartyMember


# ── create_party_member ──────────────────────────────────


def test_create_member():
    m = create_party_member("  Kira ", "rogue", {"background": "Street urchin"})
    assert m.name == "Kira"
    assert m.id.startswith("member_")
    assert m.member_class.id == "rogue"
    assert m.level == 1
    assert m.custom_attributes == {"background": "Street urchin"}
    assert m.model_version == CURRENT_CHARACTER_MODEL_VERSION
    assert m.traits == {}
    assert m.relationships == {}
    assert m.experience_data.total_xp == 0
    assert m.extension_data == {}


def test_create_member_unique_ids():
    a = create_party_member("A", "mage")
    b = create_party_member("B", "mage")
    assert a.id != b.id


def test_create_member_unknown_class():
    assert create_party_member("Nobody", "necromancer") is None


def test_create_member_from_custom_catalog():
    paladin = create_extensible_character_class(
        "paladin", "Paladin", "Holy knight.", ["Smite"],
        {"strength": 15, "dexterity": 10, "intelligence": 10,
         "wisdom": 13, "charisma": 14, "constitution": 14},
    )
    m = create_party_member("Aldric", "paladin", classes=[paladin])
    assert m.member_class.id == "paladin"
    assert get_character_attribute(m, "charisma") == 14
    assert create_party_member("Aldric", "mage", classes=[paladin]) is None


def test_create_member_seeds_core_attributes():
    m = create_party_member("Thrak", "barbarian")
    strength = m.dynamic_attributes["strength"]
    assert strength.value == 17
    assert strength.category == "core"
    assert strength.display_name == "Strength"
    assert strength.description == "Core strength attribute"
    assert strength.constraints.min == CORE_ATTRIBUTE_MIN
    assert strength.constraints.max == CORE_ATTRIBUTE_MAX
    assert set(m.dynamic_attributes) == {
        "strength", "dexterity", "intelligence", "wisdom", "charisma", "constitution",
    }


def test_create_member_with_own_attributes():
    own = {"luck": create_character_attribute(3)}
    m = create_party_member("Pip", "bard", dynamic_attributes=own)
    assert set(m.dynamic_attributes) == {"luck"}
    # Base stats still answer for anything not overridden
    assert get_character_attribute(m, "charisma") == 17


# ── Attributes ───────────────────────────────────────────


def test_character_attribute_defaults():
    attr = create_character_attribute(5)
    assert attr.category == "custom"
    assert attr.constraints is None


def test_convert_core_stats():
    attrs = convert_core_stats_to_attributes(find_party_class("priest").base_stats)
    assert attrs["wisdom"].value == 16
    assert attrs["wisdom"].display_name == "Wisdom"


def test_attribute_falls_back_to_base_stat():
    m = create_party_member("Elena", "mage", dynamic_attributes={})
    assert get_character_attribute(m, "strength") == find_party_class("mage").base_stats.strength


def test_attribute_override():
    m = create_party_member("Elena", "mage")
    updated = set_character_attribute(m, "strength", 12, category="core")
    assert get_character_attribute(updated, "strength") == 12
    assert get_character_attribute(m, "strength") == 8


def test_unknown_attribute():
    m = create_party_member("Elena", "mage")
    assert get_character_attribute(m, "sanity") is None


def test_custom_attribute_with_constraints():
    m = set_character_attribute(
        create_party_member("Elena", "mage"), "mana", 30,
        display_name="Mana", constraints={"min": 0, "max": 100, "readonly": False},
    )
    assert m.dynamic_attributes["mana"].constraints.max == 100
    assert m.dynamic_attributes["mana"].category == "custom"


# ── Traits and relationships ─────────────────────────────


def test_set_trait():
    m = create_party_member("Thrak", "barbarian")
    updated = set_character_trait(m, "temper", "short", source="personality")
    assert updated.traits["temper"].value == "short"
    assert updated.traits["temper"].source == "personality"
    assert updated.traits["temper"].acquired_at is not None
    assert m.traits == {}


def test_relationship_is_one_way():
    thrak = create_party_member("Thrak", "barbarian")
    elena = create_party_member("Elena", "mage")
    thrak = set_character_relationship(thrak, elena.id, "rivalry", 35, {"since": "the bridge"})
    assert thrak.relationships[elena.id].type == "rivalry"
    assert thrak.relationships[elena.id].strength == 35
    assert thrak.relationships[elena.id].data == {"since": "the bridge"}
    assert elena.relationships == {}


# ── Migration ────────────────────────────────────────────


def _legacy_member() -> PartyMember:
    return PartyMember(id="m1", name="Old Timer", member_class=find_party_class("priest"))


def test_migrate_legacy_member():
    m = migrate_character_model(_legacy_member())
    assert m.model_version == CURRENT_CHARACTER_MODEL_VERSION
    assert m.dynamic_attributes["wisdom"].value == 16
    assert m.traits == {}
    assert m.relationships == {}
    assert m.experience_data.total_xp == 0


def test_migrate_twice_is_noop():
    once = migrate_character_model(_legacy_member())
    assert migrate_character_model(once) is once


def test_migrate_keeps_existing_fields():
    legacy = _legacy_member().model_copy(update={"traits": {}, "relationships": None})
    legacy = set_character_trait(legacy, "devout", True).model_copy(update={"model_version": 0})
    m = migrate_character_model(legacy)
    assert m.traits["devout"].value is True
    assert m.relationships == {}


def test_setters_bump_legacy_version():
    m = set_character_attribute(_legacy_member(), "faith", 9)
    assert m.model_version == CURRENT_CHARACTER_MODEL_VERSION
