"""Built-in party member classes.

The catalog is fixed reference data. Party validation checks member classes
against it unless a caller passes its own list of classes.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from questlog.models import (
    CURRENT_CHARACTER_MODEL_VERSION,
    AttributeSchemaEntry,
    CharacterAttribute,
    CoreStats,
    PartyMemberClass,
)

DEFAULT_RELATIONSHIP_TYPES = ("friendship", "rivalry", "mentorship")
DEFAULT_TRAIT_CATEGORIES = ("personality", "background", "quirks")

DEFAULT_PARTY_CLASSES: tuple[PartyMemberClass, ...] = (
    PartyMemberClass(
        id="barbarian",
        name="Barbarian",
        description="A fierce warrior driven by primal rage and brute strength.",
        abilities=["Rage", "Reckless Attack", "Danger Sense"],
        base_stats=CoreStats(
            strength=17, dexterity=13, intelligence=8,
            wisdom=12, charisma=10, constitution=16,
        ),
    ),
    PartyMemberClass(
        id="mage",
        name="Mage",
        description="A wielder of arcane magic with powerful spells.",
        abilities=["Fireball", "Magic Shield", "Teleport"],
        base_stats=CoreStats(
            strength=8, dexterity=11, intelligence=17,
            wisdom=14, charisma=12, constitution=10,
        ),
    ),
    PartyMemberClass(
        id="priest",
        name="Priest",
        description="A divine spellcaster focused on healing and divine magic.",
        abilities=["Heal", "Bless", "Divine Protection"],
        base_stats=CoreStats(
            strength=12, dexterity=10, intelligence=13,
            wisdom=16, charisma=15, constitution=14,
        ),
    ),
    PartyMemberClass(
        id="rogue",
        name="Rogue",
        description="A stealthy character skilled in stealth and precision.",
        abilities=["Sneak Attack", "Lockpicking", "Poison Strike"],
        base_stats=CoreStats(
            strength=12, dexterity=17, intelligence=13,
            wisdom=12, charisma=14, constitution=11,
        ),
    ),
    PartyMemberClass(
        id="bard",
        name="Bard",
        description="A charismatic performer who weaves magic through music and words.",
        abilities=["Inspiration", "Charm Person", "Healing Song"],
        base_stats=CoreStats(
            strength=10, dexterity=14, intelligence=13,
            wisdom=12, charisma=17, constitution=12,
        ),
    ),
)


def get_available_party_classes() -> list[PartyMemberClass]:
    """Return the built-in classes in catalog order."""
    return list(DEFAULT_PARTY_CLASSES)


def find_party_class(
    class_id: str, classes: Iterable[PartyMemberClass] | None = None
) -> PartyMemberClass | None:
    """Look up a class by id. Returns None if the catalog has no such class."""
    for member_class in DEFAULT_PARTY_CLASSES if classes is None else classes:
        if member_class.id == class_id:
            return member_class
    return None


def create_extensible_character_class(
    id: str,
    name: str,
    description: str,
    abilities: Sequence[str],
    base_stats: CoreStats | Mapping[str, int],
    extended_attributes: Mapping[str, CharacterAttribute] | None = None,
    *,
    relationship_types: Sequence[str] | None = None,
    trait_categories: Sequence[str] | None = None,
    attribute_schema: Mapping[str, AttributeSchemaEntry | Mapping] | None = None,
) -> PartyMemberClass:
    """Build a class that carries the extensible-model fields.

    Relationship types and trait categories fall back to the defaults every
    built-in class implicitly supports.
    """
    return PartyMemberClass(
        id=id,
        name=name,
        description=description,
        abilities=list(abilities),
        base_stats=base_stats,
        model_version=CURRENT_CHARACTER_MODEL_VERSION,
        extended_attributes=dict(extended_attributes) if extended_attributes is not None else None,
        attribute_schema=dict(attribute_schema) if attribute_schema is not None else None,
        relationship_types=list(relationship_types or DEFAULT_RELATIONSHIP_TYPES),
        trait_categories=list(trait_categories or DEFAULT_TRAIT_CATEGORIES),
        extension_data={},
    )
