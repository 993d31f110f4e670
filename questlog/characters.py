"""Party members and the extensible character model.

A member's stats are layered:

  base stats         fixed per class, always present (legacy model)
  dynamic attributes named numeric values; shadow base stats of the same id
  traits             arbitrary tagged facts with a source and timestamp
  relationships      directed, typed, strength-scored edges to other members
  experience data    total XP, per-skill XP, milestones

Reading an attribute checks dynamic attributes first and falls back to the
class's base stat, so an override never hides a stat that was not
overridden. All setters return a new member; the input is left untouched.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import JsonValue

from questlog.catalog import find_party_class
from questlog.migrations import CHARACTER_MIGRATIONS
from questlog.models import (
    CURRENT_CHARACTER_MODEL_VERSION,
    AttributeCategory,
    AttributeConstraints,
    AttributeValue,
    CharacterAttribute,
    CoreStats,
    ExperienceData,
    PartyMember,
    PartyMemberClass,
    Relationship,
    Trait,
    utcnow,
)

CORE_ATTRIBUTE_MIN = 1
CORE_ATTRIBUTE_MAX = 20


def create_character_attribute(
    value: AttributeValue,
    *,
    category: AttributeCategory = "custom",
    display_name: str | None = None,
    description: str | None = None,
    constraints: AttributeConstraints | Mapping[str, Any] | None = None,
) -> CharacterAttribute:
    return CharacterAttribute(
        value=value,
        category=category,
        display_name=display_name,
        description=description,
        constraints=constraints,
    )


def convert_core_stats_to_attributes(
    base_stats: CoreStats | Mapping[str, int],
) -> dict[str, CharacterAttribute]:
    """Lift fixed base stats into ``core`` dynamic attributes ranged 1-20."""
    stats = base_stats.model_dump() if isinstance(base_stats, CoreStats) else dict(base_stats)
    return {
        stat_name: create_character_attribute(
            value,
            category="core",
            display_name=stat_name[:1].upper() + stat_name[1:],
            description=f"Core {stat_name} attribute",
            constraints=AttributeConstraints(min=CORE_ATTRIBUTE_MIN, max=CORE_ATTRIBUTE_MAX),
        )
        for stat_name, value in stats.items()
    }


def create_party_member(
    name: str,
    class_id: str,
    custom_attributes: Mapping[str, str | int | float] | None = None,
    *,
    dynamic_attributes: Mapping[str, CharacterAttribute] | None = None,
    traits: Mapping[str, Trait] | None = None,
    relationships: Mapping[str, Relationship] | None = None,
    classes: Iterable[PartyMemberClass] | None = None,
) -> PartyMember | None:
    """Create a member of ``class_id``. Returns None if the class is unknown.

    Dynamic attributes are seeded from the class's base stats unless the
    caller supplies its own.
    """
    member_class = find_party_class(class_id, classes)
    if member_class is None:
        return None

    if dynamic_attributes is None:
        dynamic_attributes = convert_core_stats_to_attributes(member_class.base_stats)

    return PartyMember(
        id=f"member_{uuid.uuid4().hex}",
        name=name.strip(),
        member_class=member_class,
        level=1,
        custom_attributes=dict(custom_attributes) if custom_attributes is not None else None,
        created_at=utcnow(),
        model_version=CURRENT_CHARACTER_MODEL_VERSION,
        dynamic_attributes=dict(dynamic_attributes),
        relationships=dict(relationships or {}),
        traits=dict(traits or {}),
        experience_data=ExperienceData(),
        extension_data={},
    )


def set_character_attribute(
    member: PartyMember,
    attribute_id: str,
    value: AttributeValue,
    *,
    category: AttributeCategory = "custom",
    display_name: str | None = None,
    description: str | None = None,
    constraints: AttributeConstraints | Mapping[str, Any] | None = None,
) -> PartyMember:
    attributes = dict(member.dynamic_attributes or {})
    attributes[attribute_id] = create_character_attribute(
        value,
        category=category,
        display_name=display_name,
        description=description,
        constraints=constraints,
    )
    return member.model_copy(update={
        "dynamic_attributes": attributes,
        "model_version": CURRENT_CHARACTER_MODEL_VERSION,
    })


def get_character_attribute(member: PartyMember, attribute_id: str) -> AttributeValue | None:
    """Resolve an attribute: dynamic attributes, then class base stats, then None."""
    attribute = (member.dynamic_attributes or {}).get(attribute_id)
    if attribute is not None:
        return attribute.value
    return member.member_class.base_stats.model_dump().get(attribute_id)


def set_character_trait(
    member: PartyMember,
    trait_id: str,
    value: JsonValue,
    source: str | None = None,
) -> PartyMember:
    traits = dict(member.traits or {})
    traits[trait_id] = Trait(value=value, source=source, acquired_at=utcnow())
    return member.model_copy(update={
        "traits": traits,
        "model_version": CURRENT_CHARACTER_MODEL_VERSION,
    })


def set_character_relationship(
    member: PartyMember,
    target_id: str,
    relationship_type: str,
    strength: AttributeValue,
    data: JsonValue = None,
) -> PartyMember:
    """Record how ``member`` regards ``target_id``.

    The edge is one-way. A mutual bond needs a second call on the target.
    """
    relationships = dict(member.relationships or {})
    relationships[target_id] = Relationship(type=relationship_type, strength=strength, data=data)
    return member.model_copy(update={
        "relationships": relationships,
        "model_version": CURRENT_CHARACTER_MODEL_VERSION,
    })


@CHARACTER_MIGRATIONS.step(1)
def _add_extensible_fields(member: PartyMember) -> PartyMember:
    update: dict[str, Any] = {}
    if member.dynamic_attributes is None:
        update["dynamic_attributes"] = convert_core_stats_to_attributes(member.member_class.base_stats)
    if member.traits is None:
        update["traits"] = {}
    if member.relationships is None:
        update["relationships"] = {}
    if member.experience_data is None:
        update["experience_data"] = ExperienceData()
    return member.model_copy(update=update)


def migrate_character_model(member: PartyMember) -> PartyMember:
    """Bring a member up to the current model version. No-op when current."""
    stored_version = member.model_version or 0
    if stored_version >= CURRENT_CHARACTER_MODEL_VERSION:
        return member

    migrated = CHARACTER_MIGRATIONS.apply(member, stored_version)
    return migrated.model_copy(update={"model_version": CURRENT_CHARACTER_MODEL_VERSION})
