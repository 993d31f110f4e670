"""Core domain models.

Every save-game record is a frozen pydantic model. Updates are copy-on-write
(``model_copy(update=...)``), so a snapshot handed to a caller never changes
underneath it.

Attributes are snake_case; the stored JSON uses the camelCase keys the web
client has always written (``visitedScenarios``, ``dynamicAttributes``,
``class``, ``totalXP`` ...). Both spellings are accepted on input.

Bag fields (``extension_data``, ``custom_attributes``, trait values) hold
plain JSON values and are passed through unvalidated. Nothing that an
invariant depends on lives inside one.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Literal, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, JsonValue
from pydantic.alias_generators import to_camel

# Schema generations. Bumping one of these is the only way to introduce a new
# stored shape; each bump needs a matching step in questlog.migrations.
CURRENT_VERSION = 1
CURRENT_CHARACTER_MODEL_VERSION = 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _assume_utc(value: datetime) -> datetime:
    # Older saves wrote naive ISO strings; they were always UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


Timestamp = Annotated[datetime, AfterValidator(_assume_utc)]
AttributeValue = Union[int, float]
AttributeCategory = Literal["core", "derived", "custom", "relationship"]
ExtensionData = dict[str, JsonValue]


class Record(BaseModel):
    """Base for stored records: frozen, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        protected_namespaces=(),
    )


# ---------------------------------------------------------------------------
# Progress data
# ---------------------------------------------------------------------------


class ChoiceRecord(Record):
    """One entry of the append-only choice log."""

    node_id: str
    choice_id: str
    choice_text: str = ""
    next_node_id: str
    timestamp: Timestamp = Field(default_factory=utcnow)


class InventoryItem(Record):
    name: str
    quantity: int = Field(default=1, ge=0)
    acquired_at: Timestamp = Field(default_factory=utcnow)
    description: str | None = None


class PlayerStat(Record):
    value: JsonValue
    last_updated: Timestamp = Field(default_factory=utcnow)


class GameplayStats(Record):
    start_time: Timestamp = Field(default_factory=utcnow)
    total_choices_made: int = Field(default=0, ge=0)
    current_play_session: str = ""


class ProgressData(Record):
    """A player's journey through one adventure."""

    visited_scenarios: list[str] = Field(default_factory=list)
    choice_history: list[ChoiceRecord] = Field(default_factory=list)
    inventory: dict[str, InventoryItem] = Field(default_factory=dict)
    player_stats: dict[str, PlayerStat] = Field(default_factory=dict)
    party: PartyConfiguration | None = None
    gameplay_stats: GameplayStats = Field(default_factory=GameplayStats)
    version: int = Field(default=CURRENT_VERSION, gt=0)


# ---------------------------------------------------------------------------
# Character model
# ---------------------------------------------------------------------------


class CoreStats(Record):
    """The six fixed base stats every class defines."""

    strength: int
    dexterity: int
    intelligence: int
    wisdom: int
    charisma: int
    constitution: int


class AttributeConstraints(Record):
    min: AttributeValue | None = None
    max: AttributeValue | None = None
    readonly: bool = False


class CharacterAttribute(Record):
    value: AttributeValue
    category: AttributeCategory = "custom"
    display_name: str | None = None
    description: str | None = None
    constraints: AttributeConstraints | None = None


class AttributeSchemaEntry(Record):
    type: Literal["number", "string", "boolean", "object"]
    required: bool = False
    default_value: JsonValue = None
    category: str | None = None


class PartyMemberClass(Record):
    """A catalog entry. Treated as read-only reference data."""

    id: str
    name: str
    description: str
    abilities: list[str] = Field(default_factory=list)
    base_stats: CoreStats
    model_version: int | None = None
    extended_attributes: dict[str, CharacterAttribute] | None = None
    attribute_schema: dict[str, AttributeSchemaEntry] | None = None
    relationship_types: list[str] | None = None
    trait_categories: list[str] | None = None
    extension_data: ExtensionData | None = None


class Trait(Record):
    value: JsonValue
    source: str | None = None
    acquired_at: Timestamp | None = None


class Relationship(Record):
    """A directed edge from the owning member to a target member."""

    type: str
    strength: AttributeValue
    data: JsonValue = None


class ExperienceData(Record):
    total_xp: int = Field(default=0, alias="totalXP")
    skill_xp: dict[str, int] = Field(default_factory=dict, alias="skillXP")
    milestones: list[str] = Field(default_factory=list)


class PartyMember(Record):
    id: str
    name: str
    member_class: PartyMemberClass = Field(alias="class")
    level: int = 1
    custom_attributes: dict[str, Union[str, int, float]] | None = None
    created_at: Timestamp = Field(default_factory=utcnow)
    # Records written before the extensible model carry no version at all.
    model_version: int = 0
    dynamic_attributes: dict[str, CharacterAttribute] | None = None
    relationships: dict[str, Relationship] | None = None
    traits: dict[str, Trait] | None = None
    experience_data: ExperienceData | None = None
    extension_data: ExtensionData | None = None


class PartyTrait(Record):
    value: JsonValue
    source: str | None = None
    effects: JsonValue = None


class PartyDynamics(Record):
    cohesion: AttributeValue = 50
    leadership: str | None = None  # member id
    specializations: dict[str, str] = Field(default_factory=dict)  # role -> member id


class PartyConfiguration(Record):
    members: list[PartyMember] = Field(default_factory=list)
    formation: str | None = None
    created_at: Timestamp = Field(default_factory=utcnow)
    max_size: int = 4
    model_version: int = 0
    party_traits: dict[str, PartyTrait] | None = None
    dynamics: PartyDynamics | None = None
    extension_data: ExtensionData | None = None


class PartyValidation(Record):
    is_valid: bool
    errors: list[str] = Field(default_factory=list)


class SavedParty(Record):
    """A party stored on its own, outside any adventure."""

    id: str
    session_id: str
    party_name: str
    party: PartyConfiguration
    created_at: Timestamp = Field(default_factory=utcnow)


ProgressData.model_rebuild()
