"""Party configurations: creation, validation, migration, and embedding.

Validation collects every broken rule instead of stopping at the first, so
a caller can show all of them at once. Duplicate classes across members are
allowed.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from questlog.catalog import find_party_class
from questlog.characters import migrate_character_model
from questlog.models import (
    CURRENT_CHARACTER_MODEL_VERSION,
    PartyConfiguration,
    PartyDynamics,
    PartyMember,
    PartyMemberClass,
    PartyTrait,
    PartyValidation,
    ProgressData,
    utcnow,
)


DEFAULT_PARTY_SIZE_LIMIT = 4
MIN_PARTY_SIZE = 1
DEFAULT_COHESION = 50


class InvalidPartyError(ValueError):
    """Raised when a party that breaks composition rules is stored."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = list(errors)
        super().__init__(f"Invalid party configuration: {', '.join(self.errors)}")


def _default_dynamics() -> PartyDynamics:
    return PartyDynamics(cohesion=DEFAULT_COHESION, specializations={})


def create_party_configuration(
    members: Iterable[PartyMember],
    formation: str | None = None,
    *,
    party_traits: Mapping[str, PartyTrait | Mapping[str, Any]] | None = None,
    dynamics: PartyDynamics | Mapping[str, Any] | None = None,
    max_size: int = DEFAULT_PARTY_SIZE_LIMIT,
) -> PartyConfiguration:
    """Build a party. Members are migrated on the way in."""
    return PartyConfiguration(
        members=[migrate_character_model(member) for member in members],
        formation=formation,
        created_at=utcnow(),
        max_size=max_size,
        model_version=CURRENT_CHARACTER_MODEL_VERSION,
        party_traits=dict(party_traits or {}),
        dynamics=dynamics if dynamics is not None else _default_dynamics(),
        extension_data={},
    )


def migrate_party_configuration(party: PartyConfiguration) -> PartyConfiguration:
    update: dict[str, Any] = {
        "members": [migrate_character_model(member) for member in party.members],
        "model_version": CURRENT_CHARACTER_MODEL_VERSION,
    }
    if party.party_traits is None:
        update["party_traits"] = {}
    if party.dynamics is None:
        update["dynamics"] = _default_dynamics()
    return party.model_copy(update=update)


def validate_party_configuration(
    party: PartyConfiguration,
    classes: Iterable[PartyMemberClass] | None = None,
) -> PartyValidation:
    """Check size bounds, names, and classes. Reports every violation."""
    errors: list[str] = []
    members = party.members

    if len(members) < MIN_PARTY_SIZE:
        errors.append(f"Party must have at least {MIN_PARTY_SIZE} member(s)")

    if len(members) > party.max_size:
        errors.append(f"Party cannot exceed {party.max_size} members")

    names = [member.name.strip().lower() for member in members]
    if len(set(names)) != len(names):
        errors.append("Party members must have unique names")

    if any(not name for name in names):
        errors.append("All party members must have names")

    catalog = list(classes) if classes is not None else None
    if any(find_party_class(member.member_class.id, catalog) is None for member in members):
        errors.append("All party members must have valid classes")

    return PartyValidation(is_valid=not errors, errors=errors)


def set_party_configuration(
    progress: ProgressData,
    party: PartyConfiguration,
    classes: Iterable[PartyMemberClass] | None = None,
) -> ProgressData:
    """Embed ``party`` in ``progress``.

    Raises:
        InvalidPartyError: If the migrated party breaks any composition rule.
    """
    migrated = migrate_party_configuration(party)
    validation = validate_party_configuration(migrated, classes)
    if not validation.is_valid:
        raise InvalidPartyError(validation.errors)
    return progress.model_copy(update={"party": migrated})


def get_party_configuration(progress: ProgressData) -> PartyConfiguration | None:
    """Return the embedded party, migrated to the current model version."""
    if progress.party is None:
        return None
    return migrate_party_configuration(progress.party)


def has_party_configuration(progress: ProgressData) -> bool:
    return progress.party is not None and len(progress.party.members) > 0


def generate_party_name(party: PartyConfiguration) -> str:
    """Suggest a name from the party's composition."""
    class_names = list(dict.fromkeys(member.member_class.name for member in party.members))

    if len(class_names) == 1:
        return f"{class_names[0]} Band"
    if len(class_names) == 2:
        return f"{' & '.join(class_names)} Team"
    if len(party.members) <= 2:
        return " & ".join(member.name for member in party.members)
    return f"The {class_names[0]}'s Party"
