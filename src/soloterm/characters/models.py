"""Character and attribute records with their field validators.

An attribute sheet is stored flat: every Attribute carries a group number
and a position inside that group. Position 0 is the group's header; rows
at position 1 and up are its children, in ascending order.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from soloterm.core.exceptions import FieldError, field_errors_from


MIN_NAME_LENGTH = 1
MAX_NAME_LENGTH = 50
MIN_SYSTEM_LENGTH = 1
MAX_SYSTEM_LENGTH = 50
MIN_ROLE_LENGTH = 1
MAX_ROLE_LENGTH = 50
MIN_SPECIES_LENGTH = 1
MAX_SPECIES_LENGTH = 50

MIN_ATTRIBUTE_NAME_LENGTH = 1
MAX_ATTRIBUTE_NAME_LENGTH = 50
MIN_ATTRIBUTE_VALUE_LENGTH = 0
MAX_ATTRIBUTE_VALUE_LENGTH = 50

HEADER_POSITION = 0


# =============================================================================
# Records
# =============================================================================


@dataclass
class Character:
    """A tracked character.

    Attributes:
        name: Character name.
        system: Game system the character is played in.
        role: Class, job or archetype.
        species: Species or ancestry.
        id: Database id; 0 until persisted.
        created_at: Set by the store on insert.
        updated_at: Refreshed by the store on every update.
    """

    name: str
    system: str
    role: str
    species: str
    id: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: Any) -> Character:
        """Create from database row."""
        return cls(
            id=row["id"],
            name=row["name"],
            system=row["system"],
            role=row["role"],
            species=row["species"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


@dataclass
class Attribute:
    """One name/value row on a character sheet.

    Attributes:
        character_id: Owning character.
        group: Group number; rows sharing it form one group.
        position_in_group: 0 for the header, 1.. for children.
        name: Entry name (HP, Skills, Gear...).
        value: Entry value; may be blank.
        id: Database id; 0 until persisted.
        created_at: Set by the store on insert.
        updated_at: Refreshed by the store on every update.
        group_count: Rows in this row's group (read-only, set on fetch).
        child_count: Rows in this row's group past the header (read-only).
    """

    character_id: int
    group: int
    position_in_group: int
    name: str
    value: str = ""
    id: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    group_count: int = 0
    child_count: int = 0

    @property
    def is_header(self) -> bool:
        return self.position_in_group == HEADER_POSITION

    @property
    def is_child(self) -> bool:
        return self.position_in_group > HEADER_POSITION

    @property
    def sort_key(self) -> tuple[int, int, datetime]:
        """Sheet order: group, then position, then creation time."""
        return (self.group, self.position_in_group, self.created_at or datetime.min)

    @classmethod
    def from_row(cls, row: Any) -> Attribute:
        """Create from database row.

        The derived ``group_count``/``child_count`` columns are optional.
        """
        keys = row.keys()
        return cls(
            id=row["id"],
            character_id=row["character_id"],
            group=row["attribute_group"],
            position_in_group=row["position_in_group"],
            name=row["name"],
            value=row["value"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
            group_count=row["group_count"] if "group_count" in keys else 0,
            child_count=row["child_count"] if "child_count" in keys else 0,
        )


# =============================================================================
# Validators
# =============================================================================


class CharacterFields(BaseModel):
    """Constraints on a character's editable fields."""

    model_config = ConfigDict(strict=True, extra="ignore")

    name: str = Field(
        min_length=MIN_NAME_LENGTH,
        max_length=MAX_NAME_LENGTH,
        description="Character name",
    )
    system: str = Field(
        min_length=MIN_SYSTEM_LENGTH,
        max_length=MAX_SYSTEM_LENGTH,
        description="Game system",
    )
    role: str = Field(
        min_length=MIN_ROLE_LENGTH,
        max_length=MAX_ROLE_LENGTH,
        description="Class, job or archetype",
    )
    species: str = Field(
        min_length=MIN_SPECIES_LENGTH,
        max_length=MAX_SPECIES_LENGTH,
        description="Species or ancestry",
    )


class AttributeFields(BaseModel):
    """Constraints on a sheet entry.

    Field order is the order errors are reported in.
    """

    model_config = ConfigDict(strict=True, extra="ignore")

    name: str = Field(
        min_length=MIN_ATTRIBUTE_NAME_LENGTH,
        max_length=MAX_ATTRIBUTE_NAME_LENGTH,
        description="Entry name",
    )
    value: str = Field(
        default="",
        min_length=MIN_ATTRIBUTE_VALUE_LENGTH,
        max_length=MAX_ATTRIBUTE_VALUE_LENGTH,
        description="Entry value; may be blank",
    )
    character_id: int = Field(gt=0, description="Owning character")
    group: int = Field(ge=0, description="Group number")
    position_in_group: int = Field(ge=HEADER_POSITION, description="0 for the header")


def _check(fields: type[BaseModel], record: Character | Attribute) -> list[FieldError]:
    try:
        fields.model_validate(asdict(record))
    except PydanticValidationError as exc:
        return field_errors_from(exc)
    return []


def validate_character(character: Character) -> list[FieldError]:
    """Check a character's text fields.

    Returns:
        Field errors; empty if the character is valid.
    """
    return _check(CharacterFields, character)


def validate_attribute(attribute: Attribute) -> list[FieldError]:
    """Check an attribute's fields. Pure: no I/O, no side effects.

    Rules:
        character_id must be nonzero; name must be 1..50 characters;
        value must be 0..50 characters; group and position must not be
        negative.

    Returns:
        Field errors; empty if the attribute is valid.
    """
    return _check(AttributeFields, attribute)


__all__ = [
    "Character",
    "Attribute",
    "CharacterFields",
    "AttributeFields",
    "HEADER_POSITION",
    "validate_character",
    "validate_attribute",
    "MIN_ATTRIBUTE_NAME_LENGTH",
    "MAX_ATTRIBUTE_NAME_LENGTH",
    "MIN_ATTRIBUTE_VALUE_LENGTH",
    "MAX_ATTRIBUTE_VALUE_LENGTH",
]
