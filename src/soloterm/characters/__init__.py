"""Characters and their attribute sheets.

Exports:
    Records: Character, Attribute
    Validators: validate_character, validate_attribute
    Stores: CharacterStore, AttributeStore
    Ordering: Direction, AttributeGroup, AttributeOrderingEngine,
        group_attributes, find_ordering_violations
    Services: CharacterService, AttributeSheetService
"""

from __future__ import annotations

from soloterm.characters.attribute_store import AttributeStore
from soloterm.characters.character_store import CharacterStore
from soloterm.characters.models import (
    Attribute,
    Character,
    validate_attribute,
    validate_character,
)
from soloterm.characters.ordering import (
    AttributeGroup,
    AttributeOrderingEngine,
    Direction,
    find_ordering_violations,
    group_attributes,
)
from soloterm.characters.service import AttributeSheetService, CharacterService


__all__ = [
    "Character",
    "Attribute",
    "validate_character",
    "validate_attribute",
    "CharacterStore",
    "AttributeStore",
    "Direction",
    "AttributeGroup",
    "AttributeOrderingEngine",
    "group_attributes",
    "find_ordering_violations",
    "CharacterService",
    "AttributeSheetService",
]
