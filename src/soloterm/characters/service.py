"""Character and attribute sheet services.

Thin compositions of validator, store and ordering engine that the
presentation layer calls.
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
    group_attributes,
)
from soloterm.core.exceptions import ValidationError
from soloterm.core.logging import get_logger

logger = get_logger(__name__)


class AttributeSheetService:
    """Save, delete, fetch and reorder a character's sheet entries."""

    def __init__(
        self,
        store: AttributeStore,
        engine: AttributeOrderingEngine | None = None,
    ) -> None:
        self.store = store
        self.engine = engine or AttributeOrderingEngine(store)

    def save(self, attribute: Attribute) -> Attribute:
        """Validate then persist (insert or update).

        Raises:
            ValidationError: With the validator's field errors. Nothing is saved.
            NotFoundError: If updating an id that does not exist.
        """
        errors = validate_attribute(attribute)
        if errors:
            raise ValidationError("attribute failed validation", errors=errors)
        return self.store.save(attribute)

    def delete(self, attribute_id: int) -> int:
        """Remove one attribute; returns the rows removed (always 1)."""
        return self.store.delete(attribute_id)

    def get_by_id(self, attribute_id: int) -> Attribute:
        return self.store.get_by_id(attribute_id)

    def get_for_character(self, character_id: int) -> list[Attribute]:
        return self.store.get_for_character(character_id)

    def get_sheet(self, character_id: int) -> list[AttributeGroup]:
        """The character's attributes grouped header-first for display."""
        return group_attributes(self.store.get_for_character(character_id))

    def reorder(self, character_id: int, attribute_id: int, direction: int) -> int:
        """See ``AttributeOrderingEngine.reorder``."""
        return self.engine.reorder(character_id, attribute_id, direction)

    def move_group(self, character_id: int, attribute_id: int, direction: int) -> int:
        """See ``AttributeOrderingEngine.move_group``."""
        return self.engine.move_group(character_id, attribute_id, direction)


class CharacterService:
    """Character business logic."""

    def __init__(self, store: CharacterStore, attributes: AttributeSheetService) -> None:
        self.store = store
        self.attributes = attributes

    def save(self, character: Character) -> Character:
        """Validate then persist (insert or update).

        Raises:
            ValidationError: With the validator's field errors. Nothing is saved.
            NotFoundError: If updating an id that does not exist.
        """
        errors = validate_character(character)
        if errors:
            raise ValidationError("character failed validation", errors=errors)
        return self.store.save(character)

    def delete(self, character_id: int) -> int:
        """Delete a character and, by cascade, its whole sheet."""
        return self.store.delete(character_id)

    def get_by_id(self, character_id: int) -> Character:
        return self.store.get_by_id(character_id)

    def get_all(self) -> list[Character]:
        return self.store.get_all()

    def duplicate(self, character_id: int) -> Character:
        """Copy a character and every sheet entry as-is.

        The copy is named "<name> (Copy)". Attributes keep their group and
        position. Runs in one transaction: a failure leaves no partial copy.

        Raises:
            NotFoundError: If the source character does not exist.
            ValidationError: If the copy's name is too long.
        """
        with self.store.database.transaction():
            source = self.store.get_by_id(character_id)
            copy = self.save(
                Character(
                    name=f"{source.name} (Copy)",
                    system=source.system,
                    role=source.role,
                    species=source.species,
                )
            )

            for attribute in self.attributes.get_for_character(character_id):
                self.attributes.save(
                    Attribute(
                        character_id=copy.id,
                        group=attribute.group,
                        position_in_group=attribute.position_in_group,
                        name=attribute.name,
                        value=attribute.value,
                    )
                )

        logger.info(f"Duplicated character {character_id} as {copy.id}")
        return copy
