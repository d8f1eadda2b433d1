"""Integration tests for AttributeStore."""

from __future__ import annotations

import time
from typing import Callable

import pytest

from soloterm.characters import Attribute, AttributeStore, Character, CharacterStore
from soloterm.core.exceptions import NotFoundError


AddAttribute = Callable[..., Attribute]


class TestSave:
    """Insert and update."""

    def test_insert_assigns_id_and_timestamps(
        self,
        attribute_store: AttributeStore,
        character: Character,
    ) -> None:
        attribute = Attribute(character.id, 0, 1, "Health", "10")

        saved = attribute_store.save(attribute)

        assert saved is attribute
        assert saved.id != 0
        assert saved.created_at is not None
        assert saved.updated_at == saved.created_at

    def test_update_refreshes_updated_at_only(
        self,
        attribute_store: AttributeStore,
        add_attribute: AddAttribute,
    ) -> None:
        attribute = add_attribute(0, 1, "Health", "10")
        first_created_at = attribute.created_at
        first_updated_at = attribute.updated_at

        time.sleep(0.01)
        attribute.name = "Max Health"
        attribute.value = "15"
        attribute_store.save(attribute)

        assert attribute.created_at == first_created_at
        assert attribute.updated_at > first_updated_at

        reloaded = attribute_store.get_by_id(attribute.id)
        assert reloaded.name == "Max Health"
        assert reloaded.value == "15"
        assert reloaded.created_at == first_created_at

    def test_update_missing_id(self, attribute_store: AttributeStore, character: Character) -> None:
        with pytest.raises(NotFoundError):
            attribute_store.save(Attribute(character.id, 0, 0, "Ghost", id=999999))


class TestDeleteAndFetch:
    """Delete, get_by_id."""

    def test_delete(self, attribute_store: AttributeStore, add_attribute: AddAttribute) -> None:
        attribute = add_attribute(0, 0, "HP")

        assert attribute_store.delete(attribute.id) == 1
        with pytest.raises(NotFoundError):
            attribute_store.get_by_id(attribute.id)

    @pytest.mark.parametrize("attribute_id", [0, 999999])
    def test_delete_missing(self, attribute_store: AttributeStore, attribute_id: int) -> None:
        with pytest.raises(NotFoundError):
            attribute_store.delete(attribute_id)

    @pytest.mark.parametrize("attribute_id", [0, 999999])
    def test_get_missing(self, attribute_store: AttributeStore, attribute_id: int) -> None:
        with pytest.raises(NotFoundError):
            attribute_store.get_by_id(attribute_id)

    def test_deleting_header_leaves_children(
        self,
        attribute_store: AttributeStore,
        add_attribute: AddAttribute,
        character: Character,
    ) -> None:
        header = add_attribute(0, 0, "Skills")
        add_attribute(0, 1, "Swords")

        attribute_store.delete(header.id)

        remaining = attribute_store.get_for_character(character.id)
        assert [(a.name, a.position_in_group) for a in remaining] == [("Swords", 1)]


class TestGetForCharacter:
    """Ordered fetch with derived group counts."""

    def test_order_and_counts(
        self,
        attribute_store: AttributeStore,
        add_attribute: AddAttribute,
        character: Character,
    ) -> None:
        add_attribute(4, 0, "Gear")
        add_attribute(0, 2, "Current")
        add_attribute(0, 0, "HP")
        add_attribute(0, 1, "Max")
        add_attribute(2, 0, "XP")

        rows = attribute_store.get_for_character(character.id)

        assert [(a.name, a.group_count, a.child_count) for a in rows] == [
            ("HP", 3, 2),
            ("Max", 3, 2),
            ("Current", 3, 2),
            ("XP", 1, 0),
            ("Gear", 1, 0),
        ]

    def test_created_at_breaks_ties(
        self,
        attribute_store: AttributeStore,
        add_attribute: AddAttribute,
        character: Character,
    ) -> None:
        add_attribute(0, 1, "First")
        time.sleep(0.01)
        add_attribute(0, 1, "Second")

        rows = attribute_store.get_for_character(character.id)

        assert [a.name for a in rows] == ["First", "Second"]

    def test_scoped_to_character(
        self,
        attribute_store: AttributeStore,
        character_store: CharacterStore,
        add_attribute: AddAttribute,
        character: Character,
    ) -> None:
        other = character_store.save(Character("Other", "FlexD6", "Rogue", "Elf"))
        add_attribute(0, 0, "Mine")
        add_attribute(0, 0, "Theirs", character_id=other.id)

        assert [a.name for a in attribute_store.get_for_character(character.id)] == ["Mine"]
        assert [a.name for a in attribute_store.get_for_character(other.id)] == ["Theirs"]

    def test_unknown_character_is_empty(self, attribute_store: AttributeStore) -> None:
        assert attribute_store.get_for_character(999999) == []


class TestPositionalMutators:
    """set_position and swap_group_numbers."""

    def test_set_position(
        self,
        attribute_store: AttributeStore,
        add_attribute: AddAttribute,
    ) -> None:
        attribute = add_attribute(0, 1, "Max")
        time.sleep(0.01)

        attribute_store.set_position(attribute.id, 3, 2)

        reloaded = attribute_store.get_by_id(attribute.id)
        assert (reloaded.group, reloaded.position_in_group) == (3, 2)
        assert reloaded.updated_at > attribute.updated_at
        assert reloaded.created_at == attribute.created_at

    def test_set_position_missing(self, attribute_store: AttributeStore) -> None:
        with pytest.raises(NotFoundError):
            attribute_store.set_position(999999, 0, 0)

    def test_swap_group_numbers(
        self,
        attribute_store: AttributeStore,
        character_store: CharacterStore,
        add_attribute: AddAttribute,
        character: Character,
        layout: Callable[[int], dict[str, tuple[int, int]]],
    ) -> None:
        other = character_store.save(Character("Other", "FlexD6", "Rogue", "Elf"))
        add_attribute(0, 0, "HP")
        add_attribute(0, 1, "Max")
        add_attribute(1, 0, "Gear")
        add_attribute(2, 0, "Notes")
        add_attribute(0, 0, "Untouched", character_id=other.id)

        updated = attribute_store.swap_group_numbers(character.id, 0, 1)

        assert updated == 3
        assert layout(character.id) == {
            "Gear": (0, 0),
            "HP": (1, 0),
            "Max": (1, 1),
            "Notes": (2, 0),
        }
        assert layout(other.id) == {"Untouched": (0, 0)}

    def test_swap_same_group_is_noop(
        self,
        attribute_store: AttributeStore,
        add_attribute: AddAttribute,
        character: Character,
    ) -> None:
        add_attribute(0, 0, "HP")
        assert attribute_store.swap_group_numbers(character.id, 0, 0) == 0


class TestCascade:
    """Attributes follow their character."""

    def test_deleting_character_removes_attributes(
        self,
        attribute_store: AttributeStore,
        character_store: CharacterStore,
        add_attribute: AddAttribute,
        character: Character,
    ) -> None:
        attribute = add_attribute(0, 0, "HP")

        character_store.delete(character.id)

        assert attribute_store.get_for_character(character.id) == []
        with pytest.raises(NotFoundError):
            attribute_store.get_by_id(attribute.id)
