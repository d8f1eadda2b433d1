"""Tests for character and attribute records and their validators."""

from __future__ import annotations

from datetime import datetime

import pytest

from soloterm.characters.models import (
    Attribute,
    Character,
    validate_attribute,
    validate_character,
)


def make_attribute(**overrides: object) -> Attribute:
    fields: dict[str, object] = {
        "character_id": 1,
        "group": 0,
        "position_in_group": 0,
        "name": "HP",
        "value": "10/10",
    }
    fields.update(overrides)
    return Attribute(**fields)  # type: ignore[arg-type]


class TestAttribute:
    """Tests for the Attribute record."""

    def test_new_attribute_is_unsaved(self) -> None:
        attribute = make_attribute()
        assert attribute.id == 0
        assert attribute.created_at is None
        assert attribute.updated_at is None

    def test_header_and_child(self) -> None:
        assert make_attribute(position_in_group=0).is_header
        assert not make_attribute(position_in_group=0).is_child
        assert make_attribute(position_in_group=2).is_child
        assert not make_attribute(position_in_group=2).is_header


class TestValidateAttribute:
    """Tests for attribute field rules."""

    def test_valid_attribute(self) -> None:
        assert validate_attribute(make_attribute()) == []

    def test_blank_value_is_allowed(self) -> None:
        assert validate_attribute(make_attribute(value="")) == []

    @pytest.mark.parametrize("length", [1, 50])
    def test_name_length_bounds_accepted(self, length: int) -> None:
        assert validate_attribute(make_attribute(name="x" * length)) == []

    def test_empty_name(self) -> None:
        errors = validate_attribute(make_attribute(name=""))

        assert [error.field for error in errors] == ["name"]
        assert errors[0].messages == ["String should have at least 1 character"]

    def test_name_too_long(self) -> None:
        errors = validate_attribute(make_attribute(name="x" * 51))
        assert [error.field for error in errors] == ["name"]
        assert errors[0].messages == ["String should have at most 50 characters"]

    def test_value_too_long(self) -> None:
        errors = validate_attribute(make_attribute(value="x" * 51))
        assert [error.field for error in errors] == ["value"]
        assert errors[0].messages == ["String should have at most 50 characters"]

    def test_character_required(self) -> None:
        errors = validate_attribute(make_attribute(character_id=0))
        assert [error.field for error in errors] == ["character_id"]
        assert errors[0].messages == ["Input should be greater than 0"]

    def test_negative_group_and_position(self) -> None:
        errors = validate_attribute(make_attribute(group=-1, position_in_group=-1))
        assert [error.field for error in errors] == ["group", "position_in_group"]
        assert errors[0].messages == ["Input should be greater than or equal to 0"]

    def test_value_must_be_text(self) -> None:
        errors = validate_attribute(make_attribute(value=10))
        assert [error.field for error in errors] == ["value"]
        assert errors[0].messages == ["Input should be a valid string"]

    def test_timestamps_and_counts_are_not_checked(self) -> None:
        attribute = make_attribute(id=4, group_count=3, child_count=2)
        attribute.created_at = datetime(2026, 1, 1)
        assert validate_attribute(attribute) == []

    def test_all_errors_reported_together(self) -> None:
        errors = validate_attribute(make_attribute(name="", value="x" * 60, character_id=0))
        assert [error.field for error in errors] == ["name", "value", "character_id"]


class TestValidateCharacter:
    """Tests for character field rules."""

    def test_valid_character(self) -> None:
        assert validate_character(Character("Ash", "FlexD6", "Fighter", "Human")) == []

    def test_every_field_is_required(self) -> None:
        errors = validate_character(Character("", "", "", ""))
        assert [error.field for error in errors] == ["name", "system", "role", "species"]

    def test_field_too_long(self) -> None:
        errors = validate_character(Character("Ash", "FlexD6", "x" * 51, "Human"))
        assert [error.field for error in errors] == ["role"]
        assert errors[0].messages == ["String should have at most 50 characters"]
