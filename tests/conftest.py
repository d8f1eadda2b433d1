"""Pytest configuration and shared fixtures.

This module provides common fixtures for the SoloTerm test suite: isolated
settings, a throwaway SQLite database, stores, services, and a helper for
building attribute sheets.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

import pytest
import structlog


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path

    from soloterm.characters import (
        Attribute,
        AttributeSheetService,
        AttributeStore,
        Character,
        CharacterService,
        CharacterStore,
    )
    from soloterm.storage import Database


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[None, None, None]:
    """Point the configured database at tmp_path and reset cached singletons."""
    from soloterm.core.config import clear_settings_cache
    from soloterm.storage.database import reset_database

    monkeypatch.setenv("SOLOTERM_DATABASE_PATH", str(tmp_path / "configured" / "soloterm.db"))
    clear_settings_cache()
    reset_database()
    yield
    clear_settings_cache()
    reset_database()
    structlog.reset_defaults()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "SOLOTERM_DEBUG": "true",
        "SOLOTERM_LOG_LEVEL": "DEBUG",
        "SOLOTERM_ENABLE_WAL": "false",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def database(tmp_path: Path) -> Database:
    """A fresh SQLite database file with the full schema."""
    from soloterm.storage import Database

    return Database(tmp_path / "test.db")


@pytest.fixture
def attribute_store(database: Database) -> AttributeStore:
    from soloterm.characters import AttributeStore

    return AttributeStore(database)


@pytest.fixture
def character_store(database: Database) -> CharacterStore:
    from soloterm.characters import CharacterStore

    return CharacterStore(database)


@pytest.fixture
def sheet_service(attribute_store: AttributeStore) -> AttributeSheetService:
    from soloterm.characters import AttributeSheetService

    return AttributeSheetService(attribute_store)


@pytest.fixture
def character_service(
    character_store: CharacterStore,
    sheet_service: AttributeSheetService,
) -> CharacterService:
    from soloterm.characters import CharacterService

    return CharacterService(character_store, sheet_service)


# =============================================================================
# Record Fixtures
# =============================================================================


@pytest.fixture
def character(character_store: CharacterStore) -> Character:
    """A persisted character to hang attributes on."""
    from soloterm.characters import Character

    return character_store.save(Character("Test Character", "FlexD6", "Fighter", "Human"))


@pytest.fixture
def add_attribute(
    attribute_store: AttributeStore,
    character: Character,
) -> Callable[..., Attribute]:
    """Insert an attribute directly through the store.

    Returns:
        ``add(group, position, name, value="", character_id=None)``; the
        character defaults to the ``character`` fixture.
    """
    from soloterm.characters import Attribute

    def add(
        group: int,
        position: int,
        name: str,
        value: str = "",
        character_id: int | None = None,
    ) -> Attribute:
        return attribute_store.save(
            Attribute(
                character_id=character_id or character.id,
                group=group,
                position_in_group=position,
                name=name,
                value=value,
            )
        )

    return add


@pytest.fixture
def layout(attribute_store: AttributeStore) -> Callable[[int], dict[str, tuple[int, int]]]:
    """Snapshot a character's sheet as ``{name: (group, position)}``."""

    def snapshot(character_id: int) -> dict[str, tuple[int, int]]:
        return {
            attribute.name: (attribute.group, attribute.position_in_group)
            for attribute in attribute_store.get_for_character(character_id)
        }

    return snapshot
