"""Wire settings, logging, database and services together."""

from __future__ import annotations

from dataclasses import dataclass

from soloterm.characters import (
    AttributeSheetService,
    AttributeStore,
    CharacterService,
    CharacterStore,
)
from soloterm.core.config import Settings, get_settings
from soloterm.core.logging import configure_logging, get_logger
from soloterm.storage.database import Database, get_database

logger = get_logger(__name__)


@dataclass
class Services:
    """Everything a front end needs.

    Attributes:
        database: The open database.
        characters: Character service.
        attributes: Attribute sheet service.
    """

    database: Database
    characters: CharacterService
    attributes: AttributeSheetService


def build_services(
    database: Database | None = None,
    settings: Settings | None = None,
) -> Services:
    """Configure logging and build the service graph.

    Args:
        database: Database to use; defaults to the configured singleton.
        settings: Settings to use; defaults to ``get_settings()``.

    Returns:
        The wired services.
    """
    settings = settings or get_settings()
    configure_logging(
        level="DEBUG" if settings.debug else settings.log_level,
        json_format=settings.log_json,
        log_file=str(settings.log_file) if settings.log_file else None,
    )

    database = database or get_database()
    attributes = AttributeSheetService(AttributeStore(database))
    characters = CharacterService(CharacterStore(database), attributes)

    logger.info(f"{settings.app_name} {settings.app_version} ready", db_path=str(database.db_path))
    return Services(database=database, characters=characters, attributes=attributes)
