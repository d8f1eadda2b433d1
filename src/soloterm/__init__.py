"""SoloTerm - record keeping for solo tabletop play.

Tracks characters and their attribute sheets in a local SQLite store. A
sheet is an ordered list of groups, each a header entry followed by its
child entries, and can be rearranged one step at a time.

Example:
    >>> from soloterm import Attribute, Character, Direction, build_services
    >>> services = build_services()
    >>> hero = services.characters.save(Character("Ash", "FlexD6", "Fighter", "Human"))
    >>> hp = services.attributes.save(Attribute(hero.id, 0, 0, "HP", "10/10"))
    >>> services.attributes.reorder(hero.id, hp.id, Direction.DOWN)
    0

Modules:
    core: Configuration, logging, validation and base exceptions.
    storage: SQLite database, schema and transactions.
    characters: Characters, attributes, sheet ordering and services.
"""

from __future__ import annotations

from soloterm.bootstrap import Services, build_services
from soloterm.characters import (
    Attribute,
    AttributeGroup,
    AttributeSheetService,
    Character,
    CharacterService,
    Direction,
)
from soloterm.core.config import Settings, get_settings
from soloterm.core.exceptions import (
    NotFoundError,
    PersistenceError,
    SoloTermError,
    ValidationError,
)
from soloterm.core.logging import configure_logging, get_logger


__version__ = "0.1.0"
__all__ = [
    "__version__",
    # Core
    "SoloTermError",
    "ValidationError",
    "NotFoundError",
    "PersistenceError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Characters
    "Character",
    "Attribute",
    "AttributeGroup",
    "Direction",
    "CharacterService",
    "AttributeSheetService",
    # Wiring
    "Services",
    "build_services",
]
