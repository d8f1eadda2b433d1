"""Storage module for SoloTerm persistence.

Provides the SQLite database, its schema, and transaction handling used
by the character and attribute stores.
"""

from soloterm.storage.database import (
    Database,
    get_database,
    now_iso,
    parse_timestamp,
    reset_database,
)

__all__ = [
    "Database",
    "get_database",
    "now_iso",
    "parse_timestamp",
    "reset_database",
]
