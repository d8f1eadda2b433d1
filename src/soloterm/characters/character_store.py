"""Persistence for characters."""

from __future__ import annotations

from soloterm.characters.models import Character
from soloterm.core.exceptions import NotFoundError
from soloterm.core.logging import get_logger
from soloterm.storage.database import Database, now_iso, parse_timestamp

logger = get_logger(__name__)


class CharacterStore:
    """Insert, update, delete and fetch character rows."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def save(self, character: Character) -> Character:
        """Insert when ``character.id`` is 0, otherwise update.

        The store manages ``created_at``/``updated_at`` and writes them back
        onto the passed character.

        Raises:
            NotFoundError: If updating an id that does not exist.
        """
        if character.id == 0:
            return self._insert(character)
        return self._update(character)

    def delete(self, character_id: int) -> int:
        """Delete a character; its attributes are removed by cascade.

        Returns:
            Rows removed (always 1).

        Raises:
            NotFoundError: If the id is 0 or unknown.
        """
        if character_id == 0:
            raise NotFoundError("id cannot be empty", entity="character", entity_id=character_id)

        with self.database.connection() as conn:
            cursor = conn.execute("DELETE FROM characters WHERE id = ?", (character_id,))
            deleted = cursor.rowcount

        if deleted == 0:
            raise NotFoundError(
                f"id '{character_id}' not found", entity="character", entity_id=character_id
            )

        logger.info(f"Deleted character: {character_id}")
        return deleted

    def get_by_id(self, character_id: int) -> Character:
        """Fetch one character.

        Raises:
            NotFoundError: If the id is 0 or unknown.
        """
        if character_id == 0:
            raise NotFoundError("id cannot be zero", entity="character", entity_id=character_id)

        with self.database.connection() as conn:
            row = conn.execute(
                "SELECT * FROM characters WHERE id = ?", (character_id,)
            ).fetchone()

        if row is None:
            raise NotFoundError("character not found", entity="character", entity_id=character_id)
        return Character.from_row(row)

    def get_all(self) -> list[Character]:
        """All characters, ordered by system then name (case-insensitive)."""
        with self.database.connection() as conn:
            rows = conn.execute(
                "SELECT * FROM characters ORDER BY lower(system), lower(name) ASC"
            ).fetchall()
        return [Character.from_row(row) for row in rows]

    def _insert(self, character: Character) -> Character:
        now = now_iso()
        with self.database.connection() as conn:
            cursor = conn.execute("""
                INSERT INTO characters (name, system, role, species, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (character.name, character.system, character.role, character.species, now, now))
            character.id = cursor.lastrowid

        character.created_at = parse_timestamp(now)
        character.updated_at = parse_timestamp(now)
        logger.info(f"Added character: {character.name} (id={character.id})")
        return character

    def _update(self, character: Character) -> Character:
        now = now_iso()
        with self.database.connection() as conn:
            cursor = conn.execute("""
                UPDATE characters
                SET name = ?, system = ?, role = ?, species = ?, updated_at = ?
                WHERE id = ?
            """, (character.name, character.system, character.role, character.species,
                  now, character.id))

            if cursor.rowcount == 0:
                raise NotFoundError(
                    "character not found", entity="character", entity_id=character.id
                )

            row = conn.execute(
                "SELECT created_at FROM characters WHERE id = ?", (character.id,)
            ).fetchone()

        character.created_at = parse_timestamp(row["created_at"])
        character.updated_at = parse_timestamp(now)
        logger.info(f"Updated character: {character.name} (id={character.id})")
        return character
