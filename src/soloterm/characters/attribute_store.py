"""Persistence for character sheet attributes.

No business rules live here. ``set_position`` and ``swap_group_numbers`` are
raw positional mutators for the ordering engine, which runs them inside a
transaction so a reorder is applied completely or not at all.
"""

from __future__ import annotations

from soloterm.characters.models import Attribute
from soloterm.core.exceptions import NotFoundError
from soloterm.core.logging import get_logger
from soloterm.storage.database import Database, now_iso, parse_timestamp

logger = get_logger(__name__)


_SELECT_FOR_CHARACTER = """
    SELECT *,
        COUNT(*) OVER (PARTITION BY character_id, attribute_group) AS group_count,
        SUM(CASE WHEN position_in_group > 0 THEN 1 ELSE 0 END)
            OVER (PARTITION BY character_id, attribute_group) AS child_count
    FROM attributes
    WHERE character_id = ?
    ORDER BY attribute_group, position_in_group, created_at
"""


class AttributeStore:
    """Durable storage of attribute rows."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def save(self, attribute: Attribute) -> Attribute:
        """Insert when ``attribute.id`` is 0, otherwise update.

        Timestamps are assigned here, never by the caller. An update leaves
        ``created_at`` untouched and refreshes ``updated_at``.

        Raises:
            NotFoundError: If updating an id that does not exist.
        """
        if attribute.id == 0:
            return self._insert(attribute)
        return self._update(attribute)

    def delete(self, attribute_id: int) -> int:
        """Remove exactly one row.

        Deleting a header leaves its children headerless; nothing here
        renumbers the remaining rows.

        Returns:
            Rows removed (always 1).

        Raises:
            NotFoundError: If the id is 0 or unknown.
        """
        if attribute_id == 0:
            raise NotFoundError("id cannot be empty", entity="attribute", entity_id=attribute_id)

        with self.database.connection() as conn:
            cursor = conn.execute("DELETE FROM attributes WHERE id = ?", (attribute_id,))
            deleted = cursor.rowcount

        if deleted == 0:
            raise NotFoundError(
                f"id '{attribute_id}' not found", entity="attribute", entity_id=attribute_id
            )

        logger.info(f"Deleted attribute: {attribute_id}")
        return deleted

    def get_by_id(self, attribute_id: int) -> Attribute:
        """Fetch one attribute.

        Raises:
            NotFoundError: If the id is 0 or unknown.
        """
        if attribute_id == 0:
            raise NotFoundError("id cannot be zero", entity="attribute", entity_id=attribute_id)

        with self.database.connection() as conn:
            row = conn.execute(
                "SELECT * FROM attributes WHERE id = ?", (attribute_id,)
            ).fetchone()

        if row is None:
            raise NotFoundError("attribute not found", entity="attribute", entity_id=attribute_id)
        return Attribute.from_row(row)

    def get_for_character(self, character_id: int) -> list[Attribute]:
        """All of a character's attributes in sheet order.

        Ordered by group, position, then creation time. Each row carries
        ``group_count`` (rows in its group) and ``child_count`` (rows in its
        group with position > 0).
        """
        with self.database.connection() as conn:
            rows = conn.execute(_SELECT_FOR_CHARACTER, (character_id,)).fetchall()
        return [Attribute.from_row(row) for row in rows]

    def set_position(self, attribute_id: int, group: int, position: int) -> None:
        """Overwrite a row's group and position unconditionally.

        Raises:
            NotFoundError: If no row has ``attribute_id``.
        """
        with self.database.connection() as conn:
            cursor = conn.execute("""
                UPDATE attributes
                SET attribute_group = ?, position_in_group = ?, updated_at = ?
                WHERE id = ?
            """, (group, position, now_iso(), attribute_id))

            if cursor.rowcount == 0:
                raise NotFoundError(
                    "attribute not found", entity="attribute", entity_id=attribute_id
                )

    def swap_group_numbers(self, character_id: int, group_a: int, group_b: int) -> int:
        """Exchange two group numbers for one character in a single statement.

        Every row of ``group_a`` moves to ``group_b`` and vice versa.
        Positions are untouched, so order inside each group is preserved.

        Returns:
            Rows updated.
        """
        if group_a == group_b:
            return 0

        with self.database.connection() as conn:
            cursor = conn.execute("""
                UPDATE attributes
                SET attribute_group = CASE attribute_group WHEN ? THEN ? ELSE ? END,
                    updated_at = ?
                WHERE character_id = ? AND attribute_group IN (?, ?)
            """, (group_a, group_b, group_a, now_iso(), character_id, group_a, group_b))
            return cursor.rowcount

    def _insert(self, attribute: Attribute) -> Attribute:
        now = now_iso()
        with self.database.connection() as conn:
            cursor = conn.execute("""
                INSERT INTO attributes
                (character_id, attribute_group, position_in_group, name, value,
                 created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (attribute.character_id, attribute.group, attribute.position_in_group,
                  attribute.name, attribute.value, now, now))
            attribute.id = cursor.lastrowid

        attribute.created_at = parse_timestamp(now)
        attribute.updated_at = parse_timestamp(now)
        logger.info(
            f"Added attribute: {attribute.name} (id={attribute.id})",
            character_id=attribute.character_id,
        )
        return attribute

    def _update(self, attribute: Attribute) -> Attribute:
        now = now_iso()
        with self.database.connection() as conn:
            cursor = conn.execute("""
                UPDATE attributes
                SET attribute_group = ?, position_in_group = ?, name = ?, value = ?,
                    updated_at = ?
                WHERE id = ?
            """, (attribute.group, attribute.position_in_group, attribute.name,
                  attribute.value, now, attribute.id))

            if cursor.rowcount == 0:
                raise NotFoundError(
                    "attribute not found", entity="attribute", entity_id=attribute.id
                )

            row = conn.execute(
                "SELECT created_at FROM attributes WHERE id = ?", (attribute.id,)
            ).fetchone()

        attribute.created_at = parse_timestamp(row["created_at"])
        attribute.updated_at = parse_timestamp(now)
        logger.info(f"Updated attribute: {attribute.name} (id={attribute.id})")
        return attribute
