"""Ordering of a character's attribute sheet.

A sheet is stored as a flat table, one row per attribute, with only a
group number and an in-group position on each row. Read as a whole it is a
two-level structure:

    group 0:  HP (header, position 0)
                Max (child, position 1)
                Current (child, position 2)
    group 3:  Gear (header, position 0)
                Rope (child, position 1)

Group numbers need not be contiguous; they are ordered numerically. Inside
a group the positions are always ``0..n-1``.

Two moves keep that shape:

* a child moves one step inside its own group by exchanging positions with
  its neighbour. It never passes the header and never leaves its group.
* a header moves its whole group one step by exchanging group numbers with
  the adjacent group. Positions are untouched, so both groups keep their
  internal order.

A move that would pass the top or bottom of its list does nothing and
returns 0. That is not an error. Neither is a child whose neighbour holds
the same position, which only older data can contain: swapping equal
positions changes nothing, so it also returns 0.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from itertools import groupby

from soloterm.characters.attribute_store import AttributeStore
from soloterm.characters.models import Attribute
from soloterm.core.exceptions import NotFoundError, ValidationError
from soloterm.core.logging import bind_context, get_logger

logger = get_logger(__name__)


class Direction(IntEnum):
    """Step direction for a reorder."""

    UP = -1
    DOWN = 1

    @classmethod
    def coerce(cls, value: int) -> Direction:
        """Accept a Direction or its integer value.

        Raises:
            ValidationError: For anything other than -1 or +1.
        """
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                "direction must be -1 (up) or 1 (down)",
                field_name="direction",
                invalid_value=value,
            ) from None


# =============================================================================
# Read-side view
# =============================================================================


@dataclass
class AttributeGroup:
    """One group of a sheet: its header row followed by its children.

    Attributes:
        number: The stored group number.
        rows: The group's rows in position order.
    """

    number: int
    rows: list[Attribute] = field(default_factory=list)

    @property
    def header(self) -> Attribute | None:
        """The position-0 row, or None if the header was deleted."""
        if self.rows and self.rows[0].is_header:
            return self.rows[0]
        return None

    @property
    def children(self) -> list[Attribute]:
        return [row for row in self.rows if row.is_child]

    @property
    def has_children(self) -> bool:
        return any(row.is_child for row in self.rows)

    @property
    def positions(self) -> list[int]:
        return [row.position_in_group for row in self.rows]

    def index_of(self, attribute_id: int) -> int:
        for index, row in enumerate(self.rows):
            if row.id == attribute_id:
                return index
        raise NotFoundError(
            "attribute is not in this group", entity="attribute", entity_id=attribute_id
        )


def group_attributes(attributes: list[Attribute]) -> list[AttributeGroup]:
    """Group a character's attributes for display.

    Args:
        attributes: Attributes of one character, in any order.

    Returns:
        Groups in ascending group number, rows ordered by position and then
        creation time.
    """
    ordered = sorted(attributes, key=lambda attribute: attribute.sort_key)
    return [
        AttributeGroup(number=number, rows=list(rows))
        for number, rows in groupby(ordered, key=lambda attribute: attribute.group)
    ]


def find_ordering_violations(attributes: list[Attribute]) -> list[str]:
    """Describe every group whose positions are not exactly ``0..n-1``.

    A group without a header, with a gap, or with a repeated position is
    reported. An empty result means the sheet is consistent.
    """
    problems = []
    for group in group_attributes(attributes):
        expected = list(range(len(group.rows)))
        if group.positions != expected:
            problems.append(
                f"group {group.number}: positions {group.positions}, expected {expected}"
            )
    return problems


# =============================================================================
# Engine
# =============================================================================


class AttributeOrderingEngine:
    """Move attributes and groups of attributes up and down a sheet.

    Every move reloads the character's whole sheet, plans the change in
    memory and writes only the rows that change, all inside one database
    transaction. The transaction holds the write lock from the first read,
    so concurrent reorders of the same sheet are serialized.
    """

    def __init__(self, store: AttributeStore) -> None:
        self.store = store

    def reorder(self, character_id: int, attribute_id: int, direction: int) -> int:
        """Move an attribute one step.

        A header (position 0) moves its whole group relative to the other
        groups. A child moves inside its group.

        Args:
            character_id: The sheet's character.
            attribute_id: The row to move.
            direction: ``Direction.UP`` (-1) or ``Direction.DOWN`` (+1).

        Returns:
            The moved attribute's id, or 0 if nothing changed: the row was
            already at the boundary, or its neighbour shares its position.

        Raises:
            NotFoundError: If the attribute does not exist on this character.
            ValidationError: If ``direction`` is not -1 or +1.
        """
        step = Direction.coerce(direction)

        with bind_context(character_id=character_id, attribute_id=attribute_id):
            with self.store.database.transaction():
                target = self._load_target(character_id, attribute_id)
                sheet = group_attributes(self.store.get_for_character(character_id))

                if target.is_header:
                    kind = "group"
                    moved = self._move_group(character_id, sheet, target.group, step)
                else:
                    kind = "child"
                    moved = self._move_child(sheet, target, step)

            return self._report(step, kind, attribute_id if moved else 0)

    def move_group(self, character_id: int, attribute_id: int, direction: int) -> int:
        """Move the whole group containing an attribute one step.

        Unlike ``reorder`` this works from any row of the group, header or
        child.

        Returns:
            The group's header id (the given id if the group has no header),
            or 0 at the boundary.

        Raises:
            NotFoundError: If the attribute does not exist on this character.
            ValidationError: If ``direction`` is not -1 or +1.
        """
        step = Direction.coerce(direction)

        with bind_context(character_id=character_id, attribute_id=attribute_id):
            with self.store.database.transaction():
                target = self._load_target(character_id, attribute_id)
                sheet = group_attributes(self.store.get_for_character(character_id))
                header = _find_group(sheet, target.group).header
                moved = self._move_group(character_id, sheet, target.group, step)

            moved_id = header.id if header is not None else attribute_id
            return self._report(step, "group", moved_id if moved else 0)

    def _load_target(self, character_id: int, attribute_id: int) -> Attribute:
        target = self.store.get_by_id(attribute_id)
        if target.character_id != character_id:
            raise NotFoundError(
                "attribute not found for character",
                entity="attribute",
                entity_id=attribute_id,
                details={"character_id": character_id},
            )
        return target

    def _move_child(self, sheet: list[AttributeGroup], target: Attribute, step: Direction) -> bool:
        group = _find_group(sheet, target.group)
        index = group.index_of(target.id)
        neighbor_index = index + step

        if neighbor_index < 0 or neighbor_index >= len(group.rows):
            return False

        current = group.rows[index]
        neighbor = group.rows[neighbor_index]
        # Children never swap with the header
        if neighbor.is_header:
            return False

        # Exchanging equal positions would write nothing
        if neighbor.position_in_group == current.position_in_group:
            logger.warning(
                "Duplicate position in group, nothing moved",
                group=group.number,
                position=current.position_in_group,
                neighbor_id=neighbor.id,
            )
            return False

        self.store.set_position(current.id, group.number, neighbor.position_in_group)
        self.store.set_position(neighbor.id, group.number, current.position_in_group)
        return True

    def _move_group(
        self,
        character_id: int,
        sheet: list[AttributeGroup],
        group_number: int,
        step: Direction,
    ) -> bool:
        numbers = [group.number for group in sheet]
        adjacent_index = numbers.index(group_number) + step

        if adjacent_index < 0 or adjacent_index >= len(numbers):
            return False

        self.store.swap_group_numbers(character_id, group_number, numbers[adjacent_index])
        return True

    @staticmethod
    def _report(step: Direction, kind: str, moved_id: int) -> int:
        if moved_id:
            logger.info("Attribute reordered", direction=step.name.lower(), kind=kind)
        else:
            logger.debug(
                "Reorder changed nothing",
                direction=step.name.lower(),
                kind=kind,
            )
        return moved_id


def _find_group(sheet: list[AttributeGroup], number: int) -> AttributeGroup:
    for group in sheet:
        if group.number == number:
            return group
    raise NotFoundError("attribute group not found", entity="attribute_group", entity_id=number)


__all__ = [
    "Direction",
    "AttributeGroup",
    "AttributeOrderingEngine",
    "group_attributes",
    "find_ordering_violations",
]
