"""Core types for world generation."""

import math
from enum import IntEnum

from pydantic import BaseModel


class Direction(IntEnum):
    """8-direction step enum, clockwise from north."""

    NORTH = 1
    NORTHEAST = 2
    EAST = 3
    SOUTHEAST = 4
    SOUTH = 5
    SOUTHWEST = 6
    WEST = 7
    NORTHWEST = 8


# Coordinate system: +X is East, +Y is South
DIRECTION_DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.NORTH: (0, -1),
    Direction.NORTHEAST: (1, -1),
    Direction.EAST: (1, 0),
    Direction.SOUTHEAST: (1, 1),
    Direction.SOUTH: (0, 1),
    Direction.SOUTHWEST: (-1, 1),
    Direction.WEST: (-1, 0),
    Direction.NORTHWEST: (-1, -1),
}

CARDINAL_DELTAS: tuple[tuple[int, int], ...] = (
    DIRECTION_DELTAS[Direction.EAST],
    DIRECTION_DELTAS[Direction.WEST],
    DIRECTION_DELTAS[Direction.SOUTH],
    DIRECTION_DELTAS[Direction.NORTH],
)


class Position(BaseModel, frozen=True):
    """Immutable global tile coordinate."""

    x: int
    y: int

    def __add__(self, other: "Position") -> "Position":
        return Position(x=self.x + other.x, y=self.y + other.y)

    def offset(self, direction: Direction) -> "Position":
        """Return new position offset by direction."""
        dx, dy = DIRECTION_DELTAS[direction]
        return Position(x=self.x + dx, y=self.y + dy)

    def neighbors(self) -> list["Position"]:
        """The 8 surrounding positions in Direction order."""
        return [Position(x=self.x + dx, y=self.y + dy) for dx, dy in DIRECTION_DELTAS.values()]

    def distance(self, other: "Position") -> float:
        """Euclidean distance in tiles."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def chebyshev(self, other: "Position") -> int:
        """King-move distance in tiles."""
        return max(abs(self.x - other.x), abs(self.y - other.y))

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"

    def __repr__(self) -> str:
        return f"Position(x={self.x}, y={self.y})"
