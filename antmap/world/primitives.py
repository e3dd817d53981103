"""Host primitives: the tile, action, direction and position types the
simulation hands to (and expects back from) an ant."""

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional


class Direction(Enum):
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @property
    def delta(self) -> tuple[int, int]:
        return _DELTAS[self]


# North is up the screen: y shrinks.
_DELTAS = {
    Direction.NORTH: (0, -1),
    Direction.EAST: (1, 0),
    Direction.SOUTH: (0, 1),
    Direction.WEST: (-1, 0),
}


class Action(Enum):
    MOVE_NORTH = "move_north"
    MOVE_EAST = "move_east"
    MOVE_SOUTH = "move_south"
    MOVE_WEST = "move_west"
    GATHER = "gather"
    DROP_OFF = "drop_off"
    HALT = "halt"

    @classmethod
    def move(cls, direction: Direction) -> "Action":
        return _MOVES[direction]

    @property
    def direction(self) -> Optional[Direction]:
        """The direction of travel, or None for actions that stay put."""
        return _MOVE_DIRECTIONS.get(self)


_MOVES = {
    Direction.NORTH: Action.MOVE_NORTH,
    Direction.EAST: Action.MOVE_EAST,
    Direction.SOUTH: Action.MOVE_SOUTH,
    Direction.WEST: Action.MOVE_WEST,
}
_MOVE_DIRECTIONS = {a: d for d, a in _MOVES.items()}


class Position(NamedTuple):
    """Offset from the anthill. (0, 0) is home."""
    x: int
    y: int

    def manhattan_distance(self, other: "Position") -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def neighbor(self, direction: Direction) -> "Position":
        dx, dy = direction.delta
        return Position(self.x + dx, self.y + dy)

    def after(self, action: Action) -> "Position":
        """Where the ant stands once `action` has been carried out."""
        direction = action.direction
        if direction is None:
            return self
        return self.neighbor(direction)


ANTHILL = Position(0, 0)


@dataclass(frozen=True)
class Tile:
    """What the host reports about one visible cell."""
    travelable: bool = True
    food: int = 0
    ants: int = 0


@dataclass
class Surroundings:
    """The five cells visible to an ant on a given tick."""
    current: Tile
    neighbors: dict[Direction, Tile] = field(default_factory=dict)

    def tile(self, direction: Direction) -> Tile:
        return self.neighbors[direction]
