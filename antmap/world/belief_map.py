"""BeliefMap: an ant's decaying, self-growing picture of the world."""

import logging
import struct
from typing import Iterator, NamedTuple, Optional

import numpy as np

from .primitives import ANTHILL, Action, Direction, Position, Tile

logger = logging.getLogger("antmap.world")

UNSEEN = -1

# Wire layout: side length and anchor, then one record per cell, row-major.
_HEADER = struct.Struct(">iii")
_CELL_DTYPE = np.dtype([
    ("wall", "?"),
    ("food", ">i4"),
    ("ants", ">i4"),
    ("seen", ">i4"),
])


class MapFormatError(ValueError):
    """A serialized map was truncated or malformed."""


class CellBelief(NamedTuple):
    wall: bool
    food: int
    occupancy: int
    last_seen: int

    @property
    def known(self) -> bool:
        return self.last_seen != UNSEEN


UNKNOWN = CellBelief(False, 0, 0, UNSEEN)


def _decayed(value: int, last_seen: int, now: int, period: int) -> int:
    """Drop one unit per `period` ticks since the observation, floored at 0."""
    elapsed = max(0, now - last_seen)
    return max(0, value - elapsed // period)


class BeliefMap:
    """
    Square grid of per-cell beliefs around the anthill.

    Walls never clear. Food and ant counts are stored as last observed and
    decay on read; food slowly, ants quickly. The grid doubles in size
    whenever something has to be recorded outside its current extent, so
    callers should never cache array indices across an update.
    """

    def __init__(self, size: int = 5, food_decay_ticks: int = 50,
                 occupancy_decay_ticks: int = 5):
        if size < 1:
            raise ValueError(f"map size must be positive, got {size}")
        self.food_decay_ticks = food_decay_ticks
        self.occupancy_decay_ticks = occupancy_decay_ticks

        # Indexed [row, col] == [y + center_y, x + center_x]
        self.walls = np.zeros((size, size), dtype=bool)
        self.food = np.zeros((size, size), dtype=np.int32)
        self.ants = np.zeros((size, size), dtype=np.int32)
        self.seen = np.full((size, size), UNSEEN, dtype=np.int32)

        self.center_x = size // 2
        self.center_y = size // 2

    # ------------------------------------------------------------------ #
    #  Coordinates and growth                                            #
    # ------------------------------------------------------------------ #
    @property
    def size(self) -> int:
        return self.walls.shape[0]

    @property
    def center(self) -> tuple[int, int]:
        return (self.center_x, self.center_y)

    def _index(self, position: Position) -> Optional[tuple[int, int]]:
        """Array index for a world position, or None if outside the grid."""
        row = position.y + self.center_y
        col = position.x + self.center_x
        if 0 <= row < self.size and 0 <= col < self.size:
            return row, col
        return None

    def _grow_to(self, position: Position) -> tuple[int, int]:
        """Double the grid until `position` fits. Returns its index."""
        idx = self._index(position)
        while idx is None:
            self._double()
            idx = self._index(position)
        return idx

    def _double(self):
        old = self.size
        size = old * 2
        new_cx = size // 2
        new_cy = size // 2
        dx = new_cx - self.center_x
        dy = new_cy - self.center_y

        walls = np.zeros((size, size), dtype=bool)
        food = np.zeros((size, size), dtype=np.int32)
        ants = np.zeros((size, size), dtype=np.int32)
        seen = np.full((size, size), UNSEEN, dtype=np.int32)

        walls[dy:dy + old, dx:dx + old] = self.walls
        food[dy:dy + old, dx:dx + old] = self.food
        ants[dy:dy + old, dx:dx + old] = self.ants
        seen[dy:dy + old, dx:dx + old] = self.seen

        self.walls, self.food, self.ants, self.seen = walls, food, ants, seen
        self.center_x, self.center_y = new_cx, new_cy
        logger.debug(f"map grown {old}x{old} -> {size}x{size}")

    # ------------------------------------------------------------------ #
    #  Reads and writes                                                  #
    # ------------------------------------------------------------------ #
    def update(self, position: Position, wall: bool, food: int, ants: int,
               tick: int):
        """Record a direct observation of one cell."""
        idx = self._grow_to(position)
        # A direct look is authoritative for food and ants, walls only accrue
        self.walls[idx] = self.walls[idx] or wall
        self.food[idx] = food
        self.ants[idx] = ants
        self.seen[idx] = tick

    def update_tile(self, position: Position, tile: Tile, tick: int):
        self.update(position, not tile.travelable, tile.food, tile.ants, tick)

    def query(self, position: Position, now: Optional[int] = None) -> CellBelief:
        """
        Belief about one cell. Cells never observed come back as UNKNOWN.

        With `now` given, food and occupancy are decayed by the time elapsed
        since the cell was last seen; without it the raw values are returned.
        """
        idx = self._index(position)
        if idx is None:
            return UNKNOWN
        last_seen = int(self.seen[idx])
        if last_seen == UNSEEN:
            return UNKNOWN
        food = int(self.food[idx])
        ants = int(self.ants[idx])
        if now is not None:
            food = _decayed(food, last_seen, now, self.food_decay_ticks)
            ants = _decayed(ants, last_seen, now, self.occupancy_decay_ticks)
        return CellBelief(bool(self.walls[idx]), food, ants, last_seen)

    def food_at(self, position: Position, now: int) -> int:
        return self.query(position, now).food

    def is_known(self, position: Position) -> bool:
        return self.query(position).known

    def next_to_unknown(self, position: Position) -> bool:
        return any(not self.is_known(position.neighbor(d)) for d in Direction)

    def known_cells(self) -> Iterator[Position]:
        rows, cols = np.nonzero(self.seen != UNSEEN)
        for row, col in zip(rows, cols):
            yield Position(int(col) - self.center_x, int(row) - self.center_y)

    # ------------------------------------------------------------------ #
    #  Movement                                                          #
    # ------------------------------------------------------------------ #
    def _passable(self, position: Position) -> bool:
        # Unknown cells are optimistic; cells past the grid edge are not
        # reachable until something has been recorded out there.
        idx = self._index(position)
        return idx is not None and not self.walls[idx]

    def possible_moves(self, position: Position, carrying_food: bool = False,
                       rng: Optional[np.random.RandomState] = None) -> list[Action]:
        """
        Moves open to an ant at `position`, in random order.

        Every cardinal neighbour that is not a known wall, plus HALT.
        `carrying_food` does not change the options for movement.
        """
        moves = [Action.move(d) for d in Direction
                 if self._passable(position.neighbor(d))]
        moves.append(Action.HALT)
        if rng is None:
            np.random.shuffle(moves)
        else:
            rng.shuffle(moves)
        return moves

    def valid_move(self, action: Action, position: Position,
                   carrying_food: bool) -> bool:
        if action is Action.HALT:
            return True
        if action is Action.GATHER:
            return not carrying_food
        if action is Action.DROP_OFF:
            return carrying_food
        return self._passable(position.after(action))

    # ------------------------------------------------------------------ #
    #  Exchange between ants                                             #
    # ------------------------------------------------------------------ #
    def serialize(self) -> bytes:
        cells = np.empty(self.walls.shape, dtype=_CELL_DTYPE)
        cells["wall"] = self.walls
        cells["food"] = self.food
        cells["ants"] = self.ants
        cells["seen"] = self.seen
        header = _HEADER.pack(self.size, self.center_x, self.center_y)
        return header + cells.tobytes()

    @classmethod
    def deserialize(cls, data: bytes, food_decay_ticks: int = 50,
                    occupancy_decay_ticks: int = 5) -> "BeliefMap":
        """Rebuild a map from `serialize()` output. Raises MapFormatError."""
        if len(data) < _HEADER.size:
            raise MapFormatError(
                f"map header needs {_HEADER.size} bytes, got {len(data)}")
        size, center_x, center_y = _HEADER.unpack_from(data)
        if size < 1:
            raise MapFormatError(f"map size must be positive, got {size}")
        if not (0 <= center_x < size and 0 <= center_y < size):
            raise MapFormatError(
                f"anchor ({center_x}, {center_y}) outside a {size}x{size} map")
        expected = _HEADER.size + size * size * _CELL_DTYPE.itemsize
        if len(data) != expected:
            raise MapFormatError(
                f"{size}x{size} map needs {expected} bytes, got {len(data)}")

        cells = np.frombuffer(data, dtype=_CELL_DTYPE, offset=_HEADER.size)
        cells = cells.reshape(size, size)
        unseen = cells["seen"] == UNSEEN
        if np.any(cells["wall"].view(np.uint8) > 1):
            raise MapFormatError("wall flag other than 0 or 1 in map payload")
        if np.any(cells["seen"] < UNSEEN):
            raise MapFormatError("negative last-seen tick in map payload")
        if np.any(cells["food"] < 0) or np.any(cells["ants"] < 0):
            raise MapFormatError("negative food or ant count in map payload")
        if np.any(unseen & (cells["wall"] | (cells["food"] != 0) | (cells["ants"] != 0))):
            raise MapFormatError("unobserved cell carries data in map payload")

        belief = cls(size, food_decay_ticks, occupancy_decay_ticks)
        belief.walls = cells["wall"].astype(bool)
        belief.food = cells["food"].astype(np.int32)
        belief.ants = cells["ants"].astype(np.int32)
        belief.seen = cells["seen"].astype(np.int32)
        belief.center_x = center_x
        belief.center_y = center_y
        return belief

    def rebase_time(self, from_tick: int, to_tick: int):
        """Shift every known timestamp from one clock onto another."""
        known = self.seen != UNSEEN
        shifted = self.seen[known] + (to_tick - from_tick)
        self.seen[known] = np.maximum(shifted, 0)

    def merge(self, other: "BeliefMap"):
        """
        Fold another map into this one.

        Both maps must already be on the same clock (see rebase_time). For
        each cell the other map has seen, its food and ants win only if
        strictly fresher. Walls from either side are kept.
        """
        rows, cols = np.nonzero(other.seen != UNSEEN)
        if len(rows) == 0:
            return
        xs = cols - other.center_x
        ys = rows - other.center_y
        self._grow_to(Position(int(xs.min()), int(ys.min())))
        self._grow_to(Position(int(xs.max()), int(ys.max())))

        target = (ys + self.center_y, xs + self.center_x)
        self.walls[target] |= other.walls[rows, cols]

        fresher = other.seen[rows, cols] > self.seen[target]
        fresh_target = (target[0][fresher], target[1][fresher])
        self.food[fresh_target] = other.food[rows[fresher], cols[fresher]]
        self.ants[fresh_target] = other.ants[rows[fresher], cols[fresher]]
        self.seen[fresh_target] = other.seen[rows[fresher], cols[fresher]]
        logger.debug(f"merged {len(rows)} cells, {int(fresher.sum())} fresher")

    def copy(self) -> "BeliefMap":
        dup = BeliefMap(1, self.food_decay_ticks, self.occupancy_decay_ticks)
        dup.walls = self.walls.copy()
        dup.food = self.food.copy()
        dup.ants = self.ants.copy()
        dup.seen = self.seen.copy()
        dup.center_x, dup.center_y = self.center_x, self.center_y
        return dup

    # ------------------------------------------------------------------ #
    #  Display                                                           #
    # ------------------------------------------------------------------ #
    def render(self) -> str:
        """Text view of everything seen so far, anthill marked AH."""
        rows, cols = np.nonzero(self.seen != UNSEEN)
        if len(rows) == 0:
            return ""
        home = self._index(ANTHILL)
        lines = []
        for row in range(rows.min(), rows.max() + 1):
            line = ""
            for col in range(cols.min(), cols.max() + 1):
                if (row, col) == home:
                    line += "AH"
                elif self.walls[row, col]:
                    line += "##"
                elif self.food[row, col] > 0:
                    line += f"{min(int(self.food[row, col]), 99):02d}"
                elif self.seen[row, col] == UNSEEN:
                    line += "??"
                else:
                    line += "  "
                line += "|"
            lines.append(line)
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.render()
