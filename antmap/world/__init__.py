from .belief_map import BeliefMap, CellBelief, MapFormatError, UNKNOWN
from .primitives import ANTHILL, Action, Direction, Position, Surroundings, Tile

__all__ = [
    "BeliefMap", "CellBelief", "MapFormatError", "UNKNOWN",
    "ANTHILL", "Action", "Direction", "Position", "Surroundings", "Tile",
]
