# antmap - map-sharing forager ant: belief map, BFS planner, control loop.

__version__ = "0.1.0"

from .config import AntConfig, load_config
from .agent import RadiusAnt, PlanDivergenceError
from .world import BeliefMap, MapFormatError

__all__ = [
    "AntConfig", "load_config", "RadiusAnt", "PlanDivergenceError",
    "BeliefMap", "MapFormatError",
]
