from .core import PlanDivergenceError, RadiusAnt
from .goals import SearchGoal, is_goal
from .planner import PartialPlan, search_for_goal

__all__ = [
    "PlanDivergenceError", "RadiusAnt", "SearchGoal", "is_goal",
    "PartialPlan", "search_for_goal",
]
