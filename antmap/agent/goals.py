"""Search goals: what a plan is trying to reach."""

from enum import Enum

from ..world.belief_map import BeliefMap
from ..world.primitives import ANTHILL, Position


class SearchGoal(Enum):
    FIND_FOOD = "find food"
    DELIVER_FOOD = "deliver food"
    EXPLORE = "the unknown"

    @property
    def plan_name(self) -> str:
        return self.value


def is_goal(goal: SearchGoal, position: Position, belief: BeliefMap, *,
            radius: int, now: int, home_band: int = 5) -> bool:
    """
    Goal test for one cell.

    FIND_FOOD: food is believed there and the cell is beyond `radius` of home,
    so food already sitting in the home zone does not count.
    DELIVER_FOOD: within `radius` of home and within `home_band` of either
    axis. Close enough to the anthill corridor, not necessarily the hill.
    EXPLORE: next to a cell nobody has seen yet.
    """
    if goal is SearchGoal.FIND_FOOD:
        return (belief.food_at(position, now) > 0
                and ANTHILL.manhattan_distance(position) > radius)
    if goal is SearchGoal.DELIVER_FOOD:
        return (ANTHILL.manhattan_distance(position) <= radius
                and (abs(position.x) < home_band or abs(position.y) < home_band))
    if goal is SearchGoal.EXPLORE:
        return belief.next_to_unknown(position)
    raise ValueError(f"unknown search goal: {goal!r}")
