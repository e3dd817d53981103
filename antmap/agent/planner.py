"""Breadth-first planning over a BeliefMap."""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from ..world.belief_map import BeliefMap
from ..world.primitives import Action, Position
from .goals import SearchGoal, is_goal

logger = logging.getLogger("antmap.agent.planner")


@dataclass
class PartialPlan:
    """Where a candidate path ends up and the actions that got it there."""
    position: Position
    moves: deque = field(default_factory=deque)

    def with_move(self, action: Action) -> "PartialPlan":
        moves = deque(self.moves)
        moves.append(action)
        return PartialPlan(self.position.after(action), moves)


def search_for_goal(belief: BeliefMap, start: Position, goal: SearchGoal, *,
                    radius: int, now: int, carrying_food: bool = False,
                    home_band: int = 5,
                    rng: Optional[np.random.RandomState] = None) -> Optional[deque]:
    """
    Shortest action sequence from `start` to the nearest goal cell.

    Unknown cells are treated as open, so the search can plan into
    unexplored ground but never past the edge of the allocated map.

    Returns:
        deque of Actions (empty if `start` already satisfies the goal),
        or None if no reachable cell does.
    """
    fringe = deque([PartialPlan(start)])
    closed = {start}

    while fringe:
        consider = fringe.popleft()
        if is_goal(goal, consider.position, belief,
                   radius=radius, now=now, home_band=home_band):
            logger.debug(f"plan '{goal.plan_name}' from {tuple(start)}: "
                         f"{len(consider.moves)} steps, {len(closed)} cells seen")
            return consider.moves

        for action in belief.possible_moves(consider.position, carrying_food, rng):
            successor = consider.position.after(action)
            if successor in closed:
                continue
            closed.add(successor)
            fringe.append(consider.with_move(action))

    logger.debug(f"no path to '{goal.plan_name}' from {tuple(start)} "
                 f"({len(closed)} cells searched)")
    return None
