"""RadiusAnt: maps its surroundings, plans with BFS, shares maps with peers."""

import logging
from collections import deque
from typing import Optional

import numpy as np

from ..config import AntConfig
from ..exchange import decode_message, encode_message
from ..logging_config import log_divergence, log_exchange, log_metrics
from ..world.belief_map import BeliefMap, MapFormatError
from ..world.primitives import ANTHILL, Action, Direction, Position, Surroundings
from .goals import SearchGoal
from .planner import search_for_goal

logger = logging.getLogger("antmap.agent")


class PlanDivergenceError(RuntimeError):
    """A plan step was rejected by the same map that produced the plan."""

    def __init__(self, position: Position, action: Action, snapshot: str):
        self.position = position
        self.action = action
        self.snapshot = snapshot
        super().__init__(
            f"plan attempted an invalid move: {action.value} from "
            f"({position.x}, {position.y})\n{snapshot}"
        )


class RadiusAnt:
    """
    An ant that:
    - folds what it sees each tick into a decaying BeliefMap
    - scouts unexplored ground for its first actions
    - then forages: find food beyond the home radius, carry it back inside it
    - swaps maps with any ant it meets and replans afterwards

    The home radius shrinks as the ant ages, so over time it accepts food
    closer to home and has to walk closer to the hill to deliver.
    """

    def __init__(self, config: Optional[AntConfig] = None,
                 seed: Optional[int] = None, scout: Optional[bool] = None):
        self.config = config or AntConfig()
        self.rng = np.random.RandomState(seed)

        self.map = BeliefMap(
            self.config.INITIAL_MAP_SIZE,
            food_decay_ticks=self.config.FOOD_DECAY_TICKS,
            occupancy_decay_ticks=self.config.OCCUPANCY_DECAY_TICKS,
        )

        # Position and cargo
        self.pos = ANTHILL
        self.has_food = False

        # Mode
        self.is_scout = self.config.START_AS_SCOUT if scout is None else scout
        self.radius = self.config.INITIAL_RADIUS

        # Clocks: time_step follows peers, actions_taken only counts our moves
        self.time_step = 0
        self.actions_taken = 0

        # Current plan; None means "make a new one"
        self.plan: Optional[deque] = None
        self.plan_goal: str = ""

        # Stats
        self.plans_made = 0
        self.plans_failed = 0
        self.food_delivered = 0
        self.exchanges = 0

    # ------------------------------------------------------------------ #
    #  Per-tick loop                                                     #
    # ------------------------------------------------------------------ #
    def get_action(self, surroundings: Surroundings) -> Action:
        """One tick: record what we see, decide, return exactly one action."""
        self._update_surroundings(surroundings)

        self.time_step += 1
        self.actions_taken += 1
        self._shrink_radius()

        if self.actions_taken % self.config.METRICS_INTERVAL == 0:
            log_metrics(self.time_step, self.get_state())

        if self.is_scout:
            action = self._scout_step()
            if action is not None:
                return action
        return self._gatherer_step()

    def _update_surroundings(self, s: Surroundings):
        self.map.update_tile(self.pos, s.current, self.time_step)
        for direction in Direction:
            self.map.update_tile(self.pos.neighbor(direction),
                                 s.tile(direction), self.time_step)

    def _shrink_radius(self):
        if (self.actions_taken > self.config.RADIUS_GRACE_ACTIONS
                and self.radius > 0
                and self.actions_taken % self.config.RADIUS_SHRINK_INTERVAL == 0):
            self.radius -= 1

    def _scout_step(self) -> Optional[Action]:
        """Returns None once the ant has stopped scouting."""
        if self.actions_taken >= self.config.SCOUT_WINDOW:
            self._become_gatherer("scout window over")
            return None

        if not self.plan:
            self.plan = self._plan(SearchGoal.EXPLORE)
        if self.plan is None:
            self._become_gatherer("nothing left to explore")
            return None
        return self._follow_plan()

    def _become_gatherer(self, reason: str):
        self.is_scout = False
        logger.info(f"t={self.time_step} scout -> gatherer ({reason})")
        self.plan = self._plan(SearchGoal.FIND_FOOD)

    def _gatherer_step(self) -> Action:
        here = self.pos
        away = ANTHILL.manhattan_distance(here)

        # On food outside the home zone: pick it up and head back
        if (not self.has_food and self.map.food_at(here, self.time_step) > 0
                and away > self.radius):
            self.plan = self._plan(SearchGoal.DELIVER_FOOD)
            return self._execute(Action.GATHER)

        # Home with food: drop it and go looking again
        if self.has_food and away <= self.radius:
            self.plan = self._plan(SearchGoal.FIND_FOOD)
            return self._execute(Action.DROP_OFF)

        if not self.plan:
            self.plan = self._plan(self._cargo_goal())

        # Can't find what we want, so look at something new
        if not self.plan:
            self.plan = self._plan(SearchGoal.EXPLORE)

        while self.plan is None and self.radius > 0:
            self.radius -= 1
            self.plan = self._plan(self._cargo_goal())

        if self.plan is None:
            logger.warning(f"t={self.time_step} no plan at radius 0 from "
                           f"{tuple(here)}, halting")
            return self._execute(Action.HALT)

        return self._follow_plan()

    def _cargo_goal(self) -> SearchGoal:
        return SearchGoal.DELIVER_FOOD if self.has_food else SearchGoal.FIND_FOOD

    def _follow_plan(self) -> Action:
        if not self.plan:
            return self._execute(Action.HALT)

        next_move = self.plan.popleft()
        if self.map.valid_move(next_move, self.pos, self.has_food):
            return self._execute(next_move)

        # The plan came from this map, so this should never happen
        snapshot = self.map.render()
        log_divergence(self.time_step, tuple(self.pos), next_move.value, snapshot)
        if self.config.STRICT_PLANS:
            raise PlanDivergenceError(self.pos, next_move, snapshot)
        self.plan = None
        return self._execute(Action.HALT)

    def _execute(self, action: Action) -> Action:
        """Track position and cargo for the action we are about to return."""
        if action is Action.GATHER:
            self.has_food = True
        elif action is Action.DROP_OFF:
            self.has_food = False
            self.food_delivered += 1
        else:
            self.pos = self.pos.after(action)
        return action

    # ------------------------------------------------------------------ #
    #  Planning                                                          #
    # ------------------------------------------------------------------ #
    def _plan(self, goal: SearchGoal) -> Optional[deque]:
        plan = search_for_goal(
            self.map, self.pos, goal,
            radius=self.radius,
            now=self.time_step,
            carrying_food=self.has_food,
            home_band=self.config.HOME_BAND,
            rng=self.rng,
        )
        self.plan_goal = goal.plan_name
        if plan is None:
            self.plans_failed += 1
        else:
            self.plans_made += 1
        return plan

    # ------------------------------------------------------------------ #
    #  Talking to other ants                                             #
    # ------------------------------------------------------------------ #
    def send(self) -> bytes:
        """Our tick and our map, for an ant we have bumped into."""
        data = encode_message(self.time_step, self.map)
        log_exchange("SEND", self.time_step, bytes=len(data), map_size=self.map.size)
        return data

    def receive(self, data: bytes) -> bool:
        """
        Merge another ant's map into ours.

        Returns False (and changes nothing) if the payload can't be read.
        """
        try:
            other_time_step, other_map = decode_message(
                data,
                food_decay_ticks=self.config.FOOD_DECAY_TICKS,
                occupancy_decay_ticks=self.config.OCCUPANCY_DECAY_TICKS,
            )
        except MapFormatError as e:
            log_exchange("REJECT", self.time_step, error=str(e))
            return False

        # Whoever is further ahead sets the clock
        if other_time_step > self.time_step:
            self.map.rebase_time(self.time_step, other_time_step)
            self.time_step = other_time_step

        other_map.rebase_time(other_time_step, self.time_step)
        self.map.merge(other_map)

        # New information may open up a better plan
        self.plan = None
        self.exchanges += 1
        log_exchange("RECV", self.time_step, peer_tick=other_time_step,
                     map_size=self.map.size)
        return True

    # ------------------------------------------------------------------ #
    #  Introspection                                                     #
    # ------------------------------------------------------------------ #
    @property
    def mode(self) -> str:
        if self.is_scout:
            return "scout"
        if self.plan_goal == SearchGoal.EXPLORE.plan_name:
            return "exploring"
        return "gatherer"

    def get_state(self) -> dict:
        return {
            "pos": tuple(self.pos),
            "has_food": self.has_food,
            "mode": self.mode,
            "radius": self.radius,
            "plan_goal": self.plan_goal,
            "plan_steps_remaining": len(self.plan) if self.plan else 0,
            "plans_made": self.plans_made,
            "plans_failed": self.plans_failed,
            "map_size": self.map.size,
            "cells_known": sum(1 for _ in self.map.known_cells()),
            "time_step": self.time_step,
            "actions_taken": self.actions_taken,
            "food_delivered": self.food_delivered,
            "exchanges": self.exchanges,
        }
