"""Shared fixtures: a tiny scripted host world for driving ants."""

from __future__ import annotations

from typing import Optional

import pytest

from antmap.world.primitives import Action, Direction, Position, Surroundings, Tile


class ScriptedWorld:
    """Static grid standing in for the host simulation.

    Cells listed in `walls` (or beyond `bound` on either axis) are not
    travelable. Food is consumed by GATHER and counted by DROP_OFF.
    """

    def __init__(self, walls=(), food: Optional[dict] = None,
                 bound: Optional[int] = None):
        self.walls = {Position(*w) for w in walls}
        self.food = {Position(*p): n for p, n in (food or {}).items()}
        self.bound = bound
        self.delivered = 0

    def travelable(self, pos: Position) -> bool:
        if pos in self.walls:
            return False
        if self.bound is not None and (abs(pos.x) > self.bound or abs(pos.y) > self.bound):
            return False
        return True

    def tile(self, pos: Position) -> Tile:
        return Tile(travelable=self.travelable(pos), food=self.food.get(pos, 0))

    def surroundings(self, pos: Position) -> Surroundings:
        return Surroundings(
            current=self.tile(pos),
            neighbors={d: self.tile(pos.neighbor(d)) for d in Direction},
        )

    def apply(self, pos: Position, action: Action) -> Position:
        """Carry out an action for an ant at `pos`; returns its new position."""
        if action is Action.GATHER:
            assert self.food.get(pos, 0) > 0, f"gathered from empty cell {pos}"
            self.food[pos] -= 1
            return pos
        if action is Action.DROP_OFF:
            self.delivered += 1
            return pos
        target = pos.after(action)
        assert self.travelable(target), f"walked into wall at {target}"
        return target

    def run(self, ant, ticks: int) -> list[Action]:
        """Drive an ant for `ticks` ticks, checking it tracks its own position."""
        actions = []
        pos = ant.pos
        for _ in range(ticks):
            action = ant.get_action(self.surroundings(pos))
            pos = self.apply(pos, action)
            assert ant.pos == pos
            actions.append(action)
        return actions


@pytest.fixture
def open_world() -> ScriptedWorld:
    return ScriptedWorld(bound=6)


@pytest.fixture
def make_world():
    return ScriptedWorld
