"""Tests for antmap.world.primitives."""

from __future__ import annotations

from antmap.world.primitives import ANTHILL, Action, Direction, Position, Surroundings, Tile


def test_north_is_up() -> None:
    assert ANTHILL.neighbor(Direction.NORTH) == Position(0, -1)
    assert ANTHILL.neighbor(Direction.SOUTH) == Position(0, 1)
    assert ANTHILL.neighbor(Direction.EAST) == Position(1, 0)
    assert ANTHILL.neighbor(Direction.WEST) == Position(-1, 0)


def test_move_actions_round_trip_direction() -> None:
    for d in Direction:
        assert Action.move(d).direction is d
    for a in (Action.GATHER, Action.DROP_OFF, Action.HALT):
        assert a.direction is None


def test_non_moves_stay_put() -> None:
    p = Position(3, -2)
    assert p.after(Action.HALT) == p
    assert p.after(Action.GATHER) == p
    assert p.after(Action.MOVE_WEST) == Position(2, -2)


def test_positions_hash_by_value() -> None:
    assert {Position(1, 2), Position(1, 2)} == {Position(1, 2)}
    assert Position(1, 2).manhattan_distance(Position(-2, 0)) == 5


def test_surroundings_lookup() -> None:
    wall = Tile(travelable=False)
    s = Surroundings(current=Tile(food=2), neighbors={Direction.EAST: wall})
    assert s.tile(Direction.EAST) is wall
    assert s.current.food == 2
