import pytest

from crucible.core.errors import OutOfBounds
from crucible.core.state_space import StateSpace
from crucible.core.types import CityGrid, Direction, Regime, State

E, S = Direction.EAST, Direction.SOUTH


def _city():
    return CityGrid.from_rows([
        [1, 2, 3],
        [4, 5, 6],
    ])


def test_successors_from_start_carry_entry_cost():
    space = StateSpace(_city(), Regime.SMALL)
    succ = space.successors(space.initial((0, 0)))
    assert succ == [
        (State((1, 0), E, 1), 2),
        (State((0, 1), S, 1), 4),
    ]


def test_run_grows_straight_and_resets_on_turn():
    space = StateSpace(_city(), Regime.SMALL)
    succ = dict(space.successors(State((1, 0), E, 1)))
    assert succ == {
        State((2, 0), E, 2): 3,
        State((1, 1), S, 1): 5,
    }


def test_index_round_trip_covers_every_state():
    city = _city()
    for regime in Regime:
        space = StateSpace(city, regime)
        seen = set()
        for y in range(city.height):
            for x in range(city.width):
                for d in Direction:
                    for run in range(regime.max_run + 1):
                        st = State((x, y), d, run)
                        i = space.index(st)
                        assert 0 <= i < space.size
                        assert space.state_at(i) == st
                        seen.add(i)
        assert len(seen) == space.size


def test_pre_start_state_has_no_index():
    space = StateSpace(_city(), Regime.ULTRA)
    with pytest.raises(ValueError):
        space.index(space.initial((0, 0)))


def test_initial_rejects_cells_outside_city():
    space = StateSpace(_city(), Regime.SMALL)
    with pytest.raises(OutOfBounds):
        space.initial((3, 0))


def test_terminal_needs_goal_and_min_run():
    space = StateSpace(_city(), Regime.ULTRA)
    assert not space.is_terminal(State((2, 1), E, 3), (2, 1))
    assert space.is_terminal(State((2, 1), E, 4), (2, 1))
    assert not space.is_terminal(State((1, 1), E, 4), (2, 1))
