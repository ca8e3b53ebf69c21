"""Movement rules for both crucibles."""

from crucible.core.movement import can_stop, legal_directions
from crucible.core.types import CityGrid, Direction, Regime, State

N, E, S, W = Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST


def _open_city():
    return CityGrid.from_rows([[1] * 21 for _ in range(21)])


def test_first_move_only_limited_by_bounds():
    city = _open_city()
    assert legal_directions(city, State((10, 10), None, 0), Regime.ULTRA) == [N, E, S, W]
    assert legal_directions(city, State((0, 0), None, 0), Regime.SMALL) == [E, S]
    assert legal_directions(city, State((20, 20), None, 0), Regime.ULTRA) == [N, W]


def test_never_reverses():
    city = _open_city()
    for regime in Regime:
        for run in range(1, regime.max_run + 1):
            for d in Direction:
                assert d.opposite not in legal_directions(city, State((10, 10), d, run), regime)


def test_small_caps_straight_run_at_three():
    city = _open_city()
    assert legal_directions(city, State((10, 10), E, 1), Regime.SMALL) == [N, E, S]
    assert legal_directions(city, State((10, 10), E, 2), Regime.SMALL) == [N, E, S]
    assert legal_directions(city, State((10, 10), E, 3), Regime.SMALL) == [N, S]


def test_ultra_must_go_four_before_turning():
    city = _open_city()
    for run in (1, 2, 3):
        assert legal_directions(city, State((10, 10), S, run), Regime.ULTRA) == [S]
    assert legal_directions(city, State((10, 10), S, 4), Regime.ULTRA) == [E, S, W]
    assert legal_directions(city, State((10, 10), S, 9), Regime.ULTRA) == [E, S, W]
    assert legal_directions(city, State((10, 10), S, 10), Regime.ULTRA) == [E, W]


def test_boundary_removes_moves_even_when_rules_allow():
    city = _open_city()
    # heading east along the top edge: north is off the map
    assert legal_directions(city, State((5, 0), E, 1), Regime.SMALL) == [E, S]
    # ultra stuck against the east wall before its fourth block
    assert legal_directions(city, State((20, 5), E, 2), Regime.ULTRA) == []


def test_can_stop():
    assert can_stop(State((0, 0), E, 1), Regime.SMALL)
    assert not can_stop(State((0, 0), E, 3), Regime.ULTRA)
    assert can_stop(State((0, 0), E, 4), Regime.ULTRA)
    assert not can_stop(State((0, 0), None, 0), Regime.SMALL)
