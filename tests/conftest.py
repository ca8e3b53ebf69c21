import pytest

from crucible.core.city import parse_city

SAMPLE = """\
2413432311323
3215453535623
3255245654254
3446585845452
4546657867536
1438598798454
4457876987766
3637877979653
4654967986887
4564679986453
1224686865563
2546548887735
4322674655533
"""

UNFORTUNATE = """\
111111111111
999999999991
999999999991
999999999991
999999999991
"""


@pytest.fixture
def sample_city():
    return parse_city(SAMPLE)


@pytest.fixture
def unfortunate_city():
    return parse_city(UNFORTUNATE)
