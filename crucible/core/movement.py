# crucible/core/movement.py
#!/usr/bin/env python3
"""
Movement rules for the two crucible regimes.

- The crucible never reverses.
- SMALL: at most 3 blocks in a straight line, may turn after any block.
- ULTRA: at least 4 blocks before it may turn (or stop), at most 10 straight.
- The very first move may go in any direction that stays inside the city.
"""

from typing import List

from crucible.core.types import CityGrid, Direction, Regime, State


def legal_directions(grid: CityGrid, state: State, regime: Regime) -> List[Direction]:
    """Directions the crucible may take next from `state`, in N, E, S, W order."""
    out: List[Direction] = []
    for d in Direction:
        if not grid.in_bounds(d.step(state.cell)):
            continue
        if state.run == 0 or state.direction is None:
            out.append(d)
            continue
        if d is state.direction.opposite:
            continue
        if d is state.direction:
            if state.run >= regime.max_run:
                continue
        elif state.run < regime.min_run:
            continue
        out.append(d)
    return out


def can_stop(state: State, regime: Regime) -> bool:
    return state.run >= regime.min_run
