# crucible/core/state_space.py
#!/usr/bin/env python3
from typing import List, Tuple

from crucible.core.movement import can_stop, legal_directions
from crucible.core.types import Cell, CityGrid, Direction, Regime, State

_DIRECTIONS = list(Direction)


class StateSpace:
    """
    The city crossed with (direction, run length).

    Every state after the first move gets a flat index so the search can keep
    its per-state bookkeeping in plain lists:
        index = ((y * width + x) * 4 + direction) * (max_run + 1) + run
    """

    def __init__(self, grid: CityGrid, regime: Regime):
        self.grid = grid
        self.regime = regime
        self._runs = regime.max_run + 1
        self.size = grid.width * grid.height * len(_DIRECTIONS) * self._runs

    def initial(self, start: Cell) -> State:
        self.grid.index(start)  # bounds check
        return State(start, None, 0)

    def advance(self, state: State, d: Direction) -> State:
        run = state.run + 1 if d is state.direction else 1
        return State(d.step(state.cell), d, run)

    def successors(self, state: State) -> List[Tuple[State, int]]:
        out: List[Tuple[State, int]] = []
        for d in legal_directions(self.grid, state, self.regime):
            nxt = self.advance(state, d)
            out.append((nxt, self.grid.cost_of(nxt.cell)))
        return out

    def index(self, state: State) -> int:
        if state.direction is None:
            raise ValueError("the pre-start state has no index")
        cell_idx = self.grid.index(state.cell)
        return (cell_idx * len(_DIRECTIONS) + state.direction.ordinal) * self._runs + state.run

    def state_at(self, idx: int) -> State:
        idx, run = divmod(idx, self._runs)
        cell_idx, d = divmod(idx, len(_DIRECTIONS))
        y, x = divmod(cell_idx, self.grid.width)
        return State((x, y), _DIRECTIONS[d], run)

    def is_terminal(self, state: State, goal: Cell) -> bool:
        return state.cell == goal and can_stop(state, self.regime)
