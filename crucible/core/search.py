# crucible/core/search.py
#!/usr/bin/env python3
"""
Crucible route search: one expansion per step() for animation, run() to drain.

Implements the Algorithm API expected by the viewer:
- init(grid) - reset() - step() -> StepResult

States are (cell, direction, run length), see StateSpace. The search is a
label-correcting relaxation over that space:
- best cost and predecessor per state live in flat lists and are written together
- a neighbour is relaxed only if it beats its own best AND the best cost seen at
  the goal so far (the bound)
- queue entries whose cost no longer matches the best cost are stale and skipped
- a goal pop never stops the search; a cheaper terminal may still come later

Frontier ordering:
- HEURISTIC: Manhattan distance to goal only (cost is ignored by the queue)
- ASTAR: g + Manhattan * min cell cost (admissible, allows stopping at the bound)

Tie-breaking in the PQ: (priority, h, tie, seq, state), lower h first, then
- ASTAR: deeper g first (tie = -g)
- HEURISTIC: cheaper g first (tie = g)
then FIFO by seq.
"""

import heapq
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from math import inf
from typing import Dict, Iterable, List, Optional, Tuple, Union

from crucible.core.errors import PathNotFound, SearchAborted
from crucible.core.path import reconstruct_path
from crucible.core.state_space import StateSpace
from crucible.core.types import Cell, CityGrid, Frontier, PathResult, Regime, StepResult

logger = logging.getLogger(__name__)

Entry = Tuple[float, int, int, int, int]  # (priority, h, tie, seq, state index)


@dataclass
class CrucibleSearch:
    name: str = "Crucible"
    regime: Regime = Regime.SMALL
    frontier: Frontier = Frontier.ASTAR
    start: Optional[Cell] = None   # defaults to the top-left block
    goal: Optional[Cell] = None    # defaults to the bottom-right block

    # Internal state
    grid: Optional[CityGrid] = None
    space: Optional[StateSpace] = None
    open_pq: List[Entry] = field(default_factory=list)
    open_cells: Dict[Cell, int] = field(default_factory=dict)  # pending entries per cell, for overlay
    closed_set: set = field(default_factory=set)
    best: List[float] = field(default_factory=list)
    parent: List[int] = field(default_factory=list)
    bound: float = inf
    best_terminal: int = -1
    popped_count: int = 0
    done: bool = False
    no_path: bool = False
    seq: int = 0
    _goal: Cell = (0, 0)
    _start: Cell = (0, 0)
    _h_scale: int = 1
    _trivial: bool = False

    # -------------------- lifecycle --------------------

    def init(self, grid: CityGrid) -> None:
        """Initialize on a given city."""
        self.grid = grid
        self.space = StateSpace(grid, self.regime)
        self.reset()

    def reset(self) -> None:
        """Clear all state and seed the frontier with every legal first move."""
        if self.grid is None:
            return
        self._start = self.start if self.start is not None else (0, 0)
        self._goal = self.goal if self.goal is not None else self.grid.bottom_right
        self.grid.index(self._goal)  # bounds check

        self.open_pq = []
        self.open_cells = {}
        self.closed_set = set()
        self.best = [inf] * self.space.size
        self.parent = [-1] * self.space.size
        self.bound = inf
        self.best_terminal = -1
        self.popped_count = 0
        self.done = False
        self.no_path = False
        self.seq = 0
        self._h_scale = min(self.grid.costs) if self.frontier is Frontier.ASTAR else 1
        self._trivial = self._start == self._goal

        origin = self.space.initial(self._start)
        if self._trivial:
            self.done = True
            return
        for nxt, cost in self.space.successors(origin):
            i = self.space.index(nxt)
            self.best[i] = cost
            self._push(i, cost)

    # -------------------- helpers --------------------

    def _bump(self) -> int:
        self.seq += 1
        return self.seq

    def _h(self, c: Cell) -> int:
        (x, y) = c
        (gx, gy) = self._goal
        return abs(gx - x) + abs(gy - y)

    def _push(self, i: int, g: int) -> None:
        cell = self.space.state_at(i).cell
        h = self._h(cell)
        if self.frontier is Frontier.ASTAR:
            h *= self._h_scale
            priority, tie = g + h, -g
        else:
            priority, tie = h, g
        heapq.heappush(self.open_pq, (priority, h, tie, self._bump(), i))
        self.open_cells[cell] = self.open_cells.get(cell, 0) + 1

    def _pop(self) -> Entry:
        entry = heapq.heappop(self.open_pq)
        cell = self.space.state_at(entry[4]).cell
        left = self.open_cells[cell] - 1
        if left:
            self.open_cells[cell] = left
        else:
            del self.open_cells[cell]
        return entry

    def _finish(self) -> StepResult:
        self.open_pq.clear()
        self.open_cells.clear()
        if self.best_terminal == -1:
            self.no_path = True
            logger.info("%s: no path after %d expansions", self.name, self.popped_count)
            return StepResult(status="no_path", metrics=self._metrics())
        self.done = True
        path = self.path_cells()
        logger.info("%s: heat loss %d after %d expansions", self.name, self.bound, self.popped_count)
        return StepResult(status="done", path=path, metrics=self._metrics(path_len=len(path)))

    # -------------------- results --------------------

    def blocks(self):
        if self._trivial:
            return []
        if self.best_terminal == -1:
            return None
        return reconstruct_path(self.space, self.parent, self.best_terminal)

    def path_cells(self) -> Optional[List[Cell]]:
        blocks = self.blocks()
        if blocks is None:
            return None
        return [self._start] + [b.cell for b in blocks]

    def result(self) -> PathResult:
        """The accepted route once the search is done; raises PathNotFound otherwise."""
        if not self.done:
            raise PathNotFound(self._start, self._goal, self.regime)
        if self._trivial:
            return PathResult([], 0, 0)
        return PathResult(self.blocks(), int(self.bound), self.popped_count)

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        """
        Run ONE expansion step:
          - Pop the best-priority entry, skip it if stale.
          - Record it as the best terminal if it may stop at the goal within the bound.
          - Relax its successors under the guard.
        """
        if self.grid is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            path = self.path_cells()
            return StepResult(status="done", path=path,
                              metrics=self._metrics(path_len=len(path) if path else 0))

        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())

        if not self.open_pq:
            return self._finish()

        f_u, _, tie, _, u = self._pop()
        g_u = -tie if self.frontier is Frontier.ASTAR else tie

        # Ignore stale pops
        if g_u != self.best[u]:
            return StepResult(status="running", metrics=self._metrics())

        # Nothing left can beat the bound
        if self.frontier is Frontier.ASTAR and f_u >= self.bound:
            return self._finish()

        self.popped_count += 1
        state = self.space.state_at(u)
        self.closed_set.add(state.cell)

        if self.space.is_terminal(state, self._goal) and g_u <= self.bound:
            self.best_terminal = u
            self.bound = g_u
            logger.debug("Best heat loss %d, frontier size %d", g_u, len(self.open_pq))

        opened_now: List[Cell] = []
        for nxt, step_cost in self.space.successors(state):
            alt = g_u + step_cost
            v = self.space.index(nxt)
            if alt < self.best[v] and alt < self.bound:
                self.best[v] = alt
                self.parent[v] = u
                self._push(v, alt)
                opened_now.append(nxt.cell)

        return StepResult(status="running", opened=opened_now, closed=[state.cell],
                          current=state.cell, metrics=self._metrics())

    def run(self, max_expansions: Optional[int] = None,
            max_time_s: Optional[float] = None) -> PathResult:
        """Step until the frontier is exhausted; raises PathNotFound or SearchAborted."""
        t0 = time.monotonic()
        while not (self.done or self.no_path):
            if max_expansions is not None and self.popped_count >= int(max_expansions):
                raise SearchAborted("max_expansions", self.popped_count, self._best_or_none())
            if max_time_s is not None and (time.monotonic() - t0) > float(max_time_s):
                raise SearchAborted("max_time", self.popped_count, self._best_or_none())
            self.step()
        if self.no_path:
            raise PathNotFound(self._start, self._goal, self.regime)
        return self.result()

    # -------------------- metrics --------------------

    def _best_or_none(self) -> Optional[int]:
        return None if self.bound == inf else int(self.bound)

    def _metrics(self, path_len: int = 0) -> dict:
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": len(self.open_cells),
            "closed_count": len(self.closed_set),
            "path_len": path_len,
            "total_cost": self._best_or_none(),
        }


def navigate(
    grid: CityGrid,
    start: Cell,
    goal: Cell,
    regime: Regime,
    frontier: Frontier = Frontier.ASTAR,
    *,
    max_expansions: Optional[int] = None,
    max_time_s: Optional[float] = None,
) -> PathResult:
    """Cheapest route from start to goal for the given crucible.

    Raises PathNotFound when no route satisfies the regime, OutOfBounds when
    start or goal lie outside the city, SearchAborted when a budget runs out.
    """
    search = CrucibleSearch(name=f"{regime.value}/{frontier.value}", regime=regime,
                            frontier=frontier, start=start, goal=goal)
    search.init(grid)
    return search.run(max_expansions=max_expansions, max_time_s=max_time_s)


def navigate_all(
    grid: CityGrid,
    start: Cell,
    goal: Cell,
    regimes: Iterable[Regime] = tuple(Regime),
    frontier: Frontier = Frontier.ASTAR,
    **budget,
) -> Dict[Regime, Union[PathResult, PathNotFound]]:
    """Run one independent search per regime on a thread pool.

    A regime without a route maps to its PathNotFound; other errors propagate.
    """
    regimes = list(regimes)
    out: Dict[Regime, Union[PathResult, PathNotFound]] = {}
    with ThreadPoolExecutor(max_workers=max(1, len(regimes))) as pool:
        futures = {r: pool.submit(navigate, grid, start, goal, r, frontier, **budget) for r in regimes}
        for r, fut in futures.items():
            try:
                out[r] = fut.result()
            except PathNotFound as e:
                out[r] = e
    return out
