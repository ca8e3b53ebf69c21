# crucible/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Optional, Dict, Any, Sequence

from crucible.core.errors import OutOfBounds

Cell = Tuple[int, int]  # (col, row)


class Direction(Enum):
    NORTH = (0, -1)
    EAST = (1, 0)
    SOUTH = (0, 1)
    WEST = (-1, 0)

    @property
    def opposite(self) -> "Direction":
        dx, dy = self.value
        return Direction((-dx, -dy))

    @property
    def ordinal(self) -> int:
        return _DIRECTION_ORDER.index(self)

    def step(self, c: Cell) -> Cell:
        x, y = c
        dx, dy = self.value
        return (x + dx, y + dy)


_DIRECTION_ORDER = list(Direction)


class Regime(Enum):
    """Movement regime of the crucible, fixed for a whole search."""
    SMALL = "small"   # max run 3, may turn anytime
    ULTRA = "ultra"   # min run 4 before turning or stopping, max run 10

    @property
    def min_run(self) -> int:
        return 4 if self is Regime.ULTRA else 1

    @property
    def max_run(self) -> int:
        return 10 if self is Regime.ULTRA else 3


class Frontier(Enum):
    HEURISTIC = "heuristic"  # distance to goal only
    ASTAR = "astar"          # g + h


@dataclass(frozen=True)
class State:
    cell: Cell
    direction: Optional[Direction]  # None only before the first move
    run: int = 0


@dataclass(frozen=True)
class CityGrid:
    width: int
    height: int
    costs: Tuple[int, ...]             # flat, index = y * width + x

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "CityGrid":
        height = len(rows)
        width = len(rows[0]) if rows else 0
        flat = tuple(int(v) for r in rows for v in r)
        if width == 0 or len(flat) != width * height:
            raise ValueError("rows must form a non-empty rectangle")
        if any(not 0 <= v <= 9 for v in flat):
            raise ValueError("block heat loss must be between 0 and 9")
        return cls(width, height, flat)

    def in_bounds(self, c: Cell) -> bool:
        x, y = c
        return 0 <= x < self.width and 0 <= y < self.height

    def index(self, c: Cell) -> int:
        if not self.in_bounds(c):
            raise OutOfBounds(c, self.width, self.height)
        x, y = c
        return y * self.width + x

    def cost_of(self, c: Cell) -> int:
        return self.costs[self.index(c)]

    def rows(self) -> List[List[int]]:
        w = self.width
        return [list(self.costs[y * w:(y + 1) * w]) for y in range(self.height)]

    @property
    def bottom_right(self) -> Cell:
        return (self.width - 1, self.height - 1)


@dataclass(frozen=True)
class Block:
    cell: Cell
    heat_loss: int


@dataclass(frozen=True)
class PathResult:
    blocks: List[Block]      # first cell entered after the start, ..., goal
    cost: int                # total heat loss, start cell excluded
    expanded: int            # states expanded (debugging/profiling)

    @property
    def cells(self) -> List[Cell]:
        return [b.cell for b in self.blocks]


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "no_path"
    opened: List[Cell] = field(default_factory=list)
    closed: List[Cell] = field(default_factory=list)
    current: Optional[Cell] = None
    path: Optional[List[Cell]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)
