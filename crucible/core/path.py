# crucible/core/path.py
#!/usr/bin/env python3
from typing import List, Sequence

from crucible.core.state_space import StateSpace
from crucible.core.types import Block


def reconstruct_path(space: StateSpace, parent: Sequence[int], end: int) -> List[Block]:
    """Follow predecessor links back from state index `end`; -1 marks a first move."""
    path: List[Block] = []
    cur = end
    while cur != -1:
        cell = space.state_at(cur).cell
        path.append(Block(cell, space.grid.cost_of(cell)))
        cur = parent[cur]
    path.reverse()
    return path
