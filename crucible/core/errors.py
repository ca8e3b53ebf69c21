# crucible/core/errors.py
#!/usr/bin/env python3
"""Exceptions raised by the route planner and the city loader."""

from typing import Optional, Tuple


class CrucibleError(Exception):
    """Base class for everything this package raises on purpose."""


class OutOfBounds(CrucibleError, IndexError):
    def __init__(self, cell: Tuple[int, int], width: int, height: int):
        self.cell = cell
        self.width = width
        self.height = height
        super().__init__(f"cell {cell} is outside the {width}x{height} city")


class PathNotFound(CrucibleError, LookupError):
    """No state satisfying the regime's stop rule was ever reached."""

    def __init__(self, start, goal, regime):
        self.start = start
        self.goal = goal
        self.regime = regime
        super().__init__(f"No path found from {start} to {goal} for the {regime.value} crucible")


class SearchAborted(CrucibleError):
    """A search ran past its expansion or wall-clock budget."""

    def __init__(self, reason: str, expansions: int, best_cost: Optional[int] = None):
        self.reason = reason
        self.expansions = expansions
        self.best_cost = best_cost
        super().__init__(f"search aborted ({reason}) after {expansions} expansions")


class CityParseError(CrucibleError, ValueError):
    pass


class UnknownCharacter(CityParseError):
    def __init__(self, char: str, line: int, column: int):
        self.char = char
        self.line = line
        self.column = column
        super().__init__(f"Unknown character: {char!r} (line {line}, column {column})")


class EmptyCity(CityParseError):
    def __init__(self):
        super().__init__("Expected city blocks")


class UnevenGrid(CityParseError):
    def __init__(self, line: int, expected: int, found: int):
        self.line = line
        self.expected = expected
        self.found = found
        super().__init__(f"Expected even grid: line {line} has {found} blocks, expected {expected}")
