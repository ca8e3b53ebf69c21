# crucible/core/city.py
#!/usr/bin/env python3
"""Load a city of heat-loss digits, one row of blocks per line."""

from pathlib import Path
from typing import IO, List, Union

from crucible.core.errors import EmptyCity, UnevenGrid, UnknownCharacter
from crucible.core.types import CityGrid


def parse_city(text: str) -> CityGrid:
    lines = text.splitlines()
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines:
        raise EmptyCity()

    rows: List[List[int]] = []
    for y, line in enumerate(lines, start=1):
        row: List[int] = []
        for x, ch in enumerate(line, start=1):
            if not ("0" <= ch <= "9"):
                raise UnknownCharacter(ch, y, x)
            row.append(ord(ch) - ord("0"))
        if rows and len(row) != len(rows[0]):
            raise UnevenGrid(y, len(rows[0]), len(row))
        rows.append(row)

    if not rows[0]:
        raise EmptyCity()
    return CityGrid.from_rows(rows)


def city_from_stream(stream: IO[str]) -> CityGrid:
    return parse_city(stream.read())


def load_city(path: Union[str, Path]) -> CityGrid:
    with open(path, "r") as f:
        return city_from_stream(f)
