# crucible/app/cli.py
#!/usr/bin/env python3
"""
Print the least heat loss for a crucible crossing a city.

Usage:
    crucible-route INPUT [--regime small|ultra|both] [--frontier heuristic|astar]
                         [--start X,Y] [--goal X,Y] [--max-expansions N]
                         [--max-time S] [--show-path] [--log-level LEVEL]

Defaults for regime, frontier, budgets and log level come from the
CRUCIBLE_* environment variables (see crucible.app.config).
"""

import argparse
import logging
import sys
from typing import List, Optional

from crucible.app.config import LOG_LEVELS, configure_logging, resolve_settings
from crucible.core.city import load_city
from crucible.core.errors import CityParseError, OutOfBounds, PathNotFound, SearchAborted
from crucible.core.search import navigate_all
from crucible.core.types import Cell, Frontier, Regime

logger = logging.getLogger(__name__)


def _cell(text: str) -> Cell:
    try:
        x, y = (int(v) for v in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected X,Y but got {text!r}")
    return (x, y)


def _positive(kind):
    def parse(text: str):
        try:
            value = kind(text)
        except ValueError:
            raise argparse.ArgumentTypeError(f"expected a number but got {text!r}")
        if value <= 0:
            raise argparse.ArgumentTypeError(f"must be greater than 0, got {text}")
        return value
    return parse


def build_parser() -> argparse.ArgumentParser:
    settings = resolve_settings(argv=[])
    p = argparse.ArgumentParser(prog="crucible-route",
                                description="Least heat loss route for a crucible through a city.")
    p.add_argument("input", help="city file: one row of digits per line")
    p.add_argument("--regime", choices=[r.value for r in Regime] + ["both"],
                   default=settings.regime.value)
    p.add_argument("--frontier", choices=[f.value for f in Frontier],
                   default=settings.frontier.value)
    p.add_argument("--start", type=_cell, default=None, help="X,Y (default 0,0)")
    p.add_argument("--goal", type=_cell, default=None, help="X,Y (default bottom-right)")
    p.add_argument("--max-expansions", type=_positive(int), default=settings.max_expansions)
    p.add_argument("--max-time", type=_positive(float), default=settings.max_time_s, help="seconds")
    p.add_argument("--show-path", action="store_true", help="also print the cells entered")
    p.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default=settings.log_level)
    return p


def _fail(msg: str) -> int:
    print(msg, file=sys.stderr)
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        city = load_city(args.input)
    except OSError as e:
        return _fail(f"Could not open file: {e}")
    except CityParseError as e:
        return _fail(f"Could not parse city: {e}")

    start = args.start if args.start is not None else (0, 0)
    goal = args.goal if args.goal is not None else city.bottom_right
    regimes = list(Regime) if args.regime == "both" else [Regime(args.regime)]
    logger.info("city %dx%d, %s -> %s, regimes %s", city.width, city.height, start, goal,
                ", ".join(r.value for r in regimes))

    try:
        results = navigate_all(city, start, goal, regimes, Frontier(args.frontier),
                               max_expansions=args.max_expansions, max_time_s=args.max_time)
    except OutOfBounds as e:
        return _fail(f"Invalid start or goal: {e}")
    except SearchAborted as e:
        return _fail(f"Search aborted: {e}")

    status = 0
    for regime in regimes:
        res = results[regime]
        prefix = f"[{regime.value}] " if len(regimes) > 1 else ""
        if isinstance(res, PathNotFound):
            print(f"{prefix}{res}", file=sys.stderr)
            status = 1
            continue
        print(f"{prefix}Total heat loss: {res.cost}")
        if args.show_path:
            print(prefix + " ".join(f"{x},{y}" for x, y in res.cells))
    return status


if __name__ == "__main__":
    sys.exit(main())
