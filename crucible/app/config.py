# crucible/app/config.py
#!/usr/bin/env python3
"""
Run-time settings shared by the CLI and the viewer.

Each setting comes from, in order of precedence:
- CLI: --regime=small|ultra, --frontier=heuristic|astar, ...
- ENV: CRUCIBLE_REGIME, CRUCIBLE_FRONTIER, CRUCIBLE_MAX_EXPANSIONS,
       CRUCIBLE_MAX_TIME_S, CRUCIBLE_LOG_LEVEL
- the defaults below
Unknown values fall back to the default.
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from crucible.core.types import Frontier, Regime

REPO_ROOT = Path(__file__).resolve().parents[2]
MAP_DIR = REPO_ROOT / "maps"

DEFAULT_REGIME = Regime.SMALL
DEFAULT_FRONTIER = Frontier.ASTAR
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(levelname)s:%(name)s:%(message)s"


@dataclass(frozen=True)
class Settings:
    regime: Regime = DEFAULT_REGIME
    frontier: Frontier = DEFAULT_FRONTIER
    max_expansions: Optional[int] = None
    max_time_s: Optional[float] = None
    log_level: str = DEFAULT_LOG_LEVEL


def _flag(argv: Sequence[str], name: str) -> Optional[str]:
    value = None
    for arg in argv:
        if arg.startswith(f"--{name}="):
            value = arg.split("=", 1)[1]
    return value


def _lookup(env: Mapping[str, str], argv: Sequence[str], name: str) -> Optional[str]:
    value = _flag(argv, name)
    if value is None:
        value = env.get("CRUCIBLE_" + name.upper().replace("-", "_"))
    return value


def _enum(cls, raw: Optional[str], default):
    try:
        return cls(raw.strip().lower()) if raw else default
    except ValueError:
        return default


def _number(kind, raw: Optional[str]):
    try:
        value = kind(raw) if raw else None
    except ValueError:
        return None
    return value if value is not None and value > 0 else None


def _level(raw: Optional[str]) -> str:
    if raw and raw.strip().upper() in LOG_LEVELS:
        return raw.strip().upper()
    return DEFAULT_LOG_LEVEL


def resolve_settings(env: Optional[Mapping[str, str]] = None,
                     argv: Optional[Sequence[str]] = None) -> Settings:
    env = os.environ if env is None else env
    argv = sys.argv[1:] if argv is None else argv
    return Settings(
        regime=_enum(Regime, _lookup(env, argv, "regime"), DEFAULT_REGIME),
        frontier=_enum(Frontier, _lookup(env, argv, "frontier"), DEFAULT_FRONTIER),
        max_expansions=_number(int, _lookup(env, argv, "max-expansions")),
        max_time_s=_number(float, _lookup(env, argv, "max-time-s")),
        log_level=_level(_lookup(env, argv, "log-level")),
    )


def log_level_number(raw: Optional[str]) -> int:
    return logging.getLevelName(_level(raw))


def configure_logging(level: str) -> None:
    logging.basicConfig(level=log_level_number(level), format=LOG_FORMAT)
