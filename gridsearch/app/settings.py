# gridsearch/app/settings.py
#!/usr/bin/env python3
"""
Startup settings for the viewer and launcher.

- ENV: GRIDSEARCH_SIZE, GRIDSEARCH_ALGO, GRIDSEARCH_PACE_MS,
       GRIDSEARCH_WALL_DENSITY, GRIDSEARCH_LOG_LEVEL
- CLI: --size=N --algo=bfs|dfs|ids --pace=MS --density=F --log=LEVEL

CLI flags win over the environment; anything unparseable keeps the default.
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence
import os
import sys

from gridsearch.core.control import ALGORITHMS, DEFAULT_STEP_MS
from gridsearch.core.grid import DEFAULT_WALL_DENSITY, MIN_SIZE

MAX_SIZE = 80

ENV_KEYS = {
    "size": "GRIDSEARCH_SIZE",
    "algo": "GRIDSEARCH_ALGO",
    "pace_ms": "GRIDSEARCH_PACE_MS",
    "wall_density": "GRIDSEARCH_WALL_DENSITY",
    "log_level": "GRIDSEARCH_LOG_LEVEL",
}
CLI_KEYS = {
    "--size": "size",
    "--algo": "algo",
    "--pace": "pace_ms",
    "--density": "wall_density",
    "--log": "log_level",
}


@dataclass
class Settings:
    size: int = 25
    algo: str = "bfs"
    pace_ms: int = DEFAULT_STEP_MS
    wall_density: float = DEFAULT_WALL_DENSITY
    log_level: str = "WARNING"


def _raw_values(argv: Sequence[str], environ: Mapping[str, str]) -> Dict[str, str]:
    raw = {field: environ[key] for field, key in ENV_KEYS.items() if key in environ}
    for arg in argv:
        if "=" not in arg:
            continue
        flag, value = arg.split("=", 1)
        if flag in CLI_KEYS:
            raw[CLI_KEYS[flag]] = value
    return raw


def resolve_settings(argv: Optional[Sequence[str]] = None,
                     environ: Optional[Mapping[str, str]] = None) -> Settings:
    argv = sys.argv[1:] if argv is None else argv
    environ = os.environ if environ is None else environ
    raw = _raw_values(argv, environ)
    s = Settings()

    try:
        s.size = min(MAX_SIZE, max(MIN_SIZE, int(raw.get("size", s.size))))
    except ValueError:
        pass
    algo = raw.get("algo", s.algo).lower()
    if algo in ALGORITHMS:
        s.algo = algo
    try:
        s.pace_ms = max(0, int(raw.get("pace_ms", s.pace_ms)))
    except ValueError:
        pass
    try:
        density = float(raw.get("wall_density", s.wall_density))
        if 0.0 <= density <= 1.0:
            s.wall_density = density
    except ValueError:
        pass
    level = raw.get("log_level", s.log_level).upper()
    if level in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        s.log_level = level
    return s
