"""Shared settings for the encoder pipeline.

Each value can be overridden through an environment variable; CLI flags in
run.py take precedence over both.
"""

import os
from typing import Optional

from .errors import ConfigurationError


def _env_int(name: str) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


# PySAT solver name: "g4" (Glucose 4), "cd15" (CaDiCaL 1.5.3), "m22" (MiniSat 2.2), ...
DEFAULT_SOLVER_NAME: str = os.environ.get("ZEBRA_SAT_SOLVER", "g4")

# Conflict budget for solve_limited(); None means solve without a limit.
DEFAULT_CONF_BUDGET: Optional[int] = _env_int("ZEBRA_CONF_BUDGET")

# Default puzzle file for run.py when no input path is passed.
DEFAULT_DATA_PATH: Optional[str] = os.environ.get("ZEBRA_DATA_PATH")
