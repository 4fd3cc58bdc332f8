"""Locating ``stargate.toml``.

Lookup order: the ``STARGATE_CONFIG`` environment variable, then the
nearest ``stargate.toml`` in the start directory or any of its parents.
The ``--config`` flag bypasses discovery entirely (see ``settings.py``).
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "stargate.toml"
CONFIG_ENV_VAR = "STARGATE_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect for *start* (default: cwd), or None.

    A ``STARGATE_CONFIG`` pointing at a missing file disables discovery
    rather than falling back to the walk-up search.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
