"""Locate ``graphtoll.toml``.

An explicit ``GRAPHTOLL_CONFIG`` path wins. Otherwise the search starts in
the working directory and climbs toward the filesystem root, so commands
run from a subdirectory share the store of the enclosing project.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "graphtoll.toml"
CONFIG_ENV_VAR = "GRAPHTOLL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start* (default: cwd), if any.

    A ``GRAPHTOLL_CONFIG`` that names a missing file disables discovery
    instead of falling back to the walk-up search.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
