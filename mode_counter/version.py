"""
mode_counter.version — package version and build description.

`__version__` is the released semver. `git_describe()` adds where the running
code came from (tag, distance, commit, dirty flag) for `run-calls version` and
diagnostic logs. Imports nothing outside the stdlib.
"""

from __future__ import annotations

import os
import subprocess
from functools import lru_cache
from typing import Dict

__version__ = "0.1.0"


@lru_cache(maxsize=1)
def git_describe() -> str:
    """
    `git describe --tags --dirty --always` for the working tree, or
    MODE_COUNTER_GIT_DESCRIBE when set (e.g. baked into an image at build time).
    Outside a checkout it falls back to "<__version__>+local".
    """
    pinned = os.getenv("MODE_COUNTER_GIT_DESCRIBE", "").strip()
    if pinned:
        return pinned
    try:
        raw = subprocess.check_output(
            ["git", "describe", "--tags", "--dirty", "--always"],
            cwd=os.path.dirname(os.path.abspath(__file__)),
            stderr=subprocess.DEVNULL,
        )
    except (OSError, subprocess.CalledProcessError):
        raw = b""
    return raw.decode("utf-8", "replace").strip() or f"{__version__}+local"


@lru_cache(maxsize=1)
def version_metadata() -> Dict[str, str]:
    """{"version", "describe", "dirty"}; all values are strings so the dict logs and serializes as-is."""
    describe = git_describe()
    dirty = describe.endswith("-dirty") or "-dirty-" in describe
    return {"version": __version__, "describe": describe, "dirty": str(dirty).lower()}


__all__ = ["__version__", "git_describe", "version_metadata"]
