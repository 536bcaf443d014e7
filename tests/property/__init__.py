# -*- coding: utf-8 -*-
"""
Hypothesis profiles for the property suite.

    dev   local default, 100 examples
    ci    200 derandomized examples (selected when CI is set)
    fast  25 examples for quick iteration

HYPOTHESIS_PROFILE overrides the choice. Use @settings(...) on a test for
one-off changes.
"""
from __future__ import annotations

import os
from typing import Final

from hypothesis import HealthCheck, Verbosity, settings

# The root conftest's autouse env fixture is function scoped.
_SUPPRESSED = (HealthCheck.too_slow, HealthCheck.filter_too_much, HealthCheck.function_scoped_fixture)

settings.register_profile("dev", max_examples=100, deadline=None, suppress_health_check=_SUPPRESSED)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=_SUPPRESSED,
    verbosity=Verbosity.verbose,
    derandomize=True,
)
settings.register_profile("fast", max_examples=25, deadline=None, suppress_health_check=_SUPPRESSED)


def _truthy(name: str) -> bool:
    return (os.getenv(name) or "").strip().lower() not in ("", "0", "false", "no", "off")


PROFILE: Final[str] = os.getenv("HYPOTHESIS_PROFILE") or ("ci" if _truthy("CI") else "dev")
settings.load_profile(PROFILE)
