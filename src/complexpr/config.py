"""Environment-driven settings, read once at import."""

from __future__ import annotations

import os
from typing import Final

COMPILE_CACHE_MAX: Final[int] = max(1, int(os.environ.get("COMPLEXPR_COMPILE_CACHE_MAX", "256")))
SIMPLIFY_BY_DEFAULT: Final[bool] = os.environ.get("COMPLEXPR_SIMPLIFY_BY_DEFAULT", "0") == "1"
INCLUDE_ENCODING: Final[str] = os.environ.get("COMPLEXPR_INCLUDE_ENCODING", "utf-8")
