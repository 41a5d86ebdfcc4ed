"""
Global constants used across exprfuzz.

Every constant is typed and immutable (``Final``).
"""

from __future__ import annotations

from typing import Final

# -- Value ranges -------------------------------------------------------------

U64_MAX: Final[int] = 2**64 - 1
BV_WIDTH: Final[int] = 64

# -- Generation defaults ------------------------------------------------------

VAR: Final[str] = "x"
DEFAULT_COUNT: Final[int] = 10
DEFAULT_TIMEOUT: Final[int] = 0

# Environment variable naming a JSON configuration file.
CONFIG_ENV_VAR: Final[str] = "EXPRFUZZ_CONFIG"
