"""
Command-line argument parsing for the expression generator.

Uses a dataclass to hold parsed values, making the contract between the CLI
and the rest of the system explicit.
"""

from __future__ import annotations

import argparse
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from exprfuzz.constants import DEFAULT_COUNT, DEFAULT_TIMEOUT, VAR


@dataclass
class GeneratorArgs:
    """Container for parsed CLI arguments."""

    seed: Optional[int] = None
    count: int = DEFAULT_COUNT
    config: Optional[str] = None
    variable: str = VAR
    timeout: int = DEFAULT_TIMEOUT
    reference: bool = False
    var_value: int = 0
    debug: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _build_parser() -> argparse.ArgumentParser:
    """Construct the ``ArgumentParser`` (no side-effects)."""
    parser = argparse.ArgumentParser(
        description="exprfuzz - random precedence-correct C expression generator",
    )
    parser.add_argument("--seed", "-s", type=int, default=None, help="seed for the random source (default: random)")
    parser.add_argument(
        "--count", "-n", type=int, default=DEFAULT_COUNT,
        help="number of expressions to generate (default: %(default)s)",
    )
    parser.add_argument("--config", "-c", type=str, default=None, help="JSON generator configuration file")
    parser.add_argument(
        "--variable", type=str, default=VAR,
        help="name of the variable referenced by generated expressions (default: %(default)s)",
    )
    parser.add_argument(
        "--timeout", "-t", type=int, default=DEFAULT_TIMEOUT,
        help="seconds allowed per expression, 0 disables (default: %(default)s)",
    )
    parser.add_argument(
        "--reference", action="store_true",
        help="print the reference value of integer-only expressions",
    )
    parser.add_argument(
        "--var-value", dest="var_value", type=int, default=0,
        help="value bound to the variable for --reference (default: %(default)s)",
    )
    parser.add_argument("--debug", action="store_true", help="enable verbose debug logging for diagnostics")
    return parser


def parse_args(argv=None) -> GeneratorArgs:
    """Parse *argv* (or ``sys.argv``) and return a :class:`GeneratorArgs`."""
    ns = _build_parser().parse_args(argv)
    if ns.count < 0:
        _build_parser().error("--count must be non-negative")
    return GeneratorArgs(
        seed=ns.seed,
        count=ns.count,
        config=ns.config,
        variable=ns.variable,
        timeout=ns.timeout,
        reference=ns.reference,
        var_value=ns.var_value,
        debug=ns.debug,
    )
