"""
Print randomly generated C expressions, one per line.

Example::

    python run_generator.py --seed 42 --count 5 --reference --var-value 7
"""

from __future__ import annotations

import logging
import sys
from typing import List, Optional

from exprfuzz.argument_parser.parser import parse_args
from exprfuzz.ast import DoubleConstant, expr_depth, iter_subexprs
from exprfuzz.config.config_loader import load_generator_config
from exprfuzz.errors import InvalidConfigError
from exprfuzz.expr_gen import ExprGenerator, enable_generator_debug
from exprfuzz.reference import reference_value
from exprfuzz.rng import DefaultGeneratorRng
from exprfuzz.utils.timeout import TimeoutException, time_limit

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)
logger = logging.getLogger("exprfuzz")


def _is_integer_only(expr) -> bool:
    return not any(isinstance(node, DoubleConstant) for node in iter_subexprs(expr))


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.debug:
        enable_generator_debug()

    try:
        cfg = load_generator_config(args.config)
    except (InvalidConfigError, OSError) as exc:
        logger.error("Invalid generator configuration: %s", exc)
        return 2

    rng = DefaultGeneratorRng(args.seed)
    generator = ExprGenerator(rng, cfg, variable=args.variable)

    depths = []
    for i in range(args.count):
        try:
            with time_limit(args.timeout):
                expr = generator.generate()
        except TimeoutException:
            logger.warning("Expression %d exceeded %ds, skipping", i, args.timeout)
            continue

        depths.append(expr_depth(expr))
        if args.reference and _is_integer_only(expr):
            value = reference_value(expr, {args.variable: args.var_value})
            print(f"{expr}\t{value}")
        else:
            print(expr)

    if depths:
        logger.info(
            "Generated %d expressions (seed=%s): max depth %d, mean depth %.2f",
            len(depths), args.seed, max(depths), sum(depths) / len(depths),
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
