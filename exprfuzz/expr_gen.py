"""
Weighted random generation of precedence-correct C expressions.

Each recursive step copies the incoming weights, draws an expression kind,
multiplies *that kind's* weight in the copy by its dampening factor, and
hands the copy to the kind's constructor.  Recursive kinds therefore become
less likely the more often they appear along a path, which is what bounds
the depth of the generated tree.  There is no hard depth limit.

Only the chosen kind is dampened.  Two recursive kinds with different
factors drift apart in relative odds as depth grows; this is intentional
and is one of the knobs the configuration exposes.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict

from exprfuzz.ast import (
    BinaryExpr,
    DoubleConstant,
    Expr,
    ExprKind,
    IntegerConstant,
    ParenthesizedExpr,
    UnaryExpr,
    VariableExpr,
    bin_op_precedence,
    expr_depth,
    expr_precedence,
)
from exprfuzz.config.generator_config import GeneratorConfig, validate_config
from exprfuzz.constants import VAR
from exprfuzz.errors import PreconditionError
from exprfuzz.rng import GeneratorRng
from exprfuzz.weights import Weights

# ---------------------------------------------------------------------------
# Debug infrastructure, activated by ``--debug`` on the generator CLI.
# ---------------------------------------------------------------------------
_GENERATOR_DEBUG = False
_generator_logger = logging.getLogger("exprfuzz.generator")


def enable_generator_debug() -> None:
    """Turn on verbose debug logging for the generator module."""
    global _GENERATOR_DEBUG
    _GENERATOR_DEBUG = True
    _generator_logger.setLevel(logging.DEBUG)
    if not _generator_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s [DEBUG] %(message)s"))
        _generator_logger.addHandler(handler)


def _debug_enabled() -> bool:
    return _GENERATOR_DEBUG


def _debug_log(msg: str, *args) -> None:
    if _GENERATOR_DEBUG:
        _generator_logger.debug(msg, *args)


class ExprGenerator:
    """Generates one expression tree per :meth:`generate` call."""

    def __init__(self, rng: GeneratorRng, cfg: GeneratorConfig, variable: str = VAR) -> None:
        self._rng = rng
        self._cfg = validate_config(cfg)
        self._variable = variable

        self._constructors: Dict[ExprKind, Callable[[Weights], Expr]] = {
            ExprKind.INTEGER_CONSTANT: self._gen_integer_constant,
            ExprKind.DOUBLE_CONSTANT: self._gen_double_constant,
            ExprKind.VARIABLE_EXPR: self._gen_variable_expr,
            ExprKind.BINARY_EXPR: self._gen_binary_expr,
            ExprKind.UNARY_EXPR: self._gen_unary_expr,
        }
        missing = set(ExprKind) - set(self._constructors)
        if missing:
            raise PreconditionError(f"no constructor for {sorted(k.name for k in missing)}")

    @property
    def config(self) -> GeneratorConfig:
        return self._cfg

    def generate(self) -> Expr:
        """Generate a fresh tree starting from the configured initial weights."""
        expr = self.gen_with_weights(Weights.from_config(self._cfg))
        if _debug_enabled():
            _debug_log("Generated expression (depth %d): %s", expr_depth(expr), expr)
        return expr

    def gen_with_weights(self, weights: Weights) -> Expr:
        new_weights = weights.copy()

        kind = self._rng.gen_expr_kind(new_weights)
        new_weights[kind] *= self._cfg.expr_kind_weight(kind).dampening_factor

        constructor = self._constructors.get(kind)
        if constructor is None:
            raise PreconditionError(f"Unhandled expression generation case: {kind!r}")
        expr = constructor(new_weights)

        return self._maybe_parenthesized(expr)

    # -- per-kind constructors --------------------------------------------------------

    def _gen_integer_constant(self, weights: Weights) -> IntegerConstant:
        value = self._rng.gen_u64(self._cfg.int_const_min, self._cfg.int_const_max)
        return IntegerConstant(value)

    def _gen_double_constant(self, weights: Weights) -> DoubleConstant:
        value = self._rng.gen_double(self._cfg.double_constant_min, self._cfg.double_constant_max)
        return DoubleConstant(value)

    def _gen_variable_expr(self, weights: Weights) -> VariableExpr:
        return VariableExpr(self._variable)

    def _gen_binary_expr(self, weights: Weights) -> BinaryExpr:
        op = self._rng.gen_bin_op(self._cfg.bin_op_mask)

        lhs = self.gen_with_weights(weights)
        rhs = self.gen_with_weights(weights)

        # Left hand side: parenthesize only if it binds strictly weaker than
        # `op`. With equal precedence, left-to-right associativity already
        # groups `3 - 4 + 5` as `(3 - 4) + 5`.
        if expr_precedence(lhs) > bin_op_precedence(op):
            lhs = ParenthesizedExpr(lhs)

        # Right hand side: parenthesize on equal precedence as well, otherwise
        # `3 - (4 + 5)` would print as `3 - 4 + 5` and re-associate. `3 + (4 + 5)`
        # is wrapped too so the printed text keeps the generated tree's shape.
        if expr_precedence(rhs) >= bin_op_precedence(op):
            rhs = ParenthesizedExpr(rhs)

        return BinaryExpr(lhs, op, rhs)

    def _gen_unary_expr(self, weights: Weights) -> UnaryExpr:
        op = self._rng.gen_un_op(self._cfg.un_op_mask)

        expr = self.gen_with_weights(weights)
        if expr_precedence(expr) > UnaryExpr.PRECEDENCE:
            expr = ParenthesizedExpr(expr)

        return UnaryExpr(op, expr)

    def _maybe_parenthesized(self, expr: Expr) -> Expr:
        if self._rng.gen_parenthesize(self._cfg.parenthesize_prob):
            return ParenthesizedExpr(expr)
        return expr
