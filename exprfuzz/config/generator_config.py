"""
Generator configuration.

A ``GeneratorConfig`` is immutable for the lifetime of a generation run and
may be shared read-only between runs (and between worker processes).  Call
:func:`validate_config` before handing one to a generator; the generator does
this itself on construction.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Tuple

from exprfuzz.ast import BinOp, ExprKind, TypeKind, UnOp
from exprfuzz.constants import U64_MAX
from exprfuzz.errors import InvalidConfigError
from exprfuzz.utils.bitmask import EnumMask

logger = logging.getLogger("exprfuzz.config")

# Kinds that generate children; a dampening factor of 1.0 on these leaves
# the expected tree depth unbounded.
RECURSIVE_KINDS = frozenset({ExprKind.BINARY_EXPR, ExprKind.UNARY_EXPR})
LEAF_KINDS = frozenset(set(ExprKind) - RECURSIVE_KINDS)


@dataclass(frozen=True)
class KindWeight:
    initial_weight: float
    dampening_factor: float = 1.0


DEFAULT_EXPR_KIND_WEIGHTS: Tuple[KindWeight, ...] = (
    KindWeight(1.0, 1.0),  # ExprKind.INTEGER_CONSTANT
    KindWeight(2.0, 1.0),  # ExprKind.DOUBLE_CONSTANT
    KindWeight(1.0, 1.0),  # ExprKind.VARIABLE_EXPR
    KindWeight(3.0, 0.4),  # ExprKind.BINARY_EXPR
    KindWeight(1.0, 0.6),  # ExprKind.UNARY_EXPR
)

DEFAULT_TYPE_KIND_WEIGHTS: Tuple[KindWeight, ...] = (
    KindWeight(2.0, 1.0),  # TypeKind.SCALAR_TYPE
    KindWeight(1.0, 1.0),  # TypeKind.TAGGED_TYPE
    KindWeight(1.0, 1.0),  # TypeKind.POINTER_TYPE
)


@dataclass(frozen=True)
class GeneratorConfig:
    int_const_min: int = 0
    int_const_max: int = 1000

    double_constant_min: float = 0.0
    double_constant_max: float = 10.0

    bin_op_mask: EnumMask = field(default_factory=lambda: EnumMask.full(BinOp))
    un_op_mask: EnumMask = field(default_factory=lambda: EnumMask.full(UnOp))

    parenthesize_prob: float = 0.2
    const_prob: float = 0.25
    volatile_prob: float = 0.05

    expr_kind_weights: Tuple[KindWeight, ...] = DEFAULT_EXPR_KIND_WEIGHTS
    type_kind_weights: Tuple[KindWeight, ...] = DEFAULT_TYPE_KIND_WEIGHTS

    def expr_kind_weight(self, kind: ExprKind) -> KindWeight:
        return self.expr_kind_weights[int(kind)]

    def type_kind_weight(self, kind: TypeKind) -> KindWeight:
        return self.type_kind_weights[int(kind)]

    def with_expr_weights(self, **weights: KindWeight) -> "GeneratorConfig":
        """Copy of this config with some expression kinds reweighted.

        Keyword names are ``ExprKind`` member names in lower case, e.g.
        ``cfg.with_expr_weights(binary_expr=KindWeight(0.0))``.
        """
        table = list(self.expr_kind_weights)
        for name, kind_weight in weights.items():
            table[ExprKind[name.upper()]] = kind_weight
        return replace(self, expr_kind_weights=tuple(table))


def _check_probability(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise InvalidConfigError(f"{name} must lie in [0, 1], got {value}")


def _check_weight_table(name: str, table, enum_cls) -> None:
    if len(table) != len(enum_cls):
        raise InvalidConfigError(f"{name} needs {len(enum_cls)} entries, got {len(table)}")
    for kind, kind_weight in zip(enum_cls, table):
        if not kind_weight.initial_weight >= 0.0:
            raise InvalidConfigError(f"{name}[{kind.name}].initial_weight must be >= 0")
        if not 0.0 < kind_weight.dampening_factor <= 1.0:
            raise InvalidConfigError(f"{name}[{kind.name}].dampening_factor must lie in (0, 1]")
    if sum(kw.initial_weight for kw in table) <= 0.0:
        raise InvalidConfigError(f"{name} must contain at least one positive weight")


def validate_config(cfg: GeneratorConfig) -> GeneratorConfig:
    """Raise :class:`InvalidConfigError` if *cfg* cannot drive a generation run."""
    if not 0 <= cfg.int_const_min <= cfg.int_const_max <= U64_MAX:
        raise InvalidConfigError(
            f"integer constant range [{cfg.int_const_min}, {cfg.int_const_max}] must lie within [0, 2**64 - 1]"
        )

    for bound in (cfg.double_constant_min, cfg.double_constant_max):
        if not math.isfinite(bound):
            raise InvalidConfigError(f"double constant bound {bound} is not finite")
    # C has no negative literals; negation is a UnaryExpr.
    if not 0.0 <= cfg.double_constant_min <= cfg.double_constant_max:
        raise InvalidConfigError(
            f"double constant range [{cfg.double_constant_min}, {cfg.double_constant_max}] "
            "must be non-negative and ordered"
        )

    if cfg.bin_op_mask.enum_cls is not BinOp or not cfg.bin_op_mask.any():
        raise InvalidConfigError("bin_op_mask must enable at least one BinOp")
    if cfg.un_op_mask.enum_cls is not UnOp or not cfg.un_op_mask.any():
        raise InvalidConfigError("un_op_mask must enable at least one UnOp")

    _check_probability("parenthesize_prob", cfg.parenthesize_prob)
    _check_probability("const_prob", cfg.const_prob)
    _check_probability("volatile_prob", cfg.volatile_prob)

    _check_weight_table("expr_kind_weights", cfg.expr_kind_weights, ExprKind)
    _check_weight_table("type_kind_weights", cfg.type_kind_weights, TypeKind)

    # Without a positive leaf weight no path can end.
    if sum(cfg.expr_kind_weight(kind).initial_weight for kind in LEAF_KINDS) <= 0.0:
        raise InvalidConfigError(
            "expr_kind_weights must give at least one leaf kind "
            "(IntegerConstant, DoubleConstant, VariableExpr) a positive weight"
        )

    for kind in RECURSIVE_KINDS:
        kind_weight = cfg.expr_kind_weight(kind)
        if kind_weight.initial_weight > 0.0 and kind_weight.dampening_factor >= 1.0:
            logger.warning(
                "%s is never dampened; expected expression depth may be unbounded", kind.name
            )

    return cfg
