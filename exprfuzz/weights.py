"""
Weight model threaded through expression generation.

A ``Weights`` value is copied at every recursive step; the generator only
ever mutates its own copy, so a child's dampening never leaks into a
sibling's or an ancestor's view.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Union

from exprfuzz.ast import ExprKind, TypeKind
from exprfuzz.errors import PreconditionError


class Weights:
    """Per-``ExprKind`` and per-``TypeKind`` selection weights."""

    __slots__ = ("_expr_weights", "_type_weights")

    def __init__(
        self, expr_weights: Optional[Sequence[float]] = None, type_weights: Optional[Sequence[float]] = None
    ) -> None:
        if expr_weights is None:
            expr_weights = [0.0] * len(ExprKind)
        if type_weights is None:
            type_weights = [0.0] * len(TypeKind)
        if len(expr_weights) != len(ExprKind):
            raise PreconditionError(f"expected {len(ExprKind)} expression weights, got {len(expr_weights)}")
        if len(type_weights) != len(TypeKind):
            raise PreconditionError(f"expected {len(TypeKind)} type weights, got {len(type_weights)}")
        self._expr_weights: List[float] = [_checked(w) for w in expr_weights]
        self._type_weights: List[float] = [_checked(w) for w in type_weights]

    @classmethod
    def from_config(cls, cfg) -> "Weights":
        """Initial weights of a generation run, taken from *cfg*."""
        return cls(
            [kw.initial_weight for kw in cfg.expr_kind_weights],
            [kw.initial_weight for kw in cfg.type_kind_weights],
        )

    def expr_weights(self) -> List[float]:
        return list(self._expr_weights)

    def type_weights(self) -> List[float]:
        return list(self._type_weights)

    def copy(self) -> "Weights":
        return Weights(self._expr_weights, self._type_weights)

    def __getitem__(self, kind: Union[ExprKind, TypeKind]) -> float:
        return self._slots(kind)[int(kind)]

    def __setitem__(self, kind: Union[ExprKind, TypeKind], value: float) -> None:
        self._slots(kind)[int(kind)] = _checked(value)

    def _slots(self, kind) -> List[float]:
        if isinstance(kind, ExprKind):
            return self._expr_weights
        if isinstance(kind, TypeKind):
            return self._type_weights
        raise TypeError(f"weights are indexed by ExprKind or TypeKind, not {type(kind).__name__}")

    def __eq__(self, other) -> bool:
        if not isinstance(other, Weights):
            return NotImplemented
        return self._expr_weights == other._expr_weights and self._type_weights == other._type_weights

    def __repr__(self) -> str:
        return f"Weights(expr={self._expr_weights}, type={self._type_weights})"


def _checked(value: float) -> float:
    value = float(value)
    if not value >= 0.0:
        raise PreconditionError(f"weight must be non-negative, got {value}")
    return value
