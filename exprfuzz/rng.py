"""
Randomness sources for the expression generator.

The generator never touches a pseudo-random engine directly; every draw goes
through a :class:`GeneratorRng`.  Subclasses implement five primitives and
inherit the typed draws built on top of them, so a scripted source can stand
in for :class:`DefaultGeneratorRng` in tests.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from exprfuzz.ast import BinOp, CvQualifiers, ExprKind, TypeKind, UnOp
from exprfuzz.errors import PreconditionError
from exprfuzz.utils.bitmask import EnumMask, pick_nth_set_bit


def weighted_choice(weights: Sequence[float], rng: random.Random) -> int:
    """Pick an index with probability proportional to its weight.

    Draws ``val`` uniformly in ``[0, sum)`` and returns the first index whose
    running sum exceeds it.
    """
    if any(not w >= 0.0 for w in weights):
        raise PreconditionError(f"weights must be non-negative: {list(weights)}")
    total = sum(weights)
    if total <= 0.0:
        raise PreconditionError("at least one weight must be positive")

    val = rng.random() * total

    running_sum = 0.0
    for i, weight in enumerate(weights):
        running_sum += weight
        if val < running_sum:
            return i

    # Rounding in the running sum can leave `val` just past the end.
    return max(i for i, weight in enumerate(weights) if weight > 0.0)


class GeneratorRng(ABC):
    """Source of every random decision the generator makes."""

    # -- primitives ---------------------------------------------------------------

    @abstractmethod
    def uniform_u64(self, min_value: int, max_value: int) -> int:
        """Uniform integer in ``[min_value, max_value]``."""

    @abstractmethod
    def uniform_double(self, min_value: float, max_value: float) -> float:
        """Uniform real in ``[min_value, max_value]``."""

    @abstractmethod
    def choose_set_bit(self, mask: EnumMask) -> int:
        """Index of a uniformly chosen set bit; empty masks are a precondition violation."""

    @abstractmethod
    def bernoulli(self, probability: float) -> bool:
        """``True`` with the given probability."""

    @abstractmethod
    def weighted_choice(self, weights: Sequence[float]) -> int:
        """Index drawn proportionally to *weights*."""

    # -- typed draws ----------------------------------------------------------------

    def gen_bin_op(self, mask: EnumMask) -> BinOp:
        return BinOp(self.choose_set_bit(mask))

    def gen_un_op(self, mask: EnumMask) -> UnOp:
        return UnOp(self.choose_set_bit(mask))

    def gen_u64(self, min_value: int, max_value: int) -> int:
        return self.uniform_u64(min_value, max_value)

    def gen_double(self, min_value: float, max_value: float) -> float:
        return self.uniform_double(min_value, max_value)

    def gen_parenthesize(self, probability: float) -> bool:
        return self.bernoulli(probability)

    def gen_cv_qualifiers(self, const_prob: float, volatile_prob: float) -> CvQualifiers:
        retval = CvQualifiers.NONE
        if self.bernoulli(const_prob):
            retval |= CvQualifiers.CONST
        if self.bernoulli(volatile_prob):
            retval |= CvQualifiers.VOLATILE
        return retval

    def gen_expr_kind(self, weights) -> ExprKind:
        return ExprKind(self.weighted_choice(weights.expr_weights()))

    def gen_type_kind(self, weights) -> TypeKind:
        return TypeKind(self.weighted_choice(weights.type_weights()))


class DefaultGeneratorRng(GeneratorRng):
    """All draws backed by one ``random.Random`` seeded at construction."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._rng = random.Random(seed)

    def uniform_u64(self, min_value: int, max_value: int) -> int:
        if min_value > max_value:
            raise PreconditionError(f"empty range [{min_value}, {max_value}]")
        return self._rng.randint(min_value, max_value)

    def uniform_double(self, min_value: float, max_value: float) -> float:
        if min_value > max_value:
            raise PreconditionError(f"empty range [{min_value}, {max_value}]")
        return self._rng.uniform(min_value, max_value)

    def choose_set_bit(self, mask: EnumMask) -> int:
        return pick_nth_set_bit(mask, self._rng)

    def bernoulli(self, probability: float) -> bool:
        if not 0.0 <= probability <= 1.0:
            raise PreconditionError(f"probability {probability} outside [0, 1]")
        return self._rng.random() < probability

    def weighted_choice(self, weights: Sequence[float]) -> int:
        return weighted_choice(weights, self._rng)
