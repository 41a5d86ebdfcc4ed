"""
Fixed-width bit sets over enum members, and uniform selection of a set bit.

An ``EnumMask`` has one bit per member of an ``IntEnum`` whose values are the
contiguous range ``0 .. len(enum) - 1``.  Operator masks in the generator
configuration are ``EnumMask`` instances over ``BinOp`` and ``UnOp``.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Type

from exprfuzz.errors import PreconditionError


class EnumMask:
    """Immutable set of members of a single enum class."""

    __slots__ = ("_enum", "_bits")

    def __init__(self, enum_cls, bits: int = 0) -> None:
        size = len(enum_cls)
        if bits < 0 or bits >> size:
            raise ValueError(f"mask {bits:#b} does not fit {enum_cls.__name__} ({size} bits)")
        self._enum = enum_cls
        self._bits = bits

    # -- constructors ---------------------------------------------------------

    @classmethod
    def of(cls, *members) -> "EnumMask":
        if not members:
            raise ValueError("EnumMask.of() needs at least one member, use EnumMask.empty()")
        enum_cls = type(members[0])
        bits = 0
        for member in members:
            if type(member) is not enum_cls:
                raise TypeError(f"mixed enum classes in mask: {enum_cls.__name__}, {type(member).__name__}")
            bits |= 1 << int(member)
        return cls(enum_cls, bits)

    @classmethod
    def full(cls, enum_cls) -> "EnumMask":
        return cls(enum_cls, (1 << len(enum_cls)) - 1)

    @classmethod
    def empty(cls, enum_cls) -> "EnumMask":
        return cls(enum_cls, 0)

    @classmethod
    def from_names(cls, enum_cls, names: Iterable[str]) -> "EnumMask":
        """Build a mask from member names, e.g. ``["PLUS", "MINUS"]``."""
        bits = 0
        for name in names:
            bits |= 1 << int(enum_cls[name])
        return cls(enum_cls, bits)

    # -- queries ------------------------------------------------------------------

    @property
    def enum_cls(self) -> Type:
        return self._enum

    @property
    def bits(self) -> int:
        return self._bits

    @property
    def size(self) -> int:
        return len(self._enum)

    def count(self) -> int:
        return bin(self._bits).count("1")

    def any(self) -> bool:
        return self._bits != 0

    def __getitem__(self, index: int) -> bool:
        if not 0 <= index < self.size:
            raise IndexError(index)
        return bool(self._bits >> index & 1)

    def __contains__(self, member) -> bool:
        return type(member) is self._enum and self[int(member)]

    def __iter__(self) -> Iterator:
        for i in range(self.size):
            if self[i]:
                yield self._enum(i)

    def __len__(self) -> int:
        return self.count()

    def __eq__(self, other) -> bool:
        if not isinstance(other, EnumMask):
            return NotImplemented
        return self._enum is other._enum and self._bits == other._bits

    def __hash__(self) -> int:
        return hash((self._enum, self._bits))

    def __repr__(self) -> str:
        names = "|".join(m.name for m in self) or "0"
        return f"EnumMask({self._enum.__name__}: {names})"


def pick_nth_set_bit(mask: EnumMask, rng) -> int:
    """Return the index of a uniformly chosen set bit of *mask*.

    *rng* must provide ``randint(a, b)`` with inclusive bounds, like
    :class:`random.Random`.
    """
    if not mask.any():
        raise PreconditionError("Mask must not be empty")

    choice = rng.randint(1, mask.count())

    running_ones = 0
    for i in range(mask.size):
        if mask[i]:
            running_ones += 1
        if running_ones == choice:
            return i

    # `choice` lies in [1, count] and the running count reaches `count`, so
    # this is only reachable with a misbehaving `randint`.
    raise PreconditionError(f"draw {choice} outside [1, {mask.count()}]")
