"""
Generation-side expression tree.

This tree is what the generator builds and prints.  It is deliberately
separate from whatever node hierarchy the evaluator under test uses
internally; the only thing the two share is the printed source text.

Precedence follows the C convention where a *smaller* number binds
*tighter*.  Leaves and parenthesized expressions have precedence 0 and
never need wrapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Dict, Iterator, Union


class ExprKind(IntEnum):
    INTEGER_CONSTANT = 0
    DOUBLE_CONSTANT = 1
    VARIABLE_EXPR = 2
    BINARY_EXPR = 3
    UNARY_EXPR = 4


class TypeKind(IntEnum):
    SCALAR_TYPE = 0
    TAGGED_TYPE = 1
    POINTER_TYPE = 2


class CvQualifiers(IntFlag):
    NONE = 0
    CONST = 1
    VOLATILE = 2


class BinOp(IntEnum):
    PLUS = 0
    MINUS = 1
    MULT = 2
    DIV = 3
    MOD = 4
    LOGICAL_AND = 5
    LOGICAL_OR = 6
    BIT_AND = 7
    BIT_OR = 8
    BIT_XOR = 9
    SHL = 10
    SHR = 11
    EQ = 12
    NE = 13
    LT = 14
    LE = 15
    GT = 16
    GE = 17

    @property
    def token(self) -> str:
        return _BIN_OP_TOKENS[self]

    @classmethod
    def from_token(cls, token: str) -> "BinOp":
        return _BIN_OP_BY_TOKEN[token]


class UnOp(IntEnum):
    PLUS = 0
    NEG = 1
    LOGICAL_NOT = 2
    BIT_NOT = 3

    @property
    def token(self) -> str:
        return _UN_OP_TOKENS[self]

    @classmethod
    def from_token(cls, token: str) -> "UnOp":
        return _UN_OP_BY_TOKEN[token]


_BIN_OP_TOKENS: Dict[BinOp, str] = {
    BinOp.PLUS: "+",
    BinOp.MINUS: "-",
    BinOp.MULT: "*",
    BinOp.DIV: "/",
    BinOp.MOD: "%",
    BinOp.LOGICAL_AND: "&&",
    BinOp.LOGICAL_OR: "||",
    BinOp.BIT_AND: "&",
    BinOp.BIT_OR: "|",
    BinOp.BIT_XOR: "^",
    BinOp.SHL: "<<",
    BinOp.SHR: ">>",
    BinOp.EQ: "==",
    BinOp.NE: "!=",
    BinOp.LT: "<",
    BinOp.LE: "<=",
    BinOp.GT: ">",
    BinOp.GE: ">=",
}
_BIN_OP_BY_TOKEN: Dict[str, BinOp] = {tok: op for op, tok in _BIN_OP_TOKENS.items()}

_UN_OP_TOKENS: Dict[UnOp, str] = {
    UnOp.PLUS: "+",
    UnOp.NEG: "-",
    UnOp.LOGICAL_NOT: "!",
    UnOp.BIT_NOT: "~",
}
_UN_OP_BY_TOKEN: Dict[str, UnOp] = {tok: op for op, tok in _UN_OP_TOKENS.items()}

# C operator precedence, see https://en.cppreference.com/w/c/language/operator_precedence
_BIN_OP_PRECEDENCE: Dict[BinOp, int] = {
    BinOp.MULT: 3,
    BinOp.DIV: 3,
    BinOp.MOD: 3,
    BinOp.PLUS: 4,
    BinOp.MINUS: 4,
    BinOp.SHL: 5,
    BinOp.SHR: 5,
    BinOp.LT: 6,
    BinOp.LE: 6,
    BinOp.GT: 6,
    BinOp.GE: 6,
    BinOp.EQ: 7,
    BinOp.NE: 7,
    BinOp.BIT_AND: 8,
    BinOp.BIT_XOR: 9,
    BinOp.BIT_OR: 10,
    BinOp.LOGICAL_AND: 11,
    BinOp.LOGICAL_OR: 12,
}


def bin_op_precedence(op: BinOp) -> int:
    return _BIN_OP_PRECEDENCE[op]


# Leaves and parenthesized expressions never need to be wrapped.
LEAF_PRECEDENCE = 0


@dataclass(frozen=True)
class IntegerConstant:
    value: int

    def precedence(self) -> int:
        return LEAF_PRECEDENCE

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class DoubleConstant:
    value: float

    def precedence(self) -> int:
        return LEAF_PRECEDENCE

    def __str__(self) -> str:
        # repr() is the shortest string that reads back as the same double.
        return repr(float(self.value))


@dataclass(frozen=True)
class VariableExpr:
    name: str

    def precedence(self) -> int:
        return LEAF_PRECEDENCE

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class UnaryExpr:
    op: UnOp
    expr: "Expr"

    PRECEDENCE = 2

    def precedence(self) -> int:
        return self.PRECEDENCE

    def __str__(self) -> str:
        operand = str(self.expr)
        # `-` followed by `-1` would lex as the decrement operator.
        if operand[:1] == self.op.token and self.op.token in "+-":
            return f"{self.op.token} {operand}"
        return f"{self.op.token}{operand}"


@dataclass(frozen=True)
class BinaryExpr:
    lhs: "Expr"
    op: BinOp
    rhs: "Expr"

    def precedence(self) -> int:
        return bin_op_precedence(self.op)

    def __str__(self) -> str:
        return f"{self.lhs} {self.op.token} {self.rhs}"


@dataclass(frozen=True)
class ParenthesizedExpr:
    expr: "Expr"

    def precedence(self) -> int:
        return LEAF_PRECEDENCE

    def __str__(self) -> str:
        return f"({self.expr})"


Expr = Union[
    IntegerConstant,
    DoubleConstant,
    VariableExpr,
    UnaryExpr,
    BinaryExpr,
    ParenthesizedExpr,
]


def expr_precedence(expr: Expr) -> int:
    return expr.precedence()


def children(expr: Expr):
    if isinstance(expr, BinaryExpr):
        return (expr.lhs, expr.rhs)
    if isinstance(expr, (UnaryExpr, ParenthesizedExpr)):
        return (expr.expr,)
    return ()


def iter_subexprs(expr: Expr) -> Iterator[Expr]:
    """Yield *expr* and all of its descendants in pre-order."""
    stack = [expr]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(children(node)))


def expr_depth(expr: Expr) -> int:
    """Number of nodes on the longest root-to-leaf path (a leaf has depth 1)."""
    kids = children(expr)
    if not kids:
        return 1
    return 1 + max(expr_depth(k) for k in kids)
