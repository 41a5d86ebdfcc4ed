"""
Reference semantics for generated integer expressions, computed with z3.

Integer-only trees are lowered to 64-bit bit-vector terms following C's
``unsigned long long`` arithmetic: ``/`` and ``%`` are unsigned, ``>>`` is a
logical shift, and comparisons and logical operators produce 0 or 1.  The
value of a tree can then be compared with what the evaluator under test
reports for the printed text.

Where C leaves behaviour undefined (division by zero, shifting by 64 or
more) the result is whatever z3's bit-vector semantics define; callers that
diff against a C implementation should filter those cases.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

import z3

from exprfuzz.ast import (
    BinaryExpr,
    BinOp,
    DoubleConstant,
    Expr,
    IntegerConstant,
    ParenthesizedExpr,
    UnaryExpr,
    UnOp,
    VariableExpr,
)
from exprfuzz.constants import BV_WIDTH
from exprfuzz.errors import UnsupportedExpressionError

_ONE = z3.BitVecVal(1, BV_WIDTH)
_ZERO = z3.BitVecVal(0, BV_WIDTH)


def _bool_to_bv(cond: z3.BoolRef) -> z3.BitVecRef:
    return z3.If(cond, _ONE, _ZERO)


def _lower_binary(op: BinOp, a: z3.BitVecRef, b: z3.BitVecRef) -> z3.BitVecRef:
    if op == BinOp.PLUS:
        return a + b
    if op == BinOp.MINUS:
        return a - b
    if op == BinOp.MULT:
        return a * b
    if op == BinOp.DIV:
        return z3.UDiv(a, b)
    if op == BinOp.MOD:
        return z3.URem(a, b)
    if op == BinOp.LOGICAL_AND:
        return _bool_to_bv(z3.And(a != _ZERO, b != _ZERO))
    if op == BinOp.LOGICAL_OR:
        return _bool_to_bv(z3.Or(a != _ZERO, b != _ZERO))
    if op == BinOp.BIT_AND:
        return a & b
    if op == BinOp.BIT_OR:
        return a | b
    if op == BinOp.BIT_XOR:
        return a ^ b
    if op == BinOp.SHL:
        return a << b
    if op == BinOp.SHR:
        return z3.LShR(a, b)
    if op == BinOp.EQ:
        return _bool_to_bv(a == b)
    if op == BinOp.NE:
        return _bool_to_bv(a != b)
    if op == BinOp.LT:
        return _bool_to_bv(z3.ULT(a, b))
    if op == BinOp.LE:
        return _bool_to_bv(z3.ULE(a, b))
    if op == BinOp.GT:
        return _bool_to_bv(z3.UGT(a, b))
    if op == BinOp.GE:
        return _bool_to_bv(z3.UGE(a, b))
    raise UnsupportedExpressionError(f"no reference semantics for {op!r}")


def _lower_unary(op: UnOp, a: z3.BitVecRef) -> z3.BitVecRef:
    if op == UnOp.PLUS:
        return a
    if op == UnOp.NEG:
        return -a
    if op == UnOp.LOGICAL_NOT:
        return _bool_to_bv(a == _ZERO)
    if op == UnOp.BIT_NOT:
        return ~a
    raise UnsupportedExpressionError(f"no reference semantics for {op!r}")


def to_z3(expr: Expr, symbols: Optional[Dict[str, z3.BitVecRef]] = None) -> z3.BitVecRef:
    """Lower *expr* to a z3 bit-vector term.

    Variables are looked up in (and added to) *symbols*, so several trees
    lowered with the same dict share their free variables.
    """
    if symbols is None:
        symbols = {}

    if isinstance(expr, IntegerConstant):
        return z3.BitVecVal(expr.value, BV_WIDTH)
    if isinstance(expr, VariableExpr):
        if expr.name not in symbols:
            symbols[expr.name] = z3.BitVec(expr.name, BV_WIDTH)
        return symbols[expr.name]
    if isinstance(expr, ParenthesizedExpr):
        return to_z3(expr.expr, symbols)
    if isinstance(expr, UnaryExpr):
        return _lower_unary(expr.op, to_z3(expr.expr, symbols))
    if isinstance(expr, BinaryExpr):
        return _lower_binary(expr.op, to_z3(expr.lhs, symbols), to_z3(expr.rhs, symbols))
    if isinstance(expr, DoubleConstant):
        raise UnsupportedExpressionError(f"double constant {expr} has no bit-vector semantics")
    raise UnsupportedExpressionError(f"unknown expression node {type(expr).__name__}")


def reference_value(expr: Expr, bindings: Optional[Mapping[str, int]] = None) -> int:
    """Value of *expr* as an unsigned 64-bit integer, with variables bound by *bindings*."""
    bindings = bindings or {}
    symbols: Dict[str, z3.BitVecRef] = {}
    term = to_z3(expr, symbols)

    unbound = sorted(set(symbols) - set(bindings))
    if unbound:
        raise ValueError(f"unbound variables: {unbound}")

    substitutions = [(symbols[name], z3.BitVecVal(bindings[name], BV_WIDTH)) for name in symbols]
    if substitutions:
        term = z3.substitute(term, *substitutions)
    return z3.simplify(term).as_long()


def equivalent(lhs: Expr, rhs: Expr) -> bool:
    """``True`` if *lhs* and *rhs* agree for every assignment of their variables."""
    symbols: Dict[str, z3.BitVecRef] = {}
    solver = z3.Solver()
    solver.add(to_z3(lhs, symbols) != to_z3(rhs, symbols))
    return solver.check() == z3.unsat
