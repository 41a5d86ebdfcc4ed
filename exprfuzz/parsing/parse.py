"""
Parser for the expression subset the generator emits.

Used to check that printed expressions read back as the tree that was
generated.  Explicit parentheses are kept as ``ParenthesizedExpr`` nodes so
the parsed tree can be compared with ``==`` against a generated one.

Grammar (all binary operators left associative, C precedence)::

    expr    := unary (binop unary)*
    unary   := ('+' | '-' | '!' | '~') unary | primary
    primary := INTEGER | DOUBLE | IDENTIFIER | '(' expr ')'
"""

from __future__ import annotations

import re
from typing import Iterable, List, NamedTuple, Optional

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
    bin_op_precedence,
)
from exprfuzz.errors import ParseError


class Token(NamedTuple):
    kind: str
    text: str
    pos: int


_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<double>\d+\.\d*(?:[eE][+-]?\d+)?|\d+[eE][+-]?\d+)
  | (?P<integer>\d+)
  | (?P<ident>[A-Za-z_][A-Za-z_0-9]*)
  | (?P<op>&&|\|\||<<|>>|<=|>=|==|!=|[-+*/%&|^<>!~])
  | (?P<lparen>\()
  | (?P<rparen>\))
    """,
    re.VERBOSE,
)

_UNARY_TOKENS = frozenset(op.token for op in UnOp)
_BINARY_TOKENS = frozenset(op.token for op in BinOp)


def tokenize(text: str) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            raise ParseError(f"unexpected character {text[pos]!r} at offset {pos}")
        kind = m.lastgroup
        if kind != "ws":
            tokens.append(Token(kind, m.group(), pos))
        pos = m.end()
    tokens.append(Token("eof", "", len(text)))
    return tokens


class _Parser:
    def __init__(self, text: str, variables: Optional[Iterable[str]]) -> None:
        self._tokens = tokenize(text)
        self._index = 0
        self._variables = None if variables is None else frozenset(variables)

    def _peek(self) -> Token:
        return self._tokens[self._index]

    def _advance(self) -> Token:
        token = self._tokens[self._index]
        self._index += 1
        return token

    def parse(self) -> Expr:
        expr = self._parse_binary(max_precedence=max(bin_op_precedence(op) for op in BinOp))
        token = self._peek()
        if token.kind != "eof":
            raise ParseError(f"unexpected {token.text!r} at offset {token.pos}")
        return expr

    def _parse_binary(self, max_precedence: int) -> Expr:
        # Precedence climbing where smaller numbers bind tighter: operands of an
        # operator at level p are parsed at level p - 1.
        lhs = self._parse_unary()
        while True:
            token = self._peek()
            if token.kind != "op" or token.text not in _BINARY_TOKENS:
                return lhs
            op = BinOp.from_token(token.text)
            precedence = bin_op_precedence(op)
            if precedence > max_precedence:
                return lhs
            self._advance()
            rhs = self._parse_binary(precedence - 1)
            lhs = BinaryExpr(lhs, op, rhs)

    def _parse_unary(self) -> Expr:
        token = self._peek()
        if token.kind == "op" and token.text in _UNARY_TOKENS:
            self._advance()
            return UnaryExpr(UnOp.from_token(token.text), self._parse_unary())
        return self._parse_primary()

    def _parse_primary(self) -> Expr:
        token = self._advance()
        if token.kind == "integer":
            return IntegerConstant(int(token.text))
        if token.kind == "double":
            return DoubleConstant(float(token.text))
        if token.kind == "ident":
            if self._variables is not None and token.text not in self._variables:
                raise ParseError(f"unknown identifier {token.text!r} at offset {token.pos}")
            return VariableExpr(token.text)
        if token.kind == "lparen":
            inner = self._parse_binary(max_precedence=max(bin_op_precedence(op) for op in BinOp))
            closing = self._advance()
            if closing.kind != "rparen":
                raise ParseError(f"expected ')' at offset {closing.pos}, got {closing.text!r}")
            return ParenthesizedExpr(inner)
        if token.kind == "eof":
            raise ParseError("unexpected end of input")
        raise ParseError(f"unexpected {token.text!r} at offset {token.pos}")


def parse_str(text: str, variables: Optional[Iterable[str]] = None) -> Expr:
    """Parse *text* into an expression tree.

    If *variables* is given, identifiers outside it are rejected.
    """
    return _Parser(text, variables).parse()
