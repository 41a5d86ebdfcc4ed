import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from exprfuzz.ast import (
    BinaryExpr,
    BinOp,
    DoubleConstant,
    IntegerConstant,
    ParenthesizedExpr,
    UnaryExpr,
    UnOp,
    VariableExpr,
)
from exprfuzz.config.generator_config import GeneratorConfig
from exprfuzz.errors import ParseError
from exprfuzz.expr_gen import ExprGenerator
from exprfuzz.parsing.parse import parse_str, tokenize
from exprfuzz.rng import DefaultGeneratorRng


class TestParser:
    def test_left_associativity(self):
        assert parse_str("1 - 2 + 3") == BinaryExpr(
            BinaryExpr(IntegerConstant(1), BinOp.MINUS, IntegerConstant(2)),
            BinOp.PLUS,
            IntegerConstant(3),
        )

    def test_precedence(self):
        assert parse_str("1 + 2 * x") == BinaryExpr(
            IntegerConstant(1),
            BinOp.PLUS,
            BinaryExpr(IntegerConstant(2), BinOp.MULT, VariableExpr("x")),
        )
        assert parse_str("a || b && c").op is BinOp.LOGICAL_OR
        assert parse_str("a | b ^ c & d").op is BinOp.BIT_OR

    def test_parentheses_are_kept(self):
        assert parse_str("(1 + 2) * 3") == BinaryExpr(
            ParenthesizedExpr(BinaryExpr(IntegerConstant(1), BinOp.PLUS, IntegerConstant(2))),
            BinOp.MULT,
            IntegerConstant(3),
        )
        assert parse_str("((x))") == ParenthesizedExpr(ParenthesizedExpr(VariableExpr("x")))

    def test_unary_chain(self):
        assert parse_str("- -~x") == UnaryExpr(UnOp.NEG, UnaryExpr(UnOp.NEG, UnaryExpr(UnOp.BIT_NOT, VariableExpr("x"))))
        assert parse_str("-1 << 2").lhs == UnaryExpr(UnOp.NEG, IntegerConstant(1))

    def test_literals(self):
        assert parse_str("18446744073709551615") == IntegerConstant(2**64 - 1)
        assert parse_str("2.5") == DoubleConstant(2.5)
        assert parse_str("1e-07") == DoubleConstant(1e-07)
        assert parse_str("1.5e+16") == DoubleConstant(1.5e16)

    def test_multi_character_operators(self):
        assert [t.text for t in tokenize("a<<b>=c&&d!=e")][:-1] == ["a", "<<", "b", ">=", "c", "&&", "d", "!=", "e"]

    @pytest.mark.parametrize("text", ["", "1 +", "(1 + 2", "1 2", "x $ y", ")"])
    def test_malformed_input(self, text):
        with pytest.raises(ParseError):
            parse_str(text)

    def test_unknown_identifier_rejected(self):
        with pytest.raises(ParseError):
            parse_str("x + y", variables={"x"})


class TestRoundTrip:
    @settings(max_examples=300, deadline=None)
    @given(st.integers(min_value=0, max_value=2**32 - 1))
    def test_printed_expression_parses_to_the_generated_tree(self, seed):
        expr = ExprGenerator(DefaultGeneratorRng(seed), GeneratorConfig()).generate()
        assert parse_str(str(expr), variables={"x"}) == expr

    @settings(max_examples=200, deadline=None)
    @given(st.integers(min_value=0, max_value=2**32 - 1))
    def test_round_trip_without_random_parentheses(self, seed):
        cfg = GeneratorConfig(parenthesize_prob=0.0, int_const_max=2**64 - 1)
        expr = ExprGenerator(DefaultGeneratorRng(seed), cfg).generate()
        assert parse_str(str(expr)) == expr

    def test_mandatory_parentheses_only(self):
        cfg = GeneratorConfig(parenthesize_prob=0.0)
        expr = BinaryExpr(
            IntegerConstant(1),
            BinOp.MINUS,
            ParenthesizedExpr(BinaryExpr(IntegerConstant(2), BinOp.PLUS, IntegerConstant(3))),
        )
        assert str(expr) == "1 - (2 + 3)"
        assert parse_str(str(expr)) == expr
        # Generation with parenthesize_prob=0 never emits redundant parens around leaves.
        for seed in range(100):
            text = str(ExprGenerator(DefaultGeneratorRng(seed), cfg).generate())
            assert "(x)" not in text
