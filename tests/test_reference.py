import pytest

from exprfuzz.ast import BinaryExpr, BinOp, DoubleConstant, IntegerConstant, VariableExpr
from exprfuzz.config.generator_config import GeneratorConfig, KindWeight
from exprfuzz.errors import UnsupportedExpressionError
from exprfuzz.expr_gen import ExprGenerator
from exprfuzz.parsing.parse import parse_str
from exprfuzz.reference import equivalent, reference_value
from exprfuzz.rng import DefaultGeneratorRng

U64 = 2**64


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1 + 2 * 3", 7),
        ("(1 + 2) * 3", 9),
        ("10 - 4 - 3", 3),
        ("10 - (4 - 3)", 9),
        ("7 / 2", 3),
        ("7 % 4", 3),
        ("1 << 4 >> 2", 4),
        ("0 - 1", U64 - 1),
        ("-1", U64 - 1),
        ("~0", U64 - 1),
        ("!5", 0),
        ("!0", 1),
        ("3 < 4", 1),
        ("3 >= 4", 0),
        ("2 == 2 && 0", 0),
        ("0 || 7", 1),
        ("6 & 3 | 8 ^ 1", 11),
        ("x * x + 1", 50),
    ],
)
def test_reference_values(text, expected):
    assert reference_value(parse_str(text), {"x": 7}) == expected


def test_comparisons_are_unsigned():
    assert reference_value(parse_str("-1 > 1")) == 1


def test_unbound_variable():
    with pytest.raises(ValueError):
        reference_value(VariableExpr("x"))


def test_double_constants_unsupported():
    expr = BinaryExpr(IntegerConstant(1), BinOp.PLUS, DoubleConstant(0.5))
    with pytest.raises(UnsupportedExpressionError):
        reference_value(expr)


def test_equivalence():
    assert equivalent(parse_str("x + x"), parse_str("2 * x"))
    assert equivalent(parse_str("(x - 1) + 1"), parse_str("x"))
    assert not equivalent(parse_str("x - (1 + 1)"), parse_str("x - 1 + 1"))


def test_generated_text_matches_generated_tree_semantics():
    cfg = GeneratorConfig().with_expr_weights(double_constant=KindWeight(0.0))
    for seed in range(50):
        expr = ExprGenerator(DefaultGeneratorRng(seed), cfg).generate()
        reparsed = parse_str(str(expr))
        for value in (0, 3, U64 - 1):
            assert reference_value(reparsed, {"x": value}) == reference_value(expr, {"x": value})
