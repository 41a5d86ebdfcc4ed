import pytest

from exprfuzz.ast import BinOp, UnOp
from exprfuzz.config.generator_config import GeneratorConfig, KindWeight
from exprfuzz.utils.bitmask import EnumMask

from fakes import only_kinds


@pytest.fixture
def plus_only_config():
    return GeneratorConfig(
        int_const_min=0,
        int_const_max=100,
        bin_op_mask=EnumMask.of(BinOp.PLUS),
        un_op_mask=EnumMask.of(UnOp.NEG),
        parenthesize_prob=0.0,
        expr_kind_weights=only_kinds(
            integer_constant=KindWeight(1.0, 1.0),
            binary_expr=KindWeight(1.0, 0.5),
        ),
    )
