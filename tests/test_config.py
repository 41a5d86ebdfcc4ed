import json
import logging
from dataclasses import replace

import pytest

from exprfuzz.ast import BinOp, ExprKind, TypeKind, UnOp
from exprfuzz.config.config_loader import config_from_dict, load_generator_config
from exprfuzz.config.generator_config import GeneratorConfig, KindWeight, validate_config
from exprfuzz.constants import CONFIG_ENV_VAR
from exprfuzz.errors import InvalidConfigError
from exprfuzz.utils.bitmask import EnumMask


class TestValidateConfig:
    def test_defaults_are_valid(self):
        cfg = GeneratorConfig()
        assert validate_config(cfg) is cfg
        assert cfg.bin_op_mask == EnumMask.full(BinOp)
        assert cfg.expr_kind_weight(ExprKind.BINARY_EXPR).dampening_factor < 1.0

    @pytest.mark.parametrize(
        "changes",
        [
            {"int_const_min": 5, "int_const_max": 4},
            {"int_const_min": -1},
            {"int_const_max": 2**64},
            {"double_constant_min": -1.0},
            {"double_constant_max": float("inf")},
            {"double_constant_min": 3.0, "double_constant_max": 2.0},
            {"bin_op_mask": EnumMask.empty(BinOp)},
            {"un_op_mask": EnumMask.empty(UnOp)},
            {"un_op_mask": EnumMask.full(BinOp)},
            {"parenthesize_prob": 1.5},
            {"const_prob": -0.1},
            {"volatile_prob": 2.0},
            {"expr_kind_weights": (KindWeight(1.0),) * 4},
            {"expr_kind_weights": (KindWeight(0.0),) * len(ExprKind)},
            {"expr_kind_weights": (KindWeight(-1.0),) + (KindWeight(1.0),) * (len(ExprKind) - 1)},
            {"expr_kind_weights": (KindWeight(1.0, 0.0),) * len(ExprKind)},
            {"expr_kind_weights": (KindWeight(1.0, 1.5),) * len(ExprKind)},
            {"type_kind_weights": (KindWeight(0.0),) * len(TypeKind)},
            {
                "expr_kind_weights": (
                    KindWeight(0.0),  # IntegerConstant
                    KindWeight(0.0),  # DoubleConstant
                    KindWeight(0.0),  # VariableExpr
                    KindWeight(1.0, 0.5),
                    KindWeight(1.0, 0.5),
                )
            },
        ],
    )
    def test_rejects_invalid_settings(self, changes):
        with pytest.raises(InvalidConfigError):
            validate_config(replace(GeneratorConfig(), **changes))

    def test_undamped_recursive_kind_warns(self, caplog):
        cfg = GeneratorConfig().with_expr_weights(unary_expr=KindWeight(1.0, 1.0))
        with caplog.at_level(logging.WARNING, logger="exprfuzz.config"):
            validate_config(cfg)
        assert "UNARY_EXPR is never dampened" in caplog.text

    def test_with_expr_weights_leaves_original_untouched(self):
        cfg = GeneratorConfig()
        changed = cfg.with_expr_weights(double_constant=KindWeight(0.0))
        assert changed.expr_kind_weight(ExprKind.DOUBLE_CONSTANT).initial_weight == 0.0
        assert cfg.expr_kind_weight(ExprKind.DOUBLE_CONSTANT).initial_weight == 2.0


class TestConfigLoader:
    def test_overlay_on_defaults(self):
        cfg = config_from_dict(
            {
                "int_const_max": 255,
                "bin_op_mask": ["+", "-", "MULT"],
                "un_op_mask": ["NEG"],
                "parenthesize_prob": 0.5,
                "expr_kind_weights": {
                    "BinaryExpr": {"initial_weight": 4.0, "dampening_factor": 0.5},
                    "DOUBLE_CONSTANT": {"initial_weight": 0.0},
                },
                "type_kind_weights": {"PointerType": {"initial_weight": 0.0}},
            }
        )
        assert cfg.int_const_max == 255
        assert cfg.int_const_min == 0
        assert cfg.bin_op_mask == EnumMask.of(BinOp.PLUS, BinOp.MINUS, BinOp.MULT)
        assert cfg.un_op_mask == EnumMask.of(UnOp.NEG)
        assert cfg.parenthesize_prob == 0.5
        assert cfg.expr_kind_weight(ExprKind.BINARY_EXPR) == KindWeight(4.0, 0.5)
        assert cfg.expr_kind_weight(ExprKind.DOUBLE_CONSTANT) == KindWeight(0.0, 1.0)
        assert cfg.type_kind_weight(TypeKind.POINTER_TYPE).initial_weight == 0.0

    def test_integer_masks(self):
        cfg = config_from_dict({"bin_op_mask": 0b11, "un_op_mask": 1})
        assert list(cfg.bin_op_mask) == [BinOp.PLUS, BinOp.MINUS]
        assert list(cfg.un_op_mask) == [UnOp.PLUS]

    @pytest.mark.parametrize(
        "data",
        [
            {"no_such_key": 1},
            {"bin_op_mask": ["**"]},
            {"bin_op_mask": []},
            {"un_op_mask": 1 << 10},
            {"expr_kind_weights": {"CastExpr": {"initial_weight": 1.0}}},
            {"expr_kind_weights": {"BinaryExpr": {"weight": 1.0}}},
            {"expr_kind_weights": {"BinaryExpr": 2.0}},
            {"expr_kind_weights": {"BinaryExpr": {"initial_weight": "heavy"}}},
            {"expr_kind_weights": {"UnaryExpr": {"dampening_factor": None}}},
            {"parenthesize_prob": "high"},
            {"parenthesize_prob": True},
            {"double_constant_max": 10**400},
            {"int_const_max": 100.7},
            {"int_const_min": "3"},
            {"int_const_min": False},
            {"bin_op_mask": True},
        ],
    )
    def test_invalid_documents(self, data):
        with pytest.raises(InvalidConfigError):
            config_from_dict(data)

    def test_integral_floats_accepted_for_integer_bounds(self):
        cfg = config_from_dict({"int_const_min": 2.0, "int_const_max": 100.0})
        assert (cfg.int_const_min, cfg.int_const_max) == (2, 100)
        assert isinstance(cfg.int_const_max, int)

    def test_load_from_path(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"int_const_min": 3, "int_const_max": 3}))
        cfg = load_generator_config(str(path))
        assert (cfg.int_const_min, cfg.int_const_max) == (3, 3)

    def test_load_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"parenthesize_prob": 0.0}))
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert load_generator_config().parenthesize_prob == 0.0

    def test_defaults_without_path(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert load_generator_config() == GeneratorConfig()

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text("{not json")
        with pytest.raises(InvalidConfigError):
            load_generator_config(str(path))

    def test_top_level_must_be_object(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text("[1, 2]")
        with pytest.raises(InvalidConfigError):
            load_generator_config(str(path))
