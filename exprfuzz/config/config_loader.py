"""
Load a :class:`GeneratorConfig` from a JSON document.

The path comes from the caller, or from the ``EXPRFUZZ_CONFIG`` environment
variable; with neither, the defaults are used.  Example document::

    {
        "int_const_min": 0,
        "int_const_max": 255,
        "bin_op_mask": ["+", "-", "*"],
        "un_op_mask": ["NEG"],
        "parenthesize_prob": 0.1,
        "expr_kind_weights": {
            "BinaryExpr": {"initial_weight": 4.0, "dampening_factor": 0.5},
            "DoubleConstant": {"initial_weight": 0.0}
        }
    }
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import fields, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from exprfuzz.ast import BinOp, ExprKind, TypeKind, UnOp
from exprfuzz.config.generator_config import GeneratorConfig, KindWeight, validate_config
from exprfuzz.constants import CONFIG_ENV_VAR
from exprfuzz.errors import InvalidConfigError
from exprfuzz.utils.bitmask import EnumMask

logger = logging.getLogger("exprfuzz.config")

_FIELD_NAMES = frozenset(f.name for f in fields(GeneratorConfig))


def _kind_from_name(enum_cls, name: str):
    """Accept ``BINARY_EXPR`` as well as ``BinaryExpr``."""
    key = name if name.isupper() else re.sub(r"(?<!^)(?=[A-Z])", "_", name).upper()
    try:
        return enum_cls[key]
    except KeyError:
        raise InvalidConfigError(f"unknown {enum_cls.__name__} '{name}'") from None


def _as_float(name: str, value: Any) -> float:
    # bool is an int subclass.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidConfigError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except OverflowError:
        raise InvalidConfigError(f"{name} is out of range: {value!r}") from None


def _as_int(name: str, value: Any) -> int:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfigError(f"{name} must be an integer, got {value!r}")
    return value


def _parse_mask(enum_cls, value: Any) -> EnumMask:
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return EnumMask(enum_cls, value)
        except ValueError as exc:
            raise InvalidConfigError(str(exc)) from None
    if not isinstance(value, list):
        raise InvalidConfigError(f"{enum_cls.__name__} mask must be a list or an integer")
    bits = 0
    for item in value:
        if not isinstance(item, str):
            raise InvalidConfigError(f"{enum_cls.__name__} mask entries must be strings, got {item!r}")
        try:
            member = enum_cls.from_token(item)
        except KeyError:
            member = _kind_from_name(enum_cls, item)
        bits |= 1 << int(member)
    return EnumMask(enum_cls, bits)


def _parse_weight_table(enum_cls, value: Any, defaults: Tuple[KindWeight, ...]) -> Tuple[KindWeight, ...]:
    if not isinstance(value, Mapping):
        raise InvalidConfigError(f"{enum_cls.__name__} weights must be an object keyed by kind")
    table = list(defaults)
    for name, entry in value.items():
        kind = _kind_from_name(enum_cls, name)
        if not isinstance(entry, Mapping):
            raise InvalidConfigError(
                f"weight for {name} must be an object with initial_weight and/or dampening_factor"
            )
        unknown = set(entry) - {"initial_weight", "dampening_factor"}
        if unknown:
            raise InvalidConfigError(f"unknown weight keys for {name}: {sorted(unknown)}")
        current = table[int(kind)]
        table[int(kind)] = KindWeight(
            _as_float(f"{name}.initial_weight", entry.get("initial_weight", current.initial_weight)),
            _as_float(f"{name}.dampening_factor", entry.get("dampening_factor", current.dampening_factor)),
        )
    return tuple(table)


def config_from_dict(data: Mapping[str, Any], base: Optional[GeneratorConfig] = None) -> GeneratorConfig:
    """Overlay *data* on *base* (or the defaults) and validate the result."""
    cfg = base if base is not None else GeneratorConfig()

    unknown = set(data) - _FIELD_NAMES
    if unknown:
        raise InvalidConfigError(f"unknown configuration keys: {sorted(unknown)}")

    changes: Dict[str, Any] = {}
    for key, value in data.items():
        if key == "bin_op_mask":
            changes[key] = _parse_mask(BinOp, value)
        elif key == "un_op_mask":
            changes[key] = _parse_mask(UnOp, value)
        elif key == "expr_kind_weights":
            changes[key] = _parse_weight_table(ExprKind, value, cfg.expr_kind_weights)
        elif key == "type_kind_weights":
            changes[key] = _parse_weight_table(TypeKind, value, cfg.type_kind_weights)
        elif key.startswith("int_const_"):
            changes[key] = _as_int(key, value)
        else:
            changes[key] = _as_float(key, value)

    return validate_config(replace(cfg, **changes))


def load_generator_config(path: Optional[str] = None) -> GeneratorConfig:
    """Load, overlay on the defaults, and validate a JSON configuration."""
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return validate_config(GeneratorConfig())

    try:
        with open(path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise InvalidConfigError(f"{path}: {exc}") from exc

    if not isinstance(data, dict):
        raise InvalidConfigError(f"{path}: top-level JSON value must be an object")
    logger.debug("Loaded generator config from %s", path)
    return config_from_dict(data)
