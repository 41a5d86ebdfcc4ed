from exprfuzz.config.config_loader import config_from_dict, load_generator_config
from exprfuzz.config.generator_config import GeneratorConfig, KindWeight, validate_config

__all__ = [
    "GeneratorConfig",
    "KindWeight",
    "config_from_dict",
    "load_generator_config",
    "validate_config",
]
