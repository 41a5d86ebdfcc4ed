from exprfuzz.parsing.parse import parse_str, tokenize

__all__ = ["parse_str", "tokenize"]
