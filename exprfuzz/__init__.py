"""Random, precedence-correct C expression generator for evaluator fuzzing."""

__version__ = "0.1.0"
