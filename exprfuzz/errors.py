"""
Exception types raised by exprfuzz.

Two failure classes exist: configuration problems detected before a run
(``InvalidConfigError``) and precondition violations hit during a draw
(``PreconditionError``).  The latter are bugs in the caller's setup and are
never recovered from inside the library.
"""


class PreconditionError(AssertionError):
    """A selection primitive or dispatcher was called with invalid input."""


class InvalidConfigError(ValueError):
    """A generator configuration failed validation."""


class UnsupportedExpressionError(ValueError):
    """The reference semantics cannot lower the given expression."""


class ParseError(ValueError):
    """Expression text does not conform to the generated grammar."""
