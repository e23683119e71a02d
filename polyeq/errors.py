"""
Exception types shared by every stage of the POLYEQ pipeline.

Each stage raises its own subclass so callers can tell a malformed input
(LexError, ParseError) apart from a broken invariant (NormalizeError).
"""

from typing import Any, Optional


class PolyeqError(Exception):
    """Base class for all POLYEQ errors."""


class LexError(PolyeqError):
    """
    An unrecognized character was found while scanning.

    Attributes:
        offset: Zero-based position of the character in the input
        character: The offending character
    """

    def __init__(self, offset: int, character: str):
        super().__init__(
            f"Unexpected character {character!r} at offset {offset}")
        self.offset = offset
        self.character = character


class ParseError(PolyeqError):
    """
    The token stream does not match the grammar.

    Attributes:
        token: The unexpected token (None if the stream ran out)
        expected: Human-readable description of what was expected
    """

    def __init__(self, token: Any, expected: Optional[str] = None):
        if token is None:
            message = "Unexpected end of input"
        elif token.offset >= 0:
            message = f"Unexpected token {token.value or token.type.name!r} at offset {token.offset}"
        else:
            message = f"Unexpected token {token.value or token.type.name!r}"
        if expected:
            message += f", expected {expected}"
        super().__init__(message)
        self.token = token
        self.expected = expected


class NormalizeError(PolyeqError):
    """The normalizer reached a node it has no rule for."""

    def __init__(self, node: Any):
        super().__init__(f"Cannot normalize node {node!r}")
        self.node = node


class EvaluationError(PolyeqError):
    """Numeric evaluation failed (unbound variable, domain error, ...)."""


class NestingError(PolyeqError):
    """
    The input is nested more deeply than the recursive stages can follow.

    Attributes:
        stage: The stage that ran out of stack ("parse" or "normalize")
    """

    def __init__(self, stage: str):
        super().__init__(f"Expression nested too deeply to {stage}")
        self.stage = stage
