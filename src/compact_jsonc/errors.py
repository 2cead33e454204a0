"""Exceptions raised while formatting JSONC."""

from __future__ import annotations


class CompactJsonError(Exception):
    """Base class for all formatting failures."""


class InvalidOptionsError(CompactJsonError, ValueError):
    """Raised when a set of format options cannot be used."""


class ParseError(CompactJsonError):
    """The input is not valid JSON or JSONC."""

    def __init__(self: ParseError, message: str, line: int = -1, column: int = -1) -> None:
        """Create a parse error with an optional source position."""
        self.message = message
        self.line = line
        self.column = column
        if line > 0:
            super().__init__(f"{message} (line {line}, column {column})")
        else:
            super().__init__(message)


class NestingDepthError(ParseError):
    """The document nests containers deeper than the formatter supports."""
