"""Error types for NestedText decoding and encoding."""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Numeric error codes.

    All errors rooted in format violations have a code >= ``FORMAT``.
    """

    IO = 10
    USAGE = 20
    SCHEMA = 100
    FORMAT = 203
    FORMAT_NO_INPUT = 204
    FORMAT_TOPLEVEL_INDENT = 205
    FORMAT_ILLEGAL_TAG = 206


class NestedTextError(Exception):
    """Base class for every error raised by this package.

    ``line`` is 1-based, ``column`` is 0-based and counted in code points.
    Both are ``None`` when the error is not tied to an input position.
    A lower-level cause (e.g. an ``OSError``) is available as ``__cause__``.
    """

    code: ErrorCode = ErrorCode.FORMAT

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    @classmethod
    def at(cls, token, message: str) -> "NestedTextError":
        """Build an error positioned at *token* (anything with line/column)."""
        return cls(message, token.line, token.column)

    @property
    def is_format_error(self) -> bool:
        return self.code >= ErrorCode.FORMAT

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"[{self.line},{self.column}] {self.message}"


class NestedTextIOError(NestedTextError):
    """Reading or writing the underlying stream failed."""

    code = ErrorCode.IO


class UsageError(NestedTextError):
    """An API option was invalid."""

    code = ErrorCode.USAGE


class SchemaError(NestedTextError):
    """A value cannot be encoded as NestedText."""

    code = ErrorCode.SCHEMA


class FormatError(NestedTextError):
    """The input violates the NestedText format."""

    code = ErrorCode.FORMAT


class NoInputError(FormatError):
    code = ErrorCode.FORMAT_NO_INPUT


class TopLevelIndentError(FormatError):
    code = ErrorCode.FORMAT_TOPLEVEL_INDENT


class IllegalTagError(FormatError):
    code = ErrorCode.FORMAT_ILLEGAL_TAG
