"""Decoder and encoder options."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from .errors import UsageError


DEFAULT_MAX_DEPTH = 256
# Block nesting is parsed recursively and must stay below the recursion limit
MAX_DEPTH_LIMIT = 256
DEFAULT_WRAP_KEY = "nestedtext"

DEFAULT_INDENT = 2
MAX_INDENT = 16
DEFAULT_INLINE_LIMIT = 128
MAX_INLINE_LIMIT = 2048


class TopLevelShape(Enum):
    ANY = auto()
    LIST = auto()
    DICT = auto()


def parse_top_level(mode: str | None) -> tuple[TopLevelShape, str | None]:
    """Interpret a top-level mode string.

    ``None`` keeps the decoded value as is, ``"list"`` forces a list,
    ``"dict"`` forces a dict keyed by ``DEFAULT_WRAP_KEY`` and
    ``"dict.<key>"`` forces a dict keyed by ``<key>``.
    """
    if mode is None:
        return TopLevelShape.ANY, None
    if mode == "list":
        return TopLevelShape.LIST, None
    if mode == "dict":
        return TopLevelShape.DICT, DEFAULT_WRAP_KEY
    if mode.startswith("dict.") and len(mode) > len("dict."):
        return TopLevelShape.DICT, mode[len("dict."):]
    raise UsageError(f"unknown top-level mode {mode!r}; expected 'list', 'dict' or 'dict.<key>'")


@dataclass
class DecodeOptions:
    top_level: str | None = None
    max_depth: int = DEFAULT_MAX_DEPTH
    shape: TopLevelShape = field(init=False, default=TopLevelShape.ANY)
    wrap_key: str | None = field(init=False, default=None)

    def __post_init__(self) -> None:
        if not 1 <= self.max_depth <= MAX_DEPTH_LIMIT:
            raise UsageError(
                f"max_depth must be between 1 and {MAX_DEPTH_LIMIT}, is {self.max_depth}"
            )
        self.shape, self.wrap_key = parse_top_level(self.top_level)


@dataclass
class EncodeOptions:
    indent_by: int = DEFAULT_INDENT
    inline_limit: int = DEFAULT_INLINE_LIMIT

    def __post_init__(self) -> None:
        # Out-of-range values are clamped, not rejected
        self.indent_by = min(max(self.indent_by, 1), MAX_INDENT)
        self.inline_limit = min(self.inline_limit, MAX_INLINE_LIMIT)
