"""Data model for NestedText values, scanner tokens and inline parse frames."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union

from .errors import FormatError, NestedTextError


# Synthetic end-of-line marker produced by the line source.
EOL = "\n"


# ---------------------------------------------------------------------------
# Value
# ---------------------------------------------------------------------------

Value = Union[str, "list[Value]", "dict[str, Value]"]


# ---------------------------------------------------------------------------
# Token
# ---------------------------------------------------------------------------

class TokenKind(Enum):
    DOC_ROOT = auto()
    EOF = auto()
    EMPTY_DOCUMENT = auto()
    LIST_ITEM = auto()              # - value
    LIST_ITEM_MULTILINE = auto()    # -
    STRING_MULTILINE = auto()       # > text
    DICT_KEY_MULTILINE = auto()     # : key fragment
    INLINE_LIST = auto()            # [ ... ]
    INLINE_DICT = auto()            # { ... }
    INLINE_DICT_KEY_VALUE = auto()  # key: value
    INLINE_DICT_KEY = auto()        # key:


@dataclass(slots=True)
class Token:
    """One classified line of input, passed from the scanner to the parser."""

    line: int
    column: int
    kind: TokenKind = TokenKind.EOF
    indent: int = 0
    content: tuple[str, ...] = ()
    error: NestedTextError | None = None

    def __str__(self) -> str:
        return (
            f"token[({self.line},{self.column}) i={self.indent} "
            f"type={self.kind.name} {self.content!r}]"
        )


# ---------------------------------------------------------------------------
# Frame
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Frame:
    """A nonterminal under construction: one (possibly nested) list or dict.

    ``keys`` is ``None`` for list frames.  ``resume`` is the state the parent
    frame continues with once this frame has been reduced.
    """

    values: list[Value] = field(default_factory=list)
    keys: list[str] | None = None
    pending_key: str | None = None
    resume: Enum | None = None

    @property
    def is_dict(self) -> bool:
        return self.keys is not None

    def push(self, value: Value) -> None:
        """Append *value*, pairing it with the pending key for dict frames."""
        if self.keys is not None and self.pending_key is not None:
            self.keys.append(self.pending_key)
            self.pending_key = None
        self.values.append(value)

    def reduce(self) -> Value:
        """Turn the accumulated content into a list or dict."""
        if self.keys is None:
            return list(self.values)
        if len(self.keys) != len(self.values):
            raise FormatError(
                f"mixed content: {len(self.keys)} keys for {len(self.values)} values"
            )
        result: dict[str, Value] = {}
        for key, value in zip(self.keys, self.values):
            if key in result:
                raise FormatError(f"duplicate key: {key!r}")
            result[key] = value
        return result
