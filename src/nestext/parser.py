"""Parser: recursive descent over the scanner's token stream.

The recursion depth of the ``parse_*`` methods mirrors the nesting depth of
the document.  Each method consumes the tokens belonging to its item and
leaves ``self.token`` on the first token that does not.
"""

from __future__ import annotations

import io
import logging
import os
from typing import IO

from .config import DEFAULT_MAX_DEPTH, DecodeOptions, TopLevelShape
from .errors import FormatError, NestedTextIOError, NoInputError
from .inline import InlineAutomaton
from .linebuf import LineSource
from .model import Token, TokenKind, Value
from .scanner import Scanner

logger = logging.getLogger(__name__)

_LIST_KINDS = (TokenKind.LIST_ITEM, TokenKind.LIST_ITEM_MULTILINE)
_DICT_KINDS = (
    TokenKind.INLINE_DICT_KEY_VALUE,
    TokenKind.INLINE_DICT_KEY,
    TokenKind.DICT_KEY_MULTILINE,
)
_INLINE_KINDS = (TokenKind.INLINE_LIST, TokenKind.INLINE_DICT)


class Parser:
    def __init__(self, scanner: Scanner, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.scanner = scanner
        self.max_depth = max_depth
        self.token: Token | None = None

    def _advance(self) -> Token:
        token = self.scanner.next_token()
        if token.error is not None:
            raise token.error
        self.token = token
        return token

    def _below(self, indent: int) -> bool:
        """True if the current token does not belong to a block at *indent*."""
        return self.token.kind is TokenKind.EOF or self.token.indent < indent

    # -- Grammar ----------------------------------------------------------

    def parse_document(self) -> Value | None:
        root = self._advance()
        if root.kind is TokenKind.EMPTY_DOCUMENT:
            return None
        if root.kind is not TokenKind.DOC_ROOT:
            raise FormatError.at(root, "missing document root")
        if self._advance().kind is TokenKind.EOF:
            return None
        value = self.parse_any(0)
        if self.token.kind is not TokenKind.EOF:
            raise FormatError.at(self.token, "unused content following valid input")
        return value

    def parse_any(self, indent: int, depth: int = 0) -> Value | None:
        token = self.token
        if self._below(indent):
            return None
        if depth > self.max_depth:
            raise FormatError.at(token, "maximum nesting depth exceeded")
        if token.kind in _LIST_KINDS:
            return self.parse_list(token.indent, depth)
        if token.kind in _DICT_KINDS:
            return self.parse_dict(token.indent, depth)
        if token.kind is TokenKind.STRING_MULTILINE:
            return self.parse_multi_string(token.indent)
        if token.kind in _INLINE_KINDS:
            return self.parse_inline(depth)
        raise FormatError.at(token, f"unexpected {token.kind.name.lower()} token")

    def parse_multi_string(self, indent: int) -> str:
        lines: list[str] = []
        while self.token.kind is TokenKind.STRING_MULTILINE and self.token.indent == indent:
            lines.append(self.token.content[0])
            self._advance()
        return "\n".join(lines)

    def parse_list(self, indent: int, depth: int = 0) -> list[Value]:
        items: list[Value] = []
        while not self._below(indent):
            token = self.token
            if token.indent > indent:
                # Nesting is only allowed directly under a bare '-'
                raise FormatError.at(token, "invalid indent")
            if token.kind is TokenKind.LIST_ITEM:
                items.append(token.content[0])
                self._advance()
            elif token.kind is TokenKind.LIST_ITEM_MULTILINE:
                self._advance()
                items.append(self._parse_nested(indent, depth))
            else:
                break
        return items

    def parse_dict(self, indent: int, depth: int = 0) -> dict[str, Value]:
        result: dict[str, Value] = {}
        while not self._below(indent):
            token = self.token
            if token.indent > indent:
                raise FormatError.at(token, "partial dedent")
            if token.kind is TokenKind.INLINE_DICT_KEY_VALUE:
                key, value = token.content
                self._advance()
            elif token.kind is TokenKind.INLINE_DICT_KEY:
                key = token.content[0]
                self._advance()
                value = self._parse_nested(indent, depth)
            elif token.kind is TokenKind.DICT_KEY_MULTILINE:
                key = self._parse_multi_key(indent)
                value = self._parse_nested(indent, depth)
            else:
                break
            if key in result:
                raise FormatError.at(token, f"duplicate key: {key!r}")
            result[key] = value
        return result

    def _parse_multi_key(self, indent: int) -> str:
        fragments: list[str] = []
        while self.token.kind is TokenKind.DICT_KEY_MULTILINE and self.token.indent == indent:
            fragments.append(self.token.content[0])
            self._advance()
        return "\n".join(fragments)

    def _parse_nested(self, indent: int, depth: int) -> Value:
        """Value of a tag that defers it to a deeper block, or ``""``."""
        if self._below(indent + 1):
            return ""
        return self.parse_any(self.token.indent, depth + 1)

    def parse_inline(self, depth: int = 0) -> Value:
        token = self.token
        automaton = InlineAutomaton(
            token.content[0],
            line=token.line,
            column=token.column,
            max_depth=self.max_depth - depth,
        )
        value = automaton.parse()
        self._advance()
        return value


# ---------------------------------------------------------------------------
# Top-level shaping
# ---------------------------------------------------------------------------

def apply_top_level(value: Value | None, options: DecodeOptions) -> Value | None:
    """Force the decoded value into the shape requested by ``top_level``."""
    if options.shape is TopLevelShape.LIST:
        if value is None:
            return []
        return value if isinstance(value, list) else [value]
    if options.shape is TopLevelShape.DICT:
        if value is None:
            return {}
        return value if isinstance(value, dict) else {options.wrap_key: value}
    return value


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def load(
    stream: IO | None,
    *,
    top_level: str | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Value | None:
    """Decode a NestedText document from a text or binary stream.

    Returns ``None`` for a document without content lines, unless
    *top_level* asks for a list or dict.
    """
    options = DecodeOptions(top_level=top_level, max_depth=max_depth)
    if stream is None:
        raise NoInputError("no input present")
    scanner = Scanner(LineSource(stream))
    try:
        value = Parser(scanner, max_depth=options.max_depth).parse_document()
    except RecursionError as exc:
        raise FormatError("maximum nesting depth exceeded") from exc
    return apply_top_level(value, options)


def loads(text: str | bytes, **kwargs) -> Value | None:
    """Decode a NestedText document held in a string (or bytes)."""
    if isinstance(text, (bytes, bytearray)):
        return load(io.BytesIO(text), **kwargs)
    return load(io.StringIO(text, newline=""), **kwargs)


def load_file(path: str | os.PathLike, **kwargs) -> Value | None:
    """Decode the NestedText file at *path*."""
    logger.debug("loading %s", path)
    try:
        fh = open(path, "rb")
    except OSError as exc:
        raise NestedTextIOError(f"cannot open {os.fspath(path)!r}") from exc
    with fh:
        return load(fh, **kwargs)
