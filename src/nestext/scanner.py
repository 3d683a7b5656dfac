"""Scanner: classifies content lines into tokens for the parser.

Each call to ``next_token`` runs a small chain of states over the current
line::

    FILE_START -> (first call only) EMPTY_DOCUMENT | DOC_ROOT
    ITEM       -> EOF | INDENT
    INDENT     -> ITEM_BODY
    ITEM_BODY  -> token complete

Errors never escape ``next_token``; they are attached to the returned token
and repeated on every later call.
"""

from __future__ import annotations

import logging
import re
from enum import Enum, auto

from .errors import FormatError, IllegalTagError, NestedTextError, TopLevelIndentError
from .linebuf import LineSource
from .model import EOL, Token, TokenKind

logger = logging.getLogger(__name__)

# A plain dict key ends at the first colon followed by a space or line end
_KEY_END_RE = re.compile(r":(?: |\Z)")

_TAGS: dict[str, tuple[TokenKind, str]] = {
    "-": (TokenKind.LIST_ITEM, "list-item"),
    ">": (TokenKind.STRING_MULTILINE, "string"),
    ":": (TokenKind.DICT_KEY_MULTILINE, "key"),
}


class ScanState(Enum):
    FILE_START = auto()
    ITEM = auto()
    INDENT = auto()
    ITEM_BODY = auto()
    DONE = auto()


class Scanner:
    def __init__(self, source: LineSource) -> None:
        self.src = source
        self.state = ScanState.FILE_START
        self.last_error: NestedTextError | None = None

    def next_token(self) -> Token:
        token = Token(line=self.src.line_no, column=self.src.column)
        if self.last_error is not None:
            token.error = self.last_error
            return token
        state: ScanState | None = self.state
        try:
            while state is not None:
                state = self._dispatch(state, token)
        except NestedTextError as err:
            self.last_error = token.error = err
        logger.debug("%s", token)
        return token

    def _dispatch(self, state: ScanState, token: Token) -> ScanState | None:
        match state:
            case ScanState.FILE_START:
                return self._scan_file_start(token)
            case ScanState.ITEM:
                return self._scan_item(token)
            case ScanState.INDENT:
                return self._scan_indentation(token)
            case ScanState.ITEM_BODY:
                return self._scan_item_body(token)
            case ScanState.DONE:
                token.kind = TokenKind.EOF
                return None
        raise AssertionError(f"unknown scanner state {state}")

    # -- Rules ------------------------------------------------------------

    def _scan_file_start(self, token: Token) -> None:
        if self.src.exhausted:
            token.kind = TokenKind.EMPTY_DOCUMENT
            self.state = ScanState.DONE
            return None
        token.kind = TokenKind.DOC_ROOT
        if self.src.lookahead == " ":
            # There is no indentation on the top-level object
            raise TopLevelIndentError.at(token, "top-level item must not be indented")
        self.state = ScanState.ITEM
        return None

    def _scan_item(self, token: Token) -> ScanState | None:
        token.line = self.src.line_no
        token.column = 0
        if self.src.exhausted:
            token.kind = TokenKind.EOF
            self.state = ScanState.DONE
            return None
        return ScanState.INDENT

    def _scan_indentation(self, token: Token) -> ScanState:
        # Only ASCII spaces are allowed in the indentation
        while self.src.match(" "):
            token.indent += 1
        token.column = self.src.column
        ch = self.src.lookahead
        if ch != EOL and ch.isspace():
            name = "tab" if ch == "\t" else f"U+{ord(ch):04X}"
            raise FormatError.at(token, f"invalid character in indentation: {name}")
        return ScanState.ITEM_BODY

    def _scan_item_body(self, token: Token) -> None:
        src = self.src
        start = src.column
        ch = src.lookahead
        if ch in _TAGS:
            src.advance_cursor()
            if src.lookahead in (" ", EOL):
                self._scan_tagged(token, ch)
            else:
                # Not a tag after all, e.g. "-->" or "-: x"
                self._scan_key(token, start, tag=ch)
        elif ch == "[":
            token.kind = TokenKind.INLINE_LIST
            token.content = (src.read_line_remainder(),)
        elif ch == "{":
            token.kind = TokenKind.INLINE_DICT
            token.content = (src.read_line_remainder(),)
        else:
            self._scan_key(token, start)
        return None

    def _scan_tagged(self, token: Token, tag: str) -> None:
        kind, _ = _TAGS[tag]
        if tag == "-" and self.src.lookahead == EOL:
            kind = TokenKind.LIST_ITEM_MULTILINE
        self.src.match(" ")
        rest = self.src.read_line_remainder()
        token.kind = kind
        token.content = () if kind is TokenKind.LIST_ITEM_MULTILINE else (rest,)

    def _scan_key(self, token: Token, start: int, tag: str | None = None) -> None:
        rest = self.src.line_from(start)
        m = _KEY_END_RE.search(rest)
        if m is None:
            if tag is not None:
                _, name = _TAGS[tag]
                raise IllegalTagError.at(
                    token, f"{name} tag ('{tag}') followed by illegal character"
                )
            raise FormatError.at(token, "dict key item not properly terminated by ':'")
        self.src.read_line_remainder()
        key = rest[: m.start()].strip()
        if m.group() == ":":
            token.kind = TokenKind.INLINE_DICT_KEY
            token.content = (key,)
        else:
            token.kind = TokenKind.INLINE_DICT_KEY_VALUE
            token.content = (key, rest[m.end():])
