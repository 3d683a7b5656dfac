"""Line source: splits a NestedText document into content lines.

Blank lines and comment lines are skipped here rather than in the scanner.
They still count for line numbers, so error positions refer to the physical
lines of the input.
"""

from __future__ import annotations

import codecs
import logging
import re
from enum import Enum, auto
from typing import IO, Iterator

from .errors import NestedTextIOError
from .model import EOL

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 8192

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")
_BLANK_RE = re.compile(r"^[ \t]*$")
_COMMENT_RE = re.compile(r"^[ \t]*#")


def is_ignored_line(text: str) -> bool:
    """Blank lines and lines whose first non-space character is ``#``."""
    return bool(_BLANK_RE.match(text) or _COMMENT_RE.match(text))


def iter_raw_lines(stream: IO, chunk_size: int = _CHUNK_SIZE) -> Iterator[str]:
    """Yield the physical lines of *stream* without their terminators.

    Accepts text and binary streams; bytes are decoded as UTF-8.  LF, CR and
    CRLF all terminate a line, also mixed within one document.
    """
    decoder = None
    pending = ""
    first = True
    while True:
        try:
            raw = stream.read(chunk_size)
        except OSError as exc:
            raise NestedTextIOError("I/O error while reading input") from exc
        chunk = raw
        if isinstance(raw, (bytes, bytearray)):
            if decoder is None:
                decoder = codecs.getincrementaldecoder("utf-8-sig")()
            try:
                chunk = decoder.decode(raw, final=not raw)
            except UnicodeDecodeError as exc:
                raise NestedTextIOError("input is not valid UTF-8") from exc
        elif first and chunk:
            chunk = chunk.removeprefix("\ufeff")
        first = False
        if chunk:
            pending += chunk
            # A trailing CR may be the first half of a CRLF split across chunks
            cut = len(pending) - 1 if pending.endswith("\r") else len(pending)
            *lines, rest = _LINE_BREAK_RE.split(pending[:cut])
            pending = rest + pending[cut:]
            yield from lines
        if not raw:
            break
    if pending:
        *lines, rest = _LINE_BREAK_RE.split(pending)
        yield from lines
        if rest:
            yield rest


class LinePhase(Enum):
    # Reported for callers; the scanner itself only tests for EXHAUSTED
    READING = auto()    # more lines may follow
    DRAINING = auto()   # current line is the last one of the stream
    EXHAUSTED = auto()  # no more lines at all


class LineSource:
    """Content lines of a document with a one-character look-ahead.

    ``lookahead`` is the next code point of the current line, ``EOL`` at the
    end of a line, and ``None`` once the input is exhausted.
    """

    def __init__(self, stream: IO) -> None:
        self._lines = iter_raw_lines(stream)
        self._next_raw = self._pull()
        self.text = ""
        self.line_no = 0
        self.char_cursor = 0
        # UTF-8 offset into the current line, kept for callers
        self.byte_cursor = 0
        self.lookahead: str | None = None
        self.phase = LinePhase.READING
        self.advance_line()

    def _pull(self) -> str | None:
        return next(self._lines, None)

    @property
    def exhausted(self) -> bool:
        return self.phase is LinePhase.EXHAUSTED

    @property
    def column(self) -> int:
        return self.char_cursor

    def advance_line(self) -> bool:
        """Move to the next content line.  Returns False at end of input."""
        self.char_cursor = 0
        self.byte_cursor = 0
        while self._next_raw is not None:
            self.text = self._next_raw
            self._next_raw = self._pull()
            self.line_no += 1
            if is_ignored_line(self.text):
                continue
            if self._next_raw is None:
                self.phase = LinePhase.DRAINING
            logger.debug("line %d: %r", self.line_no, self.text)
            self._load_lookahead()
            return True
        self.line_no += 1
        self.text = ""
        self.lookahead = None
        self.phase = LinePhase.EXHAUSTED
        return False

    def _load_lookahead(self) -> None:
        if self.char_cursor < len(self.text):
            self.lookahead = self.text[self.char_cursor]
        else:
            self.lookahead = EOL

    def advance_cursor(self) -> bool:
        """Move the look-ahead one code point; at end of line it stays ``EOL``."""
        if self.exhausted:
            return False
        if self.char_cursor < len(self.text):
            ch = self.text[self.char_cursor]
            self.byte_cursor += len(ch.encode("utf-8", "surrogatepass"))
            self.char_cursor += 1
        self._load_lookahead()
        return True

    def match(self, char: str) -> bool:
        """Consume the look-ahead if it equals *char*."""
        if self.exhausted or self.lookahead != char:
            return False
        if char == EOL:
            self.advance_line()
        else:
            self.advance_cursor()
        return True

    def line_from(self, column: int) -> str:
        return self.text[column:]

    def read_line_remainder(self) -> str:
        """Return the rest of the current line and move to the next one."""
        if self.exhausted:
            return ""
        remainder = self.text[self.char_cursor:]
        self.advance_line()
        return remainder
