"""Inline items: lists and dicts written on a single line.

Examples::

    [one, two three]
    {one: 1, two: 2, three: 3}
    {one: 1, all: [1, 2, 3], more: {x: y}}

The text is run through a table-driven state machine over character classes.
Every ``[`` or ``{`` in a value position enters a nonterminal: a new
``Frame`` is pushed that remembers where its parent continues once the nested
item has been closed and reduced.
"""

from __future__ import annotations

import logging
from enum import Enum, auto

from .config import DEFAULT_MAX_DEPTH
from .errors import FormatError
from .model import EOL, Frame, Value

logger = logging.getLogger(__name__)


class CharClass(Enum):
    ORDINARY = auto()
    SPACE = auto()
    EOL = auto()
    COMMA = auto()
    COLON = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    LBRACE = auto()
    RBRACE = auto()


_DELIMITERS: dict[str, CharClass] = {
    ",": CharClass.COMMA,
    ":": CharClass.COLON,
    "[": CharClass.LBRACKET,
    "]": CharClass.RBRACKET,
    "{": CharClass.LBRACE,
    "}": CharClass.RBRACE,
}


def classify(ch: str) -> CharClass:
    if ch == EOL:
        return CharClass.EOL
    cls = _DELIMITERS.get(ch)
    if cls is not None:
        return cls
    if ch.isspace():
        return CharClass.SPACE
    return CharClass.ORDINARY


class State(Enum):
    START = auto()
    DICT_OPEN = auto()        # just after '{'
    DICT_KEY = auto()         # reading a key
    DICT_COLON = auto()       # after ':', value not started (blanks only)
    DICT_VALUE = auto()       # reading a value
    DICT_COMMA = auto()       # after ',' in a dict
    DICT_AFTER_ITEM = auto()  # after a nested value in a dict
    LIST_OPEN = auto()        # just after '['
    LIST_BLANK = auto()       # value consists of blanks so far
    LIST_VALUE = auto()       # reading a value
    LIST_COMMA = auto()       # after ',' in a list
    LIST_AFTER_ITEM = auto()  # after a nested value in a list
    ENTER_DICT = auto()       # nonterminal: push dict frame
    ENTER_LIST = auto()       # nonterminal: push list frame
    ACCEPT_DICT = auto()
    ACCEPT_LIST = auto()
    DONE = auto()             # root item closed


class Action(Enum):
    NONE = auto()
    MARK = auto()   # start a new fragment after this character
    KEY = auto()    # fragment becomes the pending key
    VALUE = auto()  # fragment becomes a value


S = State
C = CharClass
A = Action

_ENTER = {C.LBRACKET: (S.ENTER_LIST, A.NONE), C.LBRACE: (S.ENTER_DICT, A.NONE)}

TRANSITIONS: dict[State, dict[CharClass, tuple[State, Action]]] = {
    S.START: dict(_ENTER),
    S.DICT_OPEN: {
        C.SPACE: (S.DICT_KEY, A.NONE),
        C.ORDINARY: (S.DICT_KEY, A.NONE),
        C.COLON: (S.DICT_COLON, A.KEY),
        C.RBRACE: (S.ACCEPT_DICT, A.NONE),
    },
    S.DICT_KEY: {
        C.SPACE: (S.DICT_KEY, A.NONE),
        C.ORDINARY: (S.DICT_KEY, A.NONE),
        C.COLON: (S.DICT_COLON, A.KEY),
    },
    S.DICT_COLON: {
        C.SPACE: (S.DICT_COLON, A.NONE),
        C.ORDINARY: (S.DICT_VALUE, A.NONE),
        C.COMMA: (S.DICT_COMMA, A.VALUE),
        C.RBRACE: (S.ACCEPT_DICT, A.VALUE),
        **_ENTER,
    },
    S.DICT_VALUE: {
        C.SPACE: (S.DICT_VALUE, A.NONE),
        C.ORDINARY: (S.DICT_VALUE, A.NONE),
        C.COMMA: (S.DICT_COMMA, A.VALUE),
        C.RBRACE: (S.ACCEPT_DICT, A.VALUE),
    },
    S.DICT_COMMA: {
        C.SPACE: (S.DICT_KEY, A.NONE),
        C.ORDINARY: (S.DICT_KEY, A.NONE),
        C.COLON: (S.DICT_COLON, A.KEY),
    },
    S.DICT_AFTER_ITEM: {
        C.SPACE: (S.DICT_AFTER_ITEM, A.NONE),
        C.COMMA: (S.DICT_COMMA, A.MARK),
        C.RBRACE: (S.ACCEPT_DICT, A.NONE),
    },
    S.LIST_OPEN: {
        C.SPACE: (S.LIST_BLANK, A.NONE),
        C.ORDINARY: (S.LIST_VALUE, A.NONE),
        C.COLON: (S.LIST_VALUE, A.NONE),
        C.COMMA: (S.LIST_COMMA, A.VALUE),
        C.RBRACKET: (S.ACCEPT_LIST, A.NONE),
        **_ENTER,
    },
    S.LIST_BLANK: {
        C.SPACE: (S.LIST_BLANK, A.NONE),
        C.ORDINARY: (S.LIST_VALUE, A.NONE),
        C.COLON: (S.LIST_VALUE, A.NONE),
        C.COMMA: (S.LIST_COMMA, A.VALUE),
        C.RBRACKET: (S.ACCEPT_LIST, A.VALUE),
        **_ENTER,
    },
    S.LIST_VALUE: {
        C.SPACE: (S.LIST_VALUE, A.NONE),
        C.ORDINARY: (S.LIST_VALUE, A.NONE),
        C.COLON: (S.LIST_VALUE, A.NONE),
        C.COMMA: (S.LIST_COMMA, A.VALUE),
        C.RBRACKET: (S.ACCEPT_LIST, A.VALUE),
    },
    S.LIST_COMMA: {
        C.SPACE: (S.LIST_BLANK, A.NONE),
        C.ORDINARY: (S.LIST_VALUE, A.NONE),
        C.COLON: (S.LIST_VALUE, A.NONE),
        C.COMMA: (S.LIST_COMMA, A.VALUE),
        C.RBRACKET: (S.ACCEPT_LIST, A.VALUE),
        **_ENTER,
    },
    S.LIST_AFTER_ITEM: {
        C.SPACE: (S.LIST_AFTER_ITEM, A.NONE),
        C.COMMA: (S.LIST_COMMA, A.MARK),
        C.RBRACKET: (S.ACCEPT_LIST, A.NONE),
    },
    S.DONE: {
        C.SPACE: (S.DONE, A.NONE),
        C.EOL: (S.DONE, A.NONE),
    },
}

# Where the parent frame continues after a nested item opened in
# (state, trigger) has been reduced.
RESUME: dict[tuple[State, CharClass], State] = {
    (S.START, C.LBRACKET): S.DONE,
    (S.START, C.LBRACE): S.DONE,
    (S.DICT_COLON, C.LBRACKET): S.DICT_AFTER_ITEM,
    (S.DICT_COLON, C.LBRACE): S.DICT_AFTER_ITEM,
    (S.LIST_OPEN, C.LBRACKET): S.LIST_AFTER_ITEM,
    (S.LIST_OPEN, C.LBRACE): S.LIST_AFTER_ITEM,
    (S.LIST_BLANK, C.LBRACKET): S.LIST_AFTER_ITEM,
    (S.LIST_BLANK, C.LBRACE): S.LIST_AFTER_ITEM,
    (S.LIST_COMMA, C.LBRACKET): S.LIST_AFTER_ITEM,
    (S.LIST_COMMA, C.LBRACE): S.LIST_AFTER_ITEM,
}

_DESCRIBE = {
    C.EOL: "end of line",
    C.SPACE: "space",
    C.ORDINARY: "character",
}


class InlineAutomaton:
    """Parses the text of one inline list or dict.

    ``line`` and ``column`` locate the first character of *text* in the
    document, for error messages.
    """

    def __init__(
        self,
        text: str,
        line: int = 0,
        column: int = 0,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.text = text
        self.line = line
        self.column = column
        self.max_depth = max_depth
        self.stack: list[Frame] = []
        self.state = State.START
        self.marker = 0
        self.result: Value | None = None

    def parse(self) -> Value:
        for pos, ch in enumerate(self.text):
            self._step(pos, ch)
        self._step(len(self.text), EOL)
        if self.state is not State.DONE:
            raise self._error(len(self.text), "inline item not closed")
        return self.result

    # -- Machine ----------------------------------------------------------

    def _step(self, pos: int, ch: str) -> None:
        trigger = classify(ch)
        target, action = self._lookup(pos, ch, trigger)
        if action is Action.KEY:
            self.stack[-1].pending_key = self._fragment(pos)
        elif action is Action.VALUE:
            self.stack[-1].push(self._fragment(pos))
        if action is not Action.NONE:
            self.marker = pos + 1

        if target is State.ENTER_DICT or target is State.ENTER_LIST:
            self._enter(pos, target, RESUME[(self.state, trigger)])
        elif target is State.ACCEPT_DICT or target is State.ACCEPT_LIST:
            self._accept(pos)
        else:
            self.state = target

    def _lookup(self, pos: int, ch: str, trigger: CharClass) -> tuple[State, Action]:
        successor = TRANSITIONS.get(self.state, {}).get(trigger)
        if successor is None:
            what = _DESCRIBE.get(trigger, repr(ch))
            if self.state is State.START:
                raise self._error(pos, f"inline item must start with '[' or '{{', found {what}")
            if self.state is State.DONE:
                raise self._error(pos, f"unexpected {what} after end of inline item")
            raise self._error(pos, f"unexpected {what} in inline item")
        return successor

    def _fragment(self, pos: int) -> str:
        return self.text[self.marker:pos].strip()

    def _enter(self, pos: int, target: State, resume: State) -> None:
        if len(self.stack) >= self.max_depth:
            raise self._error(pos, "maximum nesting depth exceeded")
        is_dict = target is State.ENTER_DICT
        self.stack.append(Frame(keys=[] if is_dict else None, resume=resume))
        self.state = State.DICT_OPEN if is_dict else State.LIST_OPEN
        self.marker = pos + 1

    def _accept(self, pos: int) -> None:
        frame = self.stack.pop()
        try:
            value = frame.reduce()
        except FormatError as err:
            raise self._error(pos, err.message) from None
        logger.debug("inline reduce at %d: %r", pos, value)
        if self.stack:
            self.stack[-1].push(value)
        else:
            self.result = value
        self.state = frame.resume
        self.marker = pos + 1

    def _error(self, pos: int, message: str) -> FormatError:
        return FormatError(message, self.line, self.column + pos)


def parse_inline(text: str, line: int = 0, column: int = 0,
                 max_depth: int = DEFAULT_MAX_DEPTH) -> Value:
    """Parse a complete inline list or dict, e.g. ``"[a, {b: c}]"``."""
    return InlineAutomaton(text, line, column, max_depth).parse()
