"""Encoder: writes str/list/dict trees as NestedText.

Dict entries are sorted by key, so output is deterministic regardless of the
mapping's iteration order.  Short lists of simple strings are written as a
single inline ``[a, b, c]`` line.
"""

from __future__ import annotations

import io
import logging
import os
import re
from typing import IO, Iterator

from .config import DEFAULT_INDENT, DEFAULT_INLINE_LIMIT, EncodeOptions
from .errors import NestedTextIOError, SchemaError
from .model import Value

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")

_MAX_INLINE_ITEMS = 5
_INLINE_FORBIDDEN = frozenset("[]{},:\r\n")
_KEY_TAG_STARTS = ("-", ">", ":", "#", "[", "{")


def _split_lines(text: str) -> list[str]:
    return _LINE_BREAK_RE.split(text)


def _is_single_line(text: str) -> bool:
    return _LINE_BREAK_RE.search(text) is None


def _is_inline_safe(item) -> bool:
    return (
        isinstance(item, str)
        and item != ""
        and item == item.strip()
        and not _INLINE_FORBIDDEN.intersection(item)
    )


def _is_simple_key(key: str) -> bool:
    """Keys that can be written as ``key: value`` on one line."""
    return (
        key != ""
        and key == key.strip()
        and _is_single_line(key)
        and ": " not in key
        and not key.startswith(_KEY_TAG_STARTS)
    )


class Encoder:
    def __init__(self, options: EncodeOptions | None = None) -> None:
        self.options = options or EncodeOptions()

    def lines(self, value: Value) -> Iterator[str]:
        """Yield the output lines for *value*, without line terminators."""
        yield from self._encode(value, 0)

    def _pad(self, depth: int) -> str:
        return " " * (depth * self.options.indent_by)

    def _encode(self, value: Value, depth: int) -> Iterator[str]:
        if isinstance(value, str):
            yield from self._encode_string(value, depth)
        elif isinstance(value, (list, tuple)):
            yield from self._encode_list(value, depth)
        elif isinstance(value, dict):
            yield from self._encode_dict(value, depth)
        else:
            raise SchemaError(f"unable to encode type {type(value).__name__}")

    def _encode_string(self, text: str, depth: int) -> Iterator[str]:
        pad = self._pad(depth)
        for line in _split_lines(text):
            yield f"{pad}> {line}" if line else f"{pad}>"

    def _encode_list(self, items, depth: int) -> Iterator[str]:
        pad = self._pad(depth)
        if not items:
            yield f"{pad}[]"
            return
        inline = self._inline_list(items)
        if inline is not None:
            yield pad + inline
            return
        for item in items:
            if isinstance(item, str) and _is_single_line(item):
                yield f"{pad}- {item}" if item else f"{pad}-"
            else:
                yield f"{pad}-"
                yield from self._encode(item, depth + 1)

    def _inline_list(self, items) -> str | None:
        if len(items) > _MAX_INLINE_ITEMS:
            return None
        if not all(_is_inline_safe(item) for item in items):
            return None
        line = "[" + ", ".join(items) + "]"
        if len(line.encode("utf-8")) > self.options.inline_limit:
            return None
        return line

    def _encode_dict(self, mapping: dict, depth: int) -> Iterator[str]:
        pad = self._pad(depth)
        if not mapping:
            yield f"{pad}{{}}"
            return
        for key in mapping:
            if not isinstance(key, str):
                raise SchemaError(
                    f"dict key {key!r} is not a string; only string keys can be encoded"
                )
        for key in sorted(mapping):
            value = mapping[key]
            if _is_simple_key(key):
                if isinstance(value, str) and _is_single_line(value):
                    yield f"{pad}{key}: {value}" if value else f"{pad}{key}:"
                    continue
                yield f"{pad}{key}:"
            else:
                # Key lines are always followed by a value block
                for part in _split_lines(key):
                    yield f"{pad}: {part}" if part else f"{pad}:"
            yield from self._encode(value, depth + 1)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def dump(
    value: Value,
    stream: IO,
    *,
    indent_by: int = DEFAULT_INDENT,
    inline_limit: int = DEFAULT_INLINE_LIMIT,
) -> int:
    """Write *value* to a text or binary stream.

    Returns the number of bytes written (UTF-8).  On error the stream may hold
    partial output.
    """
    encoder = Encoder(EncodeOptions(indent_by=indent_by, inline_limit=inline_limit))
    binary = isinstance(stream, (io.RawIOBase, io.BufferedIOBase))
    count = 0
    for line in encoder.lines(value):
        data = line + "\n"
        encoded = data.encode("utf-8")
        try:
            stream.write(encoded if binary else data)
        except OSError as exc:
            raise NestedTextIOError("write error during encoding") from exc
        count += len(encoded)
    logger.debug("encoded %d bytes", count)
    return count


def dumps(
    value: Value,
    *,
    indent_by: int = DEFAULT_INDENT,
    inline_limit: int = DEFAULT_INLINE_LIMIT,
) -> str:
    """Return *value* encoded as a NestedText document."""
    encoder = Encoder(EncodeOptions(indent_by=indent_by, inline_limit=inline_limit))
    return "".join(line + "\n" for line in encoder.lines(value))


def dump_file(value: Value, path: str | os.PathLike, **kwargs) -> int:
    """Encode *value* into the file at *path*.

    The document is encoded completely before the file is opened, so schema
    errors never leave a truncated file behind.
    """
    text = dumps(value, **kwargs)
    try:
        with open(path, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(text)
    except OSError as exc:
        raise NestedTextIOError(f"cannot write {os.fspath(path)!r}") from exc
    return len(text.encode("utf-8"))
