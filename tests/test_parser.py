"""Tests for the parser and the load functions."""

import io

import pytest

from nestext import load, load_file, loads
from nestext.errors import (
    ErrorCode,
    FormatError,
    IllegalTagError,
    NestedTextIOError,
    NoInputError,
    TopLevelIndentError,
    UsageError,
)


# ---------------------------------------------------------------------------
# Scalars and simple structures
# ---------------------------------------------------------------------------

def test_simple_dict():
    assert loads("a: Hello\nb: World\n") == {"a": "Hello", "b": "World"}

def test_simple_dict_with_comment():
    assert loads("\n# Example for a dict\na: Hello\nb: World\n") == {"a": "Hello", "b": "World"}

def test_multiline_string():
    assert loads("> Hello\n> World\n") == "Hello\nWorld"

def test_multiline_string_empty_lines():
    assert loads(">\n> a\n>\n") == "\na\n"

def test_simple_list():
    assert loads("- a\n- \n- c\n") == ["a", "", "c"]

def test_list_item_is_verbatim():
    assert loads("- [a, b]\n-   x: y  \n") == ["[a, b]", "  x: y  "]

def test_nested_list_with_multiline_item():
    assert loads("- Hello\n-\n  > World\n  > !\n") == ["Hello", "World\n!"]

def test_empty_multiline_list_item():
    assert loads("-\n- b\n") == ["", "b"]

def test_strange_key():
    assert loads("# strange key with :\n-:: x\n") == {"-:": "x"}

def test_empty_document():
    assert loads("") is None
    assert loads("# only a comment\n\n") is None


# ---------------------------------------------------------------------------
# Dicts
# ---------------------------------------------------------------------------

def test_multiline_dict_value():
    result = loads("a:\n  > Hello World!\nb: How are you?\n")
    assert result == {"a": "Hello World!", "b": "How are you?"}

def test_multiline_key():
    result = loads(": A\n: a\n  > Hello World!\nb: How are you?\n")
    assert result == {"A\na": "Hello World!", "b": "How are you?"}

def test_empty_multiline_key_entry():
    assert loads(":\n  >\n") == {"": ""}

def test_multiline_key_without_value():
    assert loads(": k\nb: 1\n") == {"k": "", "b": "1"}

def test_key_without_value():
    assert loads("a:\nb:\n  - x\n") == {"a": "", "b": ["x"]}

def test_dict_preserves_order():
    assert list(loads("z: 1\na: 2\nm: 3\n")) == ["z", "a", "m"]

def test_nested_dicts():
    text = (
        "president:\n"
        "   name: Katheryn McDaniel\n"
        "   phone:\n"
        "      cell: 1-210-555-5297\n"
        "   roles:\n"
        "      - board member\n"
        "vice president:\n"
        "   name: Margaret Hodge\n"
    )
    assert loads(text) == {
        "president": {
            "name": "Katheryn McDaniel",
            "phone": {"cell": "1-210-555-5297"},
            "roles": ["board member"],
        },
        "vice president": {"name": "Margaret Hodge"},
    }

def test_inline_under_key():
    assert loads("a:\n  {b: [1, 2]}\nc: [x]\n") == {"a": {"b": ["1", "2"]}, "c": "[x]"}

def test_inline_dict_in_list():
    assert loads("# inline dict in list\n-\n  {a: 0}\n") == [{"a": "0"}]

def test_inline_dict_with_inline_list():
    assert loads("{a: [x]}\n") == {"a": ["x"]}


# ---------------------------------------------------------------------------
# Inline items at top level
# ---------------------------------------------------------------------------

def test_inline_nesting():
    assert loads("{a: [1, 2], b: {c: 3}}") == {"a": ["1", "2"], "b": {"c": "3"}}

@pytest.mark.parametrize("text, expected", [
    ("[]", []),
    ("[ ]", [""]),
    ("[,]", ["", ""]),
    ("{}", {}),
])
def test_empty_inline(text, expected):
    assert loads(text) == expected

def test_inline_with_trailing_comma_in_dict():
    with pytest.raises(FormatError):
        loads("# inline dict with comma\n{a: x, }\n")

def test_inline_error_position():
    with pytest.raises(FormatError) as exc_info:
        loads("a:\n  [x y] z\n")
    assert exc_info.value.line == 2
    assert exc_info.value.column == 8


# ---------------------------------------------------------------------------
# Format errors
# ---------------------------------------------------------------------------

def test_top_level_indent():
    with pytest.raises(TopLevelIndentError) as exc_info:
        loads("   a: 1\n")
    assert exc_info.value.code == ErrorCode.FORMAT_TOPLEVEL_INDENT
    assert exc_info.value.line == 1

@pytest.mark.parametrize("text", ["- a\n-b\n", "a: 1\n>x\n", ":key\n"])
def test_illegal_tag(text):
    with pytest.raises(IllegalTagError):
        loads(text)

def test_unused_content_after_string():
    with pytest.raises(FormatError, match="unused content") as exc_info:
        loads("# string with error\n> Hello\n> World!\n: key\n")
    assert exc_info.value.line == 4

def test_list_then_dict_at_same_level():
    with pytest.raises(FormatError, match="unused content"):
        loads("- a\nb: c\n")

def test_invalid_indent_in_list():
    with pytest.raises(FormatError, match="invalid indent"):
        loads("# dict indent error\n- Hello\n  - World!\n")

def test_partial_dedent():
    with pytest.raises(FormatError, match="partial dedent"):
        loads("a:\n    b: 1\n  c: 2\n")

def test_value_and_nested_block():
    with pytest.raises(FormatError, match="partial dedent"):
        loads("a: 1\n  b: 2\n")

def test_dedent_between_levels_in_list():
    with pytest.raises(FormatError, match="invalid indent"):
        loads("-\n    - a\n  - b\n")

def test_duplicate_key():
    with pytest.raises(FormatError, match="duplicate key") as exc_info:
        loads("a: 1\nb: 2\na: 3\n")
    assert exc_info.value.line == 3

def test_unterminated_key():
    with pytest.raises(FormatError, match="not properly terminated"):
        loads("a: 1\nb\n")

def test_tab_indent():
    with pytest.raises(FormatError, match="tab"):
        loads("a:\n\tb: 1\n")

def test_non_ascii_whitespace_line_is_content():
    with pytest.raises(FormatError, match=r"U\+00A0") as exc_info:
        loads("a: 1\n\u00a0\n")
    assert exc_info.value.line == 2

def test_error_str_has_position():
    with pytest.raises(FormatError) as exc_info:
        loads("a: 1\n  b: 2\n")
    assert str(exc_info.value).startswith("[2,2] ")


# ---------------------------------------------------------------------------
# Depth limit
# ---------------------------------------------------------------------------

def _nested_lists(depth):
    return "".join("  " * i + "-\n" for i in range(depth)) + "  " * depth + "> x\n"

def test_depth_within_limit():
    value = loads(_nested_lists(5), max_depth=5)
    for _ in range(5):
        value = value[0]
    assert value == "x"

def test_depth_exceeded():
    with pytest.raises(FormatError, match="depth"):
        loads(_nested_lists(5), max_depth=4)

def test_inline_counts_towards_depth():
    with pytest.raises(FormatError, match="depth"):
        loads("-\n  [[a]]\n", max_depth=2)

def test_invalid_max_depth():
    with pytest.raises(UsageError):
        loads("a: 1", max_depth=0)

def test_max_depth_above_recursion_safe_limit():
    with pytest.raises(UsageError, match="between 1 and 256"):
        loads(_nested_lists(2000), max_depth=5000)

def test_deep_document_with_default_limit():
    with pytest.raises(FormatError, match="depth"):
        loads(_nested_lists(300))


# ---------------------------------------------------------------------------
# Top-level shaping
# ---------------------------------------------------------------------------

def test_top_level_list_wraps_string():
    assert loads("> hello\n", top_level="list") == ["hello"]

def test_top_level_list_keeps_list():
    assert loads("- a\n", top_level="list") == ["a"]

def test_top_level_dict_default_key():
    assert loads("- a\n", top_level="dict") == {"nestedtext": ["a"]}

def test_top_level_dict_custom_key():
    assert loads("> hello\n", top_level="dict.config") == {"config": "hello"}

def test_top_level_dict_keeps_dict():
    assert loads("a: 1\n", top_level="dict.config") == {"a": "1"}

def test_top_level_empty_document():
    assert loads("", top_level="dict.config") == {}
    assert loads("", top_level="list") == []

@pytest.mark.parametrize("mode", ["dict-config", "dict.", "tuple", ""])
def test_top_level_unknown_mode(mode):
    with pytest.raises(UsageError) as exc_info:
        loads("a: 1", top_level=mode)
    assert exc_info.value.code == ErrorCode.USAGE


# ---------------------------------------------------------------------------
# Streams and files
# ---------------------------------------------------------------------------

def test_load_no_input():
    with pytest.raises(NoInputError):
        load(None)

def test_load_binary_stream():
    assert load(io.BytesIO("name: Jürgen\r\n".encode("utf-8"))) == {"name": "Jürgen"}

def test_text_bom_is_dropped():
    assert loads("\ufeffa: 1\n") == {"a": "1"}

def test_loads_bytes():
    assert loads(b"- a\r- b\r") == ["a", "b"]

def test_load_file(tmp_path):
    path = tmp_path / "doc.nt"
    path.write_bytes(b"a: 1\n")
    assert load_file(path) == {"a": "1"}

def test_load_file_missing(tmp_path):
    with pytest.raises(NestedTextIOError) as exc_info:
        load_file(tmp_path / "missing.nt")
    assert isinstance(exc_info.value.__cause__, OSError)
