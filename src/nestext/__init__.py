"""nestext — reader and writer for NestedText, a human friendly data format."""

from .config import DecodeOptions, EncodeOptions, TopLevelShape
from .encoder import Encoder, dump, dump_file, dumps
from .errors import (
    ErrorCode,
    FormatError,
    IllegalTagError,
    NestedTextError,
    NestedTextIOError,
    NoInputError,
    SchemaError,
    TopLevelIndentError,
    UsageError,
)
from .inline import InlineAutomaton, parse_inline
from .linebuf import LineSource
from .model import Token, TokenKind, Value
from .parser import Parser, load, load_file, loads
from .scanner import Scanner

__version__ = "0.1.0"

__all__ = [
    "load",
    "loads",
    "load_file",
    "dump",
    "dumps",
    "dump_file",
    "parse_inline",
    "DecodeOptions",
    "EncodeOptions",
    "TopLevelShape",
    "Encoder",
    "InlineAutomaton",
    "LineSource",
    "Parser",
    "Scanner",
    "Token",
    "TokenKind",
    "Value",
    "ErrorCode",
    "NestedTextError",
    "NestedTextIOError",
    "UsageError",
    "SchemaError",
    "FormatError",
    "NoInputError",
    "TopLevelIndentError",
    "IllegalTagError",
]
