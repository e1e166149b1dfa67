"""TOML parser and emitter."""

import json
import re
from typing import Any

import toml
from toml.decoder import InlineTableDict

from ..errors import ParseError, UnrepresentableError
from ..formats import Format
from ..shared.logger import get_logger
from ..value import Kind, Value

logger = get_logger(__name__)

BARE_KEY = re.compile(r"^[A-Za-z0-9_-]+$")


class InlineTable(dict, InlineTableDict):
    """Table the encoder writes as ``key = { ... }`` instead of a section."""


class ScribeTomlEncoder(toml.TomlEncoder):
    """
    TomlEncoder writing strings as JSON-style basic strings and tables
    nested in plain arrays as inline tables.
    """

    def __init__(self):
        super().__init__(preserve=True)
        self.dump_funcs[str] = _dump_string

    def dump_value(self, v):
        if isinstance(v, dict):
            entries = [f"{format_key(key)} = {self.dump_value(item)}" for key, item in v.items()]
            return "{ " + ", ".join(entries) + " }" if entries else "{}"
        return super().dump_value(v)


def _dump_string(text: str) -> str:
    # JSON string escapes are a subset of TOML basic string escapes
    return json.dumps(text, ensure_ascii=False).replace("\x7f", "\\u007f")


def format_key(key: str) -> str:
    if BARE_KEY.match(key):
        return key
    return _dump_string(key)


def parse(text: str) -> Value:
    """
    Parse a TOML document into a mapping.

    Raises:
        ParseError: If the text is not valid TOML
        UnsupportedFeature: If the document holds dates or times
    """
    try:
        data = toml.loads(text)
    except toml.TomlDecodeError as e:
        raise ParseError(
            getattr(e, "msg", str(e)),
            Format.TOML,
            line=getattr(e, "lineno", None),
            column=getattr(e, "colno", None),
        ) from e

    if not isinstance(data, dict):
        raise ParseError("document root is not a table", Format.TOML)

    logger.debug(f"Parsed TOML document with {len(data)} top-level key(s)")
    return Value.from_python(data, Format.TOML)


def emit(value: Value, indent: int = 2, compact: bool = False) -> str:
    """
    Write a value tree as TOML.

    Plain keys of each table come first, then its arrays of tables, then
    its sub-tables.

    Raises:
        UnrepresentableError: If the root is not a mapping, or the tree
            holds a null or an array mixing value types
    """
    if value.kind is not Kind.MAPPING:
        raise UnrepresentableError(
            value.type_name,
            Format.TOML,
            "the document root must be a table",
        )
    return toml.dumps(_prepare(value, "", in_array=False), encoder=ScribeTomlEncoder())


def _prepare(value: Value, path: str, in_array: bool) -> Any:
    """
    Convert a tree to the objects ``toml.dumps`` expects.

    Empty tables below an array become inline tables, since the encoder
    drops empty sections there.
    """
    kind = value.kind

    if kind is Kind.NULL:
        raise UnrepresentableError("null", Format.TOML, f"TOML has no null value (at {path or 'root'})")

    if kind is Kind.SEQUENCE:
        kinds = {item.kind for item in value}
        if len(kinds) > 1:
            names = ", ".join(sorted(k.value for k in kinds))
            raise UnrepresentableError("sequence", Format.TOML, f"array mixes {names} values (at {path})")
        return [_prepare(item, f"{path}[{index}]", in_array=True) for index, item in enumerate(value)]

    if kind is Kind.MAPPING:
        table = InlineTable() if in_array and len(value) == 0 else {}
        for key, item in value:
            child = f"{path}.{format_key(key)}" if path else format_key(key)
            table[key] = _prepare(item, child, in_array)
        return table

    return value.data
