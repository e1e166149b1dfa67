"""JSON parser and emitter."""

import json
from typing import Any

from ..errors import ParseError, UnrepresentableError
from ..formats import Format
from ..shared.logger import get_logger
from ..value import INT64_DIGITS, INT64_MAX, INT64_MIN, Value

logger = get_logger(__name__)


def _parse_int(literal: str) -> Any:
    if len(literal.lstrip("-")) > INT64_DIGITS:
        return float(literal)
    number = int(literal)
    if INT64_MIN <= number <= INT64_MAX:
        return number
    return float(literal)


def _reject_constant(name: str) -> Any:
    raise ParseError(f"{name} is not valid JSON", Format.JSON)


def parse(text: str) -> Value:
    """
    Parse a JSON document.

    Numbers without a fraction or exponent that fit in 64 bits become
    integers, everything else becomes a float. Duplicate object keys keep
    the last value.

    Raises:
        ParseError: If the text is not valid JSON
    """
    try:
        data = json.loads(
            text,
            parse_int=_parse_int,
            parse_constant=_reject_constant,
        )
    except json.JSONDecodeError as e:
        raise ParseError(e.msg, Format.JSON, line=e.lineno, column=e.colno) from e

    logger.debug(f"Parsed JSON document with top-level {type(data).__name__}")
    return Value.from_python(data, Format.JSON)


def emit(value: Value, indent: int = 2, compact: bool = False) -> str:
    """
    Write a value tree as JSON.

    Args:
        value: Tree to write
        indent: Indentation for pretty output
        compact: Drop all optional whitespace

    Raises:
        UnrepresentableError: If the tree holds NaN or an infinity
    """
    options = {"separators": (",", ":")} if compact else {"indent": indent}

    try:
        text = json.dumps(value.to_python(), ensure_ascii=False, allow_nan=False, **options)
    except ValueError as e:
        raise UnrepresentableError("float", Format.JSON, "NaN and infinite values have no JSON form") from e

    return text + "\n"
