"""YAML parser and emitter.

Plain scalars are typed with the YAML 1.2 core schema: only ``true``/``false``
are booleans, ``null``/``~``/empty is null, and numbers follow the core
integer and float patterns. Everything else is a string, so ``yes``, ``off``
and ``2001-12-14`` survive a trip through other formats unchanged.
"""

import math
import re
from typing import Any, List

import yaml
from yaml.constructor import ConstructorError

from ..errors import ParseError, UnsupportedFeature
from ..formats import Format
from ..shared.logger import get_logger
from ..value import INT64_DIGITS, INT64_MAX, INT64_MIN, Value

logger = get_logger(__name__)

BOOL_TAG = "tag:yaml.org,2002:bool"
INT_TAG = "tag:yaml.org,2002:int"
FLOAT_TAG = "tag:yaml.org,2002:float"
NULL_TAG = "tag:yaml.org,2002:null"
MERGE_TAG = "tag:yaml.org,2002:merge"

CORE_RESOLVERS = [
    (BOOL_TAG, re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"), list("tTfF")),
    (INT_TAG, re.compile(r"^(?:[-+]?[0-9]+|0o[0-7]+|0x[0-9a-fA-F]+)$"), list("-+0123456789")),
    (
        FLOAT_TAG,
        re.compile(
            r"""^(?:[-+]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]*)?)(?:[eE][-+]?[0-9]+)?
            |[-+]?\.(?:inf|Inf|INF)
            |\.(?:nan|NaN|NAN))$""",
            re.X,
        ),
        list("-+0123456789."),
    ),
    (NULL_TAG, re.compile(r"^(?:~|null|Null|NULL|)$"), ["~", "n", "N", ""]),
]


class ScribeLoader(yaml.SafeLoader):
    """SafeLoader with core-schema implicit typing."""

    yaml_implicit_resolvers: dict = {}


ScribeLoader.add_implicit_resolver(MERGE_TAG, re.compile(r"^(?:<<)$"), ["<"])
for _tag, _pattern, _first in CORE_RESOLVERS:
    ScribeLoader.add_implicit_resolver(_tag, _pattern, _first)


def _construct_int(loader: ScribeLoader, node: yaml.Node) -> Any:
    text = loader.construct_scalar(node).replace("_", "")
    digits = text
    sign = 1
    if digits and digits[0] in "+-":
        sign = -1 if digits[0] == "-" else 1
        digits = digits[1:]

    try:
        if digits.startswith(("0o", "0O")):
            number = int(digits[2:], 8)
        elif digits.startswith(("0x", "0X")):
            number = int(digits[2:], 16)
        elif digits.startswith(("0b", "0B")):
            number = int(digits[2:], 2)
        elif len(digits.lstrip("0")) > INT64_DIGITS:
            return sign * float(digits)
        else:
            number = int(digits, 10)
    except ValueError:
        raise ConstructorError(None, None, f"invalid integer {text!r}", node.start_mark)

    number *= sign
    if INT64_MIN <= number <= INT64_MAX:
        return number

    try:
        return float(number)
    except OverflowError:
        return math.copysign(math.inf, number)


def _construct_float(loader: ScribeLoader, node: yaml.Node) -> Any:
    text = loader.construct_scalar(node).replace("_", "")
    lowered = text.lower()

    if lowered in (".inf", "+.inf"):
        return math.inf
    if lowered == "-.inf":
        return -math.inf
    if lowered == ".nan":
        return math.nan

    try:
        return float(text)
    except ValueError:
        raise ConstructorError(None, None, f"invalid float {text!r}", node.start_mark)


ScribeLoader.add_constructor(INT_TAG, _construct_int)
ScribeLoader.add_constructor(FLOAT_TAG, _construct_float)


class ScribeDumper(yaml.SafeDumper):
    """
    SafeDumper that quotes strings a YAML 1.1 or 1.2 reader would retype.

    The inherited 1.1 resolvers cover ``yes``/``on``/dates, the core
    resolvers added below cover forms like ``1e5`` and ``0o17``.
    """

    def ignore_aliases(self, data: Any) -> bool:
        return True


for _tag, _pattern, _first in CORE_RESOLVERS:
    ScribeDumper.add_implicit_resolver(_tag, _pattern, _first)


def _location(error: yaml.YAMLError) -> dict:
    mark = getattr(error, "problem_mark", None) or getattr(error, "context_mark", None)
    if mark is None:
        return {}
    return {"line": mark.line + 1, "column": mark.column + 1}


def _message(error: yaml.YAMLError) -> str:
    problem = getattr(error, "problem", None)
    context = getattr(error, "context", None)
    if problem and context:
        return f"{context}, {problem}"
    return problem or context or str(error)


def parse(text: str) -> Value:
    """
    Parse a single YAML document.

    Anchors and aliases are expanded; an empty stream is null.

    Raises:
        ParseError: If the text is not valid YAML
        UnsupportedFeature: If the stream holds more than one document
    """
    documents: List[Any] = []

    try:
        for document in yaml.load_all(text, Loader=ScribeLoader):
            documents.append(document)
            if len(documents) > 1:
                raise UnsupportedFeature("multi-document streams", Format.YAML)
    except yaml.YAMLError as e:
        raise ParseError(_message(e), Format.YAML, **_location(e)) from e

    logger.debug(f"Parsed {len(documents)} YAML document(s)")

    if not documents:
        return Value.null()
    return Value.from_python(documents[0], Format.YAML)


def emit(value: Value, indent: int = 2, compact: bool = False) -> str:
    """
    Write a value tree as block-style YAML.

    Strings are quoted only when a plain scalar would read back as another
    type.
    """
    return yaml.dump(
        value.to_python(),
        Dumper=ScribeDumper,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
        indent=indent,
    )
