"""Format-neutral value tree shared by every adapter."""

import datetime
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Tuple

from .errors import UnsupportedFeature

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
INT64_DIGITS = len(str(INT64_MAX))


class Kind(str, Enum):
    """Variants of a Value."""

    NULL = "null"
    BOOL = "bool"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


CONTAINER_KINDS = (Kind.SEQUENCE, Kind.MAPPING)


@dataclass(frozen=True)
class Value:
    """
    One node of a document tree.

    ``data`` holds the payload for the variant: ``None`` for null, a Python
    scalar for bool/integer/float/string, a tuple of Values for a sequence
    and a tuple of ``(key, Value)`` pairs for a mapping. Mapping keys are
    unique and keep insertion order.

    Build instances through the classmethod constructors rather than the
    dataclass initializer so the invariants are checked.
    """

    kind: Kind
    data: Any = None

    @classmethod
    def null(cls) -> "Value":
        return cls(Kind.NULL)

    @classmethod
    def boolean(cls, flag: bool) -> "Value":
        return cls(Kind.BOOL, bool(flag))

    @classmethod
    def integer(cls, number: int) -> "Value":
        if not INT64_MIN <= number <= INT64_MAX:
            raise ValueError(f"integer {number} does not fit in 64 bits")
        return cls(Kind.INTEGER, int(number))

    @classmethod
    def floating(cls, number: float) -> "Value":
        return cls(Kind.FLOAT, float(number))

    @classmethod
    def string(cls, text: str) -> "Value":
        return cls(Kind.STRING, str(text))

    @classmethod
    def sequence(cls, items: Iterable["Value"]) -> "Value":
        return cls(Kind.SEQUENCE, tuple(items))

    @classmethod
    def mapping(cls, pairs: Iterable[Tuple[str, "Value"]]) -> "Value":
        """
        Build a mapping from key/value pairs.

        A repeated key keeps the position of its first occurrence and the
        value of its last one.
        """
        entries: Dict[str, Value] = {}
        for key, value in pairs:
            if not isinstance(key, str):
                raise TypeError(f"mapping keys must be strings, got {type(key).__name__}")
            entries[key] = value
        return cls(Kind.MAPPING, tuple(entries.items()))

    @property
    def type_name(self) -> str:
        return self.kind.value

    def is_container(self) -> bool:
        """True for sequences and mappings."""
        return self.kind in CONTAINER_KINDS

    def keys(self) -> List[str]:
        self._require(Kind.MAPPING)
        return [key for key, _ in self.data]

    def get(self, key: str, default: Optional["Value"] = None) -> Optional["Value"]:
        self._require(Kind.MAPPING)
        for name, value in self.data:
            if name == key:
                return value
        return default

    def __len__(self) -> int:
        if not self.is_container():
            raise TypeError(f"{self.type_name} value has no length")
        return len(self.data)

    def __iter__(self) -> Iterator[Any]:
        """Iterate items of a sequence or ``(key, value)`` pairs of a mapping."""
        if not self.is_container():
            raise TypeError(f"{self.type_name} value is not iterable")
        return iter(self.data)

    def _require(self, kind: Kind) -> None:
        if self.kind is not kind:
            raise TypeError(f"expected a {kind.value} value, got {self.type_name}")

    def to_python(self) -> Any:
        """Convert to plain dicts, lists and scalars."""
        if self.kind is Kind.SEQUENCE:
            return [item.to_python() for item in self.data]
        if self.kind is Kind.MAPPING:
            return {key: value.to_python() for key, value in self.data}
        return self.data

    @classmethod
    def from_python(cls, obj: Any, source: Any = None) -> "Value":
        """
        Build a tree from objects produced by a parsing library.

        Args:
            obj: Parsed object (dicts, lists and scalars)
            source: Format the object came from, used in error messages

        Raises:
            UnsupportedFeature: If ``obj`` holds something the tree cannot
                represent (dates, binary data, sets, recursive structures)
        """
        return _Builder(source).build(obj)


class _Builder:
    def __init__(self, source: Any):
        self.source = source
        self._active: Set[int] = set()

    def build(self, obj: Any) -> Value:
        if obj is None:
            return Value.null()
        if isinstance(obj, bool):
            return Value.boolean(obj)
        if isinstance(obj, int):
            if INT64_MIN <= obj <= INT64_MAX:
                return Value.integer(obj)
            return Value.floating(_int_to_float(obj))
        if isinstance(obj, float):
            return Value.floating(obj)
        if isinstance(obj, str):
            return Value.string(obj)
        if isinstance(obj, (datetime.date, datetime.time)):
            raise UnsupportedFeature("date and time values", self.source)
        if isinstance(obj, dict):
            return self._container(obj, self._mapping)
        if isinstance(obj, list):
            return self._container(obj, self._sequence)
        raise UnsupportedFeature(f"{type(obj).__name__} values", self.source)

    def _container(self, obj: Any, build: Any) -> Value:
        marker = id(obj)
        if marker in self._active:
            raise UnsupportedFeature("recursive structures", self.source)

        self._active.add(marker)
        try:
            return build(obj)
        finally:
            self._active.discard(marker)

    def _sequence(self, items: list) -> Value:
        return Value.sequence(self.build(item) for item in items)

    def _mapping(self, entries: dict) -> Value:
        return Value.mapping((self._key(key), self.build(value)) for key, value in entries.items())

    def _key(self, key: Any) -> str:
        if isinstance(key, str):
            return key
        if key is None:
            return "null"
        if isinstance(key, bool):
            return "true" if key else "false"
        if isinstance(key, int):
            return str(key)
        if isinstance(key, float):
            return repr(key)
        raise UnsupportedFeature(f"{type(key).__name__} mapping keys", self.source)


def _int_to_float(number: int) -> float:
    try:
        return float(number)
    except OverflowError:
        return math.copysign(math.inf, number)
