"""
JSON tree view over already-parsed documents.

The external parser hands back plain Python objects (dict, list, str, int,
float, Decimal, bool, None). ``JsonNode`` wraps one of those values and exposes
the small surface decoders rely on: the node kind, its JSON text, typed
extraction, property lookup, enumeration and deep cloning.
"""

from __future__ import annotations

import copy
import math
import uuid
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Final

from ._writer import DIAGNOSTIC, WriteOptions, write_value

BYTE_MAX: Final = 255
INT32_MIN: Final = -(2**31)
INT32_MAX: Final = 2**31 - 1
INT64_MIN: Final = -(2**63)
INT64_MAX: Final = 2**63 - 1


class _Undefined:
    """Marker for a node that holds no value at all."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __copy__(self) -> _Undefined:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Undefined:
        return self

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Final = _Undefined()


class JsonKind(Enum):
    """
    JSON value categories.

    Booleans carry two kinds, one per literal, so a decoder that accepts
    booleans must match both.
    """

    UNDEFINED = "Undefined"
    OBJECT = "Object"
    ARRAY = "Array"
    STRING = "String"
    NUMBER = "Number"
    TRUE = "True"
    FALSE = "False"
    NULL = "Null"

    def __str__(self) -> str:
        return self.value


def kind_of(value: Any) -> JsonKind:  # noqa: PLR0911
    """Classifies a parsed Python value into its JSON kind."""
    if value is UNDEFINED:
        return JsonKind.UNDEFINED
    elif value is None:
        return JsonKind.NULL
    elif value is True:
        return JsonKind.TRUE
    elif value is False:
        return JsonKind.FALSE
    elif isinstance(value, str):
        return JsonKind.STRING
    elif isinstance(value, int | float | Decimal):
        return JsonKind.NUMBER
    elif isinstance(value, dict):
        return JsonKind.OBJECT
    elif isinstance(value, list | tuple):
        return JsonKind.ARRAY
    else:
        msg = f"Object of type {type(value).__name__} is not a JSON value"
        raise TypeError(msg)


@dataclass(frozen=True, eq=False)
class JsonNode:
    """
    Immutable view of a single JSON value.

    Child nodes returned by lookup and enumeration share the parent's
    underlying objects; ``clone`` produces a detached deep copy for anything
    that must outlive the document it came from.
    """

    value: Any = UNDEFINED

    def __post_init__(self) -> None:
        # Fail on construction rather than on first use
        kind_of(self.value)

    @classmethod
    def undefined(cls) -> JsonNode:
        return cls(UNDEFINED)

    @classmethod
    def null(cls) -> JsonNode:
        return cls(None)

    @property
    def kind(self) -> JsonKind:
        return kind_of(self.value)

    @property
    def raw_text(self) -> str:
        """
        Compact JSON text of this node; empty for an undefined node.

        Non-finite numbers render as ``NaN`` / ``Infinity`` so that errors can
        always describe the value; ``to_json_string`` still rejects them.
        """
        if self.value is UNDEFINED:
            return ""
        return write_value(self.value, DIAGNOSTIC)

    def to_json_string(self, options: WriteOptions | None = None) -> str:
        """Renders the node as JSON text with the given formatting."""
        if self.value is UNDEFINED:
            return ""
        return write_value(self.value, options or WriteOptions())

    def _require(self, *kinds: JsonKind) -> None:
        kind = self.kind
        if kind not in kinds:
            expected = "' or '".join(str(k) for k in kinds)
            msg = (
                f"The requested operation requires an element of type "
                f"'{expected}', but the target element has type '{kind}'"
            )
            raise TypeError(msg)

    def get_string(self) -> str:
        self._require(JsonKind.STRING)
        return str(self.value)

    def get_boolean(self) -> bool:
        self._require(JsonKind.TRUE, JsonKind.FALSE)
        return bool(self.value)

    def _try_get_integer(self, low: int, high: int) -> int | None:
        self._require(JsonKind.NUMBER)
        if not isinstance(self.value, int):
            return None
        if low <= self.value <= high:
            return int(self.value)
        return None

    def try_get_byte(self) -> int | None:
        return self._try_get_integer(0, BYTE_MAX)

    def try_get_int32(self) -> int | None:
        return self._try_get_integer(INT32_MIN, INT32_MAX)

    def try_get_int64(self) -> int | None:
        return self._try_get_integer(INT64_MIN, INT64_MAX)

    def try_get_float(self) -> float | None:
        self._require(JsonKind.NUMBER)
        try:
            result = float(self.value)
        except OverflowError:
            return None
        return result if math.isfinite(result) else None

    def try_get_uuid(self) -> uuid.UUID | None:
        self._require(JsonKind.STRING)
        try:
            return uuid.UUID(self.value)
        except ValueError:
            return None

    def try_get_datetime(self) -> datetime | None:
        """Parses an ISO 8601 string; offsets are kept when present."""
        self._require(JsonKind.STRING)
        try:
            return datetime.fromisoformat(self.value)
        except ValueError:
            return None

    def try_get_datetime_offset(self) -> datetime | None:
        """Parses an ISO 8601 string that must carry a UTC offset."""
        result = self.try_get_datetime()
        if result is None or result.utcoffset() is None:
            return None
        return result

    def try_get_property(self, name: str) -> JsonNode | None:
        self._require(JsonKind.OBJECT)
        found = self.value.get(name, UNDEFINED)
        if found is UNDEFINED:
            return None
        return JsonNode(found)

    def enumerate_object(self) -> Iterator[tuple[str, JsonNode]]:
        """Yields ``(name, node)`` pairs in document order."""
        self._require(JsonKind.OBJECT)
        for name, item in self.value.items():
            yield name, JsonNode(item)

    def enumerate_array(self) -> Iterator[JsonNode]:
        self._require(JsonKind.ARRAY)
        for item in self.value:
            yield JsonNode(item)

    @property
    def array_length(self) -> int:
        self._require(JsonKind.ARRAY)
        return len(self.value)

    def clone(self) -> JsonNode:
        """Returns a deep copy that no longer shares the parsed document."""
        return JsonNode(copy.deepcopy(self.value))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JsonNode):
            return NotImplemented
        return self.kind == other.kind and self.raw_text == other.raw_text

    def __hash__(self) -> int:
        return hash((self.kind, self.raw_text))

    def __repr__(self) -> str:
        return f"JsonNode({self.kind}, {self.raw_text!r})"
