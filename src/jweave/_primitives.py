"""
Kind-checked primitive decoding.

Every primitive decoder is a "shell" around an extractor: check the node kind,
run the extractor when it matches, and turn any exception raised along the
way into a ``DecodeError`` carrying the exception as its cause.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Final

from .errors import DecodeError, of_error, with_cause
from .node import JsonKind, JsonNode
from .result import Err, Ok, Result
from .types import Decoder

type Extractor = Decoder[Any]

ABSENT_KINDS: Final = frozenset({JsonKind.NULL, JsonKind.UNDEFINED})


@dataclass(frozen=True)
class Primitive:
    """
    Describes one primitive decoder.

    ``expected`` is the phrase used in kind-mismatch messages and
    ``target_type`` the type name recorded on errors.
    """

    kinds: frozenset[JsonKind]
    expected: str
    target_type: str
    extract: Extractor

    def mismatch(self, node: JsonNode) -> Err[DecodeError]:
        message = f"Expected {self.expected} but got '{node.kind}'"
        return Err(of_error(node, message, self.target_type))

    def failure(self, node: JsonNode, exc: Exception) -> Err[DecodeError]:
        return Err(with_cause(exc, of_error(node, "", self.target_type)))


def shell(primitive: Primitive) -> Decoder[Any]:
    """Builds the required decoder: the node must have a matching kind."""

    def decoder(node: JsonNode) -> Result[Any, DecodeError]:
        try:
            if node.kind in primitive.kinds:
                return primitive.extract(node)
            return primitive.mismatch(node)
        except Exception as e:
            return primitive.failure(node, e)

    return decoder


def optional_shell(primitive: Primitive) -> Decoder[Any]:
    """
    Builds the optional decoder.

    Null and undefined nodes decode to ``None``; any other kind that does not
    match still fails like the required decoder.
    """

    def decoder(node: JsonNode) -> Result[Any, DecodeError]:
        try:
            kind = node.kind
            if kind in primitive.kinds:
                return primitive.extract(node)
            if kind in ABSENT_KINDS:
                return Ok(None)
            return primitive.mismatch(node)
        except Exception as e:
            return primitive.failure(node, e)

    return decoder


def _from_try(
    getter: Callable[[JsonNode], Any], message: str, target_type: str
) -> Extractor:
    def extract(node: JsonNode) -> Result[Any, DecodeError]:
        value = getter(node)
        if value is None:
            return Err(of_error(node, message, target_type))
        return Ok(value)

    return extract


def _extract_char(node: JsonNode) -> Result[str, DecodeError]:
    value = node.get_string()
    if len(value) != 1:
        message = f"Expecting a char but got a string of size: {len(value)}"
        return Err(of_error(node, message, "char"))
    return Ok(value)


def _primitive(kind: JsonKind, target_type: str, extract: Extractor) -> Primitive:
    return Primitive(frozenset({kind}), f"'{kind}'", target_type, extract)


STRING: Final = _primitive(
    JsonKind.STRING, "str", lambda node: Ok(node.get_string())
)

BOOLEAN: Final = Primitive(
    frozenset({JsonKind.TRUE, JsonKind.FALSE}),
    "a boolean",
    "bool",
    lambda node: Ok(node.get_boolean()),
)

CHAR: Final = _primitive(JsonKind.STRING, "char", _extract_char)

UUID: Final = _primitive(
    JsonKind.STRING,
    "UUID",
    _from_try(
        JsonNode.try_get_uuid,
        "Unable to decode a guid from the current value",
        "UUID",
    ),
)

UNIT: Final = _primitive(JsonKind.NULL, "None", lambda _: Ok(None))

BYTE: Final = _primitive(
    JsonKind.NUMBER,
    "byte",
    _from_try(
        JsonNode.try_get_byte, "Unable to get byte from the current value", "byte"
    ),
)

INT: Final = _primitive(
    JsonKind.NUMBER,
    "int",
    _from_try(
        JsonNode.try_get_int32,
        "Unable to get an int from the current value",
        "int",
    ),
)

INT64: Final = _primitive(
    JsonKind.NUMBER,
    "int64",
    _from_try(
        JsonNode.try_get_int64,
        "Unable to get an int64 from the current value",
        "int64",
    ),
)

FLOAT: Final = _primitive(
    JsonKind.NUMBER,
    "float",
    _from_try(
        JsonNode.try_get_float,
        "Unable to get a float from the current value",
        "float",
    ),
)

DATE_TIME: Final = _primitive(
    JsonKind.STRING,
    "datetime",
    _from_try(
        JsonNode.try_get_datetime,
        "Unable to get a datetime from the current value",
        "datetime",
    ),
)

DATE_TIME_OFFSET: Final = _primitive(
    JsonKind.STRING,
    "datetime",
    _from_try(
        JsonNode.try_get_datetime_offset,
        "Unable to get a datetime with offset from the current value",
        "datetime",
    ),
)
