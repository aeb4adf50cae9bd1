"""
Encoders: build JSON tree nodes from Python values.

Encoding never fails for supported values. Objects can be assembled one
member at a time with ``property`` or in one go with ``Json.object``; both
produce identical nodes for identical input.
"""

from __future__ import annotations

import uuid as _uuid
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timedelta
from typing import Any, TypeVar

from .node import JsonKind, JsonNode
from .types import Encoder, MapEntryEncoder

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")


def null() -> JsonNode:
    return JsonNode.null()


def string(value: str) -> JsonNode:
    return JsonNode(str(value))


def boolean(value: bool) -> JsonNode:
    return JsonNode(bool(value))


def char(value: str) -> JsonNode:
    return JsonNode(str(value))


def uuid(value: _uuid.UUID) -> JsonNode:
    return JsonNode(str(value))


def byte(value: int) -> JsonNode:
    return JsonNode(int(value))


def int_(value: int) -> JsonNode:
    return JsonNode(int(value))


def int64(value: int) -> JsonNode:
    return JsonNode(int(value))


def float_(value: float) -> JsonNode:
    return JsonNode(float(value))


def date_time(value: datetime) -> JsonNode:
    """ISO 8601 round-trip format."""
    return JsonNode(value.isoformat())


def date_time_offset(value: datetime) -> JsonNode:
    return JsonNode(value.isoformat())


def time_delta(value: timedelta) -> JsonNode:
    """Encodes a duration as its total number of seconds."""
    return JsonNode(value.total_seconds())


def date_time_exact(fmt: str) -> Encoder[datetime]:
    """Returns an encoder that formats datetimes with ``strftime(fmt)``."""
    return lambda value: JsonNode(value.strftime(fmt))


def date_time_offset_exact(fmt: str) -> Encoder[datetime]:
    return lambda value: JsonNode(value.strftime(fmt))


def _require_kind(node: JsonNode, kind: JsonKind) -> None:
    if node.kind is not kind:
        msg = f"Expected an '{kind}' node but got '{node.kind}'"
        raise TypeError(msg)


def property(name: str, value: JsonNode, target: JsonNode) -> JsonNode:  # noqa: A001
    """Returns a copy of object node ``target`` with ``name`` appended."""
    _require_kind(target, JsonKind.OBJECT)
    members = dict(target.value)
    members[name] = value.value
    return JsonNode(members)


def sequence(
    values: Iterable[T], encoder: Encoder[T], target: JsonNode | None = None
) -> JsonNode:
    """Encodes ``values`` and appends them to ``target`` (a new array by default)."""
    items: list[Any] = []
    if target is not None:
        _require_kind(target, JsonKind.ARRAY)
        items.extend(target.value)
    items.extend(encoder(value).value for value in values)
    return JsonNode(items)


def map_of(values: Mapping[K, V], encoder: MapEntryEncoder[K, V]) -> JsonNode:
    """Encodes each entry with ``encoder(key, value) -> (name, node)``."""
    members = {}
    for key, value in values.items():
        name, node = encoder(key, value)
        members[name] = node.value
    return JsonNode(members)


class Json:
    """Up-front constructors for object and array nodes."""

    @staticmethod
    def empty() -> JsonNode:
        return JsonNode({})

    @staticmethod
    def object(
        values: Iterable[tuple[str, JsonNode]] | Mapping[str, JsonNode],
    ) -> JsonNode:
        pairs = values.items() if isinstance(values, Mapping) else values
        return JsonNode({name: node.value for name, node in pairs})

    @staticmethod
    def sequence(values: Iterable[T], encoder: Encoder[T]) -> JsonNode:
        return sequence(values, encoder)


def nullable(encoder: Encoder[T]) -> Callable[[T | None], JsonNode]:
    """Wraps ``encoder`` so that ``None`` encodes as ``null``."""
    return lambda value: JsonNode.null() if value is None else encoder(value)
