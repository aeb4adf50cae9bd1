"""
Optional decoders.

``null`` and missing values decode to ``None``; a present value of the wrong
kind still fails. ``Property`` mirrors ``jweave.required.Property`` with
absent members forgiven.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Final

from . import _primitives, decode
from .decode import ElementDecoder, kind_mismatch, tag_property
from .errors import DecodeError
from .node import JsonKind, JsonNode
from .result import Err, Ok, Result
from .types import Decoder

string: Final = _primitives.optional_shell(_primitives.STRING)
boolean: Final = _primitives.optional_shell(_primitives.BOOLEAN)
char: Final = _primitives.optional_shell(_primitives.CHAR)
uuid: Final = _primitives.optional_shell(_primitives.UUID)
unit: Final = _primitives.optional_shell(_primitives.UNIT)
byte: Final = _primitives.optional_shell(_primitives.BYTE)
int_: Final = _primitives.optional_shell(_primitives.INT)
int64: Final = _primitives.optional_shell(_primitives.INT64)
float_: Final = _primitives.optional_shell(_primitives.FLOAT)
date_time: Final = _primitives.optional_shell(_primitives.DATE_TIME)
date_time_offset: Final = _primitives.optional_shell(_primitives.DATE_TIME_OFFSET)


def _member(
    name: str,
    decoder: Callable[[JsonNode], Result[Any, Any]],
    *,
    collect: bool,
    null_is_absent: bool,
) -> Callable[[JsonNode], Result[Any, Any]]:
    def decode_property(node: JsonNode) -> Result[Any, Any]:
        kind = node.kind
        if kind in _primitives.ABSENT_KINDS:
            return Ok(None)
        if kind is not JsonKind.OBJECT:
            error = kind_mismatch(node, JsonKind.OBJECT)
            return Err([error]) if collect else Err(error)
        member = node.try_get_property(name)
        if member is None:
            return Ok(None)
        if null_is_absent and member.kind in _primitives.ABSENT_KINDS:
            return Ok(None)
        return decoder(member).map_error(lambda error: tag_property(name, error))

    return decode_property


class Property:
    """
    Decoders for object members that may be missing.

    ``get`` hands a present ``null`` to the inner decoder, so the inner
    decoder decides whether null is acceptable. The container forms treat a
    present ``null`` like a missing member.
    """

    @staticmethod
    def get(name: str, decoder: Decoder[Any]) -> Decoder[Any]:
        return _member(name, decoder, collect=False, null_is_absent=False)

    @staticmethod
    def get_col(
        name: str, decoder: Callable[[JsonNode], Result[Any, Any]]
    ) -> Callable[[JsonNode], Result[Any, list[DecodeError]]]:
        return _member(name, decoder, collect=True, null_is_absent=False)

    @staticmethod
    def sequence(
        name: str, decoder: Decoder[Any]
    ) -> Decoder[tuple[Any, ...] | None]:
        return _member(
            name, decode.sequence(decoder), collect=False, null_is_absent=True
        )

    @staticmethod
    def sequence_col(
        name: str, decoder: ElementDecoder
    ) -> Callable[[JsonNode], Result[tuple[Any, ...] | None, list[DecodeError]]]:
        return _member(
            name, decode.sequence_col(decoder), collect=True, null_is_absent=True
        )

    @staticmethod
    def array(name: str, decoder: Decoder[Any]) -> Decoder[list[Any] | None]:
        return _member(name, decode.array(decoder), collect=False, null_is_absent=True)

    @staticmethod
    def array_col(
        name: str, decoder: ElementDecoder
    ) -> Callable[[JsonNode], Result[list[Any] | None, list[DecodeError]]]:
        return _member(
            name, decode.array_col(decoder), collect=True, null_is_absent=True
        )

    list_of = array
    list_col = array_col

    @staticmethod
    def map_of(
        name: str, decoder: Decoder[Any]
    ) -> Decoder[Mapping[str, Any] | None]:
        return _member(name, decode.map_of(decoder), collect=False, null_is_absent=True)

    @staticmethod
    def map_col(
        name: str, decoder: ElementDecoder, *, keyed: bool = False
    ) -> Callable[[JsonNode], Result[Mapping[str, Any] | None, list[DecodeError]]]:
        return _member(
            name,
            decode.map_col(decoder, keyed=keyed),
            collect=True,
            null_is_absent=True,
        )

    @staticmethod
    def dict_of(name: str, decoder: Decoder[Any]) -> Decoder[dict[str, Any] | None]:
        return _member(
            name, decode.dict_of(decoder), collect=False, null_is_absent=True
        )

    @staticmethod
    def dict_col(
        name: str, decoder: ElementDecoder, *, keyed: bool = False
    ) -> Callable[[JsonNode], Result[dict[str, Any] | None, list[DecodeError]]]:
        return _member(
            name,
            decode.dict_col(decoder, keyed=keyed),
            collect=True,
            null_is_absent=True,
        )
