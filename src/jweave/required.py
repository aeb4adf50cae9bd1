"""
Required decoders.

The value must be present and of the expected kind; ``null`` only satisfies
``unit``. ``Property`` groups the decoders that read a named member of an
object and fail when the member is missing.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Final

from . import _primitives, decode
from .decode import ElementDecoder, kind_mismatch, property_not_found, tag_property
from .errors import DecodeError, of_indexed, with_property
from .node import JsonKind, JsonNode
from .result import Err, Result
from .types import Decoder

string: Final = _primitives.shell(_primitives.STRING)
boolean: Final = _primitives.shell(_primitives.BOOLEAN)
char: Final = _primitives.shell(_primitives.CHAR)
uuid: Final = _primitives.shell(_primitives.UUID)
unit: Final = _primitives.shell(_primitives.UNIT)
byte: Final = _primitives.shell(_primitives.BYTE)
int_: Final = _primitives.shell(_primitives.INT)
int64: Final = _primitives.shell(_primitives.INT64)
float_: Final = _primitives.shell(_primitives.FLOAT)
date_time: Final = _primitives.shell(_primitives.DATE_TIME)
date_time_offset: Final = _primitives.shell(_primitives.DATE_TIME_OFFSET)


def _member(
    name: str, decoder: Callable[[JsonNode], Result[Any, Any]], *, collect: bool
) -> Callable[[JsonNode], Result[Any, Any]]:
    def failed(error: DecodeError) -> Err[Any]:
        return Err([error]) if collect else Err(error)

    def decode_property(node: JsonNode) -> Result[Any, Any]:
        if node.kind is not JsonKind.OBJECT:
            return failed(kind_mismatch(node, JsonKind.OBJECT))
        member = node.try_get_property(name)
        if member is None:
            return failed(property_not_found(node, name))
        return decoder(member).map_error(lambda error: tag_property(name, error))

    return decode_property


class Property:
    """
    Decoders for object members that must be present.

    Each ``*_col`` method reports errors as a list, matching the collect-mode
    combinators in ``jweave.decode``. Failures inside the member are tagged
    with the member name unless a nested object already tagged them.
    """

    @staticmethod
    def get(name: str, decoder: Decoder[Any]) -> Decoder[Any]:
        return _member(name, decoder, collect=False)

    @staticmethod
    def get_col(
        name: str, decoder: Callable[[JsonNode], Result[Any, Any]]
    ) -> Callable[[JsonNode], Result[Any, list[DecodeError]]]:
        return _member(name, decoder, collect=True)

    @staticmethod
    def sequence(name: str, decoder: Decoder[Any]) -> Decoder[tuple[Any, ...]]:
        return _member(name, decode.sequence(decoder), collect=False)

    @staticmethod
    def sequence_col(
        name: str, decoder: ElementDecoder
    ) -> Callable[[JsonNode], Result[tuple[Any, ...], list[DecodeError]]]:
        return _member(name, decode.sequence_col(decoder), collect=True)

    @staticmethod
    def sequence_at(name: str, index: int, decoder: Decoder[Any]) -> Decoder[Any]:
        """
        Reads a member of an object known to sit at ``index`` of an array.

        A missing member fails with both ``index`` and ``property`` set.
        """

        def decode_property(node: JsonNode) -> Result[Any, DecodeError]:
            if node.kind is not JsonKind.OBJECT:
                return Err(kind_mismatch(node, JsonKind.OBJECT))
            member = node.try_get_property(name)
            if member is None:
                error = of_indexed(node, index, f"Property '{name}' not found")
                return Err(with_property(name, error))
            return decoder(member)

        return decode_property

    @staticmethod
    def array(name: str, decoder: Decoder[Any]) -> Decoder[list[Any]]:
        return _member(name, decode.array(decoder), collect=False)

    @staticmethod
    def array_col(
        name: str, decoder: ElementDecoder
    ) -> Callable[[JsonNode], Result[list[Any], list[DecodeError]]]:
        return _member(name, decode.array_col(decoder), collect=True)

    list_of = array
    list_col = array_col

    @staticmethod
    def map_of(name: str, decoder: Decoder[Any]) -> Decoder[Mapping[str, Any]]:
        return _member(name, decode.map_of(decoder), collect=False)

    @staticmethod
    def map_col(
        name: str, decoder: ElementDecoder, *, keyed: bool = False
    ) -> Callable[[JsonNode], Result[Mapping[str, Any], list[DecodeError]]]:
        return _member(name, decode.map_col(decoder, keyed=keyed), collect=True)

    @staticmethod
    def dict_of(name: str, decoder: Decoder[Any]) -> Decoder[dict[str, Any]]:
        return _member(name, decode.dict_of(decoder), collect=False)

    @staticmethod
    def dict_col(
        name: str, decoder: ElementDecoder, *, keyed: bool = False
    ) -> Callable[[JsonNode], Result[dict[str, Any], list[DecodeError]]]:
        return _member(name, decode.dict_col(decoder, keyed=keyed), collect=True)
