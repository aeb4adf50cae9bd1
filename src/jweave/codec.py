"""
Serializer integration for msgspec.

A ``Codec`` maps Python types to hand-written encoders and decoders and
exposes them as msgspec ``enc_hook`` / ``dec_hook`` callables. msgspec keeps
handling everything it supports natively and calls back into the codec only
for the registered custom types.

This is the one place where a decode failure is raised: msgspec hooks
cannot return results, so a failing decoder raises ``DecodingError``, which
msgspec reports as a ``ValidationError`` with the path of the failing field.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, TypeVar

import msgspec

from . import decode
from .errors import DecodeError, DecodingError
from .node import JsonNode
from .result import Err, Result
from .types import Encoder

logger = logging.getLogger(__name__)

T = TypeVar("T")

type AnyDecoder = Callable[[JsonNode], Result[Any, DecodeError | list[DecodeError]]]


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or repr(tp)


@dataclass(frozen=True, eq=False)
class Codec:
    """
    Immutable registry of per-type encoders and decoders.

    ``use_decoder``, ``use_encoder`` and ``use_codec`` return a new codec;
    the receiver is left untouched, so a base codec can be shared and
    extended freely.
    """

    decoders: Mapping[type, AnyDecoder] = field(
        default_factory=lambda: MappingProxyType({})
    )
    encoders: Mapping[type, Encoder[Any]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def use_decoder(self, tp: type[T], decoder: AnyDecoder) -> Codec:
        logger.debug("Registering decoder for %s", _type_name(tp))
        decoders = MappingProxyType({**self.decoders, tp: decoder})
        return dataclasses.replace(self, decoders=decoders)

    def use_encoder(self, tp: type[T], encoder: Encoder[T]) -> Codec:
        logger.debug("Registering encoder for %s", _type_name(tp))
        encoders = MappingProxyType({**self.encoders, tp: encoder})
        return dataclasses.replace(self, encoders=encoders)

    def use_codec(
        self, tp: type[T], encoder: Encoder[T], decoder: AnyDecoder
    ) -> Codec:
        return self.use_encoder(tp, encoder).use_decoder(tp, decoder)

    def dec_hook(self, tp: type, obj: Any) -> Any:
        """
        msgspec ``dec_hook``: runs the decoder registered for ``tp``.

        Raises ``NotImplementedError`` for unregistered types, as msgspec
        expects, and ``DecodingError`` when the decoder fails.
        """
        decoder = self.decoders.get(tp)
        if decoder is None:
            msg = f"Objects of type {_type_name(tp)} are not supported"
            raise NotImplementedError(msg)

        result = decoder(JsonNode(obj))
        if isinstance(result, Err):
            error = DecodingError(result.error)
            logger.debug("Decoder for %s failed: %s", _type_name(tp), error)
            raise error
        return result.value

    def _find_encoder(self, tp: type) -> Encoder[Any] | None:
        for candidate in tp.__mro__:
            if candidate in self.encoders:
                return self.encoders[candidate]
        return None

    def enc_hook(self, obj: Any) -> Any:
        """msgspec ``enc_hook``: renders ``obj`` with its registered encoder."""
        encoder = self._find_encoder(type(obj))
        if encoder is None:
            msg = f"Objects of type {type(obj).__name__} are not supported"
            raise NotImplementedError(msg)
        return encoder(obj).value

    def json_decoder(self, tp: type[T] | Any) -> msgspec.json.Decoder[T]:
        return msgspec.json.Decoder(tp, dec_hook=self.dec_hook)

    def json_encoder(self) -> msgspec.json.Encoder:
        return msgspec.json.Encoder(enc_hook=self.enc_hook)

    def encode(self, obj: Any) -> bytes:
        """Serializes ``obj`` to JSON bytes using the registered encoders."""
        return self.json_encoder().encode(obj)

    def decode(self, data: str | bytes, tp: type[T] | Any) -> T:
        """
        Deserializes ``data`` into ``tp`` using the registered decoders.

        Raises ``msgspec.ValidationError`` when a registered decoder fails;
        its message carries the decode error summary and the field path.
        """
        return self.json_decoder(tp).decode(data)

    def auto(self, tp: type[T] | Any) -> Callable[[JsonNode], Result[T, DecodeError]]:
        """A decoder that converts with msgspec and this codec's hooks."""
        return decode.auto(tp, dec_hook=self.dec_hook)
