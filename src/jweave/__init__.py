"""
Composable JSON decoders and encoders with structured errors.

Decoders are plain functions from a ``JsonNode`` to ``Ok(value)`` or
``Err(error)``; combinators in ``jweave.decode``, ``jweave.required`` and
``jweave.optional`` build bigger decoders from smaller ones. Nothing raises
for a value that does not fit: every failure is a ``DecodeError`` carrying the
offending node, its kind, and the array index or object key it sits at.

Usage:
    from jweave import decoding, required, result

    def person(node):
        return result.merge(
            required.Property.get("name", required.string)(node),
            required.Property.get("age", required.int_)(node),
        )

    decoding.from_string('{"name": "Alice", "age": 30}', person)
"""

__version__ = "0.1.0"

from . import decode, decoding, encode, optional, required, result
from ._writer import WriteOptions
from .codec import Codec
from .decoding import ParseOptions, from_bytes, from_stream, from_string, parse
from .encode import Json
from .errors import (
    DecodeError,
    DecodingError,
    of_error,
    of_indexed,
    with_cause,
    with_index,
    with_message,
    with_property,
)
from .node import UNDEFINED, JsonKind, JsonNode
from .result import Err, Ok, Result
from .types import CollectErrorsDecoder, Decoder, Encoder, IndexedDecoder, KeyedDecoder

__all__ = [
    "UNDEFINED",
    "Codec",
    "CollectErrorsDecoder",
    "DecodeError",
    "Decoder",
    "DecodingError",
    "Encoder",
    "Err",
    "IndexedDecoder",
    "Json",
    "JsonKind",
    "JsonNode",
    "KeyedDecoder",
    "Ok",
    "ParseOptions",
    "Result",
    "WriteOptions",
    "__version__",
    "decode",
    "decoding",
    "encode",
    "from_bytes",
    "from_stream",
    "from_string",
    "of_error",
    "of_indexed",
    "optional",
    "parse",
    "required",
    "result",
    "with_cause",
    "with_index",
    "with_message",
    "with_property",
]
