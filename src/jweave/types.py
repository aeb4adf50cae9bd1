"""Type definitions for decoders and encoders."""

from collections.abc import Callable

from .errors import DecodeError
from .node import JsonNode
from .result import Result

# A decoder is a plain function; combinators build new functions from old ones
type Decoder[T] = Callable[[JsonNode], Result[T, DecodeError]]
type CollectErrorsDecoder[T] = Callable[[JsonNode], Result[T, list[DecodeError]]]

# Index-aware and key-aware element decoders
type IndexedDecoder[T] = Callable[[int, JsonNode], Result[T, DecodeError]]
type KeyedDecoder[T] = Callable[[str, JsonNode], Result[T, DecodeError]]

type Encoder[T] = Callable[[T], JsonNode]
type MapEntryEncoder[K, V] = Callable[[K, V], tuple[str, JsonNode]]
