"""
Decoding entry points.

Parses raw JSON text, bytes or a readable stream with msgspec and hands the
root node to a decoder. Parse failures come back as a ``DecodeError`` with
the parser exception as its cause, never as a raised exception.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import AsyncIterable, Callable
from dataclasses import dataclass
from typing import IO, Any, Final, TypeVar

import msgspec

from . import decode
from .errors import DecodeError, of_error, with_cause
from .node import JsonNode
from .result import Err, Ok, Result

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_DEPTH: Final = 64

type Source = str | bytes | bytearray | memoryview


@dataclass(frozen=True)
class ParseOptions:
    """
    Configures document parsing with immutable settings.

    ``strict`` and ``float_hook`` are handed to ``msgspec.json.Decoder``;
    ``max_depth`` bounds how deeply arrays and objects may nest.
    """

    strict: bool = True
    float_hook: Callable[[str], Any] | None = None
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if not isinstance(self.strict, bool):
            raise TypeError("strict must be a boolean")
        if not isinstance(self.max_depth, int) or isinstance(self.max_depth, bool):
            raise TypeError("max_depth must be an integer")
        if self.max_depth < 1:
            raise ValueError("max_depth must be a positive integer")
        if self.float_hook is not None and not callable(self.float_hook):
            raise TypeError("float_hook must be callable")


def _exceeds_depth(value: Any, limit: int) -> bool:
    stack = [(value, 1)]
    while stack:
        item, depth = stack.pop()
        if isinstance(item, dict | list):
            if depth > limit:
                return True
            children = item.values() if isinstance(item, dict) else item
            stack.extend((child, depth + 1) for child in children)
    return False


def parse(source: Source, options: ParseOptions | None = None) -> JsonNode:
    """
    Parses a JSON document into a root node.

    Raises ``msgspec.DecodeError`` for malformed input and ``ValueError``
    when the document nests deeper than ``options.max_depth``. Exceptions
    raised by a ``float_hook`` propagate unchanged.
    """
    opts = options or ParseOptions()
    parser = msgspec.json.Decoder(strict=opts.strict, float_hook=opts.float_hook)
    value = parser.decode(source)
    if _exceeds_depth(value, opts.max_depth):
        msg = f"The maximum configured depth of {opts.max_depth} has been exceeded"
        raise ValueError(msg)
    return JsonNode(value)


def _source_text(source: Source) -> str:
    if isinstance(source, str):
        return source
    return bytes(source).decode("utf-8", errors="replace")


def _read_root(
    source: Source, options: ParseOptions | None
) -> Result[JsonNode, DecodeError]:
    try:
        return Ok(parse(source, options))
    except Exception as e:
        logger.debug("Failed to parse JSON document: %s", e)
        error = dataclasses.replace(
            of_error(JsonNode.undefined(), "", "JsonNode"),
            raw_value=_source_text(source),
        )
        return Err(with_cause(e, error))


def _run(
    source: Source,
    decoder: Callable[[JsonNode], Result[T, Any]],
    options: ParseOptions | None,
    collect: bool,
) -> Result[T, Any]:
    root = _read_root(source, options)
    if isinstance(root, Err):
        return Err([root.error]) if collect else root
    return decoder(root.value)


def _check_text(value: Any) -> None:
    if not isinstance(value, str):
        raise TypeError(f"the JSON object must be str, not {type(value).__name__}")


def _check_bytes(value: Any) -> None:
    if not isinstance(value, bytes | bytearray | memoryview):
        msg = f"the JSON object must be bytes-like, not {type(value).__name__}"
        raise TypeError(msg)


def _read_stream(fp: IO[str] | IO[bytes]) -> Source:
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")
    return fp.read()


def from_string(
    text: str,
    decoder: Callable[[JsonNode], Result[T, DecodeError]],
    options: ParseOptions | None = None,
) -> Result[T, DecodeError]:
    """Parses ``text`` and decodes its root with a fail-fast decoder."""
    _check_text(text)
    return _run(text, decoder, options, collect=False)


def from_string_col(
    text: str,
    decoder: Callable[[JsonNode], Result[T, list[DecodeError]]],
    options: ParseOptions | None = None,
) -> Result[T, list[DecodeError]]:
    """Parses ``text`` and decodes its root with a collect-mode decoder."""
    _check_text(text)
    return _run(text, decoder, options, collect=True)


def from_bytes(
    data: bytes | bytearray | memoryview,
    decoder: Callable[[JsonNode], Result[T, DecodeError]],
    options: ParseOptions | None = None,
) -> Result[T, DecodeError]:
    _check_bytes(data)
    return _run(data, decoder, options, collect=False)


def from_bytes_col(
    data: bytes | bytearray | memoryview,
    decoder: Callable[[JsonNode], Result[T, list[DecodeError]]],
    options: ParseOptions | None = None,
) -> Result[T, list[DecodeError]]:
    _check_bytes(data)
    return _run(data, decoder, options, collect=True)


def from_stream(
    fp: IO[str] | IO[bytes],
    decoder: Callable[[JsonNode], Result[T, DecodeError]],
    options: ParseOptions | None = None,
) -> Result[T, DecodeError]:
    """
    Reads a text or binary file-like object to the end and decodes it.

    The document is parsed only after ``fp.read()`` returns; I/O errors from
    the stream propagate unchanged.
    """
    return _run(_read_stream(fp), decoder, options, collect=False)


def from_stream_col(
    fp: IO[str] | IO[bytes],
    decoder: Callable[[JsonNode], Result[T, list[DecodeError]]],
    options: ParseOptions | None = None,
) -> Result[T, list[DecodeError]]:
    return _run(_read_stream(fp), decoder, options, collect=True)


async def from_stream_async(
    chunks: AsyncIterable[str] | AsyncIterable[bytes],
    decoder: Callable[[JsonNode], Result[T, Any]],
    options: ParseOptions | None = None,
    *,
    collect: bool = False,
) -> Result[T, Any]:
    """
    Decodes a document delivered as an async iterable of chunks.

    Chunks must be all ``str`` or all ``bytes``; the document is parsed once
    the iterable is exhausted.
    """
    collected: list[Any] = []
    async for chunk in chunks:
        collected.append(chunk)
    if collected and isinstance(collected[0], str):
        source: Source = "".join(collected)
    else:
        source = b"".join(collected)
    return _run(source, decoder, options, collect=collect)


def auto(
    source: Source,
    target_type: type[T] | Any,
    options: ParseOptions | None = None,
    *,
    dec_hook: Callable[[type, Any], Any] | None = None,
) -> Result[T, DecodeError]:
    """
    Decodes ``source`` straight into ``target_type`` with msgspec.

    Use it for types that need no hand-written decoder; pass a
    ``Codec.dec_hook`` to route registered types through their decoders.
    """
    if not isinstance(source, str):
        _check_bytes(source)
    return _run(
        source, decode.auto(target_type, dec_hook=dec_hook), options, collect=False
    )
