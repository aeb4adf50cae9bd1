"""
Container and union decoders.

Builds decoders for arrays, objects used as maps, indexed and keyed element
access, and unions tried in order. Each container comes in two shapes:

- fail-fast (``sequence``, ``array``, ``map_of``, ``dict_of``): stop at the
  first failing element and return that single error with its position.
- collect (``sequence_col``, ``array_col``, ``map_col``, ``dict_col``): visit
  every element and return all errors, each tagged with its position.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any, TypeVar

import msgspec

from .errors import (
    DecodeError,
    of_error,
    of_indexed,
    with_cause,
    with_index,
    with_property,
)
from .node import JsonKind, JsonNode
from .result import Err, Ok, Result, flatten_errors

T = TypeVar("T")
U = TypeVar("U")

# Element decoders are called as decoder(node), or decoder(position, node)
# when the combinator is built with indexed=True / keyed=True
ElementDecoder = Callable[..., Result[Any, Any]]


def kind_mismatch(
    node: JsonNode, expected: JsonKind, target_type: str = "Any"
) -> DecodeError:
    """Builds the standard "Expected 'K' but got 'A'" error."""
    message = f"Expected '{expected}' but got '{node.kind}'"
    return of_error(node, message, target_type)


def _first_error(error: DecodeError | list[DecodeError]) -> DecodeError:
    """Reduces an element failure of either shape to the single error reported."""
    return flatten_errors(error)[0]


def _call(
    decoder: ElementDecoder, positional: bool, position: int | str, node: JsonNode
) -> Result[Any, Any]:
    if positional:
        return decoder(position, node)
    return decoder(node)


def _collect_until_error(
    nodes: Iterable[JsonNode], decoder: ElementDecoder, indexed: bool
) -> Result[list[Any], DecodeError]:
    values = []
    for i, node in enumerate(nodes):
        result = _call(decoder, indexed, i, node)
        if isinstance(result, Err):
            return Err(with_index(i, _first_error(result.error)))
        values.append(result.value)
    return Ok(values)


def _collect_errors(
    nodes: Iterable[JsonNode], decoder: ElementDecoder, indexed: bool
) -> Result[list[Any], list[DecodeError]]:
    values = []
    errors: list[DecodeError] = []
    for i, node in enumerate(nodes):
        result = _call(decoder, indexed, i, node)
        if isinstance(result, Err):
            errors.extend(with_index(i, e) for e in flatten_errors(result.error))
        else:
            values.append(result.value)
    if errors:
        return Err(errors)
    return Ok(values)


def _collect_properties_until_error(
    members: Iterator[tuple[str, JsonNode]], decoder: ElementDecoder, keyed: bool
) -> Result[list[tuple[str, Any]], DecodeError]:
    collected = []
    for key, node in members:
        result = _call(decoder, keyed, key, node)
        if isinstance(result, Err):
            return Err(with_property(key, _first_error(result.error)))
        collected.append((key, result.value))
    return Ok(collected)


def _collect_properties(
    members: Iterator[tuple[str, JsonNode]], decoder: ElementDecoder, keyed: bool
) -> Result[list[tuple[str, Any]], list[DecodeError]]:
    collected = []
    errors: list[DecodeError] = []
    for key, node in members:
        result = _call(decoder, keyed, key, node)
        if isinstance(result, Err):
            errors.extend(with_property(key, e) for e in flatten_errors(result.error))
        else:
            collected.append((key, result.value))
    if errors:
        return Err(errors)
    return Ok(collected)


def sequence(
    decoder: ElementDecoder, *, indexed: bool = False
) -> Callable[[JsonNode], Result[tuple[Any, ...], DecodeError]]:
    """
    Decodes every array element, stopping at the first failure.

    The failing element's error is returned with its ``index`` set; on
    success the values come back as a tuple in array order.
    """

    def decode_sequence(node: JsonNode) -> Result[tuple[Any, ...], DecodeError]:
        if node.kind is not JsonKind.ARRAY:
            return Err(kind_mismatch(node, JsonKind.ARRAY, "tuple"))
        return _collect_until_error(node.enumerate_array(), decoder, indexed).map(tuple)

    return decode_sequence


def sequence_col(
    decoder: ElementDecoder, *, indexed: bool = False
) -> Callable[[JsonNode], Result[tuple[Any, ...], list[DecodeError]]]:
    """
    Decodes every array element and reports every failure.

    Element decoders may return a single error or a list of them; each one is
    tagged with the element's index.
    """

    def decode_sequence(
        node: JsonNode,
    ) -> Result[tuple[Any, ...], list[DecodeError]]:
        if node.kind is not JsonKind.ARRAY:
            return Err([kind_mismatch(node, JsonKind.ARRAY, "tuple")])
        return _collect_errors(node.enumerate_array(), decoder, indexed).map(tuple)

    return decode_sequence


def array(
    decoder: ElementDecoder, *, indexed: bool = False
) -> Callable[[JsonNode], Result[list[Any], DecodeError]]:
    """Fail-fast array decoding producing a list."""
    decode_sequence = sequence(decoder, indexed=indexed)
    return lambda node: decode_sequence(node).map(list)


def array_col(
    decoder: ElementDecoder, *, indexed: bool = False
) -> Callable[[JsonNode], Result[list[Any], list[DecodeError]]]:
    """Collect-mode array decoding producing a list."""
    decode_sequence = sequence_col(decoder, indexed=indexed)
    return lambda node: decode_sequence(node).map(list)


list_of = array
list_col = array_col


def _guard_object(
    node: JsonNode,
    target_type: str,
    body: Callable[[], Result[Any, Any]],
    collect: bool,
) -> Result[Any, Any]:
    def failed(error: DecodeError) -> Err[Any]:
        return Err([error]) if collect else Err(error)

    if node.kind is not JsonKind.OBJECT:
        return failed(kind_mismatch(node, JsonKind.OBJECT, target_type))
    try:
        return body()
    except Exception as e:
        return failed(with_cause(e, of_error(node, "", target_type)))


def map_of(
    decoder: ElementDecoder, *, keyed: bool = False
) -> Callable[[JsonNode], Result[Mapping[str, Any], DecodeError]]:
    """
    Decodes every member of an object into a read-only mapping.

    Stops at the first failing member and returns its error with
    ``property`` set to the member's key. Like the array index, the key
    replaces any property a nested decoder had already recorded.
    """

    def decode_map(node: JsonNode) -> Result[Mapping[str, Any], DecodeError]:
        return _guard_object(
            node,
            "Mapping",
            lambda: _collect_properties_until_error(
                node.enumerate_object(), decoder, keyed
            ).map(lambda pairs: MappingProxyType(dict(pairs))),
            collect=False,
        )

    return decode_map


def map_col(
    decoder: ElementDecoder, *, keyed: bool = False
) -> Callable[[JsonNode], Result[Mapping[str, Any], list[DecodeError]]]:
    """
    Collect-mode counterpart of ``map_of``; every failing key is reported.

    Each error carries the key of the member it came from, replacing any
    property set further down.
    """

    def decode_map(node: JsonNode) -> Result[Mapping[str, Any], list[DecodeError]]:
        return _guard_object(
            node,
            "Mapping",
            lambda: _collect_properties(node.enumerate_object(), decoder, keyed).map(
                lambda pairs: MappingProxyType(dict(pairs))
            ),
            collect=True,
        )

    return decode_map


def dict_of(
    decoder: ElementDecoder, *, keyed: bool = False
) -> Callable[[JsonNode], Result[dict[str, Any], DecodeError]]:
    """Same as ``map_of`` but produces a plain, mutable ``dict``."""

    def decode_dict(node: JsonNode) -> Result[dict[str, Any], DecodeError]:
        return _guard_object(
            node,
            "dict",
            lambda: _collect_properties_until_error(
                node.enumerate_object(), decoder, keyed
            ).map(dict),
            collect=False,
        )

    return decode_dict


def dict_col(
    decoder: ElementDecoder, *, keyed: bool = False
) -> Callable[[JsonNode], Result[dict[str, Any], list[DecodeError]]]:
    def decode_dict(node: JsonNode) -> Result[dict[str, Any], list[DecodeError]]:
        return _guard_object(
            node,
            "dict",
            lambda: _collect_properties(node.enumerate_object(), decoder, keyed).map(
                dict
            ),
            collect=True,
        )

    return decode_dict


def one_of(
    decoders: Iterable[Callable[[JsonNode], Result[Any, DecodeError]]],
) -> Callable[[JsonNode], Result[Any, DecodeError]]:
    """
    Tries each decoder in order and returns the first success.

    When every alternative fails, the error of the last one attempted is
    returned.
    """
    alternatives = tuple(decoders)
    if not alternatives:
        raise ValueError("one_of requires at least one decoder")

    def decode_one_of(node: JsonNode) -> Result[Any, DecodeError]:
        for alternative in alternatives:
            result = alternative(node)
            if isinstance(result, Ok):
                return result
        # alternatives is never empty, so result is the last failure
        return result

    return decode_one_of


def collect_one_of(
    decoders: Iterable[Callable[[JsonNode], Result[Any, Any]]],
) -> Callable[[JsonNode], Result[Any, list[DecodeError]]]:
    """
    Tries each decoder in order and returns the first success.

    When every alternative fails, all of their errors are returned in the
    order the alternatives were tried.
    """
    alternatives = tuple(decoders)
    if not alternatives:
        raise ValueError("collect_one_of requires at least one decoder")

    def decode_one_of(node: JsonNode) -> Result[Any, list[DecodeError]]:
        errors: list[DecodeError] = []
        for alternative in alternatives:
            result = alternative(node)
            if isinstance(result, Ok):
                return result
            errors.extend(flatten_errors(result.error))
        return Err(errors)

    return decode_one_of


def _element_at(node: JsonNode, index: int) -> JsonNode | None:
    if index < 0:
        return None
    for i, element in enumerate(node.enumerate_array()):
        if i == index:
            return element
    return None


def decode_at(
    decoder: Callable[[JsonNode], Result[T, DecodeError]], index: int
) -> Callable[[JsonNode], Result[T, DecodeError]]:
    """
    Decodes the array element at ``index``.

    Fails when the node is not an array or the index is out of range.
    """

    def decode_element(node: JsonNode) -> Result[T, DecodeError]:
        if node.kind is not JsonKind.ARRAY:
            return Err(kind_mismatch(node, JsonKind.ARRAY))
        try:
            element = _element_at(node, index)
            if element is None:
                return Err(of_indexed(node, index, f"Index {index} not found"))
            return decoder(element).map_error(
                lambda e: with_index(index, _first_error(e))
            )
        except Exception as e:
            return Err(with_cause(e, of_error(node, "")))

    return decode_element


def try_decode_at(
    decoder: Callable[[JsonNode], Result[T, DecodeError]], index: int
) -> Callable[[JsonNode], Result[T | None, DecodeError]]:
    """Like ``decode_at``, but an out-of-range index decodes to ``None``."""

    def decode_element(node: JsonNode) -> Result[T | None, DecodeError]:
        if node.kind is not JsonKind.ARRAY:
            return Err(kind_mismatch(node, JsonKind.ARRAY))
        try:
            element = _element_at(node, index)
            if element is None:
                return Ok(None)
            return decoder(element).map_error(
                lambda e: with_index(index, _first_error(e))
            )
        except Exception as e:
            return Err(with_cause(e, of_error(node, "")))

    return decode_element


def property_not_found(node: JsonNode, name: str) -> DecodeError:
    return with_property(name, of_error(node, f"Property '{name}' not found"))


def tag_property(
    name: str, error: DecodeError | list[DecodeError]
) -> DecodeError | list[DecodeError]:
    """
    Attaches ``name`` to errors that carry no property yet.

    Errors already tagged by a nested object keep the innermost key.
    """
    if isinstance(error, list):
        return [e if e.property is not None else with_property(name, e) for e in error]
    if error.property is not None:
        return error
    return with_property(name, error)


def decode_at_key(
    decoder: Callable[[JsonNode], Result[T, DecodeError]], key: str
) -> Callable[[JsonNode], Result[T, DecodeError]]:
    """
    Decodes the value stored under ``key``.

    A missing key fails with ``property`` set; a present value's result is
    returned untouched.
    """

    def decode_member(node: JsonNode) -> Result[T, DecodeError]:
        if node.kind is not JsonKind.OBJECT:
            return Err(kind_mismatch(node, JsonKind.OBJECT))
        member = node.try_get_property(key)
        if member is None:
            return Err(property_not_found(node, key))
        return decoder(member)

    return decode_member


def try_decode_at_key(
    decoder: Callable[[JsonNode], Result[T, DecodeError]], key: str
) -> Callable[[JsonNode], Result[T | None, DecodeError]]:
    """Like ``decode_at_key``, but a missing key decodes to ``None``."""

    def decode_member(node: JsonNode) -> Result[T | None, DecodeError]:
        if node.kind is not JsonKind.OBJECT:
            return Err(kind_mismatch(node, JsonKind.OBJECT))
        member = node.try_get_property(key)
        if member is None:
            return Ok(None)
        return decoder(member)

    return decode_member


def succeed(value: T) -> Callable[[JsonNode], Result[T, DecodeError]]:
    """A decoder that ignores its input and always returns ``value``."""
    return lambda _: Ok(value)


def fail(
    message: str, target_type: str = "Any"
) -> Callable[[JsonNode], Result[Any, DecodeError]]:
    """A decoder that always fails with ``message`` at the current node."""
    return lambda node: Err(of_error(node, message, target_type))


def map_value(
    decoder: Callable[[JsonNode], Result[T, Any]], fn: Callable[[T], U]
) -> Callable[[JsonNode], Result[U, Any]]:
    return lambda node: decoder(node).map(fn)


def and_then(
    decoder: Callable[[JsonNode], Result[T, Any]],
    fn: Callable[[T], Callable[[JsonNode], Result[U, Any]]],
) -> Callable[[JsonNode], Result[U, Any]]:
    """
    Chains a decoder whose choice depends on an earlier decoded value.

    ``fn`` receives the first value and returns the decoder to run against
    the same node, the usual way to dispatch on a union tag.
    """
    return lambda node: decoder(node).and_then(lambda value: fn(value)(node))


def _type_name(target_type: Any) -> str:
    return getattr(target_type, "__name__", None) or repr(target_type)


def auto(
    target_type: type[T] | Any,
    *,
    dec_hook: Callable[[type, Any], Any] | None = None,
    strict: bool = True,
) -> Callable[[JsonNode], Result[T, DecodeError]]:
    """
    Decodes through msgspec's own type conversion.

    A fallback for types that need no custom handling; conversion failures
    become a ``DecodeError`` whose cause is the msgspec exception.
    """
    name = _type_name(target_type)

    def decode_auto(node: JsonNode) -> Result[T, DecodeError]:
        try:
            return Ok(
                msgspec.convert(
                    node.value, type=target_type, strict=strict, dec_hook=dec_hook
                )
            )
        except Exception as e:
            return Err(with_cause(e, of_error(node, "", name)))

    return decode_auto
