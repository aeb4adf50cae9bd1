"""
Result values returned by every decoder.

``Ok`` carries a decoded value, ``Err`` carries either a single
``DecodeError`` (fail-fast decoders) or a list of them (collect-mode
decoders). ``merge`` and ``validate`` chain several results together, the
first stopping at the earliest failure and the second gathering all of them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, NoReturn, TypeVar

if TYPE_CHECKING:
    from .errors import DecodeError

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        return Ok(fn(self.value))

    def map_error(self, fn: Callable[[Any], Any]) -> Ok[T]:
        return self

    def and_then(self, fn: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return fn(self.value)

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: object) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Error result containing an error value."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def map(self, fn: Callable[[Any], Any]) -> Err[E]:
        return self

    def map_error(self, fn: Callable[[E], F]) -> Err[F]:
        return Err(fn(self.error))

    def and_then(self, fn: Callable[[Any], Any]) -> Err[E]:
        return self

    def unwrap(self) -> NoReturn:
        """Raises ``DecodingError`` carrying the contained error(s)."""
        from .errors import DecodingError

        raise DecodingError(self.error)  # type: ignore[arg-type]

    def unwrap_or(self, default: U) -> U:
        return default


type Result[T, E] = Ok[T] | Err[E]


def flatten_errors(error: DecodeError | list[DecodeError]) -> list[DecodeError]:
    """Normalizes either error shape into a list."""
    if isinstance(error, list):
        return list(error)
    return [error]


def merge(*results: Result[Any, Any]) -> Result[tuple[Any, ...], Any]:
    """
    Combines results, stopping at the first failure.

    Returns ``Ok`` with a tuple of every value in argument order, or the
    first ``Err`` encountered unchanged.
    """
    values = []
    for result in results:
        if isinstance(result, Err):
            return result
        values.append(result.value)
    return Ok(tuple(values))


def validate(
    *results: Result[Any, Any],
) -> Result[tuple[Any, ...], list[DecodeError]]:
    """
    Combines results, gathering every failure.

    Single errors and error lists are flattened into one list in argument
    order; ``Ok`` is returned only when no result failed.
    """
    values = []
    errors: list[DecodeError] = []
    for result in results:
        if isinstance(result, Err):
            errors.extend(flatten_errors(result.error))
        else:
            values.append(result.value)
    if errors:
        return Err(errors)
    return Ok(tuple(values))
