"""
Structured decode errors.

A ``DecodeError`` describes exactly one failure site. The innermost decoder
builds it with ``of_error``; enclosing array and object combinators then add
their position with ``with_index`` / ``with_property`` as the error travels
outward.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from .node import JsonKind, JsonNode


@dataclass(frozen=True)
class DecodeError:
    """
    Handles decode failures with the node, kind and position they occurred at.

    ``value`` is always a detached clone, so an error stays valid after the
    document that produced it is gone.
    """

    value: JsonNode
    kind: JsonKind
    raw_value: str
    target_type: str
    message: str
    cause: BaseException | None = None
    index: int | None = None
    property: str | None = None

    def describe(self) -> str:
        """One-line summary including any positional context."""
        context = []
        if self.property is not None:
            context.append(f"property '{self.property}'")
        if self.index is not None:
            context.append(f"index {self.index}")
        where = f" at {', '.join(context)}" if context else ""
        return f"{self.message}{where} (target: {self.target_type}, kind: {self.kind})"

    def __str__(self) -> str:
        return self.describe()


def of_error(node: JsonNode, message: str, target_type: str = "Any") -> DecodeError:
    """Builds a base error for ``node`` with no cause or position."""
    snapshot = node.clone()
    return DecodeError(
        value=snapshot,
        kind=snapshot.kind,
        raw_value=snapshot.raw_text,
        target_type=target_type,
        message=message,
    )


def of_indexed(
    node: JsonNode, index: int, message: str, target_type: str = "Any"
) -> DecodeError:
    """Builds an error raised directly at an array position."""
    return dataclasses.replace(of_error(node, message, target_type), index=index)


def with_index(index: int, error: DecodeError) -> DecodeError:
    return dataclasses.replace(error, index=index)


def with_property(name: str, error: DecodeError) -> DecodeError:
    return dataclasses.replace(error, property=name)


def with_cause(cause: BaseException, error: DecodeError) -> DecodeError:
    """
    Attaches ``cause`` and replaces the message with the cause's own.

    Exceptions with an empty message fall back to their class name so the
    error never ends up blank.
    """
    message = str(cause) or type(cause).__name__
    return dataclasses.replace(error, cause=cause, message=message)


def with_message(message: str, error: DecodeError) -> DecodeError:
    return dataclasses.replace(error, message=message)


class DecodingError(ValueError):
    """
    Raised when a decode failure has to cross a throwing boundary.

    Only the serializer adapter and ``Err.unwrap`` raise it; decoders
    themselves always return results.
    """

    def __init__(self, errors: DecodeError | list[DecodeError]) -> None:
        if isinstance(errors, DecodeError):
            errors = [errors]
        elif not isinstance(errors, list) or not errors:
            raise TypeError("errors must be a DecodeError or a non-empty list")

        self.errors = errors
        summary = "; ".join(error.describe() for error in errors)
        super().__init__(summary)

    @property
    def error(self) -> DecodeError:
        """The first (or only) decode error."""
        return self.errors[0]
