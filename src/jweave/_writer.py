"""JSON text rendering for tree node values."""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Final

ASCII_LIMIT: Final = 127
CONTROL_LIMIT: Final = 0x20

_ESCAPES: Final = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


@dataclass(frozen=True)
class WriteOptions:
    """
    Configures JSON text output with immutable settings.

    Defaults follow the usual human-readable separators. ``allow_nan`` renders
    non-finite numbers as ``NaN`` / ``Infinity`` / ``-Infinity`` instead of
    raising; ``DIAGNOSTIC`` is the compact form used for raw text and errors.
    """

    indent: str | int | None = None
    sort_keys: bool = False
    ensure_ascii: bool = False
    allow_nan: bool = False
    separators: tuple[str, str] | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.sort_keys, bool):
            raise TypeError("sort_keys must be a boolean")
        if not isinstance(self.ensure_ascii, bool):
            raise TypeError("ensure_ascii must be a boolean")
        if not isinstance(self.allow_nan, bool):
            raise TypeError("allow_nan must be a boolean")
        if isinstance(self.indent, int) and self.indent < 0:
            raise ValueError("indent must be a non-negative integer")

    @property
    def item_separator(self) -> str:
        if self.separators:
            return self.separators[0]
        return "," if self.indent is not None else ", "

    @property
    def key_separator(self) -> str:
        return self.separators[1] if self.separators else ": "


DIAGNOSTIC: Final = WriteOptions(separators=(",", ":"), allow_nan=True)


def _encode_string(s: str, ensure_ascii: bool) -> str:
    """Encode string with proper escape sequences."""
    result = ['"']
    for char in s:
        if char in _ESCAPES:
            result.append(_ESCAPES[char])
        elif ord(char) < CONTROL_LIMIT:
            result.append(f"\\u{ord(char):04x}")
        elif ensure_ascii and ord(char) > ASCII_LIMIT:
            code_point = ord(char)
            if code_point > 0xFFFF:
                # Astral characters become a UTF-16 surrogate pair
                code_point -= 0x10000
                high = 0xD800 | (code_point >> 10)
                low = 0xDC00 | (code_point & 0x3FF)
                result.append(f"\\u{high:04x}\\u{low:04x}")
            else:
                result.append(f"\\u{code_point:04x}")
        else:
            result.append(char)
    result.append('"')
    return "".join(result)


def _is_finite(n: int | float | Decimal) -> bool:
    if isinstance(n, Decimal):
        return n.is_finite()
    if isinstance(n, float):
        return math.isfinite(n)
    return True


def _encode_non_finite(n: float | Decimal) -> str:
    if isinstance(n, Decimal):
        if n.is_nan():
            return "NaN"
        return "-Infinity" if n.is_signed() else "Infinity"
    if math.isnan(n):
        return "NaN"
    return "-Infinity" if n < 0 else "Infinity"


def _encode_number(n: int | float | Decimal, allow_nan: bool) -> str:
    """Encode numeric values with JSON compliance."""
    if not _is_finite(n):
        if allow_nan:
            return _encode_non_finite(n)
        msg = "Out of range float values are not JSON compliant"
        raise ValueError(msg)
    return str(n)


def _get_indent_string(indent: str | int | None, level: int) -> str:
    """Generate indentation string for given level."""
    if indent is None:
        return ""
    elif isinstance(indent, int):
        return " " * (indent * level)
    else:
        return indent * level


def _wrap(
    opening: str, items: list[str], closing: str, options: WriteOptions, level: int
) -> str:
    if not items:
        return opening + closing
    if options.indent is None:
        return opening + options.item_separator.join(items) + closing

    inner_indent = _get_indent_string(options.indent, level + 1)
    outer_indent = _get_indent_string(options.indent, level)
    separator = options.item_separator + "\n" + inner_indent
    return (
        f"{opening}\n{inner_indent}{separator.join(items)}\n"
        f"{outer_indent}{closing}"
    )


def _encode_array(
    arr: list[Any] | tuple[Any, ...], options: WriteOptions, level: int
) -> str:
    """Encode array with optional formatting."""
    items = [_encode_value(item, options, level + 1) for item in arr]
    return _wrap("[", items, "]", options, level)


def _encode_dict(d: dict[str, Any], options: WriteOptions, level: int) -> str:
    """Encode object members with optional key ordering and formatting."""
    pairs = sorted(d.items()) if options.sort_keys else list(d.items())
    items = [
        _encode_string(key, options.ensure_ascii)
        + options.key_separator
        + _encode_value(value, options, level + 1)
        for key, value in pairs
    ]
    return _wrap("{", items, "}", options, level)


def _encode_value(obj: Any, options: WriteOptions, level: int) -> str:  # noqa: PLR0911
    """Encode any parsed JSON value."""
    if obj is None:
        return "null"
    elif obj is True:
        return "true"
    elif obj is False:
        return "false"
    elif isinstance(obj, str):
        return _encode_string(obj, options.ensure_ascii)
    elif isinstance(obj, int | float | Decimal):
        return _encode_number(obj, options.allow_nan)
    elif isinstance(obj, dict):
        return _encode_dict(obj, options, level)
    elif isinstance(obj, list | tuple):
        return _encode_array(obj, options, level)
    else:
        msg = f"Object of type {type(obj).__name__} is not JSON serializable"
        raise TypeError(msg)


def write_value(obj: Any, options: WriteOptions) -> str:
    """Renders a parsed JSON value as text."""
    return _encode_value(obj, options, 0)
