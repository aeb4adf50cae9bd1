"""
Required decoder tests.

Validates primitive decoding, kind mismatch messages and required object
members, including nested error tagging.
"""

import math
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

import pytest

from jweave import (
    DecodeError,
    JsonKind,
    JsonNode,
    ParseOptions,
    decode,
    decoding,
    encode,
    required,
    result,
)
from jweave.result import Err, Ok

from .conftest import DecodeCase

PRIMITIVE_CASES = [
    DecodeCase("string", '"hello"', required.string, "hello"),
    DecodeCase("empty string", '""', required.string, ""),
    DecodeCase("true", "true", required.boolean, True),
    DecodeCase("false", "false", required.boolean, False),
    DecodeCase("char", '"x"', required.char, "x"),
    DecodeCase("unit", "null", required.unit, None),
    DecodeCase("byte", "200", required.byte, 200),
    DecodeCase("int", "-42", required.int_, -42),
    DecodeCase("int64", "9007199254740993", required.int64, 9007199254740993),
    DecodeCase("float", "2.5", required.float_, 2.5),
    DecodeCase("float from int", "3", required.float_, 3.0),
    DecodeCase(
        "uuid",
        '"12345678-1234-5678-1234-567812345678"',
        required.uuid,
        uuid.UUID("12345678-1234-5678-1234-567812345678"),
    ),
]


@pytest.mark.parametrize("case", PRIMITIVE_CASES, ids=lambda c: c.description)
def test_primitive_success(case: DecodeCase) -> None:
    """
    Validates each primitive decodes a value of its own kind.
    """
    assert decoding.from_string(case.input_data, case.decoder) == Ok(
        case.expected_output
    )


@pytest.mark.parametrize(
    "decoder,text,expected,actual",
    [
        (required.string, "1", "'String'", "Number"),
        (required.int_, '"1"', "'Number'", "String"),
        (required.boolean, "null", "a boolean", "Null"),
        (required.unit, "0", "'Null'", "Number"),
        (required.float_, "[]", "'Number'", "Array"),
    ],
)
def test_kind_mismatch_message(
    decoder: Callable[[JsonNode], Any], text: str, expected: str, actual: str
) -> None:
    """
    Validates a value of the wrong kind names both kinds in the error.
    """
    outcome = decoding.from_string(text, decoder)
    assert isinstance(outcome, Err)
    assert outcome.error.message == f"Expected {expected} but got '{actual}'"
    assert outcome.error.cause is None


@pytest.mark.parametrize(
    "decoder,target_type",
    [
        (required.string, "str"),
        (required.boolean, "bool"),
        (required.char, "char"),
        (required.uuid, "UUID"),
        (required.byte, "byte"),
        (required.int_, "int"),
        (required.int64, "int64"),
        (required.float_, "float"),
        (required.date_time, "datetime"),
        (required.date_time_offset, "datetime"),
    ],
)
def test_required_rejects_null(
    decoder: Callable[[JsonNode], Any], target_type: str
) -> None:
    """
    Validates null never satisfies a required decoder other than unit.
    """
    outcome = decoding.from_string("null", decoder)
    assert isinstance(outcome, Err)
    assert outcome.error.kind is JsonKind.NULL
    assert outcome.error.target_type == target_type
    assert outcome.error.message.endswith("but got 'Null'")


def test_non_finite_number_is_an_error() -> None:
    """
    Validates an overflowing float is reported rather than raised.
    """
    options = ParseOptions(float_hook=float)
    outcome = decoding.from_string("1e400", required.float_, options)
    assert isinstance(outcome, Err)
    assert outcome.error.message == "Unable to get a float from the current value"
    assert outcome.error.raw_value == "Infinity"


def test_mismatch_on_non_finite_node() -> None:
    """
    Validates errors can describe a node holding NaN.
    """
    outcome = required.string(encode.float_(math.nan))
    assert isinstance(outcome, Err)
    assert outcome.error.kind is JsonKind.NUMBER
    assert outcome.error.raw_value == "NaN"
    assert outcome.error.message == "Expected 'String' but got 'Number'"


@pytest.mark.parametrize("text,size", [('""', 0), ('"ab"', 2)])
def test_char_size(text: str, size: int) -> None:
    """
    Validates char accepts exactly one character.
    """
    outcome = decoding.from_string(text, required.char)
    assert isinstance(outcome, Err)
    assert outcome.error.message == f"Expecting a char but got a string of size: {size}"


@pytest.mark.parametrize(
    "decoder,text,message",
    [
        (required.byte, "256", "Unable to get byte from the current value"),
        (required.int_, "2147483648", "Unable to get an int from the current value"),
        (required.int_, "1.5", "Unable to get an int from the current value"),
        (required.uuid, '"nope"', "Unable to decode a guid from the current value"),
        (
            required.date_time,
            '"yesterday"',
            "Unable to get a datetime from the current value",
        ),
        (
            required.date_time_offset,
            '"2024-11-17T05:35:11"',
            "Unable to get a datetime with offset from the current value",
        ),
    ],
)
def test_extraction_failure(
    decoder: Callable[[JsonNode], Any], text: str, message: str
) -> None:
    """
    Validates a value of the right kind that cannot be converted is reported.
    """
    outcome = decoding.from_string(text, decoder)
    assert isinstance(outcome, Err)
    assert outcome.error.message == message


def test_date_time_utc() -> None:
    """
    Validates ISO 8601 timestamps with a Z suffix decode as UTC.
    """
    outcome = decoding.from_string('"2024-11-17T05:35:11.147Z"', required.date_time)
    assert outcome == Ok(datetime(2024, 11, 17, 5, 35, 11, 147000, tzinfo=UTC))

    offset = decoding.from_string(
        '"2024-11-17T05:35:11+02:00"', required.date_time_offset
    )
    assert isinstance(offset, Ok)
    assert offset.value.utcoffset().total_seconds() == 7200


def test_property_get(person_document: str) -> None:
    """
    Validates a present member is decoded with the inner decoder.
    """
    outcome = decoding.from_string(
        person_document, required.Property.get("name", required.string)
    )
    assert outcome == Ok("Alice")


def test_property_missing(person_document: str) -> None:
    """
    Validates a missing member fails with its name as the property.
    """
    outcome = decoding.from_string(
        person_document, required.Property.get("email", required.string)
    )
    assert isinstance(outcome, Err)
    assert outcome.error.message == "Property 'email' not found"
    assert outcome.error.property == "email"
    assert outcome.error.kind is JsonKind.OBJECT


def test_property_on_non_object() -> None:
    """
    Validates reading a member from an array is a kind mismatch.
    """
    outcome = decoding.from_string("[1]", required.Property.get("a", required.int_))
    assert isinstance(outcome, Err)
    assert outcome.error.message == "Expected 'Object' but got 'Array'"


def test_property_inner_failure_is_tagged() -> None:
    """
    Validates an inner failure carries the member name.
    """
    outcome = decoding.from_string(
        '{"age": "thirty"}', required.Property.get("age", required.int_)
    )
    assert isinstance(outcome, Err)
    assert outcome.error.property == "age"
    assert outcome.error.kind is JsonKind.STRING
    assert outcome.error.raw_value == '"thirty"'


def test_nested_property_keeps_innermost_name(nested_document: str) -> None:
    """
    Validates a failure deep in nested objects keeps the innermost key.
    """
    city = required.Property.get("address", required.Property.get("zip", required.int_))
    outcome = decoding.from_string(nested_document, city)
    assert isinstance(outcome, Err)
    assert outcome.error.property == "zip"


def test_property_containers(nested_document: str) -> None:
    """
    Validates the map and dict member forms produce their container types.
    """
    scores = decoding.from_string(
        nested_document, required.Property.map_of("scores", required.int_)
    )
    assert isinstance(scores, Ok)
    assert isinstance(scores.value, MappingProxyType)
    assert dict(scores.value) == {"math": 90, "art": 75}

    address = decoding.from_string(
        nested_document, required.Property.dict_of("address", required.string)
    )
    assert address == Ok({"city": "New York", "country": "USA"})


def test_property_sequences(person_document: str) -> None:
    """
    Validates array members decode as tuples or lists.
    """
    assert decoding.from_string(
        person_document, required.Property.sequence("tags", required.string)
    ) == Ok(("x", "y"))
    assert decoding.from_string(
        person_document, required.Property.list_of("tags", required.string)
    ) == Ok(["x", "y"])


def test_property_array_col_reports_every_element() -> None:
    """
    Validates collect-mode array members report each bad element.
    """
    outcome = decoding.from_string_col(
        '{"ids": [1, "a", 3, "b"]}', required.Property.array_col("ids", required.int_)
    )
    assert isinstance(outcome, Err)
    assert [e.index for e in outcome.error] == [1, 3]
    assert all(e.property == "ids" for e in outcome.error)


def test_property_dict_col_keyed() -> None:
    """
    Validates keyed element decoders receive the member key.
    """

    def labelled(key: str, node: JsonNode) -> Any:
        return required.int_(node).map(lambda n: f"{key}={n}")

    outcome = decoding.from_string_col(
        '{"m": {"a": 1, "b": 2}}', required.Property.dict_col("m", labelled, keyed=True)
    )
    assert outcome == Ok({"a": "a=1", "b": "b=2"})


def test_sequence_at_missing_member() -> None:
    """
    Validates a missing member inside an array element carries both positions.
    """
    items = decode.sequence(
        lambda i, node: required.Property.sequence_at("id", i, required.int_)(node),
        indexed=True,
    )
    outcome = decoding.from_string('[{"id": 1}, {"name": "x"}]', items)
    assert isinstance(outcome, Err)
    assert outcome.error.index == 1
    assert outcome.error.property == "id"
    assert outcome.error.message == "Property 'id' not found"


def person(node: JsonNode) -> Any:
    return result.merge(
        required.Property.get("name", required.string)(node),
        required.Property.get("age", required.int_)(node),
        required.Property.list_of("tags", required.string)(node),
    )


def test_person_end_to_end(person_document: str) -> None:
    """
    Validates a hand-written record decoder built from member decoders.
    """
    assert decoding.from_string(person_document, person) == Ok(
        ("Alice", 30, ["x", "y"])
    )


def test_person_first_failure() -> None:
    """
    Validates fail-fast record decoding reports only the first bad member.
    """
    outcome = decoding.from_string('{"name": 1, "age": "x", "tags": []}', person)
    assert isinstance(outcome, Err)
    error: DecodeError = outcome.error
    assert error.property == "name"
