"""
Pytest configuration and shared fixtures for jweave tests.

Provides immutable case containers and parsed sample documents.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import pytest

import jweave
from jweave import JsonNode


@dataclass(frozen=True)
class DecodeCase:
    """
    Immutable container for a decoder test case.

    Holds the JSON input, the decoder under test and the expected value.
    """

    description: str
    input_data: str
    decoder: Callable[[JsonNode], Any]
    expected_output: Any = None


@pytest.fixture
def parse() -> Callable[[str], JsonNode]:
    """Parses JSON text into a root node, raising on malformed input."""
    return jweave.parse


@pytest.fixture
def person_document() -> str:
    return '{"name": "Alice", "age": 30, "tags": ["x", "y"]}'


@pytest.fixture
def nested_document() -> str:
    return """{
    "name": "John Doe",
    "age": 30,
    "address": {"city": "New York", "country": "USA"},
    "scores": {"math": 90, "art": 75}
}"""
