"""
Serializer integration tests.

Validates hand-written encoders and decoders plugged into msgspec through
a Codec, for a custom type nested inside a msgspec Struct.
"""

from typing import Any

import msgspec
import pytest

from jweave import Codec, DecodingError, JsonNode, decode, decoding, encode, required
from jweave.encode import Json
from jweave.result import Err, Ok

CONTACT_KINDS = ("email", "phone")


class ContactForm:
    """A plain class msgspec cannot handle on its own."""

    def __init__(self, kind: str, value: str) -> None:
        self.kind = kind
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContactForm):
            return NotImplemented
        return (self.kind, self.value) == (other.kind, other.value)


class Person(msgspec.Struct):
    name: str
    contact: ContactForm


def encode_contact(contact: ContactForm) -> JsonNode:
    return Json.object(
        [("kind", encode.string(contact.kind)), ("value", encode.string(contact.value))]
    )


def decode_contact(node: JsonNode) -> Any:
    def check_kind(kind: str) -> Any:
        if kind not in CONTACT_KINDS:
            return decode.fail("Invalid contact form type", "ContactForm")
        value = required.Property.get("value", required.string)
        return decode.map_value(value, lambda v: ContactForm(kind, v))

    return decode.and_then(required.Property.get("kind", required.string), check_kind)(
        node
    )


@pytest.fixture
def codec() -> Codec:
    return Codec().use_codec(ContactForm, encode_contact, decode_contact)


def test_round_trip(codec: Codec) -> None:
    """
    Validates a custom type nested in a Struct encodes and decodes.
    """
    alice = Person("Alice", ContactForm("email", "alice@example.com"))
    data = codec.encode(alice)

    assert data == (
        b'{"name":"Alice","contact":{"kind":"email","value":"alice@example.com"}}'
    )
    assert codec.decode(data, Person) == alice


def test_decoder_failure_raises_validation_error(codec: Codec) -> None:
    """
    Validates a failing registered decoder surfaces as a ValidationError.
    """
    data = b'{"name": "Bob", "contact": {"kind": "fax", "value": "123"}}'
    with pytest.raises(msgspec.ValidationError, match="Invalid contact form type"):
        codec.decode(data, Person)


def test_dec_hook_direct(codec: Codec) -> None:
    """
    Validates the decode hook raises the decode error it received.
    """
    assert codec.dec_hook(ContactForm, {"kind": "phone", "value": "1"}) == ContactForm(
        "phone", "1"
    )

    with pytest.raises(DecodingError) as info:
        codec.dec_hook(ContactForm, {"kind": "phone"})
    assert info.value.error.property == "value"


def test_unregistered_types(codec: Codec) -> None:
    """
    Validates hooks decline types nothing was registered for.
    """
    with pytest.raises(NotImplementedError):
        codec.dec_hook(complex, 1)
    with pytest.raises(NotImplementedError):
        codec.enc_hook(object())


def test_encoder_lookup_follows_subclasses(codec: Codec) -> None:
    """
    Validates subclasses use their base class encoder.
    """

    class WorkContact(ContactForm):
        pass

    assert codec.enc_hook(WorkContact("phone", "2")) == {"kind": "phone", "value": "2"}


def test_registration_is_immutable() -> None:
    """
    Validates registering returns a new codec and leaves the original alone.
    """
    base = Codec()
    extended = base.use_decoder(ContactForm, decode_contact)

    assert ContactForm in extended.decoders
    assert ContactForm not in base.decoders
    assert not extended.encoders
    with pytest.raises(TypeError):
        extended.decoders[int] = required.int_  # type: ignore[index]


def test_codec_auto(codec: Codec) -> None:
    """
    Validates the automatic decoder routes registered types through the codec.
    """
    text = '{"name": "Cy", "contact": {"kind": "email", "value": "c@x"}}'
    outcome = decoding.from_string(text, codec.auto(Person))
    assert outcome == Ok(Person("Cy", ContactForm("email", "c@x")))

    failed = decoding.from_string(
        '{"name": "Cy", "contact": {"kind": "telex", "value": "1"}}', codec.auto(Person)
    )
    assert isinstance(failed, Err)
    assert "Invalid contact form type" in failed.error.message
