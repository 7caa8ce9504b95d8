"""
Message Converter Unit Tests
"""

from typing import Optional

import pytest
from pydantic import BaseModel
from requests.structures import CaseInsensitiveDict

from rest_template.client import (
    ByteArrayHttpMessageConverter,
    HttpMessageConverter,
    HttpMessageNotReadableError,
    JsonHttpMessageConverter,
    PydanticHttpMessageConverter,
    StringHttpMessageConverter,
    default_message_converters,
)
from rest_template.client.http import (
    ClientHttpRequest,
    ClientHttpResponse,
    HttpMethod,
    MediaType,
)


class Item(BaseModel):
    sku: str
    quantity: int = 1


def response(body: bytes, content_type: Optional[str] = None) -> ClientHttpResponse:
    headers = CaseInsensitiveDict()
    if content_type:
        headers["Content-Type"] = content_type
    return ClientHttpResponse(status_code=200, headers=headers, body=body)


@pytest.fixture
def request_(recording_factory) -> ClientHttpRequest:
    return recording_factory.create_request("http://example.com", HttpMethod.POST)


class TestMediaType:
    """Tests for media type helpers"""

    def test_parse(self):
        """Should strip parameters and lower-case"""
        assert MediaType.parse("Application/JSON; charset=UTF-8") == "application/json"
        assert MediaType.parse(None) is None

    def test_charset(self):
        """Should read the charset parameter"""
        assert MediaType.charset("text/plain; charset=latin-1") == "latin-1"
        assert MediaType.charset("text/plain") == "utf-8"

    def test_includes(self):
        """Should match wildcards and structured suffixes"""
        assert MediaType.includes("*/*", "image/png")
        assert MediaType.includes("text/*", "text/html")
        assert MediaType.includes("application/*+json", "application/problem+json")
        assert not MediaType.includes("application/json", "text/plain")


class TestDefaultConverters:
    """Tests for the default converter set"""

    def test_default_converters_satisfy_protocol(self):
        """Should all implement HttpMessageConverter"""
        converters = default_message_converters()
        assert len(converters) == 4
        assert all(isinstance(c, HttpMessageConverter) for c in converters)

    def test_default_converters_are_fresh_instances(self):
        """Should return new converters on every call"""
        first, second = default_message_converters(), default_message_converters()
        assert all(a is not b for a, b in zip(first, second))


class TestByteAndStringConverters:
    """Tests for bytes and str converters"""

    def test_bytes_round_trip(self, request_: ClientHttpRequest):
        """Should read and write raw bytes"""
        converter = ByteArrayHttpMessageConverter()
        assert converter.can_read(bytes, "image/png")
        assert converter.read(bytes, response(b"\x00\x01")) == b"\x00\x01"

        converter.write(b"\x02", None, request_)
        assert bytes(request_.body) == b"\x02"
        assert request_.headers["Content-Type"] == "application/octet-stream"

    def test_string_uses_response_charset(self):
        """Should decode with the charset of the response"""
        converter = StringHttpMessageConverter()
        body = "café".encode("latin-1")
        assert converter.read(str, response(body, "text/plain; charset=latin-1")) == "café"

    def test_string_write_sets_content_type(self, request_: ClientHttpRequest):
        """Should write text/plain with the default charset"""
        StringHttpMessageConverter().write("hi", None, request_)
        assert request_.headers["Content-Type"] == "text/plain;charset=utf-8"
        assert bytes(request_.body) == b"hi"

    def test_string_cannot_read_dict(self):
        """Should only handle str"""
        assert not StringHttpMessageConverter().can_read(dict, "text/plain")


class TestJsonConverters:
    """Tests for JSON and pydantic converters"""

    def test_json_requires_json_media_type(self):
        """Should refuse non-JSON media types"""
        converter = JsonHttpMessageConverter()
        assert converter.can_read(dict, "application/json")
        assert converter.can_read(list, "application/vnd.api+json")
        assert not converter.can_read(dict, "text/html")

    def test_json_invalid_document_should_raise(self):
        """Should raise HttpMessageNotReadableError for malformed JSON"""
        with pytest.raises(HttpMessageNotReadableError):
            JsonHttpMessageConverter().read(dict, response(b"{nope", "application/json"))

    def test_pydantic_read(self):
        """Should validate the body into the model"""
        item = PydanticHttpMessageConverter().read(
            Item, response(b'{"sku": "A1", "quantity": 3}', "application/json")
        )
        assert item == Item(sku="A1", quantity=3)

    def test_pydantic_invalid_body_should_raise(self):
        """Should raise HttpMessageNotReadableError for invalid models"""
        with pytest.raises(HttpMessageNotReadableError, match="Could not read Item"):
            PydanticHttpMessageConverter().read(Item, response(b'{"quantity": 3}'))

    def test_pydantic_write_respects_existing_content_type(self, request_: ClientHttpRequest):
        """Should keep a Content-Type set by the caller"""
        request_.headers["Content-Type"] = "application/vnd.item+json"
        PydanticHttpMessageConverter().write(
            Item(sku="B2"), "application/vnd.item+json", request_
        )
        assert request_.headers["Content-Type"] == "application/vnd.item+json"
        assert bytes(request_.body) == b'{"sku":"B2","quantity":1}'
