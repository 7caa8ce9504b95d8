"""
RestTemplate Unit Tests
"""

import json
import logging
from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel

from rest_template.client import (
    HttpMethod,
    RestTemplate,
    SimpleClientHttpRequestFactory,
    StringHttpMessageConverter,
    default_message_converters,
)
from rest_template.exceptions import (
    HttpClientError,
    HttpServerError,
    RestClientError,
    UnknownHttpStatusCodeError,
    ValidationError,
)


class User(BaseModel):
    id: int
    name: str


class TestRestTemplateDefaults:
    """Tests for a freshly created RestTemplate"""

    def test_default_request_factory(self):
        """Should start with the simple transport"""
        assert isinstance(RestTemplate().request_factory, SimpleClientHttpRequestFactory)

    def test_default_message_converters(self):
        """Should start with the default converters"""
        template = RestTemplate()
        assert [type(c) for c in template.message_converters] == [
            type(c) for c in default_message_converters()
        ]

    def test_custom_message_converters(self):
        """Should use the converters passed to the constructor"""
        converter = StringHttpMessageConverter()
        assert RestTemplate([converter]).message_converters == [converter]

    def test_setters_reject_none(self):
        """Should reject null collaborators"""
        template = RestTemplate()
        with pytest.raises(ValidationError, match="RequestFactory must not be null"):
            template.request_factory = None
        with pytest.raises(ValidationError, match="ErrorHandler must not be null"):
            template.error_handler = None
        with pytest.raises(ValidationError, match="UriTemplateHandler must not be null"):
            template.uri_template_handler = None
        with pytest.raises(ValidationError, match="MessageConverters must not contain null"):
            template.message_converters = [None]


class TestRestTemplateExchange:
    """Tests for request execution"""

    @pytest.fixture
    def template(self, recording_factory) -> RestTemplate:
        template = RestTemplate()
        template.request_factory = recording_factory
        return template

    def test_get_for_entity_reads_json(self, template: RestTemplate, recording_factory):
        """Should convert a JSON body into a dict"""
        recording_factory.respond(200, b'{"id": 1}', "application/json")

        entity = template.get_for_entity("http://example.com/users/{id}", dict, 1)

        assert entity.status_code == 200
        assert entity.body == {"id": 1}
        assert recording_factory.last_request.uri == "http://example.com/users/1"
        assert recording_factory.last_request.method == HttpMethod.GET

    def test_get_for_object_reads_pydantic_model(
        self, template: RestTemplate, recording_factory
    ):
        """Should convert a JSON body into a pydantic model"""
        recording_factory.respond(200, b'{"id": 7, "name": "ada"}', "application/json")

        user = template.get_for_object(
            "http://example.com/users/{id}", User, uri_variables={"id": 7}
        )

        assert user == User(id=7, name="ada")

    def test_get_sends_accept_header(self, template: RestTemplate, recording_factory):
        """Should advertise the media types readable into the response type"""
        recording_factory.respond(200, b"[]", "application/json")

        template.get_for_object("http://example.com/items", list)

        accept = recording_factory.last_request.sent_headers["Accept"]
        assert "application/json" in accept

    def test_post_for_object_writes_json(self, template: RestTemplate, recording_factory):
        """Should write a dict body as JSON"""
        recording_factory.respond(201, b"created", "text/plain")

        result = template.post_for_object("http://example.com/items", {"a": 1}, str)

        request = recording_factory.last_request
        assert result == "created"
        assert request.method == HttpMethod.POST
        assert request.sent_headers["Content-Type"] == "application/json"
        assert json.loads(request.sent_body) == {"a": 1}

    def test_put_writes_pydantic_model(self, template: RestTemplate, recording_factory):
        """Should write a pydantic model as JSON"""
        template.put("http://example.com/users/{id}", User(id=3, name="bo"), 3)

        request = recording_factory.last_request
        assert request.method == HttpMethod.PUT
        assert json.loads(request.sent_body) == {"id": 3, "name": "bo"}

    def test_delete(self, template: RestTemplate, recording_factory):
        """Should send a DELETE without a body"""
        template.delete("http://example.com/users/{id}", 9)

        request = recording_factory.last_request
        assert request.method == HttpMethod.DELETE
        assert request.uri == "http://example.com/users/9"
        assert request.sent_body == b""

    def test_exchange_sends_extra_headers(self, template: RestTemplate, recording_factory):
        """Should send caller supplied headers"""
        template.exchange(
            "http://example.com/ping", HttpMethod.GET, headers={"X-Trace": "abc"}
        )
        assert recording_factory.last_request.sent_headers["X-Trace"] == "abc"

    def test_uri_variable_named_like_a_parameter(
        self, template: RestTemplate, recording_factory
    ):
        """Should expand variables named body, url or response_type"""
        template.get_for_object(
            "http://example.com/{body}/{url}/{response_type}",
            str,
            uri_variables={"body": "a", "url": "b", "response_type": "c"},
        )
        assert recording_factory.last_request.uri == "http://example.com/a/b/c"

    def test_uri_variable_named_headers(self, template: RestTemplate, recording_factory):
        """Should keep a variable named headers apart from request headers"""
        template.exchange(
            "http://example.com/{headers}",
            HttpMethod.GET,
            headers={"X-Trace": "abc"},
            uri_variables={"headers": "h"},
        )

        request = recording_factory.last_request
        assert request.uri == "http://example.com/h"
        assert request.sent_headers["X-Trace"] == "abc"

    def test_no_writer_should_raise(self, template: RestTemplate):
        """Should raise when no converter can write the body"""
        with pytest.raises(RestClientError, match="No HttpMessageConverter for object"):
            template.post_for_entity("http://example.com", object(), None)

    def test_no_reader_should_raise(self, template: RestTemplate, recording_factory):
        """Should raise when no converter can read the response"""
        recording_factory.respond(200, b"<xml/>", "application/xml")
        with pytest.raises(RestClientError, match="no suitable HttpMessageConverter"):
            template.get_for_object("http://example.com", dict)

    def test_empty_body_returns_none(self, template: RestTemplate, recording_factory):
        """Should return None for an empty body"""
        recording_factory.respond(204)
        assert template.get_for_object("http://example.com", dict) is None


class TestRestTemplateErrors:
    """Tests for error handler dispatch"""

    @pytest.fixture
    def template(self, recording_factory) -> RestTemplate:
        template = RestTemplate()
        template.request_factory = recording_factory
        return template

    def test_client_error(self, template: RestTemplate, recording_factory):
        """Should raise HttpClientError for 4xx responses"""
        recording_factory.respond(404, b"missing", "text/plain", reason="Not Found")

        with pytest.raises(HttpClientError) as exc_info:
            template.get_for_object("http://example.com/nope", str)

        assert exc_info.value.status_code == 404
        assert exc_info.value.body_text == "missing"
        assert str(exc_info.value) == "404 Not Found"

    def test_server_error(self, template: RestTemplate, recording_factory):
        """Should raise HttpServerError for 5xx responses"""
        recording_factory.respond(503, reason="Service Unavailable")
        with pytest.raises(HttpServerError):
            template.get_for_object("http://example.com", str)

    def test_unknown_status(self, template: RestTemplate, recording_factory):
        """Should raise UnknownHttpStatusCodeError for unknown statuses"""
        recording_factory.respond(600)
        with pytest.raises(UnknownHttpStatusCodeError):
            template.get_for_object("http://example.com", str)

    def test_custom_error_handler(self, template: RestTemplate, recording_factory):
        """Should delegate to a custom error handler"""
        recording_factory.respond(500, b"oops", "text/plain")
        error_handler = MagicMock()
        error_handler.has_error.return_value = False
        template.error_handler = error_handler

        assert template.get_for_object("http://example.com", str) == "oops"
        error_handler.handle_error.assert_not_called()


class TestRestTemplateInterceptors:
    """Tests for the interceptor chain"""

    def test_interceptors_run_in_order(self, recording_factory):
        """Should run interceptors in list order before sending"""
        order = []

        class Tagging:
            def __init__(self, tag):
                self.tag = tag

            def intercept(self, request, body, execution):
                order.append(self.tag)
                request.headers[f"X-{self.tag}"] = "1"
                return execution.execute(request, body)

        template = RestTemplate()
        template.request_factory = recording_factory
        template.interceptors = [Tagging("first"), Tagging("second")]

        template.get_for_entity("http://example.com", None)

        assert order == ["first", "second"]
        headers = recording_factory.last_request.sent_headers
        assert headers["X-first"] == "1"
        assert headers["X-second"] == "1"

    def test_interceptor_can_short_circuit(self, recording_factory):
        """Should return the interceptor's response without sending"""
        from rest_template.client.http import ClientHttpResponse

        class ShortCircuit:
            def intercept(self, request, body, execution):
                return ClientHttpResponse(status_code=200, body=b"cached")

        template = RestTemplate()
        template.request_factory = recording_factory
        template.interceptors = [ShortCircuit()]

        assert template.get_for_object("http://example.com", str) == "cached"
        assert recording_factory.requests == []


class TestRestTemplateLogging:
    """Tests for request logging"""

    def test_authorization_header_is_redacted(self, recording_factory, caplog):
        """Should never log credentials"""
        template = RestTemplate()
        template.request_factory = recording_factory

        with caplog.at_level(logging.DEBUG, logger="rest_template.client.rest_template"):
            template.exchange(
                "http://example.com",
                HttpMethod.GET,
                headers={"Authorization": "Basic c2VjcmV0"},
            )

        assert "c2VjcmV0" not in caplog.text
        assert "[REDACTED]" in caplog.text

    def test_close_closes_request_factory(self):
        """Should close a request factory that supports it"""
        factory = MagicMock()
        template = RestTemplate()
        template.request_factory = factory

        with template:
            pass

        factory.close.assert_called_once_with()
