"""
RestTemplate: a configurable synchronous HTTP client

Requests flow through the pluggable collaborators held by the template:
URI template handler, request factory (wrapped with interceptors),
message converters and response error handler.
"""

import logging
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Type,
    TypeVar,
)

from requests.structures import CaseInsensitiveDict

from rest_template.client.converters import (
    HttpMessageConverter,
    default_message_converters,
)
from rest_template.client.error_handler import (
    DefaultResponseErrorHandler,
    ResponseErrorHandler,
)
from rest_template.client.http import (
    ClientHttpRequest,
    ClientHttpResponse,
    HttpMethod,
    MediaType,
    ResponseEntity,
)
from rest_template.client.interceptors import ClientHttpRequestInterceptor
from rest_template.client.request_factory import (
    ClientHttpRequestFactory,
    InterceptingClientHttpRequestFactory,
    SimpleClientHttpRequestFactory,
)
from rest_template.client.uri import DefaultUriTemplateHandler, UriTemplateHandler
from rest_template.exceptions import RestClientError, ValidationError


T = TypeVar("T")

logger = logging.getLogger(__name__)


# Headers whose values are never written to the logs
SENSITIVE_HEADERS = [
    "authorization",
    "proxy-authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
]


RequestCallback = Callable[[ClientHttpRequest], None]
ResponseExtractor = Callable[[ClientHttpResponse], Any]


def _require(value: Any, name: str) -> Any:
    if value is None:
        raise ValidationError(f"{name} must not be null", field=name)
    return value


def _require_items(items: Optional[Iterable[Any]], name: str) -> List[Any]:
    _require(items, name)
    result = list(items)
    if any(item is None for item in result):
        raise ValidationError(f"{name} must not contain null elements", field=name)
    return result


class RestTemplate:
    """
    Synchronous HTTP client

    A new template uses SimpleClientHttpRequestFactory, the default
    message converters, no interceptors, DefaultUriTemplateHandler and
    DefaultResponseErrorHandler. RestTemplateBuilder is the usual way to
    create and configure one.

    Example:
        >>> template = RestTemplate()
        >>> entity = template.get_for_entity("https://example.com/users/{id}", dict, 42)
        >>> print(entity.status_code, entity.body)
    """

    def __init__(
        self, message_converters: Optional[Iterable[HttpMessageConverter]] = None
    ) -> None:
        """
        Create a new template

        Args:
            message_converters: Converters to use instead of the defaults
        """
        self._request_factory: ClientHttpRequestFactory = SimpleClientHttpRequestFactory()
        if message_converters is None:
            self._message_converters = default_message_converters()
        else:
            self._message_converters = _require_items(
                message_converters, "MessageConverters"
            )
        self._interceptors: List[ClientHttpRequestInterceptor] = []
        self._uri_template_handler: UriTemplateHandler = DefaultUriTemplateHandler()
        self._error_handler: ResponseErrorHandler = DefaultResponseErrorHandler()

    @property
    def request_factory(self) -> ClientHttpRequestFactory:
        """Transport used to create requests"""
        return self._request_factory

    @request_factory.setter
    def request_factory(self, request_factory: ClientHttpRequestFactory) -> None:
        self._request_factory = _require(request_factory, "RequestFactory")

    @property
    def message_converters(self) -> List[HttpMessageConverter]:
        """Converters consulted in order for request and response bodies"""
        return self._message_converters

    @message_converters.setter
    def message_converters(self, converters: Iterable[HttpMessageConverter]) -> None:
        self._message_converters = _require_items(converters, "MessageConverters")

    @property
    def interceptors(self) -> List[ClientHttpRequestInterceptor]:
        """Interceptors applied to every request, in order"""
        return self._interceptors

    @interceptors.setter
    def interceptors(self, interceptors: Iterable[ClientHttpRequestInterceptor]) -> None:
        self._interceptors = _require_items(interceptors, "Interceptors")

    @property
    def uri_template_handler(self) -> UriTemplateHandler:
        """Strategy expanding URI templates"""
        return self._uri_template_handler

    @uri_template_handler.setter
    def uri_template_handler(self, handler: UriTemplateHandler) -> None:
        self._uri_template_handler = _require(handler, "UriTemplateHandler")

    @property
    def error_handler(self) -> ResponseErrorHandler:
        """Strategy deciding which responses are errors"""
        return self._error_handler

    @error_handler.setter
    def error_handler(self, error_handler: ResponseErrorHandler) -> None:
        self._error_handler = _require(error_handler, "ErrorHandler")

    def get_for_entity(
        self,
        url: str,
        response_type: Type[T],
        *uri_args: Any,
        uri_variables: Optional[Mapping[str, Any]] = None,
    ) -> ResponseEntity[T]:
        """
        Perform GET request

        Args:
            url: URI template
            response_type: Type the response body is converted to
            uri_args: Positional template variables
            uri_variables: Named template variables

        Returns:
            Response entity with converted body
        """
        return self.exchange(
            url, HttpMethod.GET, None, response_type, *uri_args,
            uri_variables=uri_variables,
        )

    def get_for_object(
        self,
        url: str,
        response_type: Type[T],
        *uri_args: Any,
        uri_variables: Optional[Mapping[str, Any]] = None,
    ) -> Optional[T]:
        """Perform GET request and return the converted body"""
        return self.get_for_entity(
            url, response_type, *uri_args, uri_variables=uri_variables
        ).body

    def post_for_entity(
        self,
        url: str,
        body: Any,
        response_type: Type[T],
        *uri_args: Any,
        uri_variables: Optional[Mapping[str, Any]] = None,
    ) -> ResponseEntity[T]:
        """
        Perform POST request

        Args:
            url: URI template
            body: Request body, written by the first matching converter
            response_type: Type the response body is converted to
            uri_args: Positional template variables
            uri_variables: Named template variables

        Returns:
            Response entity with converted body
        """
        return self.exchange(
            url, HttpMethod.POST, body, response_type, *uri_args,
            uri_variables=uri_variables,
        )

    def post_for_object(
        self,
        url: str,
        body: Any,
        response_type: Type[T],
        *uri_args: Any,
        uri_variables: Optional[Mapping[str, Any]] = None,
    ) -> Optional[T]:
        """Perform POST request and return the converted body"""
        return self.post_for_entity(
            url, body, response_type, *uri_args, uri_variables=uri_variables
        ).body

    def put(
        self,
        url: str,
        body: Any,
        *uri_args: Any,
        uri_variables: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Perform PUT request"""
        self.exchange(
            url, HttpMethod.PUT, body, None, *uri_args, uri_variables=uri_variables
        )

    def patch_for_object(
        self,
        url: str,
        body: Any,
        response_type: Type[T],
        *uri_args: Any,
        uri_variables: Optional[Mapping[str, Any]] = None,
    ) -> Optional[T]:
        """Perform PATCH request and return the converted body"""
        return self.exchange(
            url, HttpMethod.PATCH, body, response_type, *uri_args,
            uri_variables=uri_variables,
        ).body

    def delete(
        self,
        url: str,
        *uri_args: Any,
        uri_variables: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Perform DELETE request"""
        self.exchange(
            url, HttpMethod.DELETE, None, None, *uri_args, uri_variables=uri_variables
        )

    def exchange(
        self,
        url: str,
        method: HttpMethod,
        body: Any = None,
        response_type: Optional[Type[T]] = None,
        *uri_args: Any,
        headers: Optional[Mapping[str, str]] = None,
        uri_variables: Optional[Mapping[str, Any]] = None,
    ) -> ResponseEntity[T]:
        """
        Perform a request with any method

        Args:
            url: URI template
            method: HTTP method
            body: Optional request body
            response_type: Type the response body is converted to, or None
                to discard the body
            uri_args: Positional template variables
            headers: Extra request headers
            uri_variables: Named template variables

        Returns:
            Response entity with converted body
        """

        def request_callback(request: ClientHttpRequest) -> None:
            if headers:
                request.headers.update(headers)
            if response_type is not None:
                self._write_accept(request, response_type)
            if body is not None:
                self._write_body(request, body)

        def response_extractor(response: ClientHttpResponse) -> ResponseEntity[T]:
            converted = (
                self._read_body(response, response_type)
                if response_type is not None
                else None
            )
            return ResponseEntity(
                body=converted,
                status_code=response.status_code,
                headers=CaseInsensitiveDict(response.headers),
            )

        return self.execute(
            url, method, request_callback, response_extractor, *uri_args,
            uri_variables=uri_variables,
        )

    def execute(
        self,
        url: str,
        method: HttpMethod,
        request_callback: Optional[RequestCallback] = None,
        response_extractor: Optional[ResponseExtractor] = None,
        *uri_args: Any,
        uri_variables: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """
        Expand ``url``, send the request and extract the response

        Args:
            url: URI template
            method: HTTP method
            request_callback: Prepares headers and body of the request
            response_extractor: Turns the response into the return value
            uri_args: Positional template variables
            uri_variables: Named template variables, looked up by name

        Returns:
            Whatever ``response_extractor`` returns, or None
        """
        uri = self._uri_template_handler.expand(
            url, *uri_args, uri_variables=uri_variables
        )
        method = HttpMethod(method)

        request = self._create_request(uri, method)
        if request_callback is not None:
            request_callback(request)

        logger.debug(
            "%s %s headers=%s", method.value, uri, self._redact_headers(request.headers)
        )
        response = request.execute()
        logger.debug("%s %s -> %s", method.value, uri, response.status_code)

        if self._error_handler.has_error(response):
            self._error_handler.handle_error(response)

        if response_extractor is None:
            return None
        return response_extractor(response)

    def _create_request(self, uri: str, method: HttpMethod) -> ClientHttpRequest:
        factory = self._request_factory
        if self._interceptors:
            factory = InterceptingClientHttpRequestFactory(factory, self._interceptors)
        return factory.create_request(uri, method)

    def _write_accept(self, request: ClientHttpRequest, response_type: type) -> None:
        """Advertise the media types readable into ``response_type``"""
        if "Accept" in request.headers:
            return
        media_types: List[str] = []
        for converter in self._message_converters:
            if converter.can_read(response_type, None):
                for media_type in converter.supported_media_types:
                    if media_type not in media_types:
                        media_types.append(media_type)
        if media_types:
            request.headers["Accept"] = ", ".join(media_types)

    def _write_body(self, request: ClientHttpRequest, body: Any) -> None:
        media_type = MediaType.parse(request.headers.get("Content-Type"))
        for converter in self._message_converters:
            if converter.can_write(type(body), media_type):
                converter.write(body, media_type, request)
                return
        raise RestClientError(
            f"No HttpMessageConverter for {type(body).__name__}"
            + (f" and content type [{media_type}]" if media_type else ""),
            code="NO_CONVERTER",
        )

    def _read_body(self, response: ClientHttpResponse, response_type: Type[T]) -> Optional[T]:
        if not response.body:
            return None
        media_type = response.content_type
        for converter in self._message_converters:
            if converter.can_read(response_type, media_type):
                return converter.read(response_type, response)
        raise RestClientError(
            "Could not extract response: no suitable HttpMessageConverter found "
            f"for response type [{getattr(response_type, '__name__', response_type)}] "
            f"and content type [{media_type}]",
            code="NO_CONVERTER",
            status_code=response.status_code,
        )

    def _redact_headers(self, headers: Mapping[str, str]) -> Dict[str, str]:
        """Redact sensitive headers for logging"""
        return {
            key: "[REDACTED]" if key.lower() in SENSITIVE_HEADERS else value
            for key, value in headers.items()
        }

    def close(self) -> None:
        """Close the request factory if it holds resources"""
        close = getattr(self._request_factory, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "RestTemplate":
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit"""
        self.close()
