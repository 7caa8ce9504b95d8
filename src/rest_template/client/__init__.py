"""
RestTemplate client module
"""

from rest_template.client.builder import RestTemplateBuilder, RestTemplateCustomizer
from rest_template.client.rest_template import RestTemplate
from rest_template.client.http import (
    ClientHttpRequest,
    ClientHttpResponse,
    HttpMethod,
    MediaType,
    ResponseEntity,
)
from rest_template.client.request_factory import (
    ClientHttpRequestFactory,
    SimpleClientHttpRequestFactory,
    PooledClientHttpRequestFactory,
    InterceptingClientHttpRequestFactory,
    detect_request_factory,
)
from rest_template.client.interceptors import (
    ClientHttpRequestInterceptor,
    ClientHttpRequestExecution,
    BasicAuthorizationInterceptor,
)
from rest_template.client.converters import (
    HttpMessageConverter,
    ByteArrayHttpMessageConverter,
    StringHttpMessageConverter,
    JsonHttpMessageConverter,
    PydanticHttpMessageConverter,
    HttpMessageNotReadableError,
    default_message_converters,
)
from rest_template.client.uri import (
    UriTemplateHandler,
    DefaultUriTemplateHandler,
    RootUriTemplateHandler,
)
from rest_template.client.error_handler import (
    ResponseErrorHandler,
    DefaultResponseErrorHandler,
)

__all__ = [
    "RestTemplateBuilder",
    "RestTemplateCustomizer",
    "RestTemplate",
    "ClientHttpRequest",
    "ClientHttpResponse",
    "HttpMethod",
    "MediaType",
    "ResponseEntity",
    "ClientHttpRequestFactory",
    "SimpleClientHttpRequestFactory",
    "PooledClientHttpRequestFactory",
    "InterceptingClientHttpRequestFactory",
    "detect_request_factory",
    "ClientHttpRequestInterceptor",
    "ClientHttpRequestExecution",
    "BasicAuthorizationInterceptor",
    "HttpMessageConverter",
    "ByteArrayHttpMessageConverter",
    "StringHttpMessageConverter",
    "JsonHttpMessageConverter",
    "PydanticHttpMessageConverter",
    "HttpMessageNotReadableError",
    "default_message_converters",
    "UriTemplateHandler",
    "DefaultUriTemplateHandler",
    "RootUriTemplateHandler",
    "ResponseErrorHandler",
    "DefaultResponseErrorHandler",
]
