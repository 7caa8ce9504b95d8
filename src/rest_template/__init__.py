"""
rest_template: fluent, immutable builder for a configurable HTTP client

Main entry point for the package
"""

from rest_template.client import (
    RestTemplate,
    RestTemplateBuilder,
    RestTemplateCustomizer,
    HttpMethod,
    MediaType,
    ResponseEntity,
    ClientHttpRequestFactory,
    SimpleClientHttpRequestFactory,
    PooledClientHttpRequestFactory,
    detect_request_factory,
    ClientHttpRequestInterceptor,
    BasicAuthorizationInterceptor,
    HttpMessageConverter,
    ByteArrayHttpMessageConverter,
    StringHttpMessageConverter,
    JsonHttpMessageConverter,
    PydanticHttpMessageConverter,
    default_message_converters,
    UriTemplateHandler,
    DefaultUriTemplateHandler,
    RootUriTemplateHandler,
    ResponseErrorHandler,
    DefaultResponseErrorHandler,
)
from rest_template.exceptions import (
    RestClientError,
    ValidationError,
    InstantiationError,
    ConfigError,
    ResourceAccessError,
    RestClientResponseError,
    HttpClientError,
    HttpServerError,
    UnknownHttpStatusCodeError,
)

# Configuration
from rest_template.config import (
    RestTemplateSettings,
    SettingsDefaults,
    SettingsLoader,
    ENV_VAR_MAPPING,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "RestTemplate",
    "RestTemplateBuilder",
    "RestTemplateCustomizer",
    "HttpMethod",
    "MediaType",
    "ResponseEntity",
    # Transports
    "ClientHttpRequestFactory",
    "SimpleClientHttpRequestFactory",
    "PooledClientHttpRequestFactory",
    "detect_request_factory",
    # Interceptors
    "ClientHttpRequestInterceptor",
    "BasicAuthorizationInterceptor",
    # Converters
    "HttpMessageConverter",
    "ByteArrayHttpMessageConverter",
    "StringHttpMessageConverter",
    "JsonHttpMessageConverter",
    "PydanticHttpMessageConverter",
    "default_message_converters",
    # URI templates
    "UriTemplateHandler",
    "DefaultUriTemplateHandler",
    "RootUriTemplateHandler",
    # Error handling
    "ResponseErrorHandler",
    "DefaultResponseErrorHandler",
    # Exceptions
    "RestClientError",
    "ValidationError",
    "InstantiationError",
    "ConfigError",
    "ResourceAccessError",
    "RestClientResponseError",
    "HttpClientError",
    "HttpServerError",
    "UnknownHttpStatusCodeError",
    # Configuration
    "RestTemplateSettings",
    "SettingsDefaults",
    "SettingsLoader",
    "ENV_VAR_MAPPING",
]
