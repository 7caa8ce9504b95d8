"""
RestTemplateBuilder: immutable, fluent configuration for RestTemplate

Every mutator returns a new builder; the receiver is never changed. A
builder can therefore be shared between threads and reused to build or
configure any number of templates.
"""

import copy
import logging
from collections.abc import Iterable
from typing import Any, Callable, Optional, Tuple, Type, TypeVar, Union

from rest_template.client.converters import (
    HttpMessageConverter,
    default_message_converters,
)
from rest_template.client.error_handler import ResponseErrorHandler
from rest_template.client.interceptors import (
    BasicAuthorizationInterceptor,
    ClientHttpRequestInterceptor,
)
from rest_template.client.request_factory import (
    ClientHttpRequestFactory,
    detect_request_factory,
)
from rest_template.client.rest_template import RestTemplate
from rest_template.client.uri import RootUriTemplateHandler, UriTemplateHandler
from rest_template.exceptions import ConfigError, InstantiationError, ValidationError


R = TypeVar("R", bound=RestTemplate)

logger = logging.getLogger(__name__)


# Called with the fully configured template, after everything else is applied
RestTemplateCustomizer = Callable[[RestTemplate], None]

RequestFactorySelection = Union[ClientHttpRequestFactory, Type[ClientHttpRequestFactory]]

_SCALAR_TYPES = (str, bytes, bytearray)


def _is_collection(value: Any) -> bool:
    # Customizers are callables, so a callable is always a single item
    return (
        isinstance(value, Iterable)
        and not isinstance(value, _SCALAR_TYPES)
        and not callable(value)
    )


def _collect(items: Tuple[Any, ...], name: str) -> Tuple[Any, ...]:
    """
    Normalize varargs into a tuple

    Accepts either individual items or a single iterable of items, such
    as a list, deque, generator or dict view.
    A lone None argument, or any None element, is rejected.
    """
    if len(items) == 1 and items[0] is None:
        raise ValidationError(f"{name} must not be null", field=name)
    if len(items) == 1 and _is_collection(items[0]):
        items = tuple(items[0])
    if any(item is None for item in items):
        raise ValidationError(f"{name} must not contain null elements", field=name)
    return tuple(items)


def _require(value: Any, name: str) -> Any:
    if value is None:
        raise ValidationError(f"{name} must not be null", field=name)
    return value


def _require_timeout(value: Optional[int], name: str) -> int:
    _require(value, name)
    if value < 0:
        raise ValidationError(f"{name} must not be negative", field=name)
    return value


def _instantiate(cls: Any) -> Any:
    """Create ``cls`` through its no-argument constructor"""
    if not isinstance(cls, type):
        raise InstantiationError(f"{cls!r} is not a class", target=None)
    try:
        return cls()
    except Exception as e:
        raise InstantiationError(
            f"Unable to instantiate {cls.__name__} through its "
            f"no-argument constructor: {e}",
            target=cls,
            cause=e,
        ) from e


class RestTemplateBuilder:
    """
    Builder for RestTemplate

    Example:
        >>> builder = (
        ...     RestTemplateBuilder()
        ...     .root_uri("https://api.example.com")
        ...     .basic_authorization("user", "secret")
        ...     .set_read_timeout(5000)
        ... )
        >>> template = builder.build()
        >>> template.get_for_object("/users/{id}", dict, 42)

    Unless ``detect_request_factory(False)`` is called or a request
    factory is given explicitly, the richest transport available at
    runtime is detected and used.
    """

    def __init__(self, *customizers: RestTemplateCustomizer) -> None:
        """
        Create a new builder

        Args:
            customizers: Customizers applied to every built template
        """
        self._customizers: Tuple[RestTemplateCustomizer, ...] = _collect(
            customizers, "Customizers"
        )
        self._detect_request_factory = True
        self._root_uri: Optional[str] = None
        self._message_converters: Optional[Tuple[HttpMessageConverter, ...]] = None
        self._interceptors: Tuple[ClientHttpRequestInterceptor, ...] = ()
        self._request_factory: Optional[RequestFactorySelection] = None
        self._uri_template_handler: Optional[UriTemplateHandler] = None
        self._error_handler: Optional[ResponseErrorHandler] = None
        self._connect_timeout: Optional[int] = None
        self._read_timeout: Optional[int] = None

    def _derive(self, **changes: Any) -> "RestTemplateBuilder":
        """Return a copy of this builder with the given fields replaced"""
        builder = copy.copy(self)
        for name, value in changes.items():
            setattr(builder, f"_{name}", value)
        return builder

    def detect_request_factory(self, detect: bool) -> "RestTemplateBuilder":
        """
        Enable or disable request factory detection

        When disabled and no request factory is set, templates keep their
        own default transport.
        """
        return self._derive(detect_request_factory=bool(detect))

    def root_uri(self, root_uri: str) -> "RestTemplateBuilder":
        """
        Set a root URI prefixed to every template starting with ``/``

        The root URI wraps whichever URI template handler the template
        ends up with, regardless of the order in which ``root_uri`` and
        ``uri_template_handler`` are called.
        """
        return self._derive(root_uri=_require(root_uri, "RootUri"))

    def message_converters(self, *converters: Any) -> "RestTemplateBuilder":
        """Replace the message converters"""
        return self._derive(
            message_converters=_collect(converters, "MessageConverters")
        )

    def additional_message_converters(self, *converters: Any) -> "RestTemplateBuilder":
        """Append message converters to the current ones"""
        added = _collect(converters, "MessageConverters")
        return self._derive(
            message_converters=(self._message_converters or ()) + added
        )

    def default_message_converters(self) -> "RestTemplateBuilder":
        """Reset the message converters to the standard default set"""
        return self._derive(message_converters=tuple(default_message_converters()))

    def interceptors(self, *interceptors: Any) -> "RestTemplateBuilder":
        """Replace the request interceptors"""
        return self._derive(interceptors=_collect(interceptors, "Interceptors"))

    def additional_interceptors(self, *interceptors: Any) -> "RestTemplateBuilder":
        """Append request interceptors to the current ones"""
        return self._derive(
            interceptors=self._interceptors + _collect(interceptors, "Interceptors")
        )

    def request_factory(
        self, request_factory: RequestFactorySelection
    ) -> "RestTemplateBuilder":
        """
        Set the request factory

        Args:
            request_factory: A factory instance, or a factory class created
                through its no-argument constructor for every build
        """
        return self._derive(request_factory=_require(request_factory, "RequestFactory"))

    def uri_template_handler(self, handler: UriTemplateHandler) -> "RestTemplateBuilder":
        """Set the URI template handler"""
        return self._derive(uri_template_handler=_require(handler, "UriTemplateHandler"))

    def error_handler(self, error_handler: ResponseErrorHandler) -> "RestTemplateBuilder":
        """Set the response error handler"""
        return self._derive(error_handler=_require(error_handler, "ErrorHandler"))

    def basic_authorization(self, username: str, password: str) -> "RestTemplateBuilder":
        """Append an interceptor adding HTTP Basic authorization"""
        interceptor = BasicAuthorizationInterceptor(username, password)
        return self._derive(interceptors=self._interceptors + (interceptor,))

    def set_connect_timeout(self, connect_timeout: int) -> "RestTemplateBuilder":
        """Set the connect timeout of the request factory in milliseconds"""
        return self._derive(
            connect_timeout=_require_timeout(connect_timeout, "ConnectTimeout")
        )

    def set_read_timeout(self, read_timeout: int) -> "RestTemplateBuilder":
        """Set the read timeout of the request factory in milliseconds"""
        return self._derive(read_timeout=_require_timeout(read_timeout, "ReadTimeout"))

    def customizers(self, *customizers: Any) -> "RestTemplateBuilder":
        """Replace the customizers"""
        return self._derive(
            customizers=_collect(customizers, "RestTemplateCustomizers")
        )

    def additional_customizers(self, *customizers: Any) -> "RestTemplateBuilder":
        """Append customizers to the current ones"""
        return self._derive(
            customizers=self._customizers
            + _collect(customizers, "RestTemplateCustomizers")
        )

    def build(self, rest_template_class: Optional[Type[R]] = None) -> R:
        """
        Build and configure a new template

        Args:
            rest_template_class: Template type to create through its
                no-argument constructor, RestTemplate by default

        Returns:
            Configured template

        Raises:
            InstantiationError: If the template type cannot be created
        """
        cls = RestTemplate if rest_template_class is None else rest_template_class
        return self.configure(_instantiate(cls))

    def configure(self, rest_template: R) -> R:
        """
        Apply this builder's configuration to an existing template

        Transport, converters, interceptors, URI template handler and
        error handler are applied first; customizers run last, in order.

        A transport replaced here is not closed: the caller keeps ownership
        of whatever factory the template held before. The new transport
        belongs to the template and is released by ``RestTemplate.close()``.

        Returns:
            The given template
        """
        _require(rest_template, "RestTemplate")

        request_factory = self._build_request_factory()
        if request_factory is not None:
            rest_template.request_factory = request_factory
        self._apply_timeouts(rest_template.request_factory)

        if self._message_converters is not None:
            rest_template.message_converters = list(self._message_converters)

        if self._interceptors:
            rest_template.interceptors = (
                list(rest_template.interceptors) + list(self._interceptors)
            )

        if self._uri_template_handler is not None:
            rest_template.uri_template_handler = self._uri_template_handler
        if self._root_uri is not None:
            RootUriTemplateHandler.add_to(rest_template, self._root_uri)

        if self._error_handler is not None:
            rest_template.error_handler = self._error_handler

        for customizer in self._customizers:
            customizer(rest_template)

        logger.debug(
            "Configured %s with %s",
            type(rest_template).__name__,
            type(rest_template.request_factory).__name__,
        )
        return rest_template

    def _build_request_factory(self) -> Optional[ClientHttpRequestFactory]:
        if self._request_factory is not None:
            if isinstance(self._request_factory, type):
                return _instantiate(self._request_factory)
            return self._request_factory
        if self._detect_request_factory:
            return detect_request_factory()
        return None

    def _apply_timeouts(self, request_factory: ClientHttpRequestFactory) -> None:
        for attribute, value in (
            ("connect_timeout", self._connect_timeout),
            ("read_timeout", self._read_timeout),
        ):
            if value is None:
                continue
            if not hasattr(request_factory, attribute):
                raise ConfigError(
                    f"Request factory {type(request_factory).__name__} "
                    f"does not support {attribute}",
                    code="CONFIG_UNSUPPORTED_TIMEOUT",
                )
            setattr(request_factory, attribute, value)
