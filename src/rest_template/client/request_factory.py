"""
HTTP transports for RestTemplate

A request factory creates buffered ClientHttpRequest objects for a URI
and method. Two transports are provided on top of requests:

- SimpleClientHttpRequestFactory: one connection per request
- PooledClientHttpRequestFactory: keep-alive connection pooling through
  a requests session backed by urllib3 pools

detect_request_factory() picks the richest transport available at
runtime.
"""

import importlib.util
import logging
from typing import (
    Callable,
    Iterable,
    Iterator,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    Type,
    runtime_checkable,
)

import requests
from requests.adapters import HTTPAdapter
from requests.structures import CaseInsensitiveDict
from urllib3.util.retry import Retry

from rest_template.client.http import (
    ClientHttpRequest,
    ClientHttpResponse,
    HttpMethod,
)
from rest_template.client.interceptors import ClientHttpRequestInterceptor
from rest_template.exceptions import ResourceAccessError


logger = logging.getLogger(__name__)


# Signature shared by requests.request and requests.Session.request
RequestSender = Callable[..., requests.Response]

TimeoutSpec = Optional[Tuple[Optional[float], Optional[float]]]


@runtime_checkable
class ClientHttpRequestFactory(Protocol):
    """Creates requests for a given URI and method"""

    def create_request(self, uri: str, method: HttpMethod) -> ClientHttpRequest:
        ...


class RequestsClientHttpRequest(ClientHttpRequest):
    """ClientHttpRequest sent through a requests send function"""

    def __init__(
        self,
        send: RequestSender,
        method: HttpMethod,
        uri: str,
        timeout: TimeoutSpec = None,
    ) -> None:
        super().__init__(method, uri)
        self._send = send
        self._timeout = timeout

    def _execute_internal(
        self, headers: CaseInsensitiveDict, body: bytes
    ) -> ClientHttpResponse:
        try:
            response = self._send(
                self.method.value,
                self.uri,
                headers=dict(headers),
                data=body or None,
                timeout=self._timeout,
            )
        except requests.exceptions.Timeout as e:
            raise ResourceAccessError.timeout(
                f'I/O error on {self.method.value} request for "{self.uri}": '
                f"{e}",
                cause=e,
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise ResourceAccessError.connection_refused(
                f'I/O error on {self.method.value} request for "{self.uri}": '
                f"{e}",
                cause=e,
            ) from e
        except requests.exceptions.RequestException as e:
            raise ResourceAccessError(
                f'I/O error on {self.method.value} request for "{self.uri}": '
                f"{e}",
                cause=e,
                retryable=False,
            ) from e

        return ClientHttpResponse(
            status_code=response.status_code,
            headers=CaseInsensitiveDict(response.headers),
            body=response.content or b"",
            reason=response.reason or "",
        )


class _TimeoutMixin:
    """Connect and read timeouts in milliseconds"""

    connect_timeout: Optional[int] = None
    read_timeout: Optional[int] = None

    def _timeout(self) -> TimeoutSpec:
        if self.connect_timeout is None and self.read_timeout is None:
            return None
        return (
            self.connect_timeout / 1000.0 if self.connect_timeout is not None else None,
            self.read_timeout / 1000.0 if self.read_timeout is not None else None,
        )


class SimpleClientHttpRequestFactory(_TimeoutMixin):
    """
    Minimal transport opening a fresh connection for every request

    This is the transport a RestTemplate starts with.
    """

    def __init__(
        self,
        connect_timeout: Optional[int] = None,
        read_timeout: Optional[int] = None,
    ) -> None:
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout

    def create_request(self, uri: str, method: HttpMethod) -> ClientHttpRequest:
        return RequestsClientHttpRequest(
            requests.request, HttpMethod(method), uri, self._timeout()
        )


class PooledClientHttpRequestFactory(_TimeoutMixin):
    """
    Connection-pooling transport backed by a requests session

    The session is opened by the first request, so a factory that is
    never used holds no connections. Call ``close()`` (or close the
    owning RestTemplate) to release the pool.

    Example:
        >>> with PooledClientHttpRequestFactory(pool_maxsize=20) as factory:
        ...     request = factory.create_request("https://example.com", HttpMethod.GET)
        ...     response = request.execute()
    """

    def __init__(
        self,
        pool_connections: int = 10,
        pool_maxsize: int = 10,
        max_retries: int = 0,
        connect_timeout: Optional[int] = None,
        read_timeout: Optional[int] = None,
    ) -> None:
        """
        Create a pooled transport

        Args:
            pool_connections: Number of host pools to cache
            pool_maxsize: Maximum connections kept per host pool
            max_retries: Connection-level retries handled by urllib3
            connect_timeout: Connect timeout in milliseconds
            read_timeout: Read timeout in milliseconds
        """
        self.pool_connections = pool_connections
        self.pool_maxsize = pool_maxsize
        self.max_retries = max_retries
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self._session: Optional[requests.Session] = None

    def _create_session(self) -> requests.Session:
        """Create requests session with connection pooling adapter"""
        session = requests.Session()

        adapter = HTTPAdapter(
            pool_connections=self.pool_connections,
            pool_maxsize=self.pool_maxsize,
            max_retries=Retry(
                total=self.max_retries,
                backoff_factor=0.5,
                raise_on_status=False,
            ),
        )

        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    @property
    def session(self) -> requests.Session:
        """Underlying requests session, created on first use"""
        if self._session is None:
            self._session = self._create_session()
        return self._session

    def create_request(self, uri: str, method: HttpMethod) -> ClientHttpRequest:
        return RequestsClientHttpRequest(
            self.session.request, HttpMethod(method), uri, self._timeout()
        )

    def close(self) -> None:
        """Close the pooled session if one was opened"""
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "PooledClientHttpRequestFactory":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class ClientHttpRequestExecutionChain:
    """Walks the interceptors, then sends through the delegate factory"""

    def __init__(
        self,
        delegate: ClientHttpRequestFactory,
        interceptors: Iterable[ClientHttpRequestInterceptor],
    ) -> None:
        self._delegate = delegate
        self._iterator: Iterator[ClientHttpRequestInterceptor] = iter(interceptors)

    def execute(self, request: ClientHttpRequest, body: bytes) -> ClientHttpResponse:
        interceptor = next(self._iterator, None)
        if interceptor is not None:
            return interceptor.intercept(request, body, self)

        delegate = self._delegate.create_request(request.uri, request.method)
        delegate.headers.update(request.headers)
        delegate.body.extend(body)
        return delegate.execute()


class InterceptingClientHttpRequest(ClientHttpRequest):
    """Request that runs an interceptor chain when executed"""

    def __init__(
        self,
        delegate: ClientHttpRequestFactory,
        interceptors: Sequence[ClientHttpRequestInterceptor],
        method: HttpMethod,
        uri: str,
    ) -> None:
        super().__init__(method, uri)
        self._delegate = delegate
        self._interceptors = interceptors

    def _execute_internal(
        self, headers: CaseInsensitiveDict, body: bytes
    ) -> ClientHttpResponse:
        chain = ClientHttpRequestExecutionChain(self._delegate, self._interceptors)
        return chain.execute(self, body)


class InterceptingClientHttpRequestFactory:
    """Wraps a factory so that its requests pass through interceptors"""

    def __init__(
        self,
        delegate: ClientHttpRequestFactory,
        interceptors: Iterable[ClientHttpRequestInterceptor],
    ) -> None:
        self.delegate = delegate
        self.interceptors = tuple(interceptors)

    def create_request(self, uri: str, method: HttpMethod) -> ClientHttpRequest:
        return InterceptingClientHttpRequest(
            self.delegate, self.interceptors, HttpMethod(method), uri
        )


# Candidate transports probed in order: (module that must be importable, factory)
REQUEST_FACTORY_CANDIDATES: Tuple[Tuple[str, Type[ClientHttpRequestFactory]], ...] = (
    ("urllib3", PooledClientHttpRequestFactory),
)


def detect_request_factory() -> ClientHttpRequestFactory:
    """
    Return the richest transport available at runtime

    Falls back to SimpleClientHttpRequestFactory when no candidate
    module can be found. urllib3 ships with requests, so in a regular
    install the pooled transport is always the one detected.
    """
    for module_name, factory_class in REQUEST_FACTORY_CANDIDATES:
        if importlib.util.find_spec(module_name) is not None:
            logger.debug(
                "Detected request factory %s (found %s)",
                factory_class.__name__,
                module_name,
            )
            return factory_class()

    logger.debug("No pooling transport found, using SimpleClientHttpRequestFactory")
    return SimpleClientHttpRequestFactory()
