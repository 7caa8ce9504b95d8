"""
Request interceptors

An interceptor wraps the execution of every request made by a
RestTemplate. Interceptors are chained: each one receives the request,
its buffered body and an execution object used to hand the request on
to the next interceptor (or to the transport, for the last one).
"""

import base64
from typing import Protocol, runtime_checkable

from rest_template.client.http import ClientHttpRequest, ClientHttpResponse


@runtime_checkable
class ClientHttpRequestExecution(Protocol):
    """Hands a request on to the rest of the chain"""

    def execute(self, request: ClientHttpRequest, body: bytes) -> ClientHttpResponse:
        ...


@runtime_checkable
class ClientHttpRequestInterceptor(Protocol):
    """Strategy invoked around each request execution"""

    def intercept(
        self,
        request: ClientHttpRequest,
        body: bytes,
        execution: ClientHttpRequestExecution,
    ) -> ClientHttpResponse:
        ...


class BasicAuthorizationInterceptor:
    """
    Adds an HTTP Basic ``Authorization`` header to every request

    The credentials are kept exactly as given; they are only encoded
    when a request is intercepted.
    """

    def __init__(self, username: str, password: str) -> None:
        self.username = username
        self.password = password

    def intercept(
        self,
        request: ClientHttpRequest,
        body: bytes,
        execution: ClientHttpRequestExecution,
    ) -> ClientHttpResponse:
        token = f"{self.username}:{self.password}".encode("utf-8")
        request.headers["Authorization"] = (
            "Basic " + base64.b64encode(token).decode("ascii")
        )
        return execution.execute(request, body)

    def __repr__(self) -> str:
        return f"BasicAuthorizationInterceptor(username={self.username!r})"
