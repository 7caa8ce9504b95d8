"""Exception classes for the rest_template package"""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional


class RestClientError(Exception):
    """
    Base exception for rest_template errors

    All errors raised by the builder, the client and its transports
    extend from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.cause = cause
        self.details = details
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary"""
        return {
            "name": self.__class__.__name__,
            "message": str(self),
            "code": self.code,
            "status_code": self.status_code,
            "timestamp": self.timestamp.isoformat(),
            "details": self.details,
        }

    def has_code(self, code: str) -> bool:
        """Check if error has a specific code"""
        return self.code == code


class ValidationError(RestClientError, ValueError):
    """Invalid argument passed to the builder or one of its collaborators"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="VALIDATION_ERROR", details=details)
        self.field = field


class InstantiationError(RestClientError):
    """A class could not be constructed through its no-argument constructor"""

    def __init__(
        self,
        message: str,
        target: Optional[type] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, code="INSTANTIATION_ERROR", cause=cause)
        self.target = target


class ConfigError(RestClientError):
    """Configuration error"""

    def __init__(
        self,
        message: str,
        code: str = "CONFIG01",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, details=details)


class ResourceAccessError(RestClientError):
    """
    I/O error raised by a transport while executing a request

    RestTemplate never retries on its own. ``retryable`` tells a caller
    with its own retry policy whether sending the same request again can
    succeed: True for timeouts and refused or dropped connections, False
    when the request itself could not be built (bad URL, bad scheme).
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
        retryable: bool = True,
    ) -> None:
        super().__init__(
            message, code="IO_ERROR", status_code=status_code, cause=cause
        )
        self.retryable = retryable

    @classmethod
    def timeout(
        cls, message: str = "Request timed out", cause: Optional[Exception] = None
    ) -> "ResourceAccessError":
        """Create a timeout error"""
        return cls(message, status_code=408, cause=cause)

    @classmethod
    def connection_refused(
        cls, message: str = "Connection refused", cause: Optional[Exception] = None
    ) -> "ResourceAccessError":
        """Create a connection refused error"""
        return cls(message, cause=cause)


class RestClientResponseError(RestClientError):
    """Error carrying the HTTP response that caused it"""

    def __init__(
        self,
        message: str,
        status_code: int,
        reason: str = "",
        headers: Optional[Mapping[str, str]] = None,
        body: bytes = b"",
    ) -> None:
        super().__init__(message, code=f"HTTP{status_code}", status_code=status_code)
        self.reason = reason
        self.headers = dict(headers or {})
        self.body = body

    @property
    def body_text(self) -> str:
        """Response body decoded as UTF-8"""
        return self.body.decode("utf-8", errors="replace")


class HttpClientError(RestClientResponseError):
    """4xx response"""


class HttpServerError(RestClientResponseError):
    """5xx response"""


class UnknownHttpStatusCodeError(RestClientResponseError):
    """Response status outside of the known 1xx-5xx ranges"""
