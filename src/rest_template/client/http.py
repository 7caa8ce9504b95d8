"""
HTTP primitives shared by the client, its transports and converters
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from requests.structures import CaseInsensitiveDict


T = TypeVar("T")


class HttpMethod(str, Enum):
    """HTTP method types supported"""
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"


class MediaType:
    """Common media types and helpers for Content-Type handling"""
    ALL = "*/*"
    APPLICATION_JSON = "application/json"
    APPLICATION_OCTET_STREAM = "application/octet-stream"
    APPLICATION_FORM_URLENCODED = "application/x-www-form-urlencoded"
    TEXT_PLAIN = "text/plain"

    @staticmethod
    def parse(content_type: Optional[str]) -> Optional[str]:
        """Return the lower-cased type/subtype of a Content-Type value"""
        if not content_type:
            return None
        return content_type.split(";", 1)[0].strip().lower() or None

    @staticmethod
    def charset(content_type: Optional[str], default: str = "utf-8") -> str:
        """Return the charset parameter of a Content-Type value"""
        if not content_type:
            return default
        for param in content_type.split(";")[1:]:
            name, _, value = param.partition("=")
            if name.strip().lower() == "charset" and value.strip():
                return value.strip().strip('"')
        return default

    @staticmethod
    def includes(pattern: str, media_type: Optional[str]) -> bool:
        """
        Check whether ``pattern`` (possibly a wildcard) covers ``media_type``

        A missing media type is covered by every pattern.
        """
        if media_type is None or pattern == MediaType.ALL:
            return True
        pattern_type, _, pattern_sub = pattern.partition("/")
        media_main, _, media_sub = media_type.partition("/")
        if pattern_type != media_main:
            return False
        if pattern_sub == "*" or pattern_sub == media_sub:
            return True
        # application/*+json covers application/problem+json
        if pattern_sub.startswith("*+"):
            return media_sub.endswith(pattern_sub[1:])
        return False


@dataclass
class ClientHttpResponse:
    """Response returned by a transport"""
    status_code: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes = b""
    reason: str = ""

    @property
    def content_type(self) -> Optional[str]:
        """Media type of the response body"""
        return MediaType.parse(self.headers.get("Content-Type"))

    @property
    def charset(self) -> str:
        """Charset of the response body"""
        return MediaType.charset(self.headers.get("Content-Type"))


@dataclass
class ResponseEntity(Generic[T]):
    """Converted response body together with status and headers"""
    body: Optional[T]
    status_code: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)

    def header(self, name: str, default: Any = None) -> Any:
        """Get a response header"""
        return self.headers.get(name, default)


class ClientHttpRequest(ABC):
    """
    Buffered outgoing request

    Headers and body are written first, then ``execute()`` sends the
    request exactly once. Transports override ``_execute_internal``.
    """

    def __init__(self, method: HttpMethod, uri: str) -> None:
        self.method = method
        self.uri = uri
        self.headers: CaseInsensitiveDict = CaseInsensitiveDict()
        self.body = bytearray()
        self._executed = False

    @property
    def executed(self) -> bool:
        """Whether the request has already been sent"""
        return self._executed

    def execute(self) -> ClientHttpResponse:
        """Send the request and return the transport response"""
        if self._executed:
            raise RuntimeError("ClientHttpRequest already executed")
        response = self._execute_internal(self.headers, bytes(self.body))
        self._executed = True
        return response

    @abstractmethod
    def _execute_internal(
        self, headers: CaseInsensitiveDict, body: bytes
    ) -> ClientHttpResponse:
        """Send ``headers`` and ``body`` and return the response"""
