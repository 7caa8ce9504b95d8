"""
Message converters

A converter reads response bodies into Python objects and writes Python
objects into request bodies for the media types it supports.
RestTemplate asks its converters in order and uses the first one that
reports it can handle the type and media type.
"""

import json
from typing import Any, List, Optional, Protocol, Tuple, runtime_checkable

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from rest_template.client.http import ClientHttpRequest, ClientHttpResponse, MediaType
from rest_template.exceptions import RestClientError


class HttpMessageNotReadableError(RestClientError):
    """Response body could not be converted"""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message, code="MESSAGE_NOT_READABLE", cause=cause)


@runtime_checkable
class HttpMessageConverter(Protocol):
    """Reads and writes HTTP message bodies"""

    supported_media_types: Tuple[str, ...]

    def can_read(self, cls: type, media_type: Optional[str]) -> bool:
        ...

    def can_write(self, cls: type, media_type: Optional[str]) -> bool:
        ...

    def read(self, cls: type, response: ClientHttpResponse) -> Any:
        ...

    def write(
        self, obj: Any, media_type: Optional[str], request: ClientHttpRequest
    ) -> None:
        ...


def _supports(supported: Tuple[str, ...], media_type: Optional[str]) -> bool:
    return any(MediaType.includes(pattern, media_type) for pattern in supported)


def _is_subclass(cls: Any, base: Any) -> bool:
    return isinstance(cls, type) and issubclass(cls, base)


def _set_content_type(
    request: ClientHttpRequest, media_type: Optional[str], default: str
) -> None:
    if "Content-Type" not in request.headers:
        request.headers["Content-Type"] = media_type or default


class ByteArrayHttpMessageConverter:
    """Raw ``bytes`` bodies of any media type"""

    supported_media_types: Tuple[str, ...] = (
        MediaType.APPLICATION_OCTET_STREAM,
        MediaType.ALL,
    )

    def can_read(self, cls: type, media_type: Optional[str]) -> bool:
        return _is_subclass(cls, bytes)

    def can_write(self, cls: type, media_type: Optional[str]) -> bool:
        return _is_subclass(cls, (bytes, bytearray))

    def read(self, cls: type, response: ClientHttpResponse) -> bytes:
        return bytes(response.body)

    def write(
        self, obj: Any, media_type: Optional[str], request: ClientHttpRequest
    ) -> None:
        _set_content_type(request, media_type, MediaType.APPLICATION_OCTET_STREAM)
        request.body.extend(obj)


class StringHttpMessageConverter:
    """``str`` bodies, decoded with the charset of the message"""

    supported_media_types: Tuple[str, ...] = (MediaType.TEXT_PLAIN, MediaType.ALL)

    def __init__(self, default_charset: str = "utf-8") -> None:
        self.default_charset = default_charset

    def can_read(self, cls: type, media_type: Optional[str]) -> bool:
        return _is_subclass(cls, str)

    def can_write(self, cls: type, media_type: Optional[str]) -> bool:
        return _is_subclass(cls, str)

    def read(self, cls: type, response: ClientHttpResponse) -> str:
        charset = MediaType.charset(
            response.headers.get("Content-Type"), self.default_charset
        )
        return response.body.decode(charset)

    def write(
        self, obj: Any, media_type: Optional[str], request: ClientHttpRequest
    ) -> None:
        _set_content_type(
            request, media_type, f"{MediaType.TEXT_PLAIN};charset={self.default_charset}"
        )
        charset = MediaType.charset(request.headers.get("Content-Type"), self.default_charset)
        request.body.extend(obj.encode(charset))


class JsonHttpMessageConverter:
    """``dict`` and ``list`` bodies encoded as JSON"""

    supported_media_types: Tuple[str, ...] = (
        MediaType.APPLICATION_JSON,
        "application/*+json",
    )

    def can_read(self, cls: type, media_type: Optional[str]) -> bool:
        return (
            cls is object or _is_subclass(cls, (dict, list))
        ) and _supports(self.supported_media_types, media_type)

    def can_write(self, cls: type, media_type: Optional[str]) -> bool:
        return _is_subclass(cls, (dict, list)) and _supports(
            self.supported_media_types, media_type
        )

    def read(self, cls: type, response: ClientHttpResponse) -> Any:
        if not response.body:
            return None
        try:
            return json.loads(response.body.decode(response.charset))
        except ValueError as e:
            raise HttpMessageNotReadableError(
                f"Could not read JSON document: {e}", cause=e
            ) from e

    def write(
        self, obj: Any, media_type: Optional[str], request: ClientHttpRequest
    ) -> None:
        _set_content_type(request, media_type, MediaType.APPLICATION_JSON)
        request.body.extend(json.dumps(obj).encode("utf-8"))


class PydanticHttpMessageConverter:
    """pydantic model bodies encoded as JSON"""

    supported_media_types: Tuple[str, ...] = (
        MediaType.APPLICATION_JSON,
        "application/*+json",
    )

    def can_read(self, cls: type, media_type: Optional[str]) -> bool:
        return _is_subclass(cls, BaseModel) and _supports(
            self.supported_media_types, media_type
        )

    def can_write(self, cls: type, media_type: Optional[str]) -> bool:
        return self.can_read(cls, media_type)

    def read(self, cls: type, response: ClientHttpResponse) -> BaseModel:
        try:
            return cls.model_validate_json(response.body)
        except PydanticValidationError as e:
            raise HttpMessageNotReadableError(
                f"Could not read {cls.__name__}: {e}", cause=e
            ) from e

    def write(
        self, obj: Any, media_type: Optional[str], request: ClientHttpRequest
    ) -> None:
        _set_content_type(request, media_type, MediaType.APPLICATION_JSON)
        request.body.extend(obj.model_dump_json().encode("utf-8"))


def default_message_converters() -> List[HttpMessageConverter]:
    """Standard converters a new RestTemplate is created with"""
    return [
        ByteArrayHttpMessageConverter(),
        StringHttpMessageConverter(),
        PydanticHttpMessageConverter(),
        JsonHttpMessageConverter(),
    ]
