"""
Response error handling

RestTemplate consults its ResponseErrorHandler after every request.
"""

import logging
from typing import Protocol, runtime_checkable

from rest_template.client.http import ClientHttpResponse
from rest_template.exceptions import (
    HttpClientError,
    HttpServerError,
    UnknownHttpStatusCodeError,
)


logger = logging.getLogger(__name__)


@runtime_checkable
class ResponseErrorHandler(Protocol):
    """Decides whether a response is an error and handles it"""

    def has_error(self, response: ClientHttpResponse) -> bool:
        ...

    def handle_error(self, response: ClientHttpResponse) -> None:
        ...


class DefaultResponseErrorHandler:
    """Raises HttpClientError for 4xx and HttpServerError for 5xx responses"""

    def has_error(self, response: ClientHttpResponse) -> bool:
        status = response.status_code
        return not 100 <= status < 400

    def handle_error(self, response: ClientHttpResponse) -> None:
        status = response.status_code
        message = f"{status} {response.reason}".strip()

        if 400 <= status < 500:
            logger.debug("Client error response: %s", message)
            raise HttpClientError(
                message, status, response.reason, response.headers, response.body
            )
        if 500 <= status < 600:
            logger.warning("Server error response: %s", message)
            raise HttpServerError(
                message, status, response.reason, response.headers, response.body
            )

        raise UnknownHttpStatusCodeError(
            f"Unknown status code [{status}] {response.reason}".strip(),
            status,
            response.reason,
            response.headers,
            response.body,
        )
