"""
Shared fixtures for unit tests
"""

from typing import List, Optional

import pytest
from requests.structures import CaseInsensitiveDict

from rest_template.client.http import ClientHttpRequest, ClientHttpResponse, HttpMethod


class RecordedRequest(ClientHttpRequest):
    """Request that records itself instead of hitting the network"""

    def __init__(self, factory: "RecordingRequestFactory", method: HttpMethod, uri: str) -> None:
        super().__init__(method, uri)
        self._factory = factory
        self.sent_headers: Optional[CaseInsensitiveDict] = None
        self.sent_body: Optional[bytes] = None

    def _execute_internal(self, headers, body) -> ClientHttpResponse:
        self.sent_headers = CaseInsensitiveDict(headers)
        self.sent_body = body
        return self._factory.next_response()


class RecordingRequestFactory:
    """Request factory returning canned responses and recording requests"""

    def __init__(self) -> None:
        self.requests: List[RecordedRequest] = []
        self.responses: List[ClientHttpResponse] = []
        self.connect_timeout: Optional[int] = None
        self.read_timeout: Optional[int] = None

    def respond(
        self,
        status_code: int = 200,
        body: bytes = b"",
        content_type: Optional[str] = None,
        reason: str = "",
    ) -> "RecordingRequestFactory":
        headers = CaseInsensitiveDict()
        if content_type:
            headers["Content-Type"] = content_type
        self.responses.append(
            ClientHttpResponse(status_code=status_code, headers=headers, body=body, reason=reason)
        )
        return self

    def next_response(self) -> ClientHttpResponse:
        if self.responses:
            return self.responses.pop(0)
        return ClientHttpResponse(status_code=200)

    def create_request(self, uri: str, method: HttpMethod) -> ClientHttpRequest:
        request = RecordedRequest(self, HttpMethod(method), uri)
        self.requests.append(request)
        return request

    @property
    def last_request(self) -> RecordedRequest:
        return self.requests[-1]


@pytest.fixture
def recording_factory() -> RecordingRequestFactory:
    return RecordingRequestFactory()
