"""
Fake HTTP transport for CargoLink tests.

Requests are fully prepared by requests and answered with real
``requests.Response`` objects, so headers and bodies are exactly what
would go over the wire.
"""

import json
from collections import deque
from typing import Any, Dict, List, Optional

import requests
from requests.structures import CaseInsensitiveDict


def make_response(
    status_code: int = 200,
    body: Any = None,
    content: Optional[bytes] = None,
    headers: Optional[Dict[str, str]] = None,
    reason: str = "OK"
) -> requests.Response:
    """Build a real requests.Response; ``body`` is JSON-encoded"""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.encoding = "utf-8"
    response.headers = CaseInsensitiveDict(headers or {})

    if content is not None:
        response._content = content
    elif body is not None:
        response._content = json.dumps(body).encode("utf-8")
        response.headers.setdefault("Content-Type", "application/json")
    else:
        response._content = b""
    return response


class FakeTransport:
    """
    Stand-in for ``Session.send``: records prepared requests and answers
    from a queue of responses (the last one repeats when the queue runs dry)
    """

    def __init__(self):
        self.requests: List[requests.PreparedRequest] = []
        self._responses = deque()
        self._last: Optional[requests.Response] = None

    def queue(self, *responses: requests.Response):
        self._responses.extend(responses)

    def __call__(self, prepared, **kwargs):
        self.requests.append(prepared)
        if self._responses:
            self._last = self._responses.popleft()
        if self._last is None:
            raise AssertionError(f"No response queued for {prepared.method} {prepared.url}")
        self._last.request = prepared
        self._last.url = prepared.url
        return self._last

    @property
    def last_request(self) -> requests.PreparedRequest:
        return self.requests[-1]
