"""
Testing helpers for RestMachine Client.

MockTransport stands in for an ``httpx.AsyncClient``: it records every
request it is asked to send and answers from a queue of canned responses or
from a handler function.

Example:
    >>> transport = MockTransport()
    >>> transport.add_json({"id": 12, "title": "t"})
    >>> Post.request_config = RequestConfig(transport=transport)
    >>> post = await Post.get_one("12")
    >>> transport.last_request.url.path
    '/posts/12'
"""

import json
from collections import deque
from typing import Any, Awaitable, Callable, Optional, Union

import httpx

Handler = Callable[[httpx.Request], Union[httpx.Response, Awaitable[httpx.Response], Any]]


class MockTransport:
    """
    Transport double that records requests.

    Queued responses are used first; when the queue is empty the handler is
    called, and without a handler an empty 200 response is returned.
    """

    def __init__(self, handler: Optional[Handler] = None):
        self.handler = handler
        self.requests: list[httpx.Request] = []
        self._queue: deque[Any] = deque()

    def add_response(
        self,
        status_code: int = 200,
        *,
        content: bytes = b"",
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        """Queue a raw response."""
        self._queue.append(
            lambda request: httpx.Response(status_code, content=content, headers=headers, request=request)
        )

    def add_json(self, payload: Any, status_code: int = 200) -> None:
        """Queue a JSON response."""
        self.add_response(
            status_code,
            content=json.dumps(payload).encode("utf-8"),
            headers={"Content-Type": "application/json"},
        )

    def add_object(self, value: Any) -> None:
        """Queue an arbitrary return value (used to simulate broken transports)."""
        self._queue.append(lambda request: value)

    @property
    def last_request(self) -> httpx.Request:
        if not self.requests:
            raise AssertionError("No request has been sent")
        return self.requests[-1]

    def reset(self) -> None:
        self.requests.clear()
        self._queue.clear()

    async def send(self, request: httpx.Request) -> Any:
        self.requests.append(request)

        if self._queue:
            return self._queue.popleft()(request)

        if self.handler is not None:
            result = self.handler(request)
            if hasattr(result, "__await__"):
                result = await result
            return result

        return httpx.Response(200, request=request)
