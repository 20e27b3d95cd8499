"""
Request execution.

Merges headers and query parameters, sends requests through the configured
transport and checks the response before handing its body back.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Protocol, runtime_checkable

import httpx

from restmachine_client.config import KeyValueLike, KeyValuePair, RequestConfig, as_key_values
from restmachine_client.envelope import EnvelopeResolver, ResponseEnvelope
from restmachine_client.exceptions import HttpStatusError, InvalidResponseError

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """
    Anything that can send an httpx request asynchronously.

    ``httpx.AsyncClient`` satisfies this protocol, and so does
    ``restmachine_client.testing.MockTransport``.
    """

    async def send(self, request: httpx.Request) -> httpx.Response:
        ...


@dataclass(frozen=True)
class RequestEnvelope:
    """Everything needed to send one request."""

    method: str
    path: str
    headers: tuple[KeyValuePair, ...] = ()
    query_params: tuple[KeyValuePair, ...] = ()
    body: Optional[bytes] = None

    def build_url(self) -> httpx.URL:
        """URL with query items appended, only when there are any."""
        url = httpx.URL(self.path)
        if self.query_params:
            existing = list(url.params.multi_items())
            url = url.copy_with(params=existing + [tuple(pair) for pair in self.query_params])
        return url

    def to_request(self) -> httpx.Request:
        return httpx.Request(
            self.method,
            self.build_url(),
            headers=[tuple(pair) for pair in self.headers],
            content=self.body,
        )


def merge_key_values(*sources: Optional[Iterable[KeyValueLike]]) -> tuple[KeyValuePair, ...]:
    """
    Concatenate pair lists in order.

    Repeated keys are kept; which one wins is up to the server.

    Example:
        >>> merge_key_values([("A", "1")], [("B", "2")], [("A", "3")])
        (KeyValuePair(key='A', value='1'), KeyValuePair(key='B', value='2'), KeyValuePair(key='A', value='3'))
    """
    merged: list[KeyValuePair] = []
    for source in sources:
        merged.extend(as_key_values(source))
    return tuple(merged)


async def merge_headers(
    static: Iterable[KeyValueLike],
    config: RequestConfig,
    dynamic: Optional[Iterable[KeyValueLike]] = None,
) -> tuple[KeyValuePair, ...]:
    """
    Merge directive, default and per-call headers, then append authorization.

    Order: static + config.default_headers + dynamic + authorization header
    (only when the provider resolves to one).
    """
    headers = merge_key_values(static, config.default_headers, dynamic)
    if config.authorization is not None:
        authorization = await config.authorization.get_header()
        if authorization is not None:
            headers = headers + (KeyValuePair(*authorization),)
    return headers


def merge_query_params(
    static: Iterable[KeyValueLike],
    config: RequestConfig,
    dynamic: Optional[Iterable[KeyValueLike]] = None,
) -> tuple[KeyValuePair, ...]:
    """Merge directive, default and per-call query parameters, in that order."""
    return merge_key_values(static, config.default_query_params, dynamic)


class RequestExecutor:
    """
    Sends RequestEnvelopes through a transport.

    When no transport is given, each call opens a short-lived
    ``httpx.AsyncClient``.
    """

    def __init__(self, transport: Optional[Transport] = None):
        self.transport = transport

    async def _send(self, request: httpx.Request) -> Any:
        if self.transport is not None:
            return await self.transport.send(request)
        async with httpx.AsyncClient() as client:
            return await client.send(request)

    async def execute(self, envelope: RequestEnvelope) -> bytes:
        """
        Send the request and return the raw response body.

        Raises:
            InvalidResponseError: If the transport did not return an HTTP response
            HttpStatusError: If the status code is outside 200-299
        """
        request = envelope.to_request()
        logger.debug(f"{request.method} {request.url}")

        response = await self._send(request)
        if not isinstance(response, httpx.Response):
            raise InvalidResponseError(
                f"Invalid response for {request.method} {request.url}: "
                f"expected an HTTP response, got {type(response).__name__}"
            )

        content = await response.aread()
        if not 200 <= response.status_code <= 299:
            logger.warning(f"{request.method} {request.url} returned {response.status_code}")
            raise HttpStatusError(response.status_code, content, url=str(request.url))

        return content

    async def fetch(self, envelope: RequestEnvelope, target: Any, *, many: bool = False) -> ResponseEnvelope[Any]:
        """
        Send the request and resolve its body into ``target``.

        Example:
            >>> envelope = RequestEnvelope("GET", "https://api.example.com/users")
            >>> result = await RequestExecutor(client).fetch(envelope, User, many=True)
            >>> users = result.data
        """
        content = await self.execute(envelope)
        return EnvelopeResolver(target, many=many).resolve(content)
