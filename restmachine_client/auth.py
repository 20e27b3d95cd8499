"""
Authorization providers.

An authorization provider is asked for a header right before each request is
sent. When it returns a pair, the pair is appended after every other header.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

from restmachine_client.config import KeyValuePair


class AuthorizationProvider(ABC):
    """Source of the authorization header added to outgoing requests."""

    @abstractmethod
    async def get_header(self) -> Optional[KeyValuePair]:
        """
        Resolve the authorization header for the next request.

        Returns:
            The header to append, or None to send the request without one
        """
        pass


class StaticAuthorization(AuthorizationProvider):
    """Always returns the same header."""

    def __init__(self, key: str, value: str):
        self.header = KeyValuePair(key, value)

    async def get_header(self) -> Optional[KeyValuePair]:
        return self.header


class BearerTokenAuthorization(AuthorizationProvider):
    """
    Builds an ``Authorization: Bearer <token>`` header from an async token getter.

    Example:
        >>> async def current_token():
        ...     return await session_store.token()
        >>> config = RequestConfig(authorization=BearerTokenAuthorization(current_token))
    """

    def __init__(
        self,
        get_token: Callable[[], Awaitable[Optional[str]]],
        *,
        header_name: str = "Authorization",
        scheme: str = "Bearer",
    ):
        self.get_token = get_token
        self.header_name = header_name
        self.scheme = scheme

    async def get_header(self) -> Optional[KeyValuePair]:
        token = await self.get_token()
        if not token:
            return None
        return KeyValuePair(self.header_name, f"{self.scheme} {token}")
