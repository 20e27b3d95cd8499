"""
Request configuration for RestMachine Client.

A RequestConfig holds what every request of a resource shares: default
headers, default query parameters, the transport used to send requests and
an optional authorization provider. It is attached to a model explicitly
(class keyword or class variable) instead of being looked up from global
state.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, NamedTuple, Optional, TYPE_CHECKING, Union

if TYPE_CHECKING:
    from restmachine_client.auth import AuthorizationProvider
    from restmachine_client.executor import Transport


class KeyValuePair(NamedTuple):
    """
    A header or query parameter.

    Example:
        >>> header = KeyValuePair("Authorization", "Bearer token123")
        >>> param = KeyValuePair("page", "1")
    """

    key: str
    value: str


KeyValueLike = Union[KeyValuePair, tuple[str, str]]

CONTENT_TYPE_JSON = KeyValuePair("Content-Type", "application/json")


def as_key_values(items: Optional[Iterable[KeyValueLike]]) -> tuple[KeyValuePair, ...]:
    """
    Normalize an iterable of pairs into a tuple of KeyValuePair.

    Accepts KeyValuePair instances and plain (key, value) tuples. Order and
    repeated keys are preserved.

    Raises:
        TypeError: If an item is not a two-item pair
    """
    if not items:
        return ()
    if isinstance(items, (str, bytes, dict)):
        raise TypeError(
            f"Expected a sequence of (key, value) pairs, got {type(items).__name__}"
        )

    pairs = []
    for item in items:
        if isinstance(item, KeyValuePair):
            pairs.append(item)
            continue
        try:
            key, value = item
        except (TypeError, ValueError):
            raise TypeError(f"Expected a (key, value) pair, got {item!r}") from None
        pairs.append(KeyValuePair(str(key), str(value)))
    return tuple(pairs)


@dataclass(frozen=True)
class RequestConfig:
    """
    Defaults shared by every request of a resource.

    Example:
        >>> config = RequestConfig(
        ...     default_headers=[CONTENT_TYPE_JSON],
        ...     default_query_params=[("api_key", "123456")],
        ... )
        >>> class Post(RestModel, request_config=config):
        ...     id: int
    """

    default_headers: tuple[KeyValuePair, ...] = ()
    default_query_params: tuple[KeyValuePair, ...] = ()
    transport: Optional["Transport"] = field(default=None, compare=False)
    authorization: Optional["AuthorizationProvider"] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "default_headers", as_key_values(self.default_headers))
        object.__setattr__(self, "default_query_params", as_key_values(self.default_query_params))

    def replace(self, **changes: Any) -> "RequestConfig":
        """Return a copy of this config with the given attributes changed."""
        return replace(self, **changes)


DEFAULT_REQUEST_CONFIG = RequestConfig(default_headers=(CONTENT_TYPE_JSON,))
