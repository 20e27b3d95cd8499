"""
Response envelope resolution.

APIs wrap their payloads in different ways: some return the object or array
as is, others nest it under a key such as ``data`` or ``result``, and some
under a key nobody could predict. The resolver tries an ordered list of
strategies against the parsed JSON document and returns the first payload
that validates against the target shape.

Object keys are scanned in document order. Python's json module keeps that
order, but a producer that does not guarantee key order can make the
unknown-key fallback pick different keys for equivalent payloads.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from pydantic import TypeAdapter, ValidationError

from restmachine_client.exceptions import DecodingError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SYNONYM_KEYS: tuple[str, ...] = ("data", "result", "payload", "response", "content", "body")


@dataclass(frozen=True)
class ResponseEnvelope(Generic[T]):
    """
    A resolved response payload.

    Attributes:
        data: The decoded payload
        found_key: Key the payload was found under ("" for the document root)
        is_array: Whether the payload was a JSON array
    """

    data: T
    found_key: str
    is_array: bool


class EnvelopeResolver(Generic[T]):
    """
    Locate and decode a payload of unknown wrapping.

    Example:
        >>> resolver = EnvelopeResolver(User)
        >>> envelope = resolver.resolve(b'{"data": {"id": 1}}')
        >>> envelope.found_key
        'data'
    """

    def __init__(self, target: Any, *, many: bool = False):
        """
        Args:
            target: Type of a single payload item (a pydantic model or any
                type pydantic can validate)
            many: Whether the payload is a sequence of ``target``
        """
        self.target = target
        self.many = many
        self.adapter: TypeAdapter[Any] = TypeAdapter(list[target] if many else target)  # type: ignore[valid-type]
        self.strategies: list[Callable[[Any], Optional[ResponseEnvelope[T]]]] = [
            self._decode_root_array,
            self._decode_root,
            self._decode_synonym_keys,
            self._decode_any_key,
        ]

    @property
    def target_name(self) -> str:
        name = getattr(self.target, "__name__", repr(self.target))
        return f"list[{name}]" if self.many else name

    def resolve(self, content: bytes) -> ResponseEnvelope[T]:
        """
        Decode ``content`` into the target shape.

        Raises:
            DecodingError: If the content is not JSON or no strategy produced
                a valid decode
        """
        try:
            root = json.loads(content)
        except (TypeError, ValueError) as exc:
            raise DecodingError(
                f"Could not decode {self.target_name}: response is not valid JSON ({exc})",
                target=self.target_name,
            ) from exc

        for strategy in self.strategies:
            envelope = strategy(root)
            if envelope is not None:
                logger.debug(
                    f"Resolved {self.target_name} via {strategy.__name__} "
                    f"(key={envelope.found_key!r}, array={envelope.is_array})"
                )
                return envelope

        raise DecodingError(
            f"Could not decode {self.target_name} from any key",
            target=self.target_name,
        )

    def _attempt(self, value: Any, key: str) -> Optional[ResponseEnvelope[T]]:
        try:
            data = self.adapter.validate_python(value)
        except ValidationError:
            return None
        return ResponseEnvelope(data=data, found_key=key, is_array=isinstance(value, list))

    def _decode_root_array(self, root: Any) -> Optional[ResponseEnvelope[T]]:
        if self.many and isinstance(root, list):
            return self._attempt(root, "")
        return None

    def _decode_root(self, root: Any) -> Optional[ResponseEnvelope[T]]:
        return self._attempt(root, "")

    def _decode_synonym_keys(self, root: Any) -> Optional[ResponseEnvelope[T]]:
        if not isinstance(root, dict):
            return None
        for key in SYNONYM_KEYS:
            if key in root:
                envelope = self._attempt(root[key], key)
                if envelope is not None:
                    return envelope
        return None

    def _decode_any_key(self, root: Any) -> Optional[ResponseEnvelope[T]]:
        if not isinstance(root, dict):
            return None
        for key, value in root.items():
            if key in SYNONYM_KEYS:
                continue
            envelope = self._attempt(value, key)
            if envelope is not None:
                return envelope
        return None
