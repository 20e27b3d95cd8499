"""
Runtime request methods.

Binds MethodDefinitions to coroutine functions and exposes them on models
through the ResourceMethod descriptor. Read methods (get_one, get_many) are
bound to the class; write methods (create, update, remove) to instances.
"""

import inspect
import logging
from types import MethodType
from typing import Any, Callable, Iterable, Optional, TYPE_CHECKING

from restmachine_client.config import KeyValueLike
from restmachine_client.executor import RequestExecutor
from restmachine_client.synthesizer import MethodDefinition, Verb

if TYPE_CHECKING:
    from restmachine_client.models.base import RestModel

logger = logging.getLogger(__name__)


def _with_owner(signature: inspect.Signature, owner_name: str) -> inspect.Signature:
    owner = inspect.Parameter(owner_name, inspect.Parameter.POSITIONAL_ONLY)
    return signature.replace(parameters=[owner, *signature.parameters.values()])


def make_read_method(definition: MethodDefinition) -> Callable[..., Any]:
    """Build the class-level coroutine for a get-one or get-many definition."""
    signature = definition.signature
    resolver = definition.resolver()
    shape = definition.response_shape
    assert shape is not None
    many = definition.verb is Verb.GET_MANY

    async def method(cls: type["RestModel"], *args: Any, **kwargs: Any) -> Any:
        bound = signature.bind(*args, **kwargs)
        bound.apply_defaults()
        arguments = bound.arguments
        path_values = {name: arguments[name] for name in definition.argument_names}

        config = cls._get_request_config()
        envelope = await definition.build_request(
            config,
            path_values,
            dynamic_headers=arguments["dynamic_headers"],
            dynamic_query_params=arguments["dynamic_query_params"],
        )
        content = await RequestExecutor(config.transport).execute(envelope)
        resolved = resolver.resolve(content)

        if many:
            instances = [shape.to_model(cls, item) for item in resolved.data]
            for instance in instances:
                instance._run_callbacks("after_load")
            return instances

        instance = shape.to_model(cls, resolved.data)
        instance._run_callbacks("after_load")
        return instance

    method.__name__ = definition.name
    method.__qualname__ = definition.name
    method.__doc__ = (
        f"{definition.http_method} {definition.path.raw} and decode "
        f"{'a list of instances' if many else 'one instance'}."
    )
    method.__signature__ = _with_owner(signature, "cls")  # type: ignore[attr-defined]
    return method


def make_write_method(definition: MethodDefinition) -> Callable[..., Any]:
    """Build the instance coroutine for a create, update or delete definition."""
    has_body = definition.verb.has_body

    async def method(
        self: "RestModel",
        *,
        dynamic_headers: Optional[Iterable[KeyValueLike]] = (),
        dynamic_query_params: Optional[Iterable[KeyValueLike]] = (),
    ) -> None:
        config = type(self)._get_request_config()

        if has_body:
            self._run_callbacks("before_save")

        path_values = {name: getattr(self, name) for name in definition.path.names}
        body = definition.request_shape.encode(self) if definition.request_shape is not None else None

        envelope = await definition.build_request(
            config,
            path_values,
            body=body,
            dynamic_headers=dynamic_headers,
            dynamic_query_params=dynamic_query_params,
        )
        await RequestExecutor(config.transport).execute(envelope)

        if has_body:
            self._run_callbacks("after_save")

    method.__name__ = definition.name
    method.__qualname__ = definition.name
    method.__doc__ = f"{definition.http_method} {definition.path.raw} with this instance."
    return method


def make_method(definition: MethodDefinition) -> Callable[..., Any]:
    if definition.verb.is_read:
        return make_read_method(definition)
    return make_write_method(definition)


class ResourceMethod:
    """
    Descriptor exposing a generated request method.

    Attribute access raises AttributeError when the model declares no
    directive for the verb, so ``hasattr(Post, "get_one")`` tells whether
    the method exists.
    """

    def __init__(self, verb: Verb):
        self.verb = verb

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Callable[..., Any]:
        if owner is None:
            owner = type(instance)
        func = getattr(owner, "_rest_callables", {}).get(self.verb)
        if func is None:
            raise AttributeError(
                f"{owner.__name__} declares no {self.verb.value} directive, "
                f"so it has no {self.verb.method_name}() method"
            )

        if self.verb.is_read:
            return MethodType(func, owner)
        if instance is None:
            return func
        return MethodType(func, instance)
