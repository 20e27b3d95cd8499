"""
Decorators for RestMachine Client.

Directive decorators bind a model to REST endpoints, one per verb. Lifecycle
decorators register methods to run around generated requests.
"""

from typing import Any, Callable, Iterable, TypeVar, TYPE_CHECKING

from restmachine_client.config import KeyValueLike
from restmachine_client.synthesizer import Directive, Verb

if TYPE_CHECKING:
    from restmachine_client.models.base import RestModel

ModelT = TypeVar("ModelT", bound=type)

LIFECYCLE_EVENTS = ("before_save", "after_save", "after_load")


class LifecycleCallback:
    """Descriptor for lifecycle callbacks."""

    def __init__(self, event: str, func: Callable[["RestModel"], None]):
        if event not in LIFECYCLE_EVENTS:
            raise ValueError(f"Unknown lifecycle event: {event}")
        self.event = event
        self.func = func

    def __set_name__(self, owner: type, name: str):
        """Register callback when descriptor is assigned to class.

        Ensures each subclass has its own callback registry (not shared with
        parent) by checking if it exists in the class's own __dict__.
        """
        if '_lifecycle_callbacks' not in owner.__dict__:
            owner._lifecycle_callbacks = {}  # type: ignore[attr-defined]
        owner._lifecycle_callbacks.setdefault(self.event, []).append(self.func)  # type: ignore[attr-defined]

    def __get__(self, instance: Any, owner: type) -> Callable:
        """Return callable method."""
        if instance is None:
            return self.func
        return lambda: self.func(instance)


def before_save(func: Callable[["RestModel"], None]) -> LifecycleCallback:
    """
    Decorator to mark a method to be called before create() or update().

    The method runs before the request body is serialized, so mutations are
    included in the body that is sent.

    Example:
        >>> class Post(RestModel):
        ...     title: str
        ...     updated_at: Optional[datetime] = None
        ...
        ...     @before_save
        ...     def touch(self):
        ...         self.updated_at = datetime.now()

    Note:
        - Multiple @before_save methods can be defined on a model
        - They are called in the order they are defined, parents first
    """
    return LifecycleCallback("before_save", func)


def after_save(func: Callable[["RestModel"], None]) -> LifecycleCallback:
    """
    Decorator to mark a method to be called after a successful create() or update().

    Mutations made here are not sent anywhere.
    """
    return LifecycleCallback("after_save", func)


def after_load(func: Callable[["RestModel"], None]) -> LifecycleCallback:
    """
    Decorator to mark a method to be called on every instance returned by
    get_one() or get_many().
    """
    return LifecycleCallback("after_load", func)


def _directive_decorator(
    verb: Verb,
    url: str,
    headers: Iterable[KeyValueLike],
    query_params: Iterable[KeyValueLike],
) -> Callable[[ModelT], ModelT]:
    directive = Directive(verb, url, headers=headers, query_params=query_params)  # type: ignore[arg-type]

    def decorator(cls: ModelT) -> ModelT:
        from restmachine_client.models.base import RestModel

        if not (isinstance(cls, type) and issubclass(cls, RestModel)):
            raise TypeError(
                f"@{verb.method_name} directives can only decorate RestModel subclasses, got {cls!r}"
            )
        cls.declare_directives(directive)
        return cls

    return decorator


def get(url: str, *, headers: Iterable[KeyValueLike] = (), query_params: Iterable[KeyValueLike] = ()):
    """
    Declare a get-one directive: generates ``Model.get_one(...)``.

    Path parameters (``:slug``, ``:id``) in the URL become required string
    arguments of the generated method, in template order.

    Example:
        >>> @get("https://api.example.com/user/:user_id/post/:post_id")
        ... class Post(RestModel):
        ...     id: int
        ...     title: str
        >>> post = await Post.get_one("42", "1001")
    """
    return _directive_decorator(Verb.GET_ONE, url, headers, query_params)


def get_collection(url: str, *, headers: Iterable[KeyValueLike] = (), query_params: Iterable[KeyValueLike] = ()):
    """
    Declare a get-many directive: generates ``Model.get_many(...)``.

    Example:
        >>> @get_collection("https://api.example.com/articles",
        ...                 query_params=[("status", "published")])
        ... class Article(RestModel):
        ...     id: int
        ...     title: str
        >>> articles = await Article.get_many()
    """
    return _directive_decorator(Verb.GET_MANY, url, headers, query_params)


def post(url: str, *, headers: Iterable[KeyValueLike] = (), query_params: Iterable[KeyValueLike] = ()):
    """
    Declare a create directive: generates ``instance.create()``.

    Path parameters must name fields of the model; their values come from
    the instance.
    """
    return _directive_decorator(Verb.CREATE, url, headers, query_params)


def put(url: str, *, headers: Iterable[KeyValueLike] = (), query_params: Iterable[KeyValueLike] = ()):
    """Declare an update directive: generates ``instance.update()``."""
    return _directive_decorator(Verb.UPDATE, url, headers, query_params)


def delete(url: str, *, headers: Iterable[KeyValueLike] = (), query_params: Iterable[KeyValueLike] = ()):
    """Declare a delete directive: generates ``instance.remove()``."""
    return _directive_decorator(Verb.DELETE, url, headers, query_params)
