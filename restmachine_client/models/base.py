"""
Base model class for RestMachine Client.

Models declare the REST endpoints backing them through directives; the
request methods are generated from the model's fields when the class is
defined.
"""

import logging
from typing import Any, Callable, ClassVar, Optional

from pydantic import BaseModel, ConfigDict

from restmachine_client.config import DEFAULT_REQUEST_CONFIG, RequestConfig
from restmachine_client.methods import ResourceMethod, make_method
from restmachine_client.models.decorators import LifecycleCallback
from restmachine_client.schema import ResourceSchema
from restmachine_client.synthesizer import Directive, MethodDefinition, Verb, build_methods

logger = logging.getLogger(__name__)


class RestModel(BaseModel):
    """
    Base model class for REST-backed resources.

    Example:
        >>> @get("https://jsonplaceholder.typicode.com/posts/:id")
        ... @get_collection("https://jsonplaceholder.typicode.com/posts")
        ... @post("https://jsonplaceholder.typicode.com/posts")
        ... class Post(RestModel):
        ...     id: int = Field(exclude_from_body=True)
        ...     user_id: int = Field(wire_key="userId")
        ...     title: str
        ...     body: str
        ...
        >>> post = await Post.get_one("12")
        >>> posts = await Post.get_many()
        >>> await Post(id=0, user_id=1, title="Hello", body="World").create()

        Alternative syntax using class parameters and data-only directives:
        >>> class Post(RestModel, request_config=RequestConfig(transport=client)):
        ...     rest_directives = (
        ...         Directive(Verb.GET_ONE, "https://jsonplaceholder.typicode.com/posts/:id"),
        ...     )
        ...     id: int
        ...     title: str
    """

    # Pydantic configuration
    model_config = ConfigDict(
        validate_assignment=True,  # Validate on attribute assignment
        arbitrary_types_allowed=True,  # Allow custom types
        from_attributes=True,
        ignored_types=(LifecycleCallback, ResourceMethod),  # Ignore descriptors
    )

    # Request configuration (falls back to DEFAULT_REQUEST_CONFIG)
    request_config: ClassVar[Optional[RequestConfig]] = None

    # Directives declared in the class body (data-only registration)
    rest_directives: ClassVar[tuple[Directive, ...]] = ()

    # Populated when directives are installed
    _declared_directives: ClassVar[tuple[Directive, ...]] = ()
    _rest_methods: ClassVar[dict[Verb, MethodDefinition]] = {}
    _rest_callables: ClassVar[dict[Verb, Callable[..., Any]]] = {}

    # Lifecycle callbacks (populated by descriptors)
    _lifecycle_callbacks: ClassVar[dict[str, list[Callable[["RestModel"], None]]]] = {}

    # Generated request methods
    get_one = ResourceMethod(Verb.GET_ONE)
    get_many = ResourceMethod(Verb.GET_MANY)
    create = ResourceMethod(Verb.CREATE)
    update = ResourceMethod(Verb.UPDATE)
    remove = ResourceMethod(Verb.DELETE)

    def __init_subclass__(cls, request_config: Optional[RequestConfig] = None, **kwargs: Any):
        """
        Args:
            request_config: Optional config for this model (alternative to ClassVar)
            **kwargs: Additional arguments passed to parent
        """
        super().__init_subclass__(**kwargs)

        # Support class parameter pattern: class Post(RestModel, request_config=RequestConfig())
        if request_config is not None:
            cls.request_config = request_config

    @classmethod
    def __pydantic_init_subclass__(cls, request_config: Optional[RequestConfig] = None, **kwargs: Any) -> None:
        """Install directives once Pydantic has collected the model fields."""
        super().__pydantic_init_subclass__(**kwargs)

        cls._declared_directives = tuple(cls.__dict__.get("rest_directives", ()))
        cls._install_directives()

    @classmethod
    def declare_directives(cls, *directives: Directive) -> None:
        """
        Add directives to this class and regenerate its request methods.

        Directive decorators call this; it can also be called directly.

        Raises:
            DuplicateDirectiveError: If a verb is declared twice on this class
            InvalidUrlError: If a URL template is not a valid absolute URL
            MissingPathPropertyError: If a write directive's path parameter
                has no matching field
        """
        previous = cls.__dict__.get("_declared_directives", ())
        cls._install_directives(previous + tuple(directives))

    @classmethod
    def _inherited_directives(cls) -> dict[Verb, Directive]:
        inherited: dict[Verb, Directive] = {}
        for base in reversed(cls.__mro__[1:]):
            for definition in base.__dict__.get("_rest_methods", {}).values():
                inherited[definition.verb] = definition.directive
        return inherited

    @classmethod
    def _install_directives(cls, declared: Optional[tuple[Directive, ...]] = None) -> None:
        """
        Build and attach the request methods of this class.

        Directives declared on a parent class are inherited unless this class
        declares the same verb. Nothing is attached if any directive fails
        to build.
        """
        if declared is None:
            declared = cls.__dict__.get("_declared_directives", ())

        schema = ResourceSchema.from_model(cls)
        # Validates duplicates among this class's own declarations
        own = build_methods(schema, declared)

        inherited = {
            verb: directive
            for verb, directive in cls._inherited_directives().items()
            if verb not in own
        }
        methods = {**build_methods(schema, inherited.values()), **own}
        callables = {verb: make_method(definition) for verb, definition in methods.items()}

        cls._declared_directives = declared
        cls._rest_methods = methods
        cls._rest_callables = callables

        if methods:
            logger.debug(
                f"Installed {', '.join(sorted(d.name for d in methods.values()))} on {cls.__name__}"
            )

    @classmethod
    def _get_request_config(cls) -> RequestConfig:
        """Get the request configuration for this model."""
        if cls.request_config is not None:
            return cls.request_config
        return DEFAULT_REQUEST_CONFIG

    @classmethod
    def rest_methods(cls) -> dict[Verb, MethodDefinition]:
        """Method definitions generated for this model, keyed by verb."""
        return dict(cls._rest_methods)

    def _run_callbacks(self, event: str) -> None:
        """Call every callback registered for ``event``, parents first."""
        for klass in reversed(type(self).__mro__):
            for callback in klass.__dict__.get("_lifecycle_callbacks", {}).get(event, []):
                callback(self)
