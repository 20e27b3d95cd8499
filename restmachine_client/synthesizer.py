"""
Request method synthesis.

Turns a resource schema plus its directives into MethodDefinitions: plain,
immutable descriptions of the request methods a model exposes. This step is
pure; binding the definitions to callables happens in
``restmachine_client.methods``.
"""

import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from restmachine_client.codec import BodyShape, build_request_shape, build_response_shape
from restmachine_client.config import KeyValueLike, KeyValuePair, RequestConfig, as_key_values
from restmachine_client.envelope import EnvelopeResolver
from restmachine_client.exceptions import DuplicateDirectiveError, InvalidUrlError, MissingPathPropertyError
from restmachine_client.executor import RequestEnvelope, merge_headers, merge_query_params
from restmachine_client.paths import PathTemplate, parse_url_template
from restmachine_client.schema import ResourceSchema


class Verb(str, Enum):
    """Resource verbs a directive can declare."""

    GET_ONE = "get-one"
    GET_MANY = "get-many"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

    @property
    def http_method(self) -> str:
        return _HTTP_METHODS[self]

    @property
    def method_name(self) -> str:
        """Name of the generated method on the model."""
        return _METHOD_NAMES[self]

    @property
    def shape_prefix(self) -> str:
        return _SHAPE_PREFIXES[self]

    @property
    def is_read(self) -> bool:
        return self in (Verb.GET_ONE, Verb.GET_MANY)

    @property
    def has_body(self) -> bool:
        return self in (Verb.CREATE, Verb.UPDATE)


_HTTP_METHODS = {
    Verb.GET_ONE: "GET",
    Verb.GET_MANY: "GET",
    Verb.CREATE: "POST",
    Verb.UPDATE: "PUT",
    Verb.DELETE: "DELETE",
}

_METHOD_NAMES = {
    Verb.GET_ONE: "get_one",
    Verb.GET_MANY: "get_many",
    Verb.CREATE: "create",
    Verb.UPDATE: "update",
    Verb.DELETE: "remove",
}

_SHAPE_PREFIXES = {
    Verb.GET_ONE: "GetOne",
    Verb.GET_MANY: "GetMany",
    Verb.CREATE: "Create",
    Verb.UPDATE: "Update",
    Verb.DELETE: "Delete",
}


@dataclass(frozen=True)
class Directive:
    """
    Declaration binding a resource verb to a URL template.

    Example:
        >>> Directive(Verb.GET_ONE, "https://api.example.com/posts/:id",
        ...           headers=[("Accept", "application/json")])
    """

    verb: Verb
    url: str
    headers: tuple[KeyValuePair, ...] = ()
    query_params: tuple[KeyValuePair, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "verb", Verb(self.verb))
        object.__setattr__(self, "headers", as_key_values(self.headers))
        object.__setattr__(self, "query_params", as_key_values(self.query_params))


@dataclass(frozen=True)
class MethodDefinition:
    """
    Description of one generated request method.

    Attributes:
        directive: The directive this method was built from
        path: Parsed URL template
        request_shape: Outgoing body shape (create/update only)
        response_shape: Incoming body shape (get-one/get-many only)
        signature: Call signature of the generated method, without the
            leading class/instance argument
    """

    directive: Directive
    path: PathTemplate
    request_shape: Optional[BodyShape] = None
    response_shape: Optional[BodyShape] = None
    signature: inspect.Signature = field(default_factory=inspect.Signature)

    @property
    def verb(self) -> Verb:
        return self.directive.verb

    @property
    def name(self) -> str:
        return self.verb.method_name

    @property
    def http_method(self) -> str:
        return self.verb.http_method

    @property
    def argument_names(self) -> tuple[str, ...]:
        """Path parameters passed by the caller (read verbs only)."""
        return self.path.names if self.verb.is_read else ()

    def resolver(self) -> EnvelopeResolver[Any]:
        if self.response_shape is None:
            raise TypeError(f"{self.name} does not decode a response body")
        return EnvelopeResolver(self.response_shape.model, many=self.verb is Verb.GET_MANY)

    async def build_request(
        self,
        config: RequestConfig,
        path_values: Mapping[str, Any],
        *,
        body: Optional[bytes] = None,
        dynamic_headers: Optional[Iterable[KeyValueLike]] = None,
        dynamic_query_params: Optional[Iterable[KeyValueLike]] = None,
    ) -> RequestEnvelope:
        """Assemble the RequestEnvelope of one call."""
        headers = await merge_headers(self.directive.headers, config, dynamic_headers)
        query_params = merge_query_params(self.directive.query_params, config, dynamic_query_params)
        return RequestEnvelope(
            method=self.http_method,
            path=self.path.resolve(path_values),
            headers=headers,
            query_params=query_params,
            body=body,
        )


# Argument names the generated read methods already use
RESERVED_ARGUMENT_NAMES = ("cls", "dynamic_headers", "dynamic_query_params")


def _build_signature(argument_names: Iterable[str]) -> inspect.Signature:
    parameters = [
        inspect.Parameter(name, inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=str)
        for name in argument_names
    ]
    parameters.extend([
        inspect.Parameter("dynamic_headers", inspect.Parameter.KEYWORD_ONLY, default=()),
        inspect.Parameter("dynamic_query_params", inspect.Parameter.KEYWORD_ONLY, default=()),
    ])
    return inspect.Signature(parameters)


def validate_path_properties(schema: ResourceSchema, path: PathTemplate) -> None:
    """
    Check that every path parameter names a field of the resource.

    Raises:
        MissingPathPropertyError: Naming the first parameter without a field
    """
    for name in path.names:
        if name not in schema:
            raise MissingPathPropertyError(name, path.raw, schema.name)


def build_method(schema: ResourceSchema, directive: Directive) -> MethodDefinition:
    """
    Build the method definition of a single directive.

    Raises:
        InvalidUrlError: If the URL template is not a valid absolute URL, or a
            get-one/get-many path parameter clashes with a reserved argument
            name (cls, dynamic_headers, dynamic_query_params)
        MissingPathPropertyError: If a create/update/delete path parameter
            has no matching field
    """
    path = parse_url_template(directive.url)

    if directive.verb.is_read:
        for name in path.names:
            if name in RESERVED_ARGUMENT_NAMES:
                raise InvalidUrlError(
                    directive.url,
                    f"path parameter ':{name}' clashes with the {name} argument of {directive.verb.method_name}()",
                )
        return MethodDefinition(
            directive=directive,
            path=path,
            response_shape=build_response_shape(schema, many=directive.verb is Verb.GET_MANY),
            signature=_build_signature(path.names),
        )

    validate_path_properties(schema, path)
    request_shape = build_request_shape(schema, directive.verb) if directive.verb.has_body else None
    return MethodDefinition(
        directive=directive,
        path=path,
        request_shape=request_shape,
        signature=_build_signature(()),
    )


def build_methods(schema: ResourceSchema, directives: Iterable[Directive]) -> dict[Verb, MethodDefinition]:
    """
    Build every method of a resource.

    Either all directives build or an error is raised; nothing partial is
    returned.

    Raises:
        DuplicateDirectiveError: If two directives share a verb
        InvalidUrlError: See build_method
        MissingPathPropertyError: See build_method

    Example:
        >>> methods = build_methods(schema, [Directive(Verb.GET_ONE, "https://api.example.com/posts/:id")])
        >>> methods[Verb.GET_ONE].argument_names
        ('id',)
    """
    directives = list(directives)
    seen: set[Verb] = set()
    for directive in directives:
        if directive.verb in seen:
            raise DuplicateDirectiveError(schema.name, directive.verb.value)
        seen.add(directive.verb)

    return {directive.verb: build_method(schema, directive) for directive in directives}
