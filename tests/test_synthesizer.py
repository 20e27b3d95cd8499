"""
Tests for directive declaration and request method synthesis.
"""

import inspect

import pytest
from pydantic import BaseModel

from restmachine_client import (
    Directive,
    Field,
    RequestConfig,
    RestModel,
    StaticAuthorization,
    Verb,
    delete,
    get,
    get_collection,
    post,
    put,
)
from restmachine_client.exceptions import (
    DuplicateDirectiveError,
    InvalidUrlError,
    MissingPathPropertyError,
)
from restmachine_client.schema import ResourceSchema
from restmachine_client.synthesizer import build_method, build_methods

BASE_URL = "https://api.example.com"


class PostFields(BaseModel):
    id: int
    title: str


@pytest.fixture
def schema():
    return ResourceSchema.from_model(PostFields)


class TestVerb:
    """Test verb to HTTP method and method name mapping."""

    @pytest.mark.parametrize("verb, http_method, method_name", [
        (Verb.GET_ONE, "GET", "get_one"),
        (Verb.GET_MANY, "GET", "get_many"),
        (Verb.CREATE, "POST", "create"),
        (Verb.UPDATE, "PUT", "update"),
        (Verb.DELETE, "DELETE", "remove"),
    ])
    def test_mapping(self, verb, http_method, method_name):
        assert verb.http_method == http_method
        assert verb.method_name == method_name

    def test_directive_accepts_verb_values(self):
        directive = Directive("get-one", f"{BASE_URL}/posts/:id", headers=[("Accept", "application/json")])
        assert directive.verb is Verb.GET_ONE
        assert directive.headers[0].key == "Accept"

    def test_directive_rejects_dict_headers(self):
        with pytest.raises(TypeError):
            Directive(Verb.GET_ONE, f"{BASE_URL}/posts/:id", headers={"Accept": "application/json"})


class TestBuildMethods:
    """Test building method definitions from directives."""

    def test_read_method_arguments(self, schema):
        definition = build_method(schema, Directive(Verb.GET_ONE, f"{BASE_URL}/users/:user_id/posts/:slug"))

        assert definition.name == "get_one"
        assert definition.argument_names == ("user_id", "slug")
        assert list(definition.signature.parameters) == [
            "user_id",
            "slug",
            "dynamic_headers",
            "dynamic_query_params",
        ]
        assert definition.signature.parameters["slug"].kind is inspect.Parameter.POSITIONAL_OR_KEYWORD
        assert definition.signature.parameters["dynamic_headers"].kind is inspect.Parameter.KEYWORD_ONLY

    def test_read_parameters_need_no_field(self, schema):
        definition = build_method(schema, Directive(Verb.GET_ONE, f"{BASE_URL}/posts/:slug"))
        assert definition.response_shape.name == "PostFieldsGetOneResponse"
        assert definition.request_shape is None

    def test_get_many_shape(self, schema):
        definition = build_method(schema, Directive(Verb.GET_MANY, f"{BASE_URL}/posts"))
        assert definition.argument_names == ()
        assert definition.response_shape.name == "PostFieldsGetManyResponse"
        assert definition.resolver().many is True

    def test_write_methods(self, schema):
        methods = build_methods(schema, [
            Directive(Verb.CREATE, f"{BASE_URL}/posts"),
            Directive(Verb.UPDATE, f"{BASE_URL}/posts/:id"),
            Directive(Verb.DELETE, f"{BASE_URL}/posts/:id"),
        ])

        assert set(methods) == {Verb.CREATE, Verb.UPDATE, Verb.DELETE}
        assert methods[Verb.CREATE].request_shape.name == "PostFieldsCreateRequestBody"
        assert methods[Verb.UPDATE].request_shape.name == "PostFieldsUpdateRequestBody"
        assert methods[Verb.DELETE].request_shape is None
        assert methods[Verb.UPDATE].argument_names == ()
        assert methods[Verb.UPDATE].response_shape is None

    def test_write_method_has_no_resolver(self, schema):
        definition = build_method(schema, Directive(Verb.CREATE, f"{BASE_URL}/posts"))
        with pytest.raises(TypeError):
            definition.resolver()

    def test_duplicate_verb(self, schema):
        with pytest.raises(DuplicateDirectiveError) as exc_info:
            build_methods(schema, [
                Directive(Verb.GET_ONE, f"{BASE_URL}/posts/:id"),
                Directive(Verb.GET_ONE, f"{BASE_URL}/articles/:id"),
            ])
        assert exc_info.value.verb == "get-one"
        assert exc_info.value.model_name == "PostFields"

    @pytest.mark.parametrize("verb", [Verb.CREATE, Verb.UPDATE, Verb.DELETE])
    def test_write_parameter_without_field(self, schema, verb):
        with pytest.raises(MissingPathPropertyError) as exc_info:
            build_method(schema, Directive(verb, f"{BASE_URL}/posts/:id/user/:userId"))
        assert exc_info.value.property_name == "userId"
        assert "userId" in str(exc_info.value)

    def test_invalid_url(self, schema):
        with pytest.raises(InvalidUrlError):
            build_methods(schema, [Directive(Verb.GET_MANY, "posts")])

    @pytest.mark.parametrize("name", ["cls", "dynamic_headers", "dynamic_query_params"])
    def test_reserved_argument_name(self, schema, name):
        with pytest.raises(InvalidUrlError) as exc_info:
            build_method(schema, Directive(Verb.GET_ONE, f"{BASE_URL}/posts/:{name}"))
        assert name in str(exc_info.value)


@pytest.mark.anyio
class TestBuildRequest:
    """Test assembling request envelopes."""

    async def test_merge_order(self, schema):
        definition = build_method(schema, Directive(
            Verb.GET_ONE,
            f"{BASE_URL}/posts/:id",
            headers=[("X-Header", "static")],
            query_params=[("page", "static")],
        ))
        config = RequestConfig(
            default_headers=[("X-Header", "default")],
            default_query_params=[("page", "default")],
            authorization=StaticAuthorization("Authorization", "Bearer abc"),
        )

        envelope = await definition.build_request(
            config,
            {"id": "12"},
            dynamic_headers=[("X-Header", "dynamic")],
            dynamic_query_params=[("page", "dynamic")],
        )

        assert envelope.method == "GET"
        assert envelope.path == f"{BASE_URL}/posts/12"
        assert [tuple(pair) for pair in envelope.headers] == [
            ("X-Header", "static"),
            ("X-Header", "default"),
            ("X-Header", "dynamic"),
            ("Authorization", "Bearer abc"),
        ]
        assert [tuple(pair) for pair in envelope.query_params] == [
            ("page", "static"),
            ("page", "default"),
            ("page", "dynamic"),
        ]
        assert envelope.body is None


class TestDecorators:
    """Test declaring directives on models."""

    def test_generated_methods(self):
        @get(f"{BASE_URL}/posts/:id")
        @get_collection(f"{BASE_URL}/posts")
        @post(f"{BASE_URL}/posts")
        @put(f"{BASE_URL}/posts/:id")
        @delete(f"{BASE_URL}/posts/:id")
        class Post(RestModel):
            id: int = Field(exclude_from_body=True)
            title: str

        assert set(Post.rest_methods()) == set(Verb)
        assert inspect.iscoroutinefunction(Post.get_one)
        assert list(inspect.signature(Post.get_one).parameters) == [
            "id",
            "dynamic_headers",
            "dynamic_query_params",
        ]
        post_instance = Post(id=1, title="t")
        assert inspect.iscoroutinefunction(post_instance.create)
        assert callable(post_instance.update)
        assert callable(post_instance.remove)

    def test_undeclared_verbs_have_no_method(self):
        @get(f"{BASE_URL}/notes/:id")
        class Note(RestModel):
            id: int

        assert hasattr(Note, "get_one")
        assert not hasattr(Note, "get_many")
        assert not hasattr(Note(id=1), "create")
        with pytest.raises(AttributeError):
            Note(id=1).remove

    def test_model_without_directives(self):
        class Plain(RestModel):
            id: int

        assert Plain.rest_methods() == {}
        assert not hasattr(Plain, "get_one")

    def test_duplicate_decorators(self):
        with pytest.raises(DuplicateDirectiveError):
            @get(f"{BASE_URL}/posts/:id")
            @get(f"{BASE_URL}/posts/:slug")
            class Post(RestModel):
                id: int

    def test_missing_path_property(self):
        with pytest.raises(MissingPathPropertyError):
            @put(f"{BASE_URL}/posts/:slug")
            class Post(RestModel):
                id: int

    def test_reserved_argument_name_on_model(self):
        with pytest.raises(InvalidUrlError):
            @get(f"{BASE_URL}/posts/:dynamic_headers")
            class Post(RestModel):
                id: int

    def test_decorating_a_non_model(self):
        with pytest.raises(TypeError):
            @get(f"{BASE_URL}/posts/:id")
            class NotAModel:
                id: int

    def test_failed_declaration_leaves_methods_unchanged(self):
        @get_collection(f"{BASE_URL}/posts")
        class Post(RestModel):
            id: int

        with pytest.raises(InvalidUrlError):
            Post.declare_directives(Directive(Verb.GET_ONE, "not a url"))

        assert set(Post.rest_methods()) == {Verb.GET_MANY}
        assert not hasattr(Post, "get_one")

    def test_class_body_directives(self):
        class Post(RestModel):
            rest_directives = (
                Directive(Verb.GET_ONE, f"{BASE_URL}/posts/:id"),
                Directive(Verb.DELETE, f"{BASE_URL}/posts/:id"),
            )
            id: int

        assert set(Post.rest_methods()) == {Verb.GET_ONE, Verb.DELETE}

    def test_subclass_inherits_directives(self):
        @get(f"{BASE_URL}/posts/:id")
        @post(f"{BASE_URL}/posts")
        class Post(RestModel):
            id: int

        @post(f"{BASE_URL}/drafts")
        class Draft(Post):
            draft: bool = True

        assert set(Draft.rest_methods()) == {Verb.GET_ONE, Verb.CREATE}
        assert Draft.rest_methods()[Verb.CREATE].path.raw == f"{BASE_URL}/drafts"
        assert Draft.rest_methods()[Verb.GET_ONE].response_shape.name == "DraftGetOneResponse"
        assert Post.rest_methods()[Verb.CREATE].path.raw == f"{BASE_URL}/posts"
