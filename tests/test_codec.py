"""
Tests for field metadata, resource schemas and body shapes.
"""

import json
from typing import Optional

import pytest
from pydantic import ValidationError

from restmachine_client import Field, RestModel
from restmachine_client.codec import build_request_shape, build_response_shape
from restmachine_client.exceptions import DecodingError, EncodingError
from restmachine_client.models.fields import get_wire_key, is_excluded_from_body
from restmachine_client.schema import ResourceSchema
from restmachine_client.synthesizer import Verb


class Post(RestModel):
    id: int = Field(exclude_from_body=True)
    user_id: int = Field(wire_key="userId")
    title: str
    body: str = ""


class Article(RestModel):
    id: int
    title: str


class Counter(RestModel):
    count: int = Field(ge=0)


class TestFieldMetadata:
    """Test the exclude_from_body and wire_key field options."""

    def test_defaults(self):
        info = Article.model_fields["title"]
        assert is_excluded_from_body(info) is False
        assert get_wire_key(info) is None

    def test_options_are_stored(self):
        assert is_excluded_from_body(Post.model_fields["id"]) is True
        assert get_wire_key(Post.model_fields["user_id"]) == "userId"

    def test_pydantic_options_still_apply(self):
        with pytest.raises(ValidationError):
            Counter(count=-1)

    def test_empty_wire_key_rejected(self):
        with pytest.raises(ValueError):
            Field(wire_key="")

    @pytest.mark.parametrize("option", ["alias", "validation_alias", "serialization_alias"])
    def test_pydantic_aliases_rejected(self, option):
        with pytest.raises(ValueError, match="wire_key"):
            Field(**{option: "userId"})


class TestResourceSchema:
    """Test schema extraction from models."""

    def test_fields_in_declaration_order(self):
        schema = ResourceSchema.from_model(Post)
        assert schema.name == "Post"
        assert schema.field_names == ("id", "user_id", "title", "body")

    def test_field_specs(self):
        schema = ResourceSchema.from_model(Post)
        assert schema.get("id").excluded is True
        assert schema.get("user_id").key == "userId"
        assert schema.get("user_id").is_renamed is True
        assert schema.get("title").key == "title"
        assert schema.get("missing") is None
        assert "title" in schema
        assert "userId" not in schema


class TestRequestShape:
    """Test outgoing body shapes."""

    def test_excluded_fields_dropped(self):
        shape = build_request_shape(ResourceSchema.from_model(Post), Verb.CREATE)
        assert shape.name == "PostCreateRequestBody"
        assert shape.field_names == ("user_id", "title", "body")

    def test_key_map_present_when_renamed(self):
        shape = build_request_shape(ResourceSchema.from_model(Post), Verb.UPDATE)
        assert shape.name == "PostUpdateRequestBody"
        assert dict(shape.key_map) == {"user_id": "userId", "title": "title", "body": "body"}
        assert shape.wire_key("user_id") == "userId"

    def test_no_key_map_without_renames(self):
        shape = build_request_shape(ResourceSchema.from_model(Article), Verb.CREATE)
        assert shape.key_map is None
        assert shape.wire_key("title") == "title"

    @pytest.mark.parametrize("post_id", [0, 123])
    def test_encode_leaves_out_excluded_field(self, post_id):
        shape = build_request_shape(ResourceSchema.from_model(Post), Verb.CREATE)
        post = Post(id=post_id, user_id=1, title="Hello", body="World")

        body = json.loads(shape.encode(post))

        assert body == {"userId": 1, "title": "Hello", "body": "World"}

    def test_encode_missing_value(self):
        shape = build_request_shape(ResourceSchema.from_model(Post), Verb.CREATE)
        incomplete = Post.model_construct(title="Hello")

        with pytest.raises(EncodingError):
            shape.encode(incomplete)


class TestResponseShape:
    """Test incoming body shapes."""

    def test_keeps_excluded_fields(self):
        shape = build_response_shape(ResourceSchema.from_model(Post))
        assert shape.name == "PostGetOneResponse"
        assert shape.field_names == ("id", "user_id", "title", "body")

    def test_many_name(self):
        shape = build_response_shape(ResourceSchema.from_model(Post), many=True)
        assert shape.name == "PostGetManyResponse"

    def test_decodes_wire_keys(self):
        shape = build_response_shape(ResourceSchema.from_model(Post))
        decoded = shape.model.model_validate({"id": 3, "userId": 5, "title": "t", "body": "text"})

        post = shape.to_model(Post, decoded)

        assert isinstance(post, Post)
        assert post.id == 3
        assert post.user_id == 5
        assert post.body == "text"

    def test_model_defaults_are_not_used(self):
        """A field with a model default must still be present in a response."""
        shape = build_response_shape(ResourceSchema.from_model(Post))
        with pytest.raises(ValidationError):
            shape.model.model_validate({"id": 3, "userId": 5, "title": "t"})

    def test_optional_fields_default_to_none(self):
        class Profile(RestModel):
            name: str
            nickname: Optional[str] = "anon"
            bio: str | None = "empty"

        shape = build_response_shape(ResourceSchema.from_model(Profile))
        profile = shape.to_model(Profile, shape.model.model_validate({"name": "Bob"}))

        assert profile.nickname is None
        assert profile.bio is None

    def test_request_shape_keeps_model_defaults(self):
        shape = build_request_shape(ResourceSchema.from_model(Post), Verb.CREATE)
        body = shape.model.model_validate({"userId": 1, "title": "t"})
        assert body.body == ""

    def test_field_name_is_not_a_wire_key(self):
        shape = build_response_shape(ResourceSchema.from_model(Post))
        with pytest.raises(ValidationError):
            shape.model.model_validate({"id": 3, "user_id": 5, "title": "t"})

    def test_renamed_field_round_trip(self):
        class Person(RestModel):
            name: str = Field(wire_key="name_value")

        schema = ResourceSchema.from_model(Person)
        body = build_request_shape(schema, Verb.CREATE).encode(Person(name="Bob"))
        assert json.loads(body) == {"name_value": "Bob"}

        response_shape = build_response_shape(schema)
        restored = response_shape.to_model(Person, response_shape.model.model_validate_json(body))
        assert restored.name == "Bob"

    def test_model_rejects_decoded_values(self):
        shape = build_response_shape(ResourceSchema.from_model(Counter))
        decoded = shape.model.model_validate({"count": -1})

        with pytest.raises(DecodingError) as exc_info:
            shape.to_model(Counter, decoded)
        assert exc_info.value.target == "Counter"
