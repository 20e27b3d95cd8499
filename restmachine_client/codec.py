"""
Body shapes for request and response bodies.

A BodyShape is derived from a ResourceSchema. Request shapes leave out
excluded fields; response shapes keep every field, since exclusion only
means "never sent". When any field of a shape is renamed the shape carries a
key-mapping table and its backing pydantic model uses the wire keys as
aliases.

Decoded response shapes are copied field by field into the model class, so a
renamed wire key never changes the model's own attribute name.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType, UnionType
from typing import Any, Mapping, Optional, Union, TYPE_CHECKING, get_args, get_origin

from pydantic import BaseModel, ConfigDict, ValidationError, create_model
from pydantic import Field as PydanticField
from pydantic_core import PydanticSerializationError, PydanticUndefined

from restmachine_client.exceptions import DecodingError, EncodingError
from restmachine_client.schema import FieldSpec, ResourceSchema

if TYPE_CHECKING:
    from restmachine_client.synthesizer import Verb

logger = logging.getLogger(__name__)


def _admits_none(annotation: Any) -> bool:
    if annotation is None or annotation is type(None) or annotation is Any:
        return True
    if get_origin(annotation) in (Union, UnionType):
        return any(_admits_none(arg) for arg in get_args(annotation))
    return False


def _field_definition(field: FieldSpec, keep_defaults: bool = True) -> tuple[Any, Any]:
    alias = field.wire_key if field.is_renamed else None
    default: Any = PydanticUndefined

    # Response shapes: every key must be present unless the field is optional
    if not keep_defaults:
        if _admits_none(field.annotation):
            default = None
        return field.annotation, PydanticField(default=default, alias=alias)

    info = field.info
    default_factory = None
    if info is not None:
        default = info.default
        default_factory = info.default_factory

    if default_factory is not None:
        return field.annotation, PydanticField(default_factory=default_factory, alias=alias)
    return field.annotation, PydanticField(default=default, alias=alias)


def _build_shape_model(name: str, fields: tuple[FieldSpec, ...], keep_defaults: bool = True) -> type[BaseModel]:
    definitions = {field.name: _field_definition(field, keep_defaults) for field in fields}
    return create_model(  # type: ignore[call-overload, no-any-return]
        name,
        __config__=ConfigDict(arbitrary_types_allowed=True, protected_namespaces=()),
        **definitions,
    )


@dataclass(frozen=True)
class BodyShape:
    """
    Field list (exclusions and renames applied) of a request or response body.

    Attributes:
        name: Name of the generated shape, e.g. ``PostCreateRequestBody``
        fields: Fields carried by the shape
        key_map: Field name to wire key for every field, present only when
            at least one field is renamed
        model: Pydantic model backing the shape
    """

    name: str
    fields: tuple[FieldSpec, ...]
    key_map: Optional[Mapping[str, str]]
    model: type[BaseModel]

    @classmethod
    def build(cls, name: str, fields: tuple[FieldSpec, ...], *, keep_defaults: bool = True) -> "BodyShape":
        key_map = None
        if any(field.is_renamed for field in fields):
            key_map = MappingProxyType({field.name: field.key for field in fields})
        model = _build_shape_model(name, fields, keep_defaults)
        return cls(name=name, fields=fields, key_map=key_map, model=model)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(field.name for field in self.fields)

    def wire_key(self, name: str) -> str:
        if self.key_map is None:
            return name
        return self.key_map[name]

    def encode(self, instance: Any) -> bytes:
        """
        Serialize a model instance's field values as a JSON body.

        Raises:
            EncodingError: If the values do not fit the shape or cannot be
                serialized
        """
        try:
            values = {field.key: getattr(instance, field.name) for field in self.fields}
            body = self.model.model_validate(values)
            return body.model_dump_json(by_alias=True).encode("utf-8")
        except AttributeError as exc:
            raise EncodingError(f"Could not build {self.name}: {exc}") from exc
        except (ValidationError, PydanticSerializationError) as exc:
            raise EncodingError(f"Could not encode {self.name}: {exc}") from exc

    def to_model(self, model_class: type[BaseModel], decoded: BaseModel) -> Any:
        """
        Copy a decoded shape into a new instance of ``model_class``.

        Raises:
            DecodingError: If the model rejects the decoded values
        """
        values = {field.name: getattr(decoded, field.name) for field in self.fields}
        try:
            return model_class(**values)
        except ValidationError as exc:
            raise DecodingError(
                f"Could not build {model_class.__name__} from {self.name}: {exc}",
                target=model_class.__name__,
            ) from exc


def build_request_shape(schema: ResourceSchema, verb: "Verb") -> BodyShape:
    """
    Derive the outgoing body shape of a create or update directive.

    Excluded fields are dropped.
    """
    fields = tuple(field for field in schema.fields if not field.excluded)
    shape = BodyShape.build(f"{schema.name}{verb.shape_prefix}RequestBody", fields)
    logger.debug(f"Built {shape.name} with fields {list(shape.field_names)}")
    return shape


def build_response_shape(schema: ResourceSchema, many: bool = False) -> BodyShape:
    """
    Derive the incoming body shape of a read directive (all fields).

    Model defaults are not carried over: every field must be present in the
    payload, except fields whose type admits None, which default to None.
    A wrapped payload such as ``{"data": {...}}`` therefore does not decode
    at the root unless every field is optional.
    """
    prefix = "GetMany" if many else "GetOne"
    return BodyShape.build(f"{schema.name}{prefix}Response", schema.fields, keep_defaults=False)
