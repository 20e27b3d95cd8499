"""
Resource schemas.

A ResourceSchema is the plain-data view of a model that the request method
builder works from: the ordered fields with their wire types and request
body metadata.
"""

from dataclasses import dataclass
from typing import Any, Optional, TYPE_CHECKING

from pydantic.fields import FieldInfo

from restmachine_client.models.fields import get_wire_key, is_excluded_from_body

if TYPE_CHECKING:
    from pydantic import BaseModel


@dataclass(frozen=True)
class FieldSpec:
    """
    One field of a resource.

    Attributes:
        name: Attribute name on the model
        annotation: Wire type (the model field's annotation)
        excluded: Left out of request bodies
        wire_key: Key used on the wire instead of the name, if renamed
        info: The model's FieldInfo, used to carry defaults into body shapes
    """

    name: str
    annotation: Any
    excluded: bool = False
    wire_key: Optional[str] = None
    info: Optional[FieldInfo] = None

    @property
    def key(self) -> str:
        """Key used for this field in JSON bodies."""
        return self.wire_key or self.name

    @property
    def is_renamed(self) -> bool:
        return self.wire_key is not None and self.wire_key != self.name

    @classmethod
    def from_field_info(cls, name: str, field_info: FieldInfo) -> "FieldSpec":
        return cls(
            name=name,
            annotation=field_info.annotation,
            excluded=is_excluded_from_body(field_info),
            wire_key=get_wire_key(field_info),
            info=field_info,
        )


@dataclass(frozen=True)
class ResourceSchema:
    """Ordered fields of a resource."""

    name: str
    fields: tuple[FieldSpec, ...]

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(field.name for field in self.fields)

    def get(self, name: str) -> Optional[FieldSpec]:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def __contains__(self, name: object) -> bool:
        return any(field.name == name for field in self.fields)

    @classmethod
    def from_model(cls, model_class: type["BaseModel"]) -> "ResourceSchema":
        """
        Build the schema of a pydantic model class.

        Example:
            >>> schema = ResourceSchema.from_model(Post)
            >>> schema.field_names
            ('id', 'user_id', 'title', 'body')
        """
        return cls(
            name=model_class.__name__,
            fields=tuple(
                FieldSpec.from_field_info(name, field_info)
                for name, field_info in model_class.model_fields.items()
            ),
        )
