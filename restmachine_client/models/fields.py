"""
Field definitions for RestMachine Client.

Extends Pydantic's field system with request body metadata: whether a field
is left out of outgoing bodies and which key it uses on the wire.
"""

from typing import Any, Optional, Callable
from pydantic import Field as PydanticField
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined


def Field(
    default: Any = PydanticUndefined,
    *,
    # Standard Pydantic validation
    default_factory: Optional[Callable[[], Any]] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
    examples: Optional[list[Any]] = None,
    gt: Optional[float] = None,
    ge: Optional[float] = None,
    lt: Optional[float] = None,
    le: Optional[float] = None,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
    pattern: Optional[str] = None,
    # Request body options
    exclude_from_body: bool = False,  # Never sent in create/update bodies
    wire_key: Optional[str] = None,  # JSON key used in request and response bodies
    **extra: Any,
) -> FieldInfo:
    """
    Define a model field with validation and request body metadata.

    Args:
        default: Default value for the field
        default_factory: Factory function for default values
        title: Human-readable title
        description: Field description
        examples: Example values
        gt: Greater than validation
        ge: Greater than or equal validation
        lt: Less than validation
        le: Less than or equal validation
        min_length: Minimum string/list length
        max_length: Maximum string/list length
        pattern: Regex pattern for string validation
        exclude_from_body: Leave this field out of create/update request
            bodies. It is still read from responses.
        wire_key: Key used for this field in JSON bodies instead of the
            field name
        **extra: Additional Pydantic field arguments

    Returns:
        FieldInfo object with request body metadata

    Raises:
        ValueError: If wire_key is empty, or a pydantic alias option is
            passed (renames go through wire_key)

    Example:
        >>> class Post(RestModel):
        ...     id: int = Field(exclude_from_body=True)
        ...     user_id: int = Field(wire_key="userId")
        ...     title: str = Field(max_length=200)
    """
    if wire_key is not None and not wire_key:
        raise ValueError("wire_key must be a non-empty string")
    for option in ("alias", "validation_alias", "serialization_alias"):
        if option in extra:
            raise ValueError(f"Field() does not accept {option}=; use wire_key= to rename a field in JSON bodies")

    json_schema_extra = extra.pop("json_schema_extra", {})
    json_schema_extra.update({
        "rest": {
            "exclude_from_body": exclude_from_body,
            "wire_key": wire_key,
        }
    })

    if default_factory is not None:
        extra["default_factory"] = default_factory

    return PydanticField(  # type: ignore[no-any-return, call-overload, misc]
        default=default,
        title=title,
        description=description,
        examples=examples,
        gt=gt,
        ge=ge,
        lt=lt,
        le=le,
        min_length=min_length,
        max_length=max_length,
        pattern=pattern,
        json_schema_extra=json_schema_extra,
        **extra,
    )


def get_field_rest_metadata(field_info: FieldInfo) -> dict[str, Any]:
    """
    Extract request body metadata from a FieldInfo object.

    Example:
        >>> field = Field(wire_key="userId")
        >>> get_field_rest_metadata(field)["wire_key"]
        'userId'
    """
    if hasattr(field_info, "json_schema_extra") and field_info.json_schema_extra:
        extra = field_info.json_schema_extra
        if isinstance(extra, dict):
            rest_data = extra.get("rest", {})
            if isinstance(rest_data, dict):
                return rest_data
    return {}


def is_excluded_from_body(field_info: FieldInfo) -> bool:
    """Check if a field is left out of request bodies."""
    return bool(get_field_rest_metadata(field_info).get("exclude_from_body", False))


def get_wire_key(field_info: FieldInfo) -> Optional[str]:
    """Return the wire key rename of a field, if any."""
    wire_key = get_field_rest_metadata(field_info).get("wire_key")
    return str(wire_key) if wire_key else None
