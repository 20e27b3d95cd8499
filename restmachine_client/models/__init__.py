"""Model definitions for RestMachine Client."""

from restmachine_client.models.base import RestModel
from restmachine_client.models.fields import Field
from restmachine_client.models.decorators import (
    get,
    get_collection,
    post,
    put,
    delete,
    before_save,
    after_save,
    after_load,
)

__all__ = [
    "RestModel",
    "Field",
    "get",
    "get_collection",
    "post",
    "put",
    "delete",
    "before_save",
    "after_save",
    "after_load",
]
