"""
RestMachine Client - declarative REST resource models for Python.

Attach directives to a Pydantic model and the client generates its
get_one/get_many/create/update/remove request methods from the model's
fields.
"""

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
from restmachine_client.auth import (
    AuthorizationProvider,
    BearerTokenAuthorization,
    StaticAuthorization,
)
from restmachine_client.config import (
    CONTENT_TYPE_JSON,
    DEFAULT_REQUEST_CONFIG,
    KeyValuePair,
    RequestConfig,
)
from restmachine_client.envelope import EnvelopeResolver, ResponseEnvelope
from restmachine_client.executor import RequestEnvelope, RequestExecutor, Transport
from restmachine_client.synthesizer import Directive, Verb
from restmachine_client.exceptions import (
    RestClientError,
    DirectiveError,
    InvalidUrlError,
    DuplicateDirectiveError,
    MissingPathPropertyError,
    RequestError,
    InvalidResponseError,
    HttpStatusError,
    DecodingError,
    EncodingError,
)

__version__ = "0.1.0"

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
    "AuthorizationProvider",
    "BearerTokenAuthorization",
    "StaticAuthorization",
    "CONTENT_TYPE_JSON",
    "DEFAULT_REQUEST_CONFIG",
    "KeyValuePair",
    "RequestConfig",
    "EnvelopeResolver",
    "ResponseEnvelope",
    "RequestEnvelope",
    "RequestExecutor",
    "Transport",
    "Directive",
    "Verb",
    "RestClientError",
    "DirectiveError",
    "InvalidUrlError",
    "DuplicateDirectiveError",
    "MissingPathPropertyError",
    "RequestError",
    "InvalidResponseError",
    "HttpStatusError",
    "DecodingError",
    "EncodingError",
]
