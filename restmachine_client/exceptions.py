"""
Exceptions for RestMachine Client.

Build-time errors derive from DirectiveError and are raised while a model
class is being declared. Runtime errors derive from RequestError and are
raised by the generated request methods.
"""

from typing import Optional


class RestClientError(Exception):
    """Base exception for REST client errors."""
    pass


class DirectiveError(RestClientError):
    """A resource directive could not be turned into request methods."""
    pass


class InvalidUrlError(DirectiveError):
    """The URL template of a directive is not a valid absolute URL."""

    def __init__(self, url: str, reason: Optional[str] = None):
        self.url = url
        self.reason = reason
        message = f"Invalid URL: {url}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class DuplicateDirectiveError(DirectiveError):
    """More than one directive was declared for the same verb."""

    def __init__(self, model_name: str, verb: str):
        self.model_name = model_name
        self.verb = verb
        super().__init__(
            f"Only one {verb} directive allowed per resource ({model_name} declares more than one)"
        )


class MissingPathPropertyError(DirectiveError):
    """A path parameter of a write directive has no matching model field."""

    def __init__(self, property_name: str, url: str, model_name: str = ""):
        self.property_name = property_name
        self.url = url
        self.model_name = model_name
        owner = f"{model_name} " if model_name else ""
        super().__init__(
            f"Path parameter ':{property_name}' in {url} has no matching field on {owner}model. "
            f"Path parameters of create, update and delete directives are filled from the "
            f"instance's own fields, so a URL like https://api.example.com/posts/:id/user/:userId "
            f"requires fields named id and userId."
        )


class RequestError(RestClientError):
    """A generated request method failed at runtime."""
    pass


class InvalidResponseError(RequestError):
    """The transport returned something that is not an HTTP response."""
    pass


class HttpStatusError(RequestError):
    """The server answered with a status code outside 200-299."""

    def __init__(self, status_code: int, content: bytes = b"", url: str = ""):
        self.status_code = status_code
        self.content = content
        self.url = url
        location = f" from {url}" if url else ""
        super().__init__(f"Unexpected HTTP status {status_code}{location}")


class DecodingError(RequestError):
    """A response body could not be decoded into the expected shape."""

    def __init__(self, message: str, target: str = ""):
        self.target = target
        super().__init__(message)


class EncodingError(RequestError):
    """An outgoing request body could not be serialized."""
    pass
