"""
URL template parsing.

A URL template marks path parameters with a leading colon, for example
``https://api.example.com/users/:user_id/posts/:id``. Parsing yields the
parameter tokens and a template with each token replaced by a ``{name}``
interpolation slot.
"""

import keyword
import re
from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import quote

import httpx

from restmachine_client.exceptions import InvalidUrlError

PATH_PARAMETER_PATTERN = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")

_WHITESPACE = re.compile(r"\s")


def extract_path_parameters(template: str) -> list[str]:
    """
    Extract path parameter tokens in order of appearance.

    Tokens keep their leading colon and repeats are kept.

    Example:
        >>> extract_path_parameters("/a/:id/b/:x")
        [':id', ':x']
    """
    return [match.group(0) for match in PATH_PARAMETER_PATTERN.finditer(template)]


def path_parameter_names(template: str) -> list[str]:
    """
    Unique path parameter names (without colon) in first-occurrence order.

    Example:
        >>> path_parameter_names("/a/:id/b/:x/c/:id")
        ['id', 'x']
    """
    names: list[str] = []
    for token in extract_path_parameters(template):
        name = token[1:]
        if name not in names:
            names.append(name)
    return names


def validate_absolute_url(url: str) -> httpx.URL:
    """
    Check that a URL template is a syntactically valid absolute URL.

    Raises:
        InvalidUrlError: If the template cannot be parsed, is relative, or
            does not use http/https
    """
    if not isinstance(url, str) or not url:
        raise InvalidUrlError(str(url), "empty URL")
    if _WHITESPACE.search(url):
        raise InvalidUrlError(url, "URL contains whitespace")

    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError, ValueError) as exc:
        raise InvalidUrlError(url, str(exc)) from exc

    if parsed.scheme not in ("http", "https"):
        raise InvalidUrlError(url, "URL must be absolute and use http or https")
    if not parsed.host:
        raise InvalidUrlError(url, "URL has no host")
    return parsed


def _interpolation_template(template: str) -> str:
    escaped = template.replace("{", "{{").replace("}", "}}")
    return PATH_PARAMETER_PATTERN.sub(lambda match: "{" + match.group(1) + "}", escaped)


@dataclass(frozen=True)
class PathTemplate:
    """
    A parsed URL template.

    Attributes:
        raw: The template as declared
        tokens: Path parameter tokens (with colon) in order, repeats kept
        names: Unique parameter names in first-occurrence order
        interpolation: The template with ``{name}`` slots in place of tokens
    """

    raw: str
    tokens: tuple[str, ...]
    names: tuple[str, ...]
    interpolation: str

    @classmethod
    def from_template(cls, template: str) -> "PathTemplate":
        return cls(
            raw=template,
            tokens=tuple(extract_path_parameters(template)),
            names=tuple(path_parameter_names(template)),
            interpolation=_interpolation_template(template),
        )

    def resolve(self, values: Mapping[str, Any]) -> str:
        """
        Substitute every path parameter slot with its value.

        Values are converted with str() and percent-encoded as a single path
        segment.

        Raises:
            KeyError: If a parameter has no value
        """
        missing = [name for name in self.names if name not in values]
        if missing:
            raise KeyError(f"Missing value for path parameter(s): {', '.join(missing)}")

        encoded = {name: quote(str(values[name]), safe="") for name in self.names}
        return self.interpolation.format_map(encoded)


def parse_url_template(template: str) -> PathTemplate:
    """
    Validate a URL template and extract its path parameters.

    Raises:
        InvalidUrlError: If the template is not a valid absolute URL, or a
            path parameter is named after a Python keyword
    """
    validate_absolute_url(template)
    path = PathTemplate.from_template(template)

    for name in path.names:
        if keyword.iskeyword(name):
            raise InvalidUrlError(
                template, f"path parameter ':{name}' is a reserved Python keyword"
            )
    return path
