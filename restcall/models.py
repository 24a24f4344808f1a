"""Request/response values passed between the builder, sender and transport."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class HttpMethod(str, Enum):
    """Standard HTTP verbs accepted by RequestBuilder.method()."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


@dataclass(frozen=True)
class Request:
    """
    An outbound HTTP call, produced by RequestBuilder.build().
    endpoint and method are carried verbatim (possibly None or blank);
    body, timeout (ms) and client_credential are None when not set.
    """

    endpoint: Optional[str]
    method: Optional[str]
    body: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    timeout: Optional[int] = None
    client_credential: Optional[str] = None


@dataclass(frozen=True)
class Response:
    """Status and decoded body returned by a Transport."""

    status_code: int
    body: str = ""


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty, or whitespace-only strings."""
    return not value or not value.strip()
