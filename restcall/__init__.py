"""restcall - build HTTP requests fluently, send them, and parse JSON replies into typed objects."""

from typing import Any, Optional

from .builder import RequestBuilder, request_builder
from .exceptions import HttpRequestError, PayloadFormatError
from .models import HttpMethod, Request, Response
from .parser import parse_response
from .sender import Sender, is_success, send_request
from .transport import Transport, UrllibTransport


def fetch(request: Request, target: Any, strict: bool = False, transport: Optional[Transport] = None) -> Any:
    """Send `request` and parse the successful body into `target`."""
    return parse_response(send_request(request, transport), target, strict)


__version__ = "0.1.0"

__all__ = [
    "HttpMethod",
    "HttpRequestError",
    "PayloadFormatError",
    "Request",
    "RequestBuilder",
    "Response",
    "Sender",
    "Transport",
    "UrllibTransport",
    "fetch",
    "is_success",
    "parse_response",
    "request_builder",
    "send_request",
]
