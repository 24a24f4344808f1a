"""
Sender: dispatch a Request through a Transport and apply the success rule.
Success is status 200, or 201 for POST only; anything else raises HttpRequestError.
"""

import logging
from typing import Optional

from restcall.exceptions import HttpRequestError
from restcall.models import HttpMethod, Request, is_blank
from restcall.transport import Transport, UrllibTransport

logger = logging.getLogger(__name__)


def is_success(method: Optional[str], status_code: int) -> bool:
    """200 is always a success; 201 only for POST. No other status counts."""
    if status_code == 200:
        return True
    return method == HttpMethod.POST.value and status_code == 201


class Sender:
    """Wraps a Transport; callers only ever see HttpRequestError from send()."""

    def __init__(self, transport: Optional[Transport] = None):
        self.transport = transport if transport is not None else UrllibTransport()

    def send(self, request: Request) -> str:
        """Send the request and return the response body on success."""
        logger.debug("Sending %s %s", request.method, request.endpoint)
        try:
            response = self.transport.send(request)
        except Exception as e:
            raise HttpRequestError(f"An error occurred while sending the request: {e}") from e

        if is_success(request.method, response.status_code):
            return response.body

        # a Request built by hand may carry an HttpMethod member
        method = getattr(request.method, "value", request.method)
        if not is_blank(response.body):
            logger.warning(
                "%s %s returned %d with body: %s",
                method, request.endpoint, response.status_code, response.body,
            )
        raise HttpRequestError(
            f"Request method {method} for URL {request.endpoint} "
            f"failed with status code: {response.status_code}"
        )


def send_request(request: Request, transport: Optional[Transport] = None) -> str:
    """Send a built Request; return the body or raise HttpRequestError."""
    return Sender(transport).send(request)
