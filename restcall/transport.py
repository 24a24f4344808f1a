"""
HTTP transport: dispatches a Request over urllib and returns the raw Response.
Status codes are never interpreted here; the Sender owns the success rule.
"""

import logging
import os
import ssl
import urllib.error
import urllib.request
from typing import Optional, Protocol, Tuple, runtime_checkable

from restcall.config import CREDENTIALS_DIR, DEFAULT_TIMEOUT_MS, USER_AGENT
from restcall.models import Request, Response, is_blank

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Anything that can send a Request and hand back a Response."""

    def send(self, request: Request) -> Response:
        """Send the request; raise on network/transport failure."""
        ...


def resolve_credential(name: str, credentials_dir: str = CREDENTIALS_DIR) -> Tuple[str, Optional[str]]:
    """
    Locate a named client identity. Returns (certfile, keyfile) where keyfile
    is None when the certificate and key share one <name>.pem file.
    """
    if not credentials_dir:
        raise ValueError(f"Client credential '{name}' requested but RESTCALL_CREDENTIALS_DIR is not set")
    pem = os.path.join(credentials_dir, f"{name}.pem")
    if os.path.isfile(pem):
        return pem, None
    crt = os.path.join(credentials_dir, f"{name}.crt")
    key = os.path.join(credentials_dir, f"{name}.key")
    if os.path.isfile(crt) and os.path.isfile(key):
        return crt, key
    raise FileNotFoundError(f"Client credential '{name}' not found in {credentials_dir}")


class UrllibTransport:
    """Default transport built on urllib.request with a default TLS context."""

    def __init__(self, credentials_dir: Optional[str] = None, default_timeout_ms: Optional[int] = None):
        self.credentials_dir = CREDENTIALS_DIR if credentials_dir is None else credentials_dir
        self.default_timeout_ms = DEFAULT_TIMEOUT_MS if default_timeout_ms is None else default_timeout_ms

    def _ssl_context(self, client_credential: Optional[str]) -> ssl.SSLContext:
        ctx = ssl.create_default_context()
        if client_credential:
            certfile, keyfile = resolve_credential(client_credential, self.credentials_dir)
            logger.debug("Loading client credential %s from %s", client_credential, certfile)
            ctx.load_cert_chain(certfile, keyfile)
        return ctx

    def send(self, request: Request) -> Response:
        if is_blank(request.method):
            raise ValueError("Request method is not set")
        data = request.body.encode("utf-8") if request.body is not None else None
        method = getattr(request.method, "value", request.method)
        req = urllib.request.Request(request.endpoint, data=data, method=method)
        for name, value in request.headers.items():
            req.add_header(name, value)
        if not req.has_header("User-agent"):
            req.add_header("User-Agent", USER_AGENT)
        timeout_ms = request.timeout if request.timeout is not None else self.default_timeout_ms
        ctx = self._ssl_context(request.client_credential)
        try:
            with urllib.request.urlopen(req, timeout=timeout_ms / 1000, context=ctx) as r:
                status = r.getcode()
                charset = r.headers.get_content_charset() or "utf-8"
                body = r.read().decode(charset, errors="replace")
        except urllib.error.HTTPError as e:
            # Non-2xx still carries a usable response.
            status = e.code
            charset = e.headers.get_content_charset() if e.headers else None
            body = e.read().decode(charset or "utf-8", errors="replace")
        logger.debug("%s %s -> %d", method, request.endpoint, status)
        return Response(status_code=status, body=body)
