"""Configuration for outbound requests (transport defaults, client credentials)."""

import os

# Applied by the transport when a Request carries no timeout of its own.
DEFAULT_TIMEOUT_MS: int = int(os.environ.get("RESTCALL_DEFAULT_TIMEOUT_MS", "30000"))

# Directory holding named client identities: <name>.pem, or <name>.crt + <name>.key.
CREDENTIALS_DIR: str = os.environ.get("RESTCALL_CREDENTIALS_DIR", "")

USER_AGENT: str = os.environ.get("RESTCALL_USER_AGENT", "restcall/0.1.0")
