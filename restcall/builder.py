"""Fluent builder that stages request fields and produces immutable Request values."""

import dataclasses
import json
from types import MappingProxyType
from typing import Any, Optional, Union

from pydantic import BaseModel

from restcall.models import HttpMethod, Request, is_blank


class RequestBuilder:
    """
    Mutable accumulator for a Request. Every setter stores its argument as-is
    (no validation) and returns the builder, so calls can be chained:

        request_builder().url("https://api.example.com/items").method("GET").build()

    The builder may keep being mutated after build(); each build() snapshots
    the current state into a new Request.
    """

    def __init__(self) -> None:
        self._endpoint: Optional[str] = None
        self._method: Optional[str] = None
        self._body: Optional[str] = None
        self._headers: dict[str, str] = {}
        self._timeout: Optional[int] = None
        self._client_credential: Optional[str] = None

    def url(self, endpoint: Optional[str]) -> "RequestBuilder":
        self._endpoint = endpoint
        return self

    def method(self, method: Union[HttpMethod, str, None]) -> "RequestBuilder":
        self._method = method.value if isinstance(method, HttpMethod) else method
        return self

    def body(self, body: Optional[str]) -> "RequestBuilder":
        self._body = body
        return self

    def json_body(self, payload: Any) -> "RequestBuilder":
        """Serialize a pydantic model, dataclass or plain value as the JSON body."""
        if isinstance(payload, BaseModel):
            text = payload.model_dump_json()
        elif dataclasses.is_dataclass(payload) and not isinstance(payload, type):
            text = json.dumps(dataclasses.asdict(payload))
        else:
            text = json.dumps(payload)
        return self.body(text).add_header("Content-Type", "application/json")

    def add_header(self, name: str, value: str) -> "RequestBuilder":
        """Set a header; a later call with the same (case-sensitive) name replaces it."""
        self._headers[name] = value
        return self

    def timeout(self, millis: Optional[int]) -> "RequestBuilder":
        self._timeout = millis
        return self

    def client_credential(self, name: Optional[str]) -> "RequestBuilder":
        """Name of a client identity the transport resolves (see config.CREDENTIALS_DIR)."""
        self._client_credential = name
        return self

    def build(self) -> Request:
        """
        Snapshot the staged fields into a Request.
        Endpoint and method pass through unchecked; a blank body or credential
        and an unset timeout are left off the Request.
        """
        return Request(
            endpoint=self._endpoint,
            method=self._method,
            body=None if is_blank(self._body) else self._body,
            headers=MappingProxyType(dict(self._headers)),
            timeout=self._timeout,
            client_credential=None if is_blank(self._client_credential) else self._client_credential,
        )


def request_builder() -> RequestBuilder:
    """Return a fresh, empty RequestBuilder."""
    return RequestBuilder()
