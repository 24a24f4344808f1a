"""Errors surfaced to callers of the send and parse operations."""


class HttpRequestError(Exception):
    """Request could not be sent, or the response status is not a success."""


class PayloadFormatError(ValueError):
    """Response body is empty or does not fit the requested target type."""
