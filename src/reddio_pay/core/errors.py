"""
Exception hierarchy raised by the Reddio Pay client.

Every failure of the request pipeline surfaces as exactly one of these
classes, so callers can branch on the kind of failure without inspecting
messages.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "AuthError",
    "DecodeError",
    "HTTPStatusError",
    "ReddioPayError",
    "SerializeError",
    "TransportError",
]


class ReddioPayError(Exception):
    """Base class for all errors raised by the SDK."""


class TransportError(ReddioPayError):
    """The HTTP request did not complete (connect, read or timeout failure)."""


class SerializeError(ReddioPayError):
    """The request body could not be serialized to JSON."""


class DecodeError(ReddioPayError):
    """The response body could not be decoded into the expected shape."""


class HTTPStatusError(ReddioPayError):
    """
    The service answered with a status other than 200.

    ``message`` is the ``message`` field of the service's JSON error envelope
    when the body carries one, otherwise the raw body text.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        body: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.body = body if body is not None else message
        super().__init__(f"API request failed with status {status_code}: {message}")


class AuthError(HTTPStatusError):
    """The credential exchange endpoint rejected the API key."""

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(status_code, message, body=body)
        self.args = (f"Authentication failed with status {status_code}: {message}",)
