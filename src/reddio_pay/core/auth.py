"""
Bearer-token bootstrap: the token holder and the API-key credential exchange.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Dict

from .errors import AuthError, DecodeError, HTTPStatusError
from .payloads import build_login_payload
from .pipeline import AuthMode, RequestPipeline

__all__ = [
    "Credentials",
    "CredentialExchanger",
    "LOGIN_PATH",
    "TokenHolder",
]

LOGIN_PATH = "/accounts/apikeys/login"


class TokenHolder:
    """
    Thread-safe cell holding the current access token.

    One writer (the refresh scheduler) and many readers (every authenticated
    request). ``get`` returns an empty string only until the first ``set``.
    """

    def __init__(self, token: str = "") -> None:
        self._lock = threading.Lock()
        self._token = token

    def get(self) -> str:
        with self._lock:
            return self._token

    def set(self, token: str) -> None:
        with self._lock:
            self._token = token

    def __repr__(self) -> str:
        state = "set" if self.get() else "empty"
        return f"<TokenHolder {state}>"


@dataclass(frozen=True)
class Credentials:
    message: str
    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Credentials":
        if not isinstance(payload, dict):
            raise TypeError(f"expected a JSON object, got {type(payload).__name__}")
        fields = {}
        for name in ("message", "access_token", "refresh_token"):
            value = payload.get(name)
            if value is not None and not isinstance(value, str):
                raise TypeError(f"{name} must be a string, got {type(value).__name__}")
            fields[name] = value or ""
        return cls(**fields)


class CredentialExchanger:
    """
    Trades the long-lived API key for a short-lived bearer token.
    """

    def __init__(self, pipeline: RequestPipeline, api_key: str) -> None:
        self.pipeline = pipeline
        self._api_key = api_key

    def exchange(self) -> Credentials:
        try:
            credentials = self.pipeline.post(
                LOGIN_PATH,
                build_login_payload(self._api_key),
                Credentials.from_payload,
                auth=AuthMode.NONE,
            )
        except HTTPStatusError as exc:
            raise AuthError(exc.status_code, exc.message, body=exc.body) from exc

        if not credentials.access_token:
            raise DecodeError("Login response did not include an access token")
        return credentials
