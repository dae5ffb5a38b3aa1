"""
The single HTTP path shared by every Reddio Pay endpoint.

:class:`RequestPipeline` owns the mechanics: composing the URL, serializing
the JSON body, attaching the bearer token, executing the call, classifying
the status code and decoding the typed response. Endpoint helpers only
describe *what* to call through an :class:`EndpointRequest`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, TypeVar

import requests

from .errors import (
    DecodeError,
    HTTPStatusError,
    ReddioPayError,
    SerializeError,
    TransportError,
)

if TYPE_CHECKING:
    from .auth import TokenHolder

__all__ = [
    "AuthMode",
    "EndpointRequest",
    "RequestPipeline",
    "encode_json",
    "error_message",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

Decoder = Callable[[Any], T]


class AuthMode(str, Enum):
    """How a request treats the bearer token."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    NONE = "none"


@dataclass(frozen=True)
class EndpointRequest:
    method: str
    path: str
    body: Any = None
    query: Optional[Mapping[str, Any]] = None
    auth: AuthMode = AuthMode.REQUIRED


def encode_json(value: Any) -> bytes:
    """
    Serialize a request body to compact UTF-8 JSON.

    Payload objects exposing ``to_payload()`` are converted first.
    """
    if hasattr(value, "to_payload"):
        value = value.to_payload()
    try:
        text = json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SerializeError(f"Failed to serialize request body: {exc}") from exc
    return text.encode("utf-8")


def error_message(body: str) -> str:
    """Return the ``message`` of a JSON error envelope, or the raw body."""
    try:
        payload = json.loads(body)
    except ValueError:
        return body
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message:
            return message
    return body


class RequestPipeline:
    """
    Executes :class:`EndpointRequest` objects against the service.

    The pipeline is stateless apart from its collaborators: the shared
    :class:`requests.Session` and an optional token holder.
    """

    def __init__(
        self,
        base_url: str,
        *,
        session: Optional[requests.Session] = None,
        token_holder: Optional["TokenHolder"] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.token_holder = token_holder
        self.timeout = timeout

    def _auth_headers(self, mode: AuthMode) -> dict:
        if mode is AuthMode.NONE:
            return {}
        token = self.token_holder.get() if self.token_holder is not None else ""
        if token:
            return {"Authorization": f"Bearer {token}"}
        if mode is AuthMode.REQUIRED:
            raise ReddioPayError("No access token is installed for an authenticated request")
        return {}

    def prepare(self, request: EndpointRequest) -> requests.PreparedRequest:
        """Build the exact HTTP request that :meth:`execute` would send."""
        headers = {"Accept": "application/json"}
        data = None
        if request.body is not None:
            data = encode_json(request.body)
            headers["Content-Type"] = "application/json"
        headers.update(self._auth_headers(request.auth))

        params = list(request.query.items()) if request.query else None
        raw = requests.Request(
            request.method.upper(),
            self.base_url + request.path,
            headers=headers,
            params=params,
            data=data,
        )
        return self.session.prepare_request(raw)

    def _send(self, prepared: requests.PreparedRequest) -> requests.Response:
        settings = self.session.merge_environment_settings(
            prepared.url, {}, None, None, None
        )
        try:
            response = self.session.send(prepared, timeout=self.timeout, **settings)
            # Force the body read inside the transport error boundary.
            response.content
        except requests.RequestException as exc:
            raise TransportError(
                f"Failed to send {prepared.method} request to {prepared.path_url}: {exc}"
            ) from exc
        return response

    def execute(self, request: EndpointRequest, decoder: Decoder[T]) -> T:
        prepared = self.prepare(request)
        response = self._send(prepared)
        logger.debug(
            "%s %s -> %s", prepared.method, request.path, response.status_code
        )

        content = response.content or b""
        if response.status_code != 200:
            body = content.decode("utf-8", errors="replace")
            raise HTTPStatusError(response.status_code, error_message(body), body=body)

        if not content.strip():
            raise DecodeError(
                f"Empty response body from {request.method.upper()} {request.path}"
            )
        try:
            payload = json.loads(content)
        except ValueError as exc:
            raise DecodeError(
                f"Failed to parse JSON from {request.method.upper()} {request.path}: {exc}"
            ) from exc

        try:
            return decoder(payload)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise DecodeError(
                f"Unexpected response shape from {request.method.upper()} {request.path}: {exc}"
            ) from exc

    def get(
        self,
        path: str,
        decoder: Decoder[T],
        *,
        query: Optional[Mapping[str, Any]] = None,
        auth: AuthMode = AuthMode.REQUIRED,
    ) -> T:
        return self.execute(EndpointRequest("GET", path, query=query, auth=auth), decoder)

    def post(
        self,
        path: str,
        body: Any,
        decoder: Decoder[T],
        *,
        auth: AuthMode = AuthMode.REQUIRED,
    ) -> T:
        return self.execute(EndpointRequest("POST", path, body=body, auth=auth), decoder)

    def put(
        self,
        path: str,
        body: Any,
        decoder: Decoder[T],
        *,
        auth: AuthMode = AuthMode.REQUIRED,
    ) -> T:
        return self.execute(EndpointRequest("PUT", path, body=body, auth=auth), decoder)
