"""
Public, high-level helpers for opening Reddio Pay client sessions.
"""

from __future__ import annotations

from typing import Mapping, Optional

import requests

from .core.client import ReddioPayClient
from .core.config import ClientConfig, ClientParameters, load_client_config

__all__ = ["create_client", "open_client"]


def create_client(
    *,
    config: Optional[ClientConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    base_url: Optional[str] = None,
    api_key: Optional[str] = None,
    refresh_interval_seconds: Optional[float | int | str] = None,
    retry_interval_seconds: Optional[float | int | str] = None,
    timeout_seconds: Optional[float | int | str] = None,
) -> ReddioPayClient:
    """
    Construct and log in a :class:`ReddioPayClient`.

    Callers can either supply a ready-made :class:`ClientConfig` or let the
    helper assemble one from ``REDDIO_*`` environment data.
    """
    if config is not None:
        extras = (
            overrides,
            base,
            parameters,
            base_url,
            api_key,
            refresh_interval_seconds,
            retry_interval_seconds,
            timeout_seconds,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built ClientConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_client_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            parameters=parameters,
            base_url=base_url,
            api_key=api_key,
            refresh_interval_seconds=refresh_interval_seconds,
            retry_interval_seconds=retry_interval_seconds,
            timeout_seconds=timeout_seconds,
        )
    return ReddioPayClient(cfg, session=session)


def open_client(
    base_url: str,
    api_key: str,
    *,
    session: Optional[requests.Session] = None,
) -> ReddioPayClient:
    """Open a session against ``base_url`` with the default refresh cadence."""
    return ReddioPayClient.open(base_url, api_key, session=session)
