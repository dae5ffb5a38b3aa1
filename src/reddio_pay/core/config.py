"""
Configuration objects and helpers for the Reddio Pay client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .environment import build_environment

__all__ = [
    "ConfigError",
    "ClientConfig",
    "ClientParameters",
    "DEFAULT_BASE_URL",
    "DEFAULT_REFRESH_INTERVAL_SECONDS",
    "DEFAULT_RETRY_INTERVAL_SECONDS",
    "load_client_config",
]

DEFAULT_BASE_URL = "https://reddio-service-prod.reddio.com"
DEFAULT_REFRESH_INTERVAL_SECONDS = 3600.0
DEFAULT_RETRY_INTERVAL_SECONDS = 10.0

_PARAMETER_TO_ENV_KEY = {
    "base_url": "REDDIO_URL",
    "api_key": "REDDIO_API_KEY",
    "refresh_interval_seconds": "REDDIO_REFRESH_INTERVAL_SECONDS",
    "retry_interval_seconds": "REDDIO_RETRY_INTERVAL_SECONDS",
    "timeout_seconds": "REDDIO_TIMEOUT_SECONDS",
}


class ConfigError(Exception):
    """Raised when the supplied configuration is invalid."""


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class ClientParameters:
    """
    Explicit parameter bundle for constructing :class:`ClientConfig`.

    Callers can either instantiate this helper or pass the individual keyword
    arguments directly to :func:`load_client_config`.
    """

    base_url: Optional[str] = None
    api_key: Optional[str] = None
    refresh_interval_seconds: Optional[float | int | str] = None
    retry_interval_seconds: Optional[float | int | str] = None
    timeout_seconds: Optional[float | int | str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[ClientParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:  # pragma: no cover
            raise TypeError(f"Unknown client parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


def _normalize_base_url(raw_url: str) -> str:
    url = raw_url.strip().rstrip("/")
    if not url:
        raise ConfigError("REDDIO_URL must not be empty")
    if not url.startswith(("http://", "https://")):
        raise ConfigError("REDDIO_URL must start with http:// or https://")
    return url


def _positive_seconds(raw: str, env_key: str) -> float:
    try:
        seconds = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{env_key} must be a number of seconds, got '{raw}'") from exc
    if seconds <= 0:
        raise ConfigError(f"{env_key} must be greater than zero")
    return seconds


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    api_key: str = field(repr=False)
    refresh_interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS
    retry_interval_seconds: float = DEFAULT_RETRY_INTERVAL_SECONDS
    timeout_seconds: Optional[float] = None

    def __post_init__(self) -> None:
        if not self.api_key or not self.api_key.strip():
            raise ConfigError("REDDIO_API_KEY must not be empty")

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "ClientConfig":
        base_url = _normalize_base_url(values.get("REDDIO_URL") or DEFAULT_BASE_URL)

        api_key = values.get("REDDIO_API_KEY")
        if api_key is None:
            raise ConfigError("REDDIO_API_KEY must be provided")

        refresh_interval = _positive_seconds(
            values.get(
                "REDDIO_REFRESH_INTERVAL_SECONDS",
                str(DEFAULT_REFRESH_INTERVAL_SECONDS),
            ),
            "REDDIO_REFRESH_INTERVAL_SECONDS",
        )
        retry_interval = _positive_seconds(
            values.get(
                "REDDIO_RETRY_INTERVAL_SECONDS",
                str(DEFAULT_RETRY_INTERVAL_SECONDS),
            ),
            "REDDIO_RETRY_INTERVAL_SECONDS",
        )

        timeout_raw = values.get("REDDIO_TIMEOUT_SECONDS")
        timeout_seconds = (
            _positive_seconds(timeout_raw, "REDDIO_TIMEOUT_SECONDS")
            if timeout_raw
            else None
        )

        return cls(
            base_url=base_url,
            api_key=api_key.strip(),
            refresh_interval_seconds=refresh_interval,
            retry_interval_seconds=retry_interval,
            timeout_seconds=timeout_seconds,
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        parameters: Optional[ClientParameters] = None,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        refresh_interval_seconds: Optional[float | int | str] = None,
        retry_interval_seconds: Optional[float | int | str] = None,
        timeout_seconds: Optional[float | int | str] = None,
    ) -> "ClientConfig":
        parameter_overrides = _collect_parameter_overrides(
            parameters,
            {
                "base_url": base_url,
                "api_key": api_key,
                "refresh_interval_seconds": refresh_interval_seconds,
                "retry_interval_seconds": retry_interval_seconds,
                "timeout_seconds": timeout_seconds,
            },
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.variables)


def load_client_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    base_url: Optional[str] = None,
    api_key: Optional[str] = None,
    refresh_interval_seconds: Optional[float | int | str] = None,
    retry_interval_seconds: Optional[float | int | str] = None,
    timeout_seconds: Optional[float | int | str] = None,
) -> ClientConfig:
    """
    Convenience wrapper that mirrors :meth:`ClientConfig.from_env`.

    The configuration can be provided entirely through environment variables,
    a ``.env`` file, direct keyword arguments, or any combination of the three.
    """
    return ClientConfig.from_env(
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
