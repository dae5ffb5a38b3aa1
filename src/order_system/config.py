"""
Settings for the example order system.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from reddio_pay import ConfigError
from reddio_pay.core.environment import build_environment

__all__ = ["AppConfig", "load_app_config"]

_DEFAULTS = {
    "REDDIO_URL": "https://reddio-service-prod.reddio.com",
    "REDDIO_API_KEY": "mock_api_key",
    "ORDER_DB_PATH": "orders.db",
    "ORDER_HOST": "0.0.0.0",
    "ORDER_PORT": "8080",
    "ORDER_UNIT_PRICE": "100.00",
    "ORDER_RUN_DEMO": "true",
}


def _get(values: Mapping[str, str], key: str) -> str:
    # Empty variables fall back to the default, like unset ones.
    return values.get(key) or _DEFAULTS[key]


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class AppConfig:
    reddio_url: str
    reddio_api_key: str = field(repr=False)
    db_path: str = _DEFAULTS["ORDER_DB_PATH"]
    host: str = _DEFAULTS["ORDER_HOST"]
    port: int = 8080
    unit_price: Decimal = Decimal(_DEFAULTS["ORDER_UNIT_PRICE"])
    run_demo: bool = True

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "AppConfig":
        port_raw = _get(values, "ORDER_PORT")
        try:
            port = int(port_raw)
        except ValueError as exc:
            raise ConfigError(f"ORDER_PORT must be an integer, got '{port_raw}'") from exc

        price_raw = _get(values, "ORDER_UNIT_PRICE")
        try:
            unit_price = Decimal(price_raw)
        except InvalidOperation as exc:
            raise ConfigError(
                f"ORDER_UNIT_PRICE must be a valid decimal number, got '{price_raw}'"
            ) from exc
        if unit_price < 0:
            raise ConfigError("ORDER_UNIT_PRICE must not be negative")

        return cls(
            reddio_url=_get(values, "REDDIO_URL").rstrip("/"),
            reddio_api_key=_get(values, "REDDIO_API_KEY"),
            db_path=_get(values, "ORDER_DB_PATH"),
            host=_get(values, "ORDER_HOST"),
            port=port,
            unit_price=unit_price,
            run_demo=_parse_bool(_get(values, "ORDER_RUN_DEMO")),
        )


def load_app_config(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    environment = build_environment(
        env_file=env_file,
        base=os.environ if base is None else base,
        overrides=overrides,
    )
    return AppConfig.from_mapping(environment.variables)
