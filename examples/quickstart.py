"""
Minimal script that uses the public API to browse a Reddio Pay account.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Tuple

from reddio_pay import ConfigError, ReddioPayError, create_client, load_client_config


def _override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _build_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List products and recent payments")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing REDDIO_* settings",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument("--base-url", help="Override the service base URL")
    parser.add_argument("--api-key", help="Provide the API key without environment data")
    parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Number of recent payments to show (default: 10)",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        config = load_client_config(
            env_file=args.env_file,
            overrides=_build_overrides(args.set or ()),
            base_url=args.base_url,
            api_key=args.api_key,
        )
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    try:
        client = create_client(config=config)
    except ReddioPayError as exc:
        logging.error("Login failed: %s", exc)
        return 1

    with client:
        try:
            account = client.get_account_info()
            logging.info("Signed in as %s (activated: %s)", account.email, account.activated)

            for product in client.list_products().products:
                logging.info(
                    "Product %s %r with %d token(s)",
                    product.product_id,
                    product.name,
                    len(product.product_tokens),
                )

            page = client.list_payments(limit=args.limit, offset=0)
            logging.info(
                "Showing %d of %d payments (page %d/%d)",
                len(page.payments),
                page.total_count,
                page.current_page,
                page.total_pages,
            )
            for payment in page.payments:
                logging.info("  %s %s %s", payment.payment_id, payment.status, payment.total_amount)
        except ReddioPayError as exc:
            logging.error("Request failed: %s", exc)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
