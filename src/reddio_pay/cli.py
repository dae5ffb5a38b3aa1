"""
Command-line interface for exercising the Reddio Pay APIs.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from typing import Any, Callable, Dict, Iterable, Sequence, TextIO, Tuple

from eth_utils import is_hex_address

from .api import create_client
from .core.client import ReddioPayClient
from .core.config import ConfigError, load_client_config
from .core.errors import ReddioPayError
from .core.payloads import (
    AddProductTokenRequest,
    CreateProductRequest,
    ExternalCreatePaymentRequest,
    PaymentNotifyRequest,
)

Handler = Callable[[ReddioPayClient, argparse.Namespace], Any]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def _evm_address(value: str) -> str:
    address = value.strip()
    if not address.startswith("0x"):
        address = "0x" + address
    if not is_hex_address(address):
        raise argparse.ArgumentTypeError(f"'{value}' is not a valid EVM address")
    return address


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"'{value}' is not an integer") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("Value must be at least 1")
    return number


def _to_jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    return value


def _create_product(client: ReddioPayClient, args: argparse.Namespace) -> Any:
    return client.create_product(
        CreateProductRequest(
            name=args.name,
            description=args.description,
            content=args.content,
            token_ids=list(args.token_id),
            price=args.price,
            recipient_address=args.recipient_address,
        )
    )


def _add_product_token(client: ReddioPayClient, args: argparse.Namespace) -> Any:
    return client.add_product_token(
        args.product_id,
        AddProductTokenRequest(
            token_id=args.token_id,
            price=args.price,
            recipient_address=args.recipient_address,
        ),
    )


def _create_payment(client: ReddioPayClient, args: argparse.Namespace) -> Any:
    return client.external_create_payment(
        ExternalCreatePaymentRequest(
            product_id=args.product_id,
            product_token_id=args.product_token_id,
            count=args.count,
        )
    )


def _notify(client: ReddioPayClient, args: argparse.Namespace) -> Any:
    return client.external_notify_payment_success(
        PaymentNotifyRequest(payment_id=args.payment_id, email=args.email)
    )


HANDLERS: Dict[str, Handler] = {
    "account": lambda client, args: client.get_account_info(),
    "addresses": lambda client, args: client.list_account_addresses(),
    "tokens": lambda client, args: client.list_tokens(),
    "balances": lambda client, args: client.get_token_balances(
        args.wallet_address, args.chain_id, args.token_symbol
    ),
    "products": lambda client, args: client.list_products(),
    "product": lambda client, args: client.get_product(args.product_id),
    "product-status": lambda client, args: client.get_product_token_status(args.product_id),
    "create-product": _create_product,
    "add-product-token": _add_product_token,
    "payments": lambda client, args: client.list_payments(args.limit, args.offset),
    "product-payments": lambda client, args: client.list_payments_by_product(args.product_id),
    "payment": lambda client, args: client.get_payment(args.payment_id),
    "create-payment": _create_payment,
    "notify": _notify,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reddio-pay",
        description="Call the Reddio Pay API from the command line",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing REDDIO_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Python logging level (default: WARNING)",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)
    commands.add_parser("account", help="Show account information")
    commands.add_parser("addresses", help="List recipient addresses of the account")
    commands.add_parser("tokens", help="List supported payment tokens")

    balances = commands.add_parser("balances", help="Show token balances of a wallet")
    balances.add_argument("--wallet-address", required=True, type=_evm_address)
    balances.add_argument("--chain-id", required=True, type=int)
    balances.add_argument("--token-symbol", default=None)

    commands.add_parser("products", help="List products")
    product = commands.add_parser("product", help="Show one product")
    product.add_argument("product_id")
    product_status = commands.add_parser(
        "product-status", help="Show sales status of a product's tokens"
    )
    product_status.add_argument("product_id")

    create_product = commands.add_parser("create-product", help="Create a product")
    create_product.add_argument("--name", required=True)
    create_product.add_argument("--description", default="")
    create_product.add_argument("--content", default="")
    create_product.add_argument(
        "--token-id",
        action="append",
        required=True,
        help="Accepted token id (repeatable)",
    )
    create_product.add_argument("--price", required=True, help="Price in wei")
    create_product.add_argument("--recipient-address", required=True, type=_evm_address)

    add_token = commands.add_parser("add-product-token", help="Bind a token to a product")
    add_token.add_argument("product_id")
    add_token.add_argument("--token-id", required=True)
    add_token.add_argument("--price", required=True, help="Price in wei")
    add_token.add_argument("--recipient-address", required=True, type=_evm_address)

    payments = commands.add_parser("payments", help="List payments of the account")
    payments.add_argument("--limit", type=int, default=0)
    payments.add_argument("--offset", type=int, default=-1)
    product_payments = commands.add_parser(
        "product-payments", help="List payments of one product"
    )
    product_payments.add_argument("product_id")
    payment = commands.add_parser("payment", help="Show one payment")
    payment.add_argument("payment_id")

    create_payment = commands.add_parser(
        "create-payment", help="Create an external payment and print its pay link"
    )
    create_payment.add_argument("--product-id", required=True)
    create_payment.add_argument("--product-token-id", required=True)
    create_payment.add_argument("--count", type=_positive_int, default=1)

    notify = commands.add_parser(
        "notify", help="Ask the service to email the payer when a payment succeeds"
    )
    notify.add_argument("--payment-id", required=True)
    notify.add_argument("--email", required=True)
    return parser


def run_cli(argv: Sequence[str] | None = None, *, stdout: TextIO | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    out = stdout or sys.stdout

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())

    try:
        config = load_client_config(env_file=args.env_file, overrides=overrides)
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
            result = HANDLERS[args.command](client, args)
        except ReddioPayError as exc:
            logging.error("Request failed: %s", exc)
            return 1

    json.dump(_to_jsonable(result), out, indent=2, sort_keys=True)
    out.write("\n")
    return 0


def main() -> None:
    sys.exit(run_cli())
