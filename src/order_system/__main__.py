"""
Run the example order system: ``python -m order_system``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from reddio_pay import ConfigError, ReddioPayClient, ReddioPayError

from .config import load_app_config
from .database import init_db
from .demo import SDKDemo
from .handlers import create_app
from .service import OrderService


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="reddio-order-system",
        description="Example order system backed by Reddio Pay",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing REDDIO_* and ORDER_* settings",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument(
        "--skip-demo",
        action="store_true",
        help="Do not run the SDK walkthrough before serving",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        config = load_app_config(env_file=args.env_file)
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    repository = init_db(config.db_path)

    try:
        client = ReddioPayClient.open(config.reddio_url, config.reddio_api_key)
    except ReddioPayError as exc:
        logging.error("Failed to initialize Reddio Pay client: %s", exc)
        return 1

    with client:
        if config.run_demo and not args.skip_demo:
            failed = SDKDemo(client).run_all()
            if failed:
                logging.warning(
                    "SDK demonstration finished with failures (%s); continuing to start server",
                    ", ".join(failed),
                )

        app = create_app(OrderService(repository, client, unit_price=config.unit_price))
        logging.info("Order system starting on %s:%d", config.host, config.port)
        app.run(host=config.host, port=config.port, threaded=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
