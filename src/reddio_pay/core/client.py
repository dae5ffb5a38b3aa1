"""
The authenticated Reddio Pay client session.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import requests

from . import endpoints
from .auth import CredentialExchanger, TokenHolder
from .config import ClientConfig
from .models import (
    AccountAddress,
    AccountInfo,
    ExternalPayment,
    MessageResponse,
    Payment,
    PaymentList,
    PaymentPage,
    Product,
    ProductCreated,
    ProductList,
    ProductTokenCreated,
    ProductTokenStatusList,
    TokenList,
    WalletBalances,
)
from .payloads import (
    AddProductTokenRequest,
    CreateProductRequest,
    ExternalCreatePaymentRequest,
    PaymentNotifyRequest,
)
from .pipeline import RequestPipeline
from .refresh import RefreshScheduler

__all__ = ["ReddioPayClient"]

logger = logging.getLogger(__name__)

_CLOSE_JOIN_TIMEOUT = 1.0


class ReddioPayClient:
    """
    Session over the Reddio Pay API.

    Construction logs in with the API key synchronously and installs the
    access token before returning; a background thread then refreshes the
    token every ``config.refresh_interval_seconds`` until :meth:`close`.
    A failed login propagates and leaves no thread behind.

    Usage::

        with ReddioPayClient.open("https://reddio-service-prod.reddio.com", api_key) as client:
            for product in client.list_products().products:
                print(product.product_id, product.name)
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()
        self.token_holder = TokenHolder()
        self.pipeline = RequestPipeline(
            config.base_url,
            session=self.session,
            token_holder=self.token_holder,
            timeout=config.timeout_seconds,
        )
        self._exchanger = CredentialExchanger(
            RequestPipeline(
                config.base_url,
                session=self.session,
                timeout=config.timeout_seconds,
            ),
            config.api_key,
        )

        credentials = self._exchanger.exchange()
        self.token_holder.set(credentials.access_token)
        logger.info("Logged in to Reddio Pay at %s", config.base_url)

        self._scheduler = RefreshScheduler(
            self._exchanger,
            self.token_holder,
            interval=config.refresh_interval_seconds,
            retry_interval=config.retry_interval_seconds,
        )
        self._scheduler.start()

    @classmethod
    def open(
        cls,
        base_url: str,
        api_key: str,
        *,
        session: Optional[requests.Session] = None,
        **options: Any,
    ) -> "ReddioPayClient":
        """
        Build a config from ``base_url`` and ``api_key`` and log in.

        ``options`` are the remaining :class:`ClientConfig` fields, for
        example ``refresh_interval_seconds``.
        """
        config = ClientConfig(base_url=base_url.rstrip("/"), api_key=api_key, **options)
        return cls(config, session=session)

    @property
    def closed(self) -> bool:
        return self._scheduler.stopped

    def close(self) -> None:
        """Stop the token refresh thread. Safe to call more than once."""
        if self._scheduler.stopped:
            return
        self._scheduler.stop(timeout=_CLOSE_JOIN_TIMEOUT)
        logger.info("Reddio Pay client closed")

    def __enter__(self) -> "ReddioPayClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<ReddioPayClient {self.config.base_url} {state}>"

    # Accounts

    def get_account_info(self) -> AccountInfo:
        return endpoints.get_account_info(self.pipeline)

    def update_webhook(self, webhook: str) -> MessageResponse:
        return endpoints.update_webhook(self.pipeline, webhook)

    def update_account_info(self, company_name: str, company_url: str) -> MessageResponse:
        return endpoints.update_account_info(self.pipeline, company_name, company_url)

    def get_token_balances(
        self,
        wallet_address: str,
        chain_id: int,
        token_symbol: Optional[str] = None,
    ) -> WalletBalances:
        return endpoints.get_token_balances(
            self.pipeline, wallet_address, chain_id, token_symbol
        )

    def list_account_addresses(self) -> List[AccountAddress]:
        return endpoints.list_account_addresses(self.pipeline)

    # Tokens

    def list_tokens(self) -> TokenList:
        return endpoints.list_tokens(self.pipeline)

    # Products

    def create_product(self, request: CreateProductRequest) -> ProductCreated:
        return endpoints.create_product(self.pipeline, request)

    def list_products(self) -> ProductList:
        return endpoints.list_products(self.pipeline)

    def get_product(self, product_id: str) -> Product:
        return endpoints.get_product(self.pipeline, product_id)

    def add_product_token(
        self,
        product_id: str,
        request: AddProductTokenRequest,
    ) -> ProductTokenCreated:
        return endpoints.add_product_token(self.pipeline, product_id, request)

    def get_product_token_status(self, product_id: str) -> ProductTokenStatusList:
        return endpoints.get_product_token_status(self.pipeline, product_id)

    # Payments

    def list_payments_by_product(self, product_id: str) -> PaymentList:
        return endpoints.list_payments_by_product(self.pipeline, product_id)

    def list_payments(self, limit: int = 0, offset: int = -1) -> PaymentPage:
        return endpoints.list_payments(self.pipeline, limit, offset)

    def get_payment(self, payment_id: str) -> Payment:
        return endpoints.get_payment(self.pipeline, payment_id)

    # External payments

    def external_create_payment(self, request: ExternalCreatePaymentRequest) -> ExternalPayment:
        return endpoints.external_create_payment(self.pipeline, request)

    def external_notify_payment_success(self, request: PaymentNotifyRequest) -> MessageResponse:
        return endpoints.external_notify_payment_success(self.pipeline, request)
