"""
Walk through the main Reddio Pay APIs once, logging what each returns.

Each step falls back to a placeholder id when it fails, so later steps still
run and show how the service answers.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from reddio_pay import (
    AddProductTokenRequest,
    CreateProductRequest,
    ExternalCreatePaymentRequest,
    ReddioPayClient,
    ReddioPayError,
)

__all__ = ["SDKDemo"]

logger = logging.getLogger(__name__)

DEMO_PRODUCT_ID = "demo-product-id"
DEMO_PRODUCT_TOKEN_ID = "demo-product-token-id"
DEMO_PAYMENT_ID = "demo-payment-id"


class SDKDemo:
    def __init__(self, client: ReddioPayClient) -> None:
        self.client = client
        self.failures: List[str] = []

    def _failed(self, step: str, exc: ReddioPayError) -> None:
        logger.warning("Demo step '%s' failed: %s", step, exc)
        self.failures.append(step)

    def list_products(self) -> None:
        products = self.client.list_products().products
        logger.info("Retrieved %d products", len(products))
        for index, product in enumerate(products, start=1):
            logger.info(
                "  Product %d: ID=%s, Name=%s, Active=%s",
                index,
                product.product_id,
                product.name,
                product.active,
            )

    def create_product(self) -> str:
        created = self.client.create_product(
            CreateProductRequest(
                name="SDK Demo Product",
                description="Demo product created through the Python SDK",
                content="Product content description",
                token_ids=["0x1234567890abcdef1234567890abcdef12345678"],
                price="1000000000000000000",
                recipient_address="0xabcdef1234567890abcdef1234567890abcdef12",
            )
        )
        if created.product is None:
            raise ReddioPayError("Create product response did not include a product")
        logger.info(
            "Created product: ID=%s, Name=%s",
            created.product.product_id,
            created.product.name,
        )
        return created.product.product_id

    def show_product(self, product_id: str) -> None:
        product = self.client.get_product(product_id)
        logger.info(
            "Product info: ID=%s, Name=%s, Active=%s",
            product.product_id,
            product.name,
            product.active,
        )

    def add_product_token(self, product_id: str) -> str:
        created = self.client.add_product_token(
            product_id,
            AddProductTokenRequest(
                token_id="0x9876543210fedcba9876543210fedcba98765432",
                price="2000000000000000000",
                recipient_address="0xfedcba9876543210fedcba9876543210fedcba98",
            ),
        )
        if created.product_token is None:
            raise ReddioPayError("Add product token response did not include a product token")
        logger.info(
            "Added product token: ID=%s, TokenID=%s, Price=%s",
            created.product_token.product_token_id,
            created.product_token.token_id,
            created.product_token.price,
        )
        return created.product_token.product_token_id

    def create_payment(self, product_id: str, product_token_id: str) -> str:
        payment = self.client.external_create_payment(
            ExternalCreatePaymentRequest(
                product_id=product_id,
                product_token_id=product_token_id,
                count=1,
            )
        )
        logger.info(
            "Created external payment: PaymentID=%s, PayLink=%s",
            payment.payment_id,
            payment.pay_link,
        )
        return payment.payment_id

    def show_payment(self, payment_id: str) -> None:
        payment = self.client.get_payment(payment_id)
        logger.info(
            "Payment status: ID=%s, Status=%s, TransactionHash=%s",
            payment.payment_id,
            payment.status,
            payment.transaction_hash,
        )

    def run_all(self) -> List[str]:
        """Run every step; returns the names of the steps that failed."""
        logger.info("=== Reddio Pay SDK demonstration started ===")
        self.failures = []

        try:
            self.list_products()
        except ReddioPayError as exc:
            self._failed("list products", exc)

        product_id: Optional[str] = None
        try:
            product_id = self.create_product()
        except ReddioPayError as exc:
            self._failed("create product", exc)
        product_id = product_id or DEMO_PRODUCT_ID

        try:
            self.show_product(product_id)
        except ReddioPayError as exc:
            self._failed("get product", exc)

        product_token_id: Optional[str] = None
        try:
            product_token_id = self.add_product_token(product_id)
        except ReddioPayError as exc:
            self._failed("add product token", exc)
        product_token_id = product_token_id or DEMO_PRODUCT_TOKEN_ID

        payment_id: Optional[str] = None
        try:
            payment_id = self.create_payment(product_id, product_token_id)
        except ReddioPayError as exc:
            self._failed("create external payment", exc)
        payment_id = payment_id or DEMO_PAYMENT_ID

        try:
            self.show_payment(payment_id)
        except ReddioPayError as exc:
            self._failed("get payment", exc)

        logger.info("=== Reddio Pay SDK demonstration completed ===")
        return list(self.failures)
