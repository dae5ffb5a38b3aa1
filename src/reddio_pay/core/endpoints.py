"""
One function per Reddio Pay endpoint.

Each helper fixes the method, path, auth mode, body and response type and
hands the call to :class:`~reddio_pay.core.pipeline.RequestPipeline`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

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
    decode_account_addresses,
)
from .payloads import (
    AddProductTokenRequest,
    CreateProductRequest,
    ExternalCreatePaymentRequest,
    PaymentNotifyRequest,
    UpdateAccountInfoRequest,
    UpdateWebhookRequest,
    WalletBalanceRequest,
)
from .pipeline import AuthMode, RequestPipeline

__all__ = [
    "add_product_token",
    "create_product",
    "external_create_payment",
    "external_notify_payment_success",
    "get_account_info",
    "get_payment",
    "get_product",
    "get_product_token_status",
    "get_token_balances",
    "list_account_addresses",
    "list_payments",
    "list_payments_by_product",
    "list_products",
    "list_tokens",
    "pagination_query",
    "update_account_info",
    "update_webhook",
]


# Accounts


def get_account_info(pipeline: RequestPipeline) -> AccountInfo:
    return pipeline.get("/accounts/info", AccountInfo.from_payload)


def update_webhook(pipeline: RequestPipeline, webhook: str) -> MessageResponse:
    return pipeline.put(
        "/accounts/webhook",
        UpdateWebhookRequest(webhook=webhook),
        MessageResponse.from_payload,
    )


def update_account_info(
    pipeline: RequestPipeline,
    company_name: str,
    company_url: str,
) -> MessageResponse:
    return pipeline.put(
        "/accounts/info",
        UpdateAccountInfoRequest(company_name=company_name, company_url=company_url),
        MessageResponse.from_payload,
    )


def get_token_balances(
    pipeline: RequestPipeline,
    wallet_address: str,
    chain_id: int,
    token_symbol: Optional[str] = None,
) -> WalletBalances:
    """Balances of a wallet; this lookup is public and sends no token."""
    return pipeline.post(
        "/accounts/wallet/info",
        WalletBalanceRequest(
            wallet_address=wallet_address,
            chain_id=chain_id,
            token_symbol=token_symbol,
        ),
        WalletBalances.from_payload,
        auth=AuthMode.NONE,
    )


def list_account_addresses(pipeline: RequestPipeline) -> List[AccountAddress]:
    return pipeline.get("/accounts/addresses", decode_account_addresses)


# Tokens


def list_tokens(pipeline: RequestPipeline) -> TokenList:
    return pipeline.get("/tokens", TokenList.from_payload)


# Products


def create_product(
    pipeline: RequestPipeline,
    request: CreateProductRequest,
) -> ProductCreated:
    return pipeline.post("/products", request, ProductCreated.from_payload)


def list_products(pipeline: RequestPipeline) -> ProductList:
    return pipeline.get("/products", ProductList.from_payload)


def get_product(pipeline: RequestPipeline, product_id: str) -> Product:
    return pipeline.get(f"/products/{product_id}", Product.from_payload)


def add_product_token(
    pipeline: RequestPipeline,
    product_id: str,
    request: AddProductTokenRequest,
) -> ProductTokenCreated:
    return pipeline.post(
        f"/products/{product_id}/token",
        request,
        ProductTokenCreated.from_payload,
    )


def get_product_token_status(
    pipeline: RequestPipeline,
    product_id: str,
) -> ProductTokenStatusList:
    return pipeline.get(
        f"/products/{product_id}/token/status",
        ProductTokenStatusList.from_payload,
    )


# Payments


def pagination_query(limit: int, offset: int) -> Dict[str, Any]:
    """``limit`` is sent only when positive, ``offset`` only when non-negative."""
    query: Dict[str, Any] = {}
    if limit > 0:
        query["limit"] = str(limit)
    if offset >= 0:
        query["offset"] = str(offset)
    return query


def list_payments_by_product(pipeline: RequestPipeline, product_id: str) -> PaymentList:
    return pipeline.get(f"/payments/product/{product_id}", PaymentList.from_payload)


def list_payments(
    pipeline: RequestPipeline,
    limit: int = 0,
    offset: int = -1,
) -> PaymentPage:
    return pipeline.get(
        "/payments/list",
        PaymentPage.from_payload,
        query=pagination_query(limit, offset),
    )


def get_payment(pipeline: RequestPipeline, payment_id: str) -> Payment:
    return pipeline.get(f"/payments/{payment_id}", Payment.from_payload)


# External payments


def external_create_payment(
    pipeline: RequestPipeline,
    request: ExternalCreatePaymentRequest,
) -> ExternalPayment:
    return pipeline.post(
        "/external/payments",
        request,
        ExternalPayment.from_payload,
        auth=AuthMode.OPTIONAL,
    )


def external_notify_payment_success(
    pipeline: RequestPipeline,
    request: PaymentNotifyRequest,
) -> MessageResponse:
    return pipeline.post(
        "/external/payments/success/notify",
        request,
        MessageResponse.from_payload,
        auth=AuthMode.OPTIONAL,
    )
