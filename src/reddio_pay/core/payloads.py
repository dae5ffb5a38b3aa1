"""
Request bodies sent to the Reddio Pay service.

Each record knows how to turn itself into the exact JSON object the service
expects through ``to_payload``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

__all__ = [
    "AddProductTokenRequest",
    "CreateProductRequest",
    "ExternalCreatePaymentRequest",
    "PaymentNotifyRequest",
    "UpdateAccountInfoRequest",
    "UpdateWebhookRequest",
    "WalletBalanceRequest",
    "build_login_payload",
]


def build_login_payload(api_key: str) -> Dict[str, Any]:
    return {"api_key": api_key}


@dataclass(frozen=True)
class UpdateWebhookRequest:
    webhook: str

    def to_payload(self) -> Dict[str, Any]:
        return {"webhook": self.webhook}


@dataclass(frozen=True)
class UpdateAccountInfoRequest:
    company_name: str
    company_url: str

    def to_payload(self) -> Dict[str, Any]:
        return {"company_name": self.company_name, "company_url": self.company_url}


@dataclass(frozen=True)
class WalletBalanceRequest:
    """Balance lookup; without ``token_symbol`` every supported token is returned."""

    wallet_address: str
    chain_id: int
    token_symbol: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "wallet_address": self.wallet_address,
            "chain_id": self.chain_id,
        }
        if self.token_symbol:
            payload["token_symbol"] = self.token_symbol
        return payload


@dataclass(frozen=True)
class CreateProductRequest:
    name: str
    description: str
    content: str
    price: str
    recipient_address: str
    token_ids: List[str] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "content": self.content,
            "token_ids": list(self.token_ids),
            "price": self.price,
            "recipient_address": self.recipient_address,
        }


@dataclass(frozen=True)
class AddProductTokenRequest:
    token_id: str
    price: str
    recipient_address: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "token_id": self.token_id,
            "price": self.price,
            "recipient_address": self.recipient_address,
        }


@dataclass(frozen=True)
class ExternalCreatePaymentRequest:
    product_id: str
    product_token_id: str
    count: int

    def to_payload(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "product_token_id": self.product_token_id,
            "count": self.count,
        }


@dataclass(frozen=True)
class PaymentNotifyRequest:
    payment_id: str
    email: str

    def to_payload(self) -> Dict[str, Any]:
        return {"payment_id": self.payment_id, "email": self.email}
