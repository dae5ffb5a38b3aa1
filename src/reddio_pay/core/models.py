"""
Typed records decoded from Reddio Pay responses.

Field names match the service's JSON keys. Amounts in wei and formatted
amounts stay strings; timestamps stay strings and are left to the caller to
parse. Missing keys decode to empty values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

__all__ = [
    "AccountAddress",
    "AccountInfo",
    "ExternalPayment",
    "MessageResponse",
    "Payment",
    "PaymentList",
    "PaymentPage",
    "PaymentReceiver",
    "PaymentStatus",
    "Product",
    "ProductCreated",
    "ProductList",
    "ProductToken",
    "ProductTokenCreated",
    "ProductTokenStatus",
    "ProductTokenStatusList",
    "Token",
    "TokenBalance",
    "TokenList",
    "WalletBalances",
    "decode_account_addresses",
]


def _object(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise TypeError(f"expected a JSON object, got {type(payload).__name__}")
    return payload


def _items(payload: Any) -> List[Any]:
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise TypeError(f"expected a JSON array, got {type(payload).__name__}")
    return payload


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def _opt_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _int(value: Any) -> int:
    return 0 if value is None else int(value)


def _float(value: Any) -> float:
    return 0.0 if value is None else float(value)


class PaymentStatus:
    CREATED = "created"
    PAID = "paid"
    CLOSED = "closed"


@dataclass(frozen=True)
class MessageResponse:
    message: str

    @classmethod
    def from_payload(cls, payload: Any) -> "MessageResponse":
        return cls(message=_str(_object(payload).get("message")))


@dataclass(frozen=True)
class AccountInfo:
    email: str
    activated: bool
    created_at: str
    webhook: Optional[str] = None
    company_name: Optional[str] = None
    company_url: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "AccountInfo":
        data = _object(payload)
        return cls(
            email=_str(data.get("email")),
            activated=bool(data.get("activated")),
            created_at=_str(data.get("created_at")),
            webhook=_opt_str(data.get("webhook")),
            company_name=_opt_str(data.get("company_name")),
            company_url=_opt_str(data.get("company_url")),
        )


@dataclass(frozen=True)
class TokenBalance:
    token_id: str
    name: str
    symbol: str
    contract_address: str
    decimals: int
    balance: str
    formatted_balance: str
    chain_id: int
    chain_name: str
    chain_symbol: str
    icon_url: str

    @classmethod
    def from_payload(cls, payload: Any) -> "TokenBalance":
        data = _object(payload)
        return cls(
            token_id=_str(data.get("token_id")),
            name=_str(data.get("name")),
            symbol=_str(data.get("symbol")),
            contract_address=_str(data.get("contract_address")),
            decimals=_int(data.get("decimals")),
            balance=_str(data.get("balance")),
            formatted_balance=_str(data.get("formatted_balance")),
            chain_id=_int(data.get("chain_id")),
            chain_name=_str(data.get("chain_name")),
            chain_symbol=_str(data.get("chain_symbol")),
            icon_url=_str(data.get("icon_url")),
        )


@dataclass(frozen=True)
class WalletBalances:
    wallet_address: str
    chain_id: int
    chain_name: str
    balances: List[TokenBalance] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "WalletBalances":
        data = _object(payload)
        return cls(
            wallet_address=_str(data.get("wallet_address")),
            chain_id=_int(data.get("chain_id")),
            chain_name=_str(data.get("chain_name")),
            balances=[TokenBalance.from_payload(item) for item in _items(data.get("balances"))],
        )


@dataclass(frozen=True)
class AccountAddress:
    account_id: str
    token_id: str
    recipient_address: str
    ref_name: str
    created_at: str

    @classmethod
    def from_payload(cls, payload: Any) -> "AccountAddress":
        data = _object(payload)
        return cls(
            account_id=_str(data.get("account_id")),
            token_id=_str(data.get("token_id")),
            recipient_address=_str(data.get("recipient_address")),
            ref_name=_str(data.get("ref_name")),
            created_at=_str(data.get("created_at")),
        )


def decode_account_addresses(payload: Any) -> List[AccountAddress]:
    """``GET /accounts/addresses`` answers with a bare JSON array."""
    if payload is None:
        raise TypeError("expected a JSON array, got null")
    return [AccountAddress.from_payload(item) for item in _items(payload)]


@dataclass(frozen=True)
class Token:
    token_id: str
    name: str
    symbol: str
    contract_address: str
    decimals: int
    chain_id: int
    chain_name: str
    chain_symbol: str
    explorer_url: str
    icon_url: str
    token_type: str
    is_active: bool
    currency_type: str
    created_at: str

    @classmethod
    def from_payload(cls, payload: Any) -> "Token":
        data = _object(payload)
        return cls(
            token_id=_str(data.get("token_id")),
            name=_str(data.get("name")),
            symbol=_str(data.get("symbol")),
            contract_address=_str(data.get("contract_address")),
            decimals=_int(data.get("decimals")),
            chain_id=_int(data.get("chain_id")),
            chain_name=_str(data.get("chain_name")),
            chain_symbol=_str(data.get("chain_symbol")),
            explorer_url=_str(data.get("explorer_url")),
            icon_url=_str(data.get("icon_url")),
            token_type=_str(data.get("token_type")),
            is_active=bool(data.get("is_active")),
            currency_type=_str(data.get("currency_type")),
            created_at=_str(data.get("created_at")),
        )


@dataclass(frozen=True)
class TokenList:
    count: int
    tokens: List[Token] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "TokenList":
        data = _object(payload)
        return cls(
            count=_int(data.get("count")),
            tokens=[Token.from_payload(item) for item in _items(data.get("tokens"))],
        )


@dataclass(frozen=True)
class ProductToken:
    """A product's binding to one payment token, price and recipient."""

    product_token_id: str
    product_id: str
    account_id: str
    token_id: str
    price: str
    recipient_address: str
    payment_router_address: str
    created_at: str
    chain_id: str
    chain_name: str

    @classmethod
    def from_payload(cls, payload: Any) -> "ProductToken":
        data = _object(payload)
        return cls(
            product_token_id=_str(data.get("product_token_id")),
            product_id=_str(data.get("product_id")),
            account_id=_str(data.get("account_id")),
            token_id=_str(data.get("token_id")),
            price=_str(data.get("price")),
            recipient_address=_str(data.get("recipient_address")),
            payment_router_address=_str(data.get("payment_router_address")),
            created_at=_str(data.get("created_at")),
            chain_id=_str(data.get("chain_id")),
            chain_name=_str(data.get("chain_name")),
        )


@dataclass(frozen=True)
class Product:
    product_id: str
    account_id: str
    name: str
    content: str
    active: bool
    created_at: str
    description: str = ""
    product_tokens: List[ProductToken] = field(default_factory=list)
    total_sale_count: int = 0
    total_sale_amount: float = 0.0

    @classmethod
    def from_payload(cls, payload: Any) -> "Product":
        data = _object(payload)
        return cls(
            product_id=_str(data.get("product_id")),
            account_id=_str(data.get("account_id")),
            name=_str(data.get("name")),
            content=_str(data.get("content")),
            active=bool(data.get("active")),
            created_at=_str(data.get("created_at")),
            description=_str(data.get("description")),
            product_tokens=[
                ProductToken.from_payload(item)
                for item in _items(data.get("product_tokens"))
            ],
            total_sale_count=_int(data.get("total_sale_count")),
            total_sale_amount=_float(data.get("total_sale_amount")),
        )


@dataclass(frozen=True)
class ProductCreated:
    message: str
    product: Optional[Product]

    @classmethod
    def from_payload(cls, payload: Any) -> "ProductCreated":
        data = _object(payload)
        product = data.get("product")
        return cls(
            message=_str(data.get("message")),
            product=Product.from_payload(product) if product is not None else None,
        )


@dataclass(frozen=True)
class ProductList:
    message: str
    products: List[Product] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "ProductList":
        data = _object(payload)
        return cls(
            message=_str(data.get("message")),
            products=[Product.from_payload(item) for item in _items(data.get("products"))],
        )


@dataclass(frozen=True)
class ProductTokenCreated:
    message: str
    product_token: Optional[ProductToken]

    @classmethod
    def from_payload(cls, payload: Any) -> "ProductTokenCreated":
        data = _object(payload)
        product_token = data.get("product_token")
        return cls(
            message=_str(data.get("message")),
            product_token=(
                ProductToken.from_payload(product_token)
                if product_token is not None
                else None
            ),
        )


@dataclass(frozen=True)
class ProductTokenStatus:
    token_name: str
    chain_name: str
    product_token_id: str
    total_sale_count: int
    total_sale_amount: int
    created_at: str
    decimals: int
    token_id: str
    desc: str
    product_name: str = ""

    @classmethod
    def from_payload(cls, payload: Any) -> "ProductTokenStatus":
        data = _object(payload)
        return cls(
            token_name=_str(data.get("token_name")),
            chain_name=_str(data.get("chain_name")),
            product_token_id=_str(data.get("product_token_id")),
            total_sale_count=_int(data.get("total_sale_count")),
            total_sale_amount=_int(data.get("total_sale_amount")),
            created_at=_str(data.get("created_at")),
            decimals=_int(data.get("decimals")),
            token_id=_str(data.get("token_id")),
            desc=_str(data.get("desc")),
            product_name=_str(data.get("product_name")),
        )


@dataclass(frozen=True)
class ProductTokenStatusList:
    message: str
    status: List[ProductTokenStatus] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "ProductTokenStatusList":
        data = _object(payload)
        return cls(
            message=_str(data.get("message")),
            status=[ProductTokenStatus.from_payload(item) for item in _items(data.get("status"))],
        )


@dataclass(frozen=True)
class Payment:
    """
    A single purchase attempt.

    ``status`` moves through the service's lifecycle (``created``, ``paid``,
    ``closed`` and so on); see :class:`PaymentStatus`.
    """

    payment_id: str
    account_id: str
    token_id: str
    product_id: str
    product_token_id: str
    count: int
    status: str
    created_at: str
    updated_at: str
    total_amount: str
    fee_amount: str
    recipient_amount: str
    payer_email: Optional[str] = None
    paid_at: Optional[str] = None
    closed_at: Optional[str] = None
    close_reason: Optional[str] = None
    transaction_hash: Optional[str] = None
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    gas_price: Optional[str] = None

    @property
    def is_paid(self) -> bool:
        return self.status == PaymentStatus.PAID

    @classmethod
    def from_payload(cls, payload: Any) -> "Payment":
        data = _object(payload)
        block_number = data.get("block_number")
        gas_used = data.get("gas_used")
        return cls(
            payment_id=_str(data.get("payment_id")),
            account_id=_str(data.get("account_id")),
            token_id=_str(data.get("token_id")),
            product_id=_str(data.get("product_id")),
            product_token_id=_str(data.get("product_token_id")),
            count=_int(data.get("count")),
            status=_str(data.get("status")),
            created_at=_str(data.get("created_at")),
            updated_at=_str(data.get("updated_at")),
            total_amount=_str(data.get("total_amount")),
            fee_amount=_str(data.get("fee_amount")),
            recipient_amount=_str(data.get("recipient_amount")),
            payer_email=_opt_str(data.get("payer_email")),
            paid_at=_opt_str(data.get("paid_at")),
            closed_at=_opt_str(data.get("closed_at")),
            close_reason=_opt_str(data.get("close_reason")),
            transaction_hash=_opt_str(data.get("transaction_hash")),
            block_number=int(block_number) if block_number is not None else None,
            gas_used=int(gas_used) if gas_used is not None else None,
            gas_price=_opt_str(data.get("gas_price")),
        )


@dataclass(frozen=True)
class PaymentList:
    message: str
    payments: List[Payment] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "PaymentList":
        data = _object(payload)
        return cls(
            message=_str(data.get("message")),
            payments=[Payment.from_payload(item) for item in _items(data.get("payments"))],
        )


@dataclass(frozen=True)
class PaymentPage:
    message: str
    total_count: int
    total_pages: int
    current_page: int
    page_size: int
    payments: List[Payment] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "PaymentPage":
        data = _object(payload)
        return cls(
            message=_str(data.get("message")),
            total_count=_int(data.get("total_count")),
            total_pages=_int(data.get("total_pages")),
            current_page=_int(data.get("current_page")),
            page_size=_int(data.get("page_size")),
            payments=[Payment.from_payload(item) for item in _items(data.get("payments"))],
        )


@dataclass(frozen=True)
class PaymentReceiver:
    type: str  # "fee" or "merchant"
    recipient_address: str
    amount: str  # wei
    rate: str  # percentage

    @classmethod
    def from_payload(cls, payload: Any) -> "PaymentReceiver":
        data = _object(payload)
        return cls(
            type=_str(data.get("type")),
            recipient_address=_str(data.get("recipient_address")),
            amount=_str(data.get("amount")),
            rate=_str(data.get("rate")),
        )


@dataclass(frozen=True)
class ExternalPayment:
    """A payment created through the external endpoint, with its hosted pay link."""

    message: str
    payment_id: str
    pay_link: str
    contract_address: str
    token_address: str
    decimals: int
    payment_receivers: List[PaymentReceiver] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "ExternalPayment":
        data = _object(payload)
        return cls(
            message=_str(data.get("message")),
            payment_id=_str(data.get("payment_id")),
            pay_link=_str(data.get("pay_link")),
            contract_address=_str(data.get("contract_address")),
            token_address=_str(data.get("token_address")),
            decimals=_int(data.get("decimals")),
            payment_receivers=[
                PaymentReceiver.from_payload(item)
                for item in _items(data.get("payment_receivers"))
            ],
        )
