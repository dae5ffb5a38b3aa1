"""
Python client for the Reddio Pay payment service.

The most useful pieces are re-exported here so integrators can
``from reddio_pay import ...`` without navigating the package.
"""

from .api import create_client, open_client
from .core import (
    AccountAddress,
    AccountInfo,
    AddProductTokenRequest,
    AuthError,
    AuthMode,
    ClientConfig,
    ClientParameters,
    ConfigError,
    CreateProductRequest,
    DecodeError,
    ExternalCreatePaymentRequest,
    ExternalPayment,
    HTTPStatusError,
    MessageResponse,
    Payment,
    PaymentList,
    PaymentNotifyRequest,
    PaymentPage,
    PaymentReceiver,
    PaymentStatus,
    Product,
    ProductCreated,
    ProductList,
    ProductToken,
    ProductTokenCreated,
    ProductTokenStatus,
    ProductTokenStatusList,
    ReddioPayClient,
    ReddioPayError,
    SerializeError,
    Token,
    TokenBalance,
    TokenHolder,
    TokenList,
    TransportError,
    WalletBalances,
    build_environment,
    load_client_config,
    load_env_file,
)

__all__ = (
    "AccountAddress",
    "AccountInfo",
    "AddProductTokenRequest",
    "AuthError",
    "AuthMode",
    "ClientConfig",
    "ClientParameters",
    "ConfigError",
    "CreateProductRequest",
    "DecodeError",
    "ExternalCreatePaymentRequest",
    "ExternalPayment",
    "HTTPStatusError",
    "MessageResponse",
    "Payment",
    "PaymentList",
    "PaymentNotifyRequest",
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
    "ReddioPayClient",
    "ReddioPayError",
    "SerializeError",
    "Token",
    "TokenBalance",
    "TokenHolder",
    "TokenList",
    "TransportError",
    "WalletBalances",
    "build_environment",
    "create_client",
    "load_client_config",
    "load_env_file",
    "open_client",
)
