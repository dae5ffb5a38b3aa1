"""
Core primitives of the Reddio Pay client: auth, refresh, pipeline and endpoints.
"""

from .auth import CredentialExchanger, Credentials, TokenHolder
from .client import ReddioPayClient
from .config import (
    ClientConfig,
    ClientParameters,
    ConfigError,
    load_client_config,
)
from .environment import ClientEnvironment, build_environment, load_env_file
from .errors import (
    AuthError,
    DecodeError,
    HTTPStatusError,
    ReddioPayError,
    SerializeError,
    TransportError,
)
from .models import (
    AccountAddress,
    AccountInfo,
    ExternalPayment,
    MessageResponse,
    Payment,
    PaymentList,
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
    Token,
    TokenBalance,
    TokenList,
    WalletBalances,
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
from .pipeline import AuthMode, EndpointRequest, RequestPipeline
from .refresh import RefreshScheduler

__all__ = [
    "AccountAddress",
    "AccountInfo",
    "AddProductTokenRequest",
    "AuthError",
    "AuthMode",
    "ClientConfig",
    "ClientEnvironment",
    "ClientParameters",
    "ConfigError",
    "CreateProductRequest",
    "CredentialExchanger",
    "Credentials",
    "DecodeError",
    "EndpointRequest",
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
    "RefreshScheduler",
    "RequestPipeline",
    "SerializeError",
    "Token",
    "TokenBalance",
    "TokenHolder",
    "TokenList",
    "TransportError",
    "UpdateAccountInfoRequest",
    "UpdateWebhookRequest",
    "WalletBalanceRequest",
    "WalletBalances",
    "build_environment",
    "load_client_config",
    "load_env_file",
]
