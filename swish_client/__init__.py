"""Async client for the Swish commerce payment gateway."""

from swish_client.core.config import Settings, SwishEnvironment, get_settings
from swish_client.gateway import (
    ClientCertificate,
    ClientConfigurationError,
    GatewayError,
    MCommercePaymentResponse,
    PaymentResponse,
    SwishClient,
    SwishError,
    TransportError,
)
from swish_client.schemas import (
    ECommercePaymentRequest,
    MCommercePaymentRequest,
    PaymentRequestState,
    PaymentStatus,
    RefundRequest,
    RefundState,
    RefundStatus,
)

__version__ = "0.1.0"
__all__ = [
    "ClientCertificate",
    "ClientConfigurationError",
    "ECommercePaymentRequest",
    "GatewayError",
    "MCommercePaymentRequest",
    "MCommercePaymentResponse",
    "PaymentRequestState",
    "PaymentResponse",
    "PaymentStatus",
    "RefundRequest",
    "RefundState",
    "RefundStatus",
    "Settings",
    "SwishClient",
    "SwishEnvironment",
    "SwishError",
    "TransportError",
    "get_settings",
]
