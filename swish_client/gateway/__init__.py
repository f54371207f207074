"""
Swish gateway integration

Mutual-TLS transport, request encoding, response classification and the
client façade for the Swish commerce API.
"""

from .base import (
    ClientConfigurationError,
    GatewayError,
    MCommercePaymentResponse,
    PaymentResponse,
    SwishError,
    TransportError,
)
from .client import SwishClient
from .transport import ClientCertificate, SwishTransport, build_ssl_context, build_transport

__all__ = [
    "ClientCertificate",
    "ClientConfigurationError",
    "GatewayError",
    "MCommercePaymentResponse",
    "PaymentResponse",
    "SwishClient",
    "SwishError",
    "SwishTransport",
    "TransportError",
    "build_ssl_context",
    "build_transport",
]
