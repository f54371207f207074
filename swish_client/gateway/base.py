"""
Swish Gateway Base Types

Result types, the error hierarchy and the wire constants shared by the
transport, the response handling and the client façade.
"""

from dataclasses import dataclass
from typing import Optional


PAYMENT_REQUESTS_PATH = "swish-cpcapi/api/v1/paymentrequests"
REFUNDS_PATH = "swish-cpcapi/api/v1/refunds"

LOCATION_HEADER = "Location"
PAYMENT_REQUEST_TOKEN_HEADER = "PaymentRequestToken"

DOMAIN_ERROR_STATUS = 422


@dataclass(frozen=True)
class PaymentResponse:
    """Outcome of a successful creation call, read from the response headers."""
    id: Optional[str] = None
    location: Optional[str] = None


@dataclass(frozen=True)
class MCommercePaymentResponse(PaymentResponse):
    """M-commerce creation outcome; the token opens the payment on the payer's device."""
    token: Optional[str] = None


class SwishError(Exception):
    """Base class for every error raised by the Swish client."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.error_message = message
        self.error_code = error_code
        self.status_code = status_code


class GatewayError(SwishError):
    """
    Business rejection of a creation call.

    The message is the gateway's response body, unchanged, and is meant to be
    shown to the caller or end user.
    """

    def __init__(self, message: str):
        super().__init__(message, error_code="domain_rejection", status_code=DOMAIN_ERROR_STATUS)


class TransportError(SwishError):
    """
    Non-success HTTP status or network-level failure.

    status_code is None when no HTTP response was received at all
    (connection refused, TLS handshake or pinning failure).
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
    ):
        if error_code is None:
            error_code = f"http_{status_code}" if status_code is not None else "connection_failed"
        super().__init__(message, error_code=error_code, status_code=status_code)


class ClientConfigurationError(SwishError):
    """Certificate material or settings that cannot produce a working transport."""

    def __init__(self, message: str):
        super().__init__(message, error_code="invalid_configuration")
