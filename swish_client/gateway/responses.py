"""
Swish Response Handling

Classification of gateway replies into domain rejections, transport
failures and successes, and extraction of the identifiers that creation
calls return in their headers instead of their bodies.
"""

from enum import Enum
from typing import Mapping, Optional, Union

from swish_client.core.logging import get_logger

from .base import (
    DOMAIN_ERROR_STATUS,
    LOCATION_HEADER,
    PAYMENT_REQUEST_TOKEN_HEADER,
    GatewayError,
    MCommercePaymentResponse,
    PaymentResponse,
    TransportError,
)

logger = get_logger(__name__)


class ResponseKind(str, Enum):
    SUCCESS = "success"
    DOMAIN_ERROR = "domain_error"
    TRANSPORT_ERROR = "transport_error"


def classify(status: int, creation: bool) -> ResponseKind:
    """
    Decide the outcome of a gateway reply from its status code.

    Only creation calls treat 422 as a domain rejection; for status polling
    it is an ordinary transport failure.
    """
    if creation and status == DOMAIN_ERROR_STATUS:
        return ResponseKind.DOMAIN_ERROR
    if not 200 <= status < 300:
        return ResponseKind.TRANSPORT_ERROR
    return ResponseKind.SUCCESS


def _body_text(body: Union[bytes, str]) -> str:
    if isinstance(body, bytes):
        # Error bodies are not guaranteed to be valid UTF-8
        return body.decode("utf-8", errors="replace")
    return body


def raise_for_response(status: int, body: Union[bytes, str], creation: bool) -> None:
    """
    Raise the error a reply stands for, or return for a success.

    The body is only decoded for a domain rejection, the one case that
    carries it.

    Raises:
        GatewayError: Domain rejection, carrying the body verbatim
        TransportError: Any other non-success status
    """
    kind = classify(status, creation)
    if kind is ResponseKind.DOMAIN_ERROR:
        message = _body_text(body)
        logger.info("swish.response.rejected", status_code=status, message=message)
        raise GatewayError(message)
    if kind is ResponseKind.TRANSPORT_ERROR:
        logger.warning("swish.response.failed", status_code=status)
        raise TransportError(f"Gateway responded with HTTP {status}", status_code=status)


def _identifier_from_location(location: str) -> str:
    return location.split("/")[-1]


def extract_payment_response(headers: Mapping[str, str]) -> PaymentResponse:
    location: Optional[str] = headers.get(LOCATION_HEADER)
    if location is None:
        return PaymentResponse()
    return PaymentResponse(id=_identifier_from_location(location), location=location)


def extract_mcommerce_response(headers: Mapping[str, str]) -> MCommercePaymentResponse:
    payment = extract_payment_response(headers)
    return MCommercePaymentResponse(
        id=payment.id,
        location=payment.location,
        token=headers.get(PAYMENT_REQUEST_TOKEN_HEADER),
    )
