from swish_client.schemas.payment import (
    ECommercePaymentRequest,
    MCommercePaymentRequest,
    PaymentRequestState,
    PaymentStatus,
)
from swish_client.schemas.refund import RefundRequest, RefundState, RefundStatus

__all__ = [
    "ECommercePaymentRequest",
    "MCommercePaymentRequest",
    "PaymentRequestState",
    "PaymentStatus",
    "RefundRequest",
    "RefundState",
    "RefundStatus",
]
