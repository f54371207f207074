from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from swish_client.schemas.common import CamelModel


class PaymentRequestState(str, Enum):
    """Documented states of a payment request."""
    CREATED = "CREATED"
    PAID = "PAID"
    DECLINED = "DECLINED"
    ERROR = "ERROR"
    CANCELLED = "CANCELLED"


class PaymentRequestBase(CamelModel):
    amount: Decimal = Field(gt=0)
    currency: str = Field(default="SEK", min_length=3, max_length=3)
    callback_url: str
    payee_alias: str
    payee_payment_reference: Optional[str] = Field(default=None, max_length=36)
    message: Optional[str] = Field(default=None, max_length=50)


class ECommercePaymentRequest(PaymentRequestBase):
    """Payment where the merchant knows the payer's Swish alias."""
    payer_alias: str


class MCommercePaymentRequest(PaymentRequestBase):
    """Payment opened on the payer's own device using the returned token."""


class PaymentStatus(CamelModel):
    id: Optional[str] = None
    payee_payment_reference: Optional[str] = None
    payment_reference: Optional[str] = None
    callback_url: Optional[str] = None
    payer_alias: Optional[str] = None
    payee_alias: Optional[str] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    message: Optional[str] = None
    status: Optional[str] = None
    date_created: Optional[datetime] = None
    date_paid: Optional[datetime] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def is_paid(self) -> bool:
        return self.status == PaymentRequestState.PAID
