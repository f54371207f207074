from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from swish_client.schemas.common import CamelModel


class RefundState(str, Enum):
    """Documented states of a refund."""
    CREATED = "CREATED"
    DEBITED = "DEBITED"
    PAID = "PAID"
    ERROR = "ERROR"


class RefundRequest(CamelModel):
    original_payment_reference: str
    callback_url: str
    payer_alias: str
    amount: Decimal = Field(gt=0)
    currency: str = Field(default="SEK", min_length=3, max_length=3)
    payer_payment_reference: Optional[str] = Field(default=None, max_length=36)
    payee_alias: Optional[str] = None
    message: Optional[str] = Field(default=None, max_length=50)


class RefundStatus(CamelModel):
    id: Optional[str] = None
    payer_payment_reference: Optional[str] = None
    original_payment_reference: Optional[str] = None
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
    additional_information: Optional[str] = None
