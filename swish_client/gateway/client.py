"""
Swish Gateway Client

Façade over the transport, request codec and response handling. Every
operation is a single request/response exchange: encode, send, classify,
then read the result from the headers (creation calls) or the body (status
polling).
"""

from dataclasses import dataclass
from typing import Mapping, Optional, Type, TypeVar
from urllib.parse import quote

import aiohttp
from pydantic import BaseModel, ValidationError

from swish_client.core.config import Settings
from swish_client.core.logging import get_logger
from swish_client.schemas.payment import (
    ECommercePaymentRequest,
    MCommercePaymentRequest,
    PaymentStatus,
)
from swish_client.schemas.refund import RefundRequest, RefundStatus

from .base import (
    PAYMENT_REQUESTS_PATH,
    REFUNDS_PATH,
    ClientConfigurationError,
    MCommercePaymentResponse,
    PaymentResponse,
    TransportError,
)
from .codec import encode_request
from .responses import extract_mcommerce_response, extract_payment_response, raise_for_response
from .transport import ClientCertificate, SwishTransport, TrustedRoot, build_transport

logger = get_logger(__name__)

StatusModel = TypeVar("StatusModel", bound=BaseModel)


@dataclass(frozen=True)
class _Reply:
    status: int
    headers: Mapping[str, str]
    body: bytes


class SwishClient:
    """Asynchronous client for the Swish commerce API."""

    def __init__(
        self,
        certificate: Optional[ClientCertificate] = None,
        trusted_root: Optional[TrustedRoot] = None,
        settings: Optional[Settings] = None,
        transport: Optional[SwishTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            certificate: Merchant certificate used for mutual TLS
            trusted_root: Optional root certificate the gateway chain must end in;
                when omitted the server certificate is not validated
            settings: Environment and TLS settings (defaults to get_settings())
            transport: Ready-made transport, replaces certificate/settings

        Raises:
            ClientConfigurationError: If no usable transport can be built
        """
        if transport is None:
            if certificate is None:
                raise ClientConfigurationError("A client certificate or a transport is required")
            transport = build_transport(certificate, trusted_root, settings)
        self.transport = transport

    @classmethod
    def from_session(cls, session: aiohttp.ClientSession, base_url: str) -> "SwishClient":
        """Build a client on a caller-managed aiohttp session."""
        return cls(transport=SwishTransport.from_session(session, base_url))

    async def __aenter__(self) -> "SwishClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self.transport.close()

    async def create_ecommerce_payment(self, payment: ECommercePaymentRequest) -> PaymentResponse:
        """
        Create a payment request for a payer identified by alias.

        Returns:
            PaymentResponse with the id and location from the Location header

        Raises:
            GatewayError: If the gateway rejects the request (HTTP 422)
            TransportError: On any other failure
        """
        reply = await self._send("POST", PAYMENT_REQUESTS_PATH, payment)
        raise_for_response(reply.status, reply.body, creation=True)
        return extract_payment_response(reply.headers)

    async def create_mcommerce_payment(self, payment: MCommercePaymentRequest) -> MCommercePaymentResponse:
        """
        Create a payment request to be opened on the payer's device.

        Returns:
            MCommercePaymentResponse carrying the PaymentRequestToken as well

        Raises:
            GatewayError: If the gateway rejects the request (HTTP 422)
            TransportError: On any other failure
        """
        reply = await self._send("POST", PAYMENT_REQUESTS_PATH, payment)
        raise_for_response(reply.status, reply.body, creation=True)
        return extract_mcommerce_response(reply.headers)

    async def get_payment_status(self, payment_id: str) -> PaymentStatus:
        reply = await self._send("GET", f"{PAYMENT_REQUESTS_PATH}/{quote(payment_id, safe='')}")
        raise_for_response(reply.status, reply.body, creation=False)
        return self._parse_status(PaymentStatus, reply)

    async def create_refund(self, refund: RefundRequest) -> PaymentResponse:
        """
        Refund a previously paid payment request.

        Raises:
            GatewayError: If the gateway rejects the request (HTTP 422)
            TransportError: On any other failure
        """
        reply = await self._send("POST", REFUNDS_PATH, refund)
        raise_for_response(reply.status, reply.body, creation=True)
        return extract_payment_response(reply.headers)

    async def get_refund_status(self, refund_id: str) -> RefundStatus:
        reply = await self._send("GET", f"{REFUNDS_PATH}/{quote(refund_id, safe='')}")
        raise_for_response(reply.status, reply.body, creation=False)
        return self._parse_status(RefundStatus, reply)

    async def _send(self, method: str, path: str, request: Optional[BaseModel] = None) -> _Reply:
        url = self.transport.url(path)
        kwargs = {}
        if request is not None:
            encoded = encode_request(request)
            kwargs = {"data": encoded.body, "headers": encoded.headers}

        try:
            async with self.transport.session.request(method, url, **kwargs) as response:
                body = await response.read()
                logger.info("swish.request.sent", method=method, path=path, status_code=response.status)
                return _Reply(status=response.status, headers=response.headers, body=body)
        except aiohttp.ClientError as e:
            logger.error("swish.transport.failed", method=method, path=path, error=str(e))
            raise TransportError(f"Request to gateway failed: {e}") from e

    @staticmethod
    def _parse_status(model: Type[StatusModel], reply: _Reply) -> StatusModel:
        try:
            return model.model_validate_json(reply.body)
        except ValidationError as e:
            raise TransportError(
                f"Gateway returned an unreadable {model.__name__} document",
                status_code=reply.status,
                error_code="invalid_response",
            ) from e
