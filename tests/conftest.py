"""
Shared test configuration and fixtures for the Swish client test suite.
"""

from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from swish_client.core.config import clear_settings_cache
from swish_client.gateway.client import SwishClient
from swish_client.gateway.transport import ClientCertificate
from swish_client.schemas.payment import ECommercePaymentRequest, MCommercePaymentRequest
from swish_client.schemas.refund import RefundRequest


CERT_DIR = Path(__file__).parent / "certs"


@dataclass
class RecordedRequest:
    method: str
    path: str
    headers: Dict[str, str]
    body: bytes


ReplyFactory = Callable[[bytes], web.Response]


class FakeSwishGateway:
    """In-process stand-in for the gateway: canned replies per route, every request recorded."""

    def __init__(self) -> None:
        self.requests: List[RecordedRequest] = []
        self._routes: Dict[Tuple[str, str], ReplyFactory] = {}

    def route(self, method: str, path: str, factory: ReplyFactory) -> None:
        self._routes[(method, path)] = factory

    def reply(
        self,
        method: str,
        path: str,
        status: int = 201,
        body: str = "",
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.route(
            method,
            path,
            lambda _: web.Response(status=status, text=body, headers=headers or {}, content_type="text/plain"),
        )

    def reply_json(self, method: str, path: str, payload: dict, status: int = 200) -> None:
        self.route(method, path, lambda _: web.json_response(payload, status=status))

    async def handle(self, request: web.Request) -> web.Response:
        body = await request.read()
        self.requests.append(RecordedRequest(request.method, request.path, dict(request.headers), body))
        factory = self._routes.get((request.method, request.path))
        if factory is None:
            return web.Response(status=404, text="no route")
        return factory(body)


@pytest.fixture(autouse=True)
def isolated_settings():
    """Never leak cached settings between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def fake_gateway() -> FakeSwishGateway:
    return FakeSwishGateway()


@pytest_asyncio.fixture
async def gateway_server(fake_gateway):
    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", fake_gateway.handle)
    server = TestServer(app)
    await server.start_server()
    yield server
    await server.close()


@pytest_asyncio.fixture
async def swish_client(gateway_server):
    async with aiohttp.ClientSession() as session:
        yield SwishClient.from_session(session, str(gateway_server.make_url("/")))


@pytest.fixture
def cert_dir() -> Path:
    return CERT_DIR


@pytest.fixture
def merchant_certificate(cert_dir) -> ClientCertificate:
    return ClientCertificate(
        certfile=cert_dir / "merchant.pem",
        keyfile=cert_dir / "merchant.key",
    )


@pytest.fixture
def gateway_root_pem(cert_dir) -> str:
    return (cert_dir / "gateway_root.pem").read_text()


@pytest.fixture
def other_root_pem(cert_dir) -> str:
    return (cert_dir / "other_root.pem").read_text()


@pytest.fixture
def lapsed_root_pem(cert_dir) -> str:
    """Root of a server certificate that expired on 2020-02-01."""
    return (cert_dir / "lapsed_root.pem").read_text()


@pytest.fixture
def ecommerce_payment() -> ECommercePaymentRequest:
    return ECommercePaymentRequest(
        amount=Decimal("100"),
        currency="SEK",
        callback_url="https://example.com/api/swishcb/paymentrequests",
        payee_alias="1231181189",
        payee_payment_reference="0123456789",
        payer_alias="4671234768",
        message="Kingston USB Flash Drive 8 GB",
    )


@pytest.fixture
def mcommerce_payment() -> MCommercePaymentRequest:
    return MCommercePaymentRequest(
        amount=Decimal("100"),
        currency="SEK",
        callback_url="https://example.com/api/swishcb/paymentrequests",
        payee_alias="1231181189",
        payee_payment_reference="0123456789",
        message="Kingston USB Flash Drive 8 GB",
    )


@pytest.fixture
def refund_request() -> RefundRequest:
    return RefundRequest(
        payer_payment_reference="0123456789",
        original_payment_reference="6D6CD7406ECE4542A80152D909EF9F6B",
        callback_url="https://example.com/api/swishcb/refunds",
        payer_alias="1231181189",
        payee_alias="4671234768",
        amount=Decimal("100"),
        currency="SEK",
        message="Refund for Kingston USB Flash Drive 8 GB",
    )
