"""
Swish Transport Builder

Builds the mutually authenticated TLS transport the gateway requires: the
merchant certificate is presented on every connection, the protocol version
is pinned to the one the gateway accepts, and the server can optionally be
pinned to a single trusted root certificate.

Pinning decides on one thing only: the last certificate of the chain the
server presents must be byte-equal to the trusted root. OpenSSL's own
verification is switched off so validity periods, name checks and the
system trust store never influence the outcome.
"""

import os
import ssl
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import aiohttp
from aiohttp import ClientTimeout

from swish_client.core.config import Settings, get_settings
from swish_client.core.logging import get_logger

from .base import ClientConfigurationError

logger = get_logger(__name__)

CertificateSource = Union[str, os.PathLike]
TrustedRoot = Union[bytes, str]

_DER_SEQUENCE = 0x30
_DER_EXPLICIT_VERSION = 0xA0


@dataclass(frozen=True)
class ClientCertificate:
    """Merchant certificate (and key) already written to local storage."""
    certfile: CertificateSource
    keyfile: Optional[CertificateSource] = None
    password: Optional[Union[str, bytes]] = None


def _read_element(data: bytes, offset: int) -> Tuple[int, int, int]:
    """Return (tag, value start, value end) of the DER element at offset."""
    if offset + 2 > len(data):
        raise ValueError("truncated DER element")
    tag, length = data[offset], data[offset + 1]
    start = offset + 2
    if length & 0x80:
        size = length & 0x7F
        if size == 0 or start + size > len(data):
            raise ValueError("invalid DER length")
        length = int.from_bytes(data[start:start + size], "big")
        start += size
    end = start + length
    if end > len(data):
        raise ValueError("truncated DER element")
    return tag, start, end


def certificate_names(der: bytes) -> Tuple[bytes, bytes]:
    """
    Extract the encoded issuer and subject names of a DER certificate.

    Only the outer structure of TBSCertificate is walked; the names are
    returned as raw DER so they can be compared byte for byte.

    Raises:
        ValueError: If the bytes are not a DER encoded certificate
    """
    tag, start, _ = _read_element(der, 0)
    if tag != _DER_SEQUENCE:
        raise ValueError("not a DER certificate")
    tag, offset, tbs_end = _read_element(der, start)
    if tag != _DER_SEQUENCE:
        raise ValueError("not a DER certificate")

    fields = []
    while offset < tbs_end and len(fields) < 6:
        tag, _, end = _read_element(der, offset)
        fields.append((tag, der[offset:end]))
        offset = end
    if fields and fields[0][0] == _DER_EXPLICIT_VERSION:
        fields = fields[1:]
    # serialNumber, signature, issuer, validity, subject
    if len(fields) < 5:
        raise ValueError("incomplete DER certificate")
    return fields[2][1], fields[4][1]


def root_matches(chain: Sequence[bytes], trusted_root: bytes) -> bool:
    """Accept only when the last certificate of the chain is exactly the trusted root."""
    if not chain:
        return False
    return chain[-1] == trusted_root


def anchor_chain(chain: Sequence[bytes], trusted_root: bytes) -> List[bytes]:
    """
    Complete a presented chain with the trusted root when the server left it out.

    Servers commonly send their chain without the self-signed root. The root
    is appended when the last presented certificate was issued by it, so the
    chain ends where a full chain would end.
    """
    chain = list(chain)
    if not chain or chain[-1] == trusted_root:
        return chain
    try:
        issuer, _ = certificate_names(chain[-1])
        _, root_subject = certificate_names(trusted_root)
    except ValueError:
        return chain
    if issuer == root_subject:
        chain.append(trusted_root)
    return chain


def _presented_chain(sslobj: ssl.SSLObject) -> List[bytes]:
    """
    DER certificates sent by the server, leaf first.

    SSLObject.get_unverified_chain() is public from Python 3.13. Older
    interpreters (3.10 to 3.12) have the same call on the wrapped _ssl object
    only, returning certificate objects that are converted through PEM.
    """
    if hasattr(ssl.SSLObject, "get_unverified_chain"):
        return list(sslobj.get_unverified_chain() or [])
    chain = sslobj._sslobj.get_unverified_chain() or []
    return [ssl.PEM_cert_to_DER_cert(cert.public_bytes()) for cert in chain]


class PinnedRootSSLObject(ssl.SSLObject):
    """SSLObject that refuses to finish a handshake whose chain does not end in the pinned root."""

    def do_handshake(self) -> None:
        super().do_handshake()
        pinned_root = getattr(self.context, "pinned_root", None)
        if pinned_root is None:
            return
        chain = anchor_chain(_presented_chain(self), pinned_root)
        if not root_matches(chain, pinned_root):
            logger.warning("swish.transport.pinning_rejected", server_hostname=self.server_hostname)
            raise ssl.SSLCertVerificationError(
                "server certificate chain does not end in the pinned root certificate"
            )


class PinnedSSLContext(ssl.SSLContext):
    sslobject_class = PinnedRootSSLObject
    pinned_root: Optional[bytes] = None


def _root_to_der(trusted_root: TrustedRoot) -> bytes:
    if isinstance(trusted_root, bytes) and trusted_root.lstrip().startswith(b"-----BEGIN"):
        trusted_root = trusted_root.decode("ascii")
    if isinstance(trusted_root, str):
        der = ssl.PEM_cert_to_DER_cert(trusted_root.strip())
    else:
        der = bytes(trusted_root)
    certificate_names(der)
    return der


def build_ssl_context(
    certificate: ClientCertificate,
    trusted_root: Optional[TrustedRoot] = None,
    tls_version: ssl.TLSVersion = ssl.TLSVersion.TLSv1_1,
) -> ssl.SSLContext:
    """
    Build the client SSL context used for every gateway connection.

    Args:
        certificate: Merchant certificate presented for mutual authentication
        trusted_root: Root certificate (DER bytes or PEM) the server chain must
            end in; None disables server certificate validation entirely
        tls_version: The only protocol version the context will negotiate

    Returns:
        Configured ssl.SSLContext

    Raises:
        ClientConfigurationError: If the certificate or root cannot be loaded
    """
    context = PinnedSSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.minimum_version = tls_version
    context.maximum_version = tls_version
    if tls_version < ssl.TLSVersion.TLSv1_2:
        # OpenSSL 3 refuses pre-1.2 handshakes at the default security level
        context.set_ciphers("DEFAULT:@SECLEVEL=0")

    try:
        context.load_cert_chain(
            certfile=certificate.certfile,
            keyfile=certificate.keyfile,
            password=certificate.password,
        )
    except (OSError, ValueError) as e:
        raise ClientConfigurationError(f"Unable to load client certificate: {e}") from e

    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    if trusted_root is None:
        logger.info("swish.transport.server_validation_disabled")
        return context

    try:
        context.pinned_root = _root_to_der(trusted_root)
    except ValueError as e:
        raise ClientConfigurationError(f"Unable to load trusted root certificate: {e}") from e
    return context


class SwishTransport:
    """HTTP transport bound to the gateway base URL."""

    def __init__(
        self,
        base_url: str,
        ssl_context: Optional[ssl.SSLContext] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.ssl_context = ssl_context
        # Session will be created lazily to avoid event loop issues during initialization
        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_session(cls, session: aiohttp.ClientSession, base_url: str) -> "SwishTransport":
        """Wrap a caller-managed session; closing the transport leaves it open."""
        return cls(base_url, session=session)

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create the HTTP session."""
        if self._owns_session and (self._session is None or self._session.closed):
            connector = aiohttp.TCPConnector(
                ssl=self.ssl_context if self.ssl_context is not None else True,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=ClientTimeout(total=None),
            )
            logger.info("swish.transport.session_opened", base_url=self.base_url)
        return self._session

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()


def build_transport(
    certificate: ClientCertificate,
    trusted_root: Optional[TrustedRoot] = None,
    settings: Optional[Settings] = None,
) -> SwishTransport:
    settings = settings or get_settings()
    context = build_ssl_context(certificate, trusted_root, tls_version=settings.ssl_tls_version())
    return SwishTransport(settings.resolved_base_url(), ssl_context=context)
