"""HTTP client with optional TLS certificate fingerprint pinning.

Without a fingerprint the platform trust store is used. With a fingerprint,
hostname and chain checks are disabled and the SHA-256 digest of the server's
leaf certificate must match the pin; the comparison happens during the TLS
handshake so no request data is sent to a mismatching server.

To gather the SHA-256 fingerprint of a server::

    openssl s_client -connect <host>:443 < /dev/null 2>/dev/null \\
        | openssl x509 -fingerprint -sha256 -noout -in /dev/stdin
"""

import hashlib
import hmac
import logging
import ssl
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from autoinst.errors import (
    CertificateFingerprintMismatch,
    HttpError,
    HttpStatusError,
    HttpTimeoutError,
    InvalidFingerprintError,
)


logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 60.0


def parse_fingerprint(fingerprint: str) -> bytes:
    """Decode a SHA-256 fingerprint written with or without colons."""
    sanitized = fingerprint.strip().replace(":", "")
    try:
        decoded = bytes.fromhex(sanitized)
    except ValueError as e:
        raise InvalidFingerprintError(f"Invalid certificate fingerprint '{fingerprint}': {e}") from e

    if len(decoded) != hashlib.sha256().digest_size:
        raise InvalidFingerprintError(
            f"Invalid certificate fingerprint '{fingerprint}': expected 32 bytes, got {len(decoded)}"
        )
    return decoded


class CertificateVerifier(ABC):
    """Strategy deciding how the server certificate is verified."""

    @abstractmethod
    def ssl_context(self) -> ssl.SSLContext:
        """Build the SSL context for a new connection."""
        pass


class TrustStoreVerifier(CertificateVerifier):
    """Regular chain and hostname verification against the system store."""

    def ssl_context(self) -> ssl.SSLContext:
        return ssl.create_default_context()


class FingerprintVerifier(CertificateVerifier):
    """Accept only the certificate whose SHA-256 digest equals the pin."""

    def __init__(self, fingerprint: str):
        self.fingerprint = parse_fingerprint(fingerprint)

    def check(self, der_certificate: Optional[bytes]) -> None:
        """Raise ``CertificateFingerprintMismatch`` unless the leaf matches."""
        digest = hashlib.sha256(der_certificate or b"").digest()
        if not der_certificate or not hmac.compare_digest(digest, self.fingerprint):
            raise CertificateFingerprintMismatch(self.fingerprint, digest)

    def ssl_context(self) -> ssl.SSLContext:
        context = _PinnedSSLContext(ssl.PROTOCOL_TLS_CLIENT)
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        context.verifier = self
        return context


class _PinnedSSLContext(ssl.SSLContext):
    """SSL context that checks the peer certificate right after the handshake."""

    verifier: FingerprintVerifier

    def wrap_socket(self, *args, **kwargs):
        sock = super().wrap_socket(*args, **kwargs)
        try:
            self.verifier.check(sock.getpeercert(binary_form=True))
        except CertificateFingerprintMismatch:
            sock.close()
            raise
        return sock


def select_verifier(fingerprint: Optional[str]) -> CertificateVerifier:
    """Pick the verification strategy for a request."""
    if fingerprint:
        return FingerprintVerifier(fingerprint)
    return TrustStoreVerifier()


def _build_client(
    fingerprint: Optional[str],
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    verifier = select_verifier(fingerprint)
    return httpx.Client(
        verify=verifier.ssl_context(),
        timeout=REQUEST_TIMEOUT,
        transport=transport,
        follow_redirects=True,
    )


def _send(
    method: str,
    url: str,
    fingerprint: Optional[str],
    transport: Optional[httpx.BaseTransport] = None,
    **kwargs,
) -> httpx.Response:
    logger.debug(f"{method} {url} (pinned: {bool(fingerprint)})")
    if fingerprint and not url.lower().startswith("https://"):
        logger.warning(f"Ignoring certificate fingerprint for {url}: not a TLS connection")
    try:
        with _build_client(fingerprint, transport) as client:
            response = client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
    except CertificateFingerprintMismatch as e:
        e.url = url
        raise
    except httpx.TimeoutException as e:
        raise HttpTimeoutError(f"Request to {url} timed out: {e}", url) from e
    except httpx.HTTPStatusError as e:
        raise HttpStatusError(url, e.response.status_code, e.response.reason_phrase) from e
    except httpx.HTTPError as e:
        raise HttpError(f"Request to {url} failed: {e}", url) from e


def get(
    url: str,
    fingerprint: Optional[str] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> str:
    """Issue a GET request and return the response body.

    Args:
        url: URL to fetch
        fingerprint: SHA256 cert fingerprint if certificate pinning should be used
        transport: Alternative httpx transport
    """
    return _send("GET", url, fingerprint, transport).text


def get_bytes(
    url: str,
    fingerprint: Optional[str] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> bytes:
    """Issue a GET request and return the raw response body, undecoded."""
    return _send("GET", url, fingerprint, transport).content


def post(
    url: str,
    fingerprint: Optional[str] = None,
    payload: str = "",
    transport: Optional[httpx.BaseTransport] = None,
) -> str:
    """Issue a POST request with a JSON payload and return the response body.

    Args:
        url: URL to call
        fingerprint: SHA256 cert fingerprint if certificate pinning should be used
        payload: JSON formatted string sent as request body
        transport: Alternative httpx transport
    """
    return _send(
        "POST",
        url,
        fingerprint,
        transport,
        content=payload.encode(),
        headers={"Content-Type": "application/json; charset=utf-8"},
    ).text
