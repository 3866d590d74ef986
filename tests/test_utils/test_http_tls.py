"""Tests for certificate pinning against a real TLS server on loopback."""

import datetime
import ipaddress
import ssl
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from autoinst.errors import CertificateFingerprintMismatch, HttpError
from autoinst.utils import http


BODY = b"#!/bin/sh\n\xff\xfe\x80 not utf-8\n"


def self_signed_certificate(tmp_path):
    """Write a self-signed loopback certificate and key, return the cert and both paths."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "localhost")])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=1))
        .add_extension(
            x509.SubjectAlternativeName([x509.IPAddress(ipaddress.ip_address("127.0.0.1"))]),
            critical=False,
        )
        .sign(key, hashes.SHA256())
    )

    cert_path = tmp_path / "server.crt"
    key_path = tmp_path / "server.key"
    cert_path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
    key_path.write_bytes(key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ))
    return cert, cert_path, key_path


class Handler(BaseHTTPRequestHandler):
    def do_GET(self):
        self.send_response(200)
        self.send_header("Content-Type", "application/octet-stream")
        self.send_header("Content-Length", str(len(BODY)))
        self.end_headers()
        self.wfile.write(BODY)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def tls_server(tmp_path):
    """HTTPS server on 127.0.0.1 yielding its URL and certificate."""
    cert, cert_path, key_path = self_signed_certificate(tmp_path)
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(cert_path, key_path)

    server = HTTPServer(("127.0.0.1", 0), Handler)
    server.socket = context.wrap_socket(server.socket, server_side=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"https://127.0.0.1:{server.server_address[1]}/hook", cert
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


class TestPinnedHandshake:
    """Test pinning through a full TLS handshake."""

    def test_matching_pin(self, tls_server):
        """Test that the pinned self-signed certificate is accepted."""
        url, cert = tls_server
        pin = cert.fingerprint(hashes.SHA256()).hex(":")

        assert http.get_bytes(url, pin) == BODY

    def test_mismatching_pin(self, tls_server):
        """Test that a different pin aborts the connection."""
        url, cert = tls_server
        pin = bytearray(cert.fingerprint(hashes.SHA256()))
        pin[0] ^= 0xFF

        with pytest.raises(CertificateFingerprintMismatch) as exc_info:
            http.get_bytes(url, bytes(pin).hex())

        assert exc_info.value.url == url
        assert exc_info.value.actual == cert.fingerprint(hashes.SHA256())

    def test_no_pin_uses_trust_store(self, tls_server):
        """Test that an unpinned request refuses the self-signed certificate."""
        url, _ = tls_server

        with pytest.raises(HttpError) as exc_info:
            http.get_bytes(url)

        assert not isinstance(exc_info.value, CertificateFingerprintMismatch)
