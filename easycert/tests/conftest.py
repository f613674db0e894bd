"""Test fixtures for easycert tests."""

from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.x509.oid import NameOID

from easycert.lib.config import EasyCertConfig, Layout
from easycert.lib.layout import setup_layout
from easycert.lib.openssl import OpenSSL


def _self_signed(key: RSAPrivateKey, common_name: str) -> x509.Certificate:
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.now(UTC)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + timedelta(days=30))
        .sign(key, hashes.SHA256())
    )


@pytest.fixture
def layout(tmp_path: Path) -> Layout:
    """Return a layout rooted in a not yet existing temporary directory."""
    return Layout.from_root(tmp_path / ".cert")


@pytest.fixture
def initialized_layout(layout: Layout) -> Layout:
    """Return a layout whose directory structure has been created."""
    setup_layout(layout, hostname="testhost")
    return layout


@pytest.fixture
def easycert_config() -> EasyCertConfig:
    """Return test configuration."""
    return EasyCertConfig(rsa_size=2048, years=1, ca_years=10, ca_common_name="Test CA")


@pytest.fixture
def mock_subprocess() -> Generator[MagicMock]:
    """Patch subprocess in the openssl module; commands succeed with empty output."""
    with patch("easycert.lib.openssl.subprocess") as mock:
        mock.run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        yield mock


@pytest.fixture
def openssl(mock_subprocess: MagicMock) -> OpenSSL:
    """Return invoker running against the mocked subprocess module."""
    return OpenSSL("/usr/bin/openssl")


@pytest.fixture
def mock_openssl() -> MagicMock:
    """Return mocked OpenSSL invoker."""
    mock = MagicMock(spec=OpenSSL)
    mock.version.return_value = "OpenSSL 3.0.13 30 Jan 2024"
    mock.end_date.return_value = "Nov 17 12:00:00 2026 GMT"
    return mock


@pytest.fixture
def rsa_key() -> RSAPrivateKey:
    """Generate RSA private key."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def key_pem(rsa_key: RSAPrivateKey) -> bytes:
    """Return the private key as unencrypted PEM."""
    return rsa_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture
def cert_pem(rsa_key: RSAPrivateKey) -> bytes:
    """Return a self-signed certificate as PEM."""
    return _self_signed(rsa_key, "www").public_bytes(serialization.Encoding.PEM)


@pytest.fixture
def pem_files_on_disk(initialized_layout: Layout, cert_pem: bytes, key_pem: bytes) -> Layout:
    """Write CA and server certificate/key into the layout.

    Creates:
        certs/ca.crt, certs/www.crt, private/ca.key, private/www.key
    """
    for name in ("ca", "www"):
        (initialized_layout.cert / f"{name}.crt").write_bytes(cert_pem)
        (initialized_layout.key / f"{name}.key").write_bytes(key_pem)
    return initialized_layout
