"""PEM helpers for validating and bundling artifacts produced by openssl."""

from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey


def deserialize_private_key(pem_data: bytes) -> RSAPrivateKey:
    """Deserialize unencrypted private key from PEM bytes."""
    key = serialization.load_pem_private_key(pem_data, password=None)
    if not isinstance(key, RSAPrivateKey):
        raise ValueError("expected RSA private key")
    return key


def deserialize_certificate(pem_data: bytes) -> x509.Certificate:
    """Deserialize certificate from PEM bytes."""
    return x509.load_pem_x509_certificate(pem_data)


def read_certificate_pem(path: Path) -> bytes:
    """Read a certificate file, checking it holds a well-formed PEM certificate.

    Raises:
        FileNotFoundError: If path does not exist
        ValueError: If the content is not a PEM certificate
    """
    if not path.exists():
        raise FileNotFoundError(f"certificate not found: {path}")
    pem_data = path.read_bytes()
    try:
        deserialize_certificate(pem_data)
    except ValueError as e:
        raise ValueError(f"invalid PEM certificate {path}: {e}") from e
    return pem_data


def read_private_key_pem(path: Path) -> bytes:
    """Read a key file, checking it holds an unencrypted PEM RSA private key.

    Raises:
        FileNotFoundError: If path does not exist
        ValueError: If the content is not an unencrypted RSA private key
    """
    if not path.exists():
        raise FileNotFoundError(f"private key not found: {path}")
    pem_data = path.read_bytes()
    try:
        deserialize_private_key(pem_data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid PEM private key {path}: {e}") from e
    return pem_data


def create_cert_and_key_bundle(cert_pem: bytes, key_pem: bytes) -> bytes:
    """Concatenate certificate and private key for servers needing one file."""
    if not cert_pem.endswith(b"\n"):
        cert_pem += b"\n"
    return cert_pem + key_pem
