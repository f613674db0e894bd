"""Layout and issuance configuration dataclasses."""

import os
from dataclasses import dataclass
from pathlib import Path

ROOT_ENV_VAR = "EASYCERT_ROOT"
DEFAULT_ROOT_DIR = ".cert"
CA_NAME = "ca"

CONFIG_FILE = "openssl.cfg"
INDEX_FILE = "index.txt"
SERIAL_FILE = "serial"

# Artifact suffixes
EXT_CERT = ".crt"
EXT_KEY = ".key"
EXT_REVOK = ".crl"
EXT_REQUEST = ".csr"
EXT_CERT_AND_KEY = ".pem"

MIN_RSA_SIZE = 2048


@dataclass
class EasyCertConfig:
    """Issuance parameters passed to every OpenSSL invocation."""

    rsa_size: int = 2048
    years: int = 1
    ca_years: int = 10
    digest: str = "sha256"
    ca_common_name: str = "EasyCert CA"


@dataclass(frozen=True)
class Layout:
    """On-disk directory structure holding all CA state.

    Attributes:
        root: Base directory
        cert: Certificates
        new_cert: Where `openssl ca` stores issued certs as `<serial>.pem`
        key: Private keys (restrictive permissions)
        revok: Certificate revocation lists
        config: OpenSSL configuration file
        index: OpenSSL database file
        serial: Next certificate serial number
    """

    root: Path
    cert: Path
    new_cert: Path
    key: Path
    revok: Path
    config: Path
    index: Path
    serial: Path

    @classmethod
    def from_root(cls, root: Path) -> "Layout":
        """Derive the full layout from its root directory."""
        root = Path(root).expanduser().absolute()
        return cls(
            root=root,
            cert=root / "certs",
            new_cert=root / "newcerts",
            key=root / "private",
            revok=root / "crl",
            config=root / CONFIG_FILE,
            index=root / INDEX_FILE,
            serial=root / SERIAL_FILE,
        )

    @property
    def directories(self) -> tuple[Path, ...]:
        """Directories in creation order (root first)."""
        return (self.root, self.cert, self.new_cert, self.key, self.revok)


def default_root() -> Path:
    """Return the per-user root, honouring the EASYCERT_ROOT override."""
    override = os.environ.get(ROOT_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / DEFAULT_ROOT_DIR


def validate_rsa_size(size: int) -> int:
    """Validate an RSA key size in bits.

    Raises:
        ValueError: If size is below 2048 or not a multiple of 1024
    """
    if size < MIN_RSA_SIZE:
        raise ValueError(f"key size must be at least {MIN_RSA_SIZE}")
    if size % 1024 != 0:
        raise ValueError("key size must be multiple of 1024")
    return size
