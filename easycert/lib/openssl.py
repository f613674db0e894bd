"""Invoker for the external openssl executable."""

import shutil
import subprocess
from pathlib import Path

from .errors import OpenSSLError, OpenSSLNotFoundError
from .logging_config import LOGGER

KEY_FILE_MODE = 0o400


def _subject(common_name: str) -> str:
    """Build a one-component `-subj` value, escaping separators."""
    return "/CN=" + common_name.replace("\\", "\\\\").replace("/", "\\/")


def _strip_field(output: str, prefix: str) -> str:
    """Drop a `field=` prefix from single-line openssl output."""
    output = output.strip()
    if output.startswith(prefix):
        return output[len(prefix) :].strip()
    return output


class OpenSSL:
    """Runs openssl commands; every failure is fatal to the caller."""

    def __init__(self, path: str, digest: str = "sha256") -> None:
        """Initialize invoker.

        Args:
            path: Absolute path of the openssl executable
            digest: Message digest used when creating requests and certificates
        """
        self.path = path
        self.digest = digest

    @classmethod
    def locate(cls, digest: str = "sha256") -> "OpenSSL":
        """Find openssl on PATH.

        Raises:
            OpenSSLNotFoundError: If openssl is not installed
        """
        path = shutil.which("openssl")
        if path is None:
            raise OpenSSLNotFoundError("OpenSSL is not installed")
        return cls(path, digest=digest)

    def run(self, *args: str) -> str:
        """Run openssl with args and return its standard output.

        Raises:
            OpenSSLError: If the process exits with a non-zero status
        """
        argv = [self.path, *args]
        LOGGER.debug("Running %s", " ".join(argv))

        completed = subprocess.run(argv, capture_output=True, text=True, check=False)
        if completed.returncode != 0:
            raise OpenSSLError(argv, completed.returncode, completed.stderr)
        return completed.stdout

    def version(self) -> str:
        """Return the `openssl version` string."""
        return self.run("version").strip()

    def new_request(
        self,
        key_path: Path,
        request_path: Path,
        rsa_size: int,
        common_name: str,
        config_path: Path,
    ) -> None:
        """Generate an unencrypted RSA key and a certificate request for it."""
        self.run(
            "req",
            "-config", str(config_path),
            "-new",
            "-nodes",
            "-newkey", f"rsa:{rsa_size}",
            f"-{self.digest}",
            "-subj", _subject(common_name),
            "-keyout", str(key_path),
            "-out", str(request_path),
        )
        key_path.chmod(KEY_FILE_MODE)

    def self_signed_ca(
        self,
        key_path: Path,
        cert_path: Path,
        rsa_size: int,
        days: int,
        common_name: str,
        config_path: Path,
    ) -> None:
        """Generate the CA key and its self-signed certificate."""
        self.run(
            "req",
            "-config", str(config_path),
            "-new",
            "-x509",
            "-nodes",
            "-newkey", f"rsa:{rsa_size}",
            f"-{self.digest}",
            "-days", str(days),
            "-extensions", "v3_ca",
            "-subj", _subject(common_name),
            "-keyout", str(key_path),
            "-out", str(cert_path),
        )
        key_path.chmod(KEY_FILE_MODE)

    def sign_request(
        self, request_path: Path, cert_path: Path, days: int, config_path: Path
    ) -> None:
        """Sign a request with the CA configured in config_path."""
        self.run(
            "ca",
            "-config", str(config_path),
            "-batch",
            "-notext",
            "-md", self.digest,
            "-days", str(days),
            "-extensions", "server_cert",
            "-in", str(request_path),
            "-out", str(cert_path),
        )

    def _x509(self, cert_path: Path, *options: str) -> str:
        return self.run("x509", "-in", str(cert_path), "-noout", *options)

    def end_date(self, cert_path: Path) -> str:
        """Return the date until the certificate is valid."""
        return _strip_field(self._x509(cert_path, "-enddate"), "notAfter=")

    def subject_hash(self, cert_path: Path) -> str:
        """Return the subject hash value of the certificate."""
        return self._x509(cert_path, "-hash").strip()

    def issuer(self, cert_path: Path) -> str:
        """Return the issuer of the certificate."""
        return _strip_field(self._x509(cert_path, "-issuer"), "issuer=")

    def subject(self, cert_path: Path) -> str:
        """Return the subject of the certificate."""
        return _strip_field(self._x509(cert_path, "-subject"), "subject=")

    def full_text(self, cert_path: Path) -> str:
        """Return extensive information about the certificate."""
        return self._x509(cert_path, "-text")

    def cat_certificate(self, cert_path: Path) -> str:
        """Return the certificate in text and PEM form."""
        return self.run("x509", "-in", str(cert_path), "-text")

    def cat_key(self, key_path: Path) -> str:
        """Return the private key components as text."""
        return self.run("rsa", "-in", str(key_path), "-text", "-noout")

    def check_certificate(self, cert_path: Path, ca_cert_path: Path) -> str:
        """Verify the certificate chains up to the CA certificate."""
        return self.run("verify", "-CAfile", str(ca_cert_path), str(cert_path)).strip()

    def check_key(self, key_path: Path) -> str:
        """Check the consistency of an RSA private key."""
        return self.run("rsa", "-in", str(key_path), "-check", "-noout").strip()
