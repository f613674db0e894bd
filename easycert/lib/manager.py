"""Certificate manager dispatching easycert operations to openssl."""

import tempfile
from pathlib import Path

from . import emitter
from .cert_utils import create_cert_and_key_bundle
from .config import CA_NAME, EXT_CERT, EXT_REQUEST, EasyCertConfig, Layout
from .layout import (
    format_alt_names,
    render_openssl_config,
    require_layout,
    setup_layout,
    write_temp_config,
)
from .logging_config import LOGGER
from .models import ArtifactKind, BindingsResult, CertResult, InitResult, RequestResult
from .openssl import OpenSSL
from .paths import (
    list_artifacts,
    resolve_artifact,
    resolve_ca,
    resolve_ca_certificate,
    resolve_target,
)

DAYS_PER_YEAR = 365
COMBINED_FILE_MODE = 0o600

INFO_FIELDS = ("end_date", "hash", "issuer", "name")


def _require_file(path: Path, description: str) -> None:
    if not path.exists():
        raise FileNotFoundError(f"{description} not found: {path}")


def _refuse_existing(path: Path, description: str) -> None:
    if path.exists():
        raise FileExistsError(f"{description} already exists: {path}")


class CertManager:
    """Certificate authority manager over a single layout."""

    def __init__(self, layout: Layout, config: EasyCertConfig, openssl: OpenSSL) -> None:
        """Initialize manager.

        Args:
            layout: Directory structure holding the CA state
            config: Key size, validity and digest settings
            openssl: Invoker for the external openssl executable
        """
        self.layout = layout
        self.config = config
        self.openssl = openssl

    def init_layout(self, hostname: str | None = None) -> InitResult:
        """Create the directory structure; fails if the root already exists."""
        result = setup_layout(self.layout, hostname=hostname, digest=self.config.digest)
        LOGGER.info("Directory structure created in %s", result.root)
        return result

    def build_ca(self, years: int | None = None) -> CertResult:
        """Create the CA private key and self-signed certificate.

        Args:
            years: Validity in years (default: config.ca_years)

        Raises:
            FileNotFoundError: If the layout is not initialized
            FileExistsError: If the CA certificate or key already exists
        """
        require_layout(self.layout)
        paths = resolve_ca(self.layout)
        _refuse_existing(paths.cert, "CA certificate")
        _refuse_existing(paths.key, "CA private key")

        years = years if years is not None else self.config.ca_years
        self.openssl.self_signed_ca(
            key_path=paths.key,
            cert_path=paths.cert,
            rsa_size=self.config.rsa_size,
            days=years * DAYS_PER_YEAR,
            common_name=self.config.ca_common_name,
            config_path=self.layout.config,
        )
        LOGGER.info("CA certificate created: %s", paths.cert)
        return CertResult(cert_path=paths.cert, key_path=paths.key)

    def create_request(self, name: str | None, hosts: list[str] | None = None) -> RequestResult:
        """Generate a private key and certificate request for name.

        When hosts are given, the first one becomes the common name and all of
        them become subject alternative names.

        Raises:
            UsageError: If name is missing
            FileExistsError: If the request or key already exists
        """
        paths = resolve_artifact(self.layout, name)
        require_layout(self.layout)
        _refuse_existing(paths.request, "certificate request")
        _refuse_existing(paths.key, "private key")

        hosts = [h for h in (hosts or []) if h]
        common_name = hosts[0] if hosts else paths.name

        if not hosts:
            self.openssl.new_request(
                key_path=paths.key,
                request_path=paths.request,
                rsa_size=self.config.rsa_size,
                common_name=common_name,
                config_path=self.layout.config,
            )
        else:
            content = render_openssl_config(
                self.layout, common_name, format_alt_names(hosts), self.config.digest
            )
            with tempfile.TemporaryDirectory(prefix="easycert-") as tmp:
                config_path = write_temp_config(Path(tmp) / "openssl.cfg", content)
                self.openssl.new_request(
                    key_path=paths.key,
                    request_path=paths.request,
                    rsa_size=self.config.rsa_size,
                    common_name=common_name,
                    config_path=config_path,
                )

        LOGGER.info("Certificate request created: %s", paths.request)
        return RequestResult(
            key_path=paths.key,
            request_path=paths.request,
            common_name=common_name,
            alt_names=hosts,
        )

    def sign_request(
        self, name: str | None, years: int | None = None, combine: bool = False
    ) -> CertResult:
        """Sign the request for name with the CA.

        Args:
            name: Artifact name of the request
            years: Validity in years (default: config.years)
            combine: Also write certificate and key into a single file

        Raises:
            FileNotFoundError: If the CA certificate or request is missing, or the key
                when combining
            FileExistsError: If the certificate (or combined file) already exists
        """
        paths = resolve_artifact(self.layout, name)
        require_layout(self.layout)
        _require_file(resolve_ca(self.layout).cert, "CA certificate")
        _require_file(paths.request, "certificate request")
        _refuse_existing(paths.cert, "certificate")
        if combine:
            _refuse_existing(paths.combined, "certificate and key file")
            _require_file(paths.key, "private key")

        years = years if years is not None else self.config.years
        self.openssl.sign_request(
            request_path=paths.request,
            cert_path=paths.cert,
            days=years * DAYS_PER_YEAR,
            config_path=self.layout.config,
        )
        LOGGER.info("Certificate signed: %s", paths.cert)

        combined_path = None
        if combine:
            bundle = create_cert_and_key_bundle(paths.cert.read_bytes(), paths.key.read_bytes())
            paths.combined.write_bytes(bundle)
            paths.combined.chmod(COMBINED_FILE_MODE)
            combined_path = paths.combined
            LOGGER.info("Certificate and key written: %s", combined_path)

        return CertResult(cert_path=paths.cert, key_path=paths.key, combined_path=combined_path)

    def check(self, name_or_file: str | None, kind: ArtifactKind) -> str:
        """Verify a certificate against the CA, or check a private key."""
        target = resolve_target(self.layout, name_or_file, kind)
        if kind is ArtifactKind.KEY:
            _require_file(target, "private key")
            return self.openssl.check_key(target)

        ca_cert = resolve_ca(self.layout).cert
        _require_file(target, "certificate")
        _require_file(ca_cert, "CA certificate")
        return self.openssl.check_certificate(target, ca_cert)

    def cat(self, name_or_file: str | None, kind: ArtifactKind) -> str:
        """Return the textual form of a certificate or private key."""
        target = resolve_target(self.layout, name_or_file, kind)
        if kind is ArtifactKind.KEY:
            _require_file(target, "private key")
            return self.openssl.cat_key(target)
        _require_file(target, "certificate")
        return self.openssl.cat_certificate(target)

    def info(
        self, name_or_file: str | None, fields: list[str] | None = None, full: bool = False
    ) -> str:
        """Return information about a certificate.

        Args:
            name_or_file: Certificate name or literal file path
            fields: Subset of INFO_FIELDS, printed in INFO_FIELDS order
            full: Return the full text dump instead of selected fields

        Raises:
            ValueError: If an unknown field is requested
        """
        target = resolve_target(self.layout, name_or_file, ArtifactKind.CERT)
        _require_file(target, "certificate")
        if full:
            return self.openssl.full_text(target)

        fields = list(fields or [])
        unknown = set(fields) - set(INFO_FIELDS)
        if unknown:
            raise ValueError(f"unknown info fields: {', '.join(sorted(unknown))}")

        queries = {
            "end_date": self.openssl.end_date,
            "hash": self.openssl.subject_hash,
            "issuer": self.openssl.issuer,
            "name": self.openssl.subject,
        }
        lines = [queries[field](target) for field in INFO_FIELDS if field in fields]
        return "".join(f"{line}\n" for line in lines)

    def list_certificates(self) -> list[str]:
        """Return the file names of the certificates built."""
        return list_artifacts(self.layout.cert, EXT_CERT)

    def list_requests(self) -> list[str]:
        """Return the file names of the pending certificate requests."""
        return list_artifacts(self.layout.root, EXT_REQUEST)

    def emit_bindings(
        self,
        server_name: str | None,
        output_dir: Path,
        ca_cert: str | None = CA_NAME,
        language: str = "go",
    ) -> BindingsResult:
        """Generate server and client source files for a signed certificate."""
        paths = resolve_artifact(self.layout, server_name)
        ca_cert_path = resolve_ca_certificate(self.layout, ca_cert)
        result = emitter.emit_bindings(
            self.openssl,
            ca_cert_path=ca_cert_path,
            cert_path=paths.cert,
            key_path=paths.key,
            output_dir=output_dir,
            language=language,
        )
        LOGGER.info("Bindings written: %s, %s", result.server_path, result.client_path)
        return result
