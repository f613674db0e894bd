"""End-to-end tests against the installed openssl executable."""

import shutil
import stat
from pathlib import Path

import pytest
from cryptography import x509

from easycert.lib.cert_utils import deserialize_certificate
from easycert.lib.config import EasyCertConfig, Layout
from easycert.lib.manager import CertManager
from easycert.lib.models import ArtifactKind
from easycert.lib.openssl import OpenSSL

pytestmark = pytest.mark.skipif(shutil.which("openssl") is None, reason="openssl not installed")


@pytest.fixture
def real_manager(layout: Layout, easycert_config: EasyCertConfig) -> CertManager:
    """Return manager with an initialized layout and a CA built by openssl."""
    manager = CertManager(layout, easycert_config, OpenSSL.locate())
    manager.init_layout("testhost")
    manager.build_ca()
    return manager


def test_ca_is_self_signed(real_manager: CertManager) -> None:
    layout = real_manager.layout
    ca_cert = deserialize_certificate((layout.cert / "ca.crt").read_bytes())

    ca_cert.verify_directly_issued_by(ca_cert)
    bc = ca_cert.extensions.get_extension_for_class(x509.BasicConstraints).value
    assert bc.ca is True
    assert stat.S_IMODE((layout.key / "ca.key").stat().st_mode) == 0o400


def test_request_sign_and_query(real_manager: CertManager, tmp_path: Path) -> None:
    """Request with alternate names, sign it, then query and emit bindings."""
    layout = real_manager.layout
    real_manager.create_request("www", hosts=["example.org", "127.0.0.1"])
    result = real_manager.sign_request("www", combine=True)

    ca_cert = deserialize_certificate((layout.cert / "ca.crt").read_bytes())
    cert = deserialize_certificate(result.cert_path.read_bytes())
    cert.verify_directly_issued_by(ca_cert)

    san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    assert san.get_values_for_type(x509.DNSName) == ["example.org"]
    assert [str(ip) for ip in san.get_values_for_type(x509.IPAddress)] == ["127.0.0.1"]

    assert real_manager.list_certificates() == ["ca.crt", "www.crt"]
    assert real_manager.list_requests() == ["www.csr"]
    assert list(layout.new_cert.glob("*.pem"))

    assert "OK" in real_manager.check("www", ArtifactKind.CERT)
    real_manager.check("www", ArtifactKind.KEY)
    assert "example.org" in real_manager.info("www", fields=["name"])

    bindings = real_manager.emit_bindings("www", output_dir=tmp_path / "gen")
    assert bindings.valid_until in bindings.server_path.read_text()
