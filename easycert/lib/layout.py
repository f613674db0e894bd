"""Directory structure setup and OpenSSL configuration rendering."""

import ipaddress
import socket
from pathlib import Path

from .config import CA_NAME, EXT_REVOK, Layout
from .logging_config import LOGGER
from .models import InitResult
from .templates import OPENSSL_CONFIG

DIR_MODE = 0o755
KEY_DIR_MODE = 0o700
CONFIG_MODE = 0o600
SERIAL_SEED = "01\n"
LOOPBACK_ALT_NAME = "IP.1 = 127.0.0.1"


def format_alt_names(hosts: list[str]) -> str:
    """Render subjectAltName entries, numbering DNS and IP entries separately."""
    lines = []
    dns_count = ip_count = 0
    for host in hosts:
        try:
            ipaddress.ip_address(host)
        except ValueError:
            dns_count += 1
            lines.append(f"DNS.{dns_count} = {host}")
        else:
            ip_count += 1
            lines.append(f"IP.{ip_count} = {host}")
    return "\n".join(lines)


def render_openssl_config(
    layout: Layout, host_name: str, alt_names: str, digest: str = "sha256"
) -> str:
    """Render the OpenSSL configuration template for a layout."""
    return OPENSSL_CONFIG.substitute(
        root_dir=layout.root.as_posix(),
        crl_file=(layout.revok / f"{CA_NAME}{EXT_REVOK}").as_posix(),
        host_name=host_name,
        alt_names=alt_names,
        digest=digest,
    )


def setup_layout(
    layout: Layout, hostname: str | None = None, digest: str = "sha256"
) -> InitResult:
    """Create the directory structure, bookkeeping files and OpenSSL config.

    Nothing is rolled back on failure; a partially created root is left behind.

    Args:
        layout: Layout to create
        hostname: Host name for the default subject (default: local hostname)
        digest: Message digest written into the configuration

    Returns:
        InitResult with the root and configuration paths

    Raises:
        FileExistsError: If the root directory already exists
    """
    if layout.root.exists():
        raise FileExistsError(f"directory structure exists: {layout.root}")

    for directory in layout.directories:
        directory.mkdir(mode=DIR_MODE)
        LOGGER.debug("Created %s", directory)
    layout.key.chmod(KEY_DIR_MODE)

    layout.index.touch()
    layout.serial.write_text(SERIAL_SEED)

    if hostname is None:
        hostname = socket.gethostname()
    if not hostname:
        raise OSError(
            "could not get hostname; you may want to fix your /etc/hosts and/or DNS setup"
        )

    alt_names = f"DNS.1 = {hostname}\n{LOOPBACK_ALT_NAME}"
    layout.config.write_text(render_openssl_config(layout, hostname, alt_names, digest))
    layout.config.chmod(CONFIG_MODE)

    return InitResult(root=layout.root, config_path=layout.config, hostname=hostname)


def require_layout(layout: Layout) -> None:
    """Ensure the layout was initialized before issuing certificates.

    Raises:
        FileNotFoundError: If the root or its configuration file is missing
    """
    if not layout.root.is_dir():
        raise FileNotFoundError(f"directory structure not found: {layout.root} (run --new first)")
    if not layout.config.is_file():
        raise FileNotFoundError(f"OpenSSL configuration not found: {layout.config}")


def write_temp_config(path: Path, content: str) -> Path:
    """Write a per-request configuration readable only by the owner."""
    path.write_text(content)
    path.chmod(CONFIG_MODE)
    return path
