"""Source file generation embedding certificate and key PEM material."""

import platform
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from string import Template

from .cert_utils import read_certificate_pem, read_private_key_pem
from .logging_config import LOGGER
from .models import BindingsResult
from .openssl import OpenSSL
from .templates import GO_CLIENT, GO_SERVER, PYTHON_CLIENT, PYTHON_SERVER

# Go's time.RFC822 layout
RFC822_FORMAT = "%d %b %y %H:%M %Z"

_PRINTABLE = range(0x20, 0x7F)


def escape_line(data: bytes) -> str:
    """Escape bytes for a double-quoted Go string or Python bytes literal.

    Printable ASCII is kept as is, except backslash and double quote.
    """
    parts = []
    for byte in data:
        if byte == 0x0A:
            parts.append("\\n")
        elif byte in (0x22, 0x5C):
            parts.append("\\" + chr(byte))
        elif byte in _PRINTABLE:
            parts.append(chr(byte))
        else:
            parts.append(f"\\x{byte:02x}")
    return "".join(parts)


def escape_bytes(data: bytes) -> list[str]:
    """Escape data one line at a time, keeping each line's trailing newline."""
    return [escape_line(line) for line in data.splitlines(keepends=True)]


def format_go_literal(data: bytes) -> str:
    """Render data as a concatenated Go string literal."""
    lines = escape_bytes(data)
    if not lines:
        return '""'
    body = " +\n".join(f'\t"{line}"' for line in lines)
    return f'"" +\n{body}'


def format_python_literal(data: bytes) -> str:
    """Render data as a parenthesized Python bytes literal."""
    lines = escape_bytes(data)
    if not lines:
        return 'b""'
    body = "\n".join(f'    b"{line}"' for line in lines)
    return f"(\n{body}\n)"


@dataclass(frozen=True)
class BindingLanguage:
    """Output file names, templates and literal formatter for one language."""

    server_file: str
    client_file: str
    server_template: Template
    client_template: Template
    format_literal: Callable[[bytes], str]


LANGUAGES: dict[str, BindingLanguage] = {
    "go": BindingLanguage(
        server_file="z-cert_srv.go",
        client_file="z-cert_cl.go",
        server_template=GO_SERVER,
        client_template=GO_CLIENT,
        format_literal=format_go_literal,
    ),
    "python": BindingLanguage(
        server_file="z_cert_srv.py",
        client_file="z_cert_cl.py",
        server_template=PYTHON_SERVER,
        client_template=PYTHON_CLIENT,
        format_literal=format_python_literal,
    ),
}


def emit_bindings(
    openssl: OpenSSL,
    ca_cert_path: Path,
    cert_path: Path,
    key_path: Path,
    output_dir: Path,
    language: str = "go",
    now: datetime | None = None,
) -> BindingsResult:
    """Write server and client source files embedding the PEM material.

    Args:
        openssl: Invoker used for the version string and expiry date
        ca_cert_path: CA certificate trusted by both sides
        cert_path: Server certificate
        key_path: Server private key
        output_dir: Directory receiving the generated files
        language: Key of LANGUAGES
        now: Generation timestamp (default: current local time)

    Returns:
        BindingsResult with both output paths

    Raises:
        ValueError: If language is unknown or an input is not valid PEM
        FileExistsError: If either output file already exists
        FileNotFoundError: If an input file is missing
    """
    if language not in LANGUAGES:
        raise ValueError(f"unsupported language: {language}")
    binding = LANGUAGES[language]

    server_path = output_dir / binding.server_file
    client_path = output_dir / binding.client_file
    for path in (server_path, client_path):
        if path.exists():
            raise FileExistsError(f"file already exists: {path}")

    ca_cert_pem = read_certificate_pem(ca_cert_path)
    cert_pem = read_certificate_pem(cert_path)
    key_pem = read_private_key_pem(key_path)

    if now is None:
        now = datetime.now().astimezone()
    valid_until = openssl.end_date(cert_path)

    data = {
        "system": platform.system().lower(),
        "arch": platform.machine().lower(),
        "version": openssl.version(),
        "date": now.strftime(RFC822_FORMAT).strip(),
        "valid_until": valid_until,
        "ca_cert": binding.format_literal(ca_cert_pem),
        "cert": binding.format_literal(cert_pem),
        "key": binding.format_literal(key_pem),
    }

    output_dir.mkdir(parents=True, exist_ok=True)
    server_path.write_text(binding.server_template.substitute(data))
    LOGGER.debug("Wrote %s", server_path)
    client_path.write_text(binding.client_template.substitute(data))
    LOGGER.debug("Wrote %s", client_path)

    return BindingsResult(
        language=language,
        server_path=server_path,
        client_path=client_path,
        valid_until=valid_until,
    )
