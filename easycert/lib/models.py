"""Artifact and result models for easycert operations."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class ArtifactKind(Enum):
    """Kind of file an informational query targets."""

    CERT = "cert"
    KEY = "key"


@dataclass(frozen=True)
class ArtifactPaths:
    """Paths derived from a logical artifact name."""

    name: str
    cert: Path
    key: Path
    request: Path
    combined: Path


@dataclass
class InitResult:
    """Result from directory layout initialization."""

    root: Path
    config_path: Path
    hostname: str


@dataclass
class RequestResult:
    """Result from certificate request generation."""

    key_path: Path
    request_path: Path
    common_name: str
    alt_names: list[str] = field(default_factory=list)


@dataclass
class CertResult:
    """Result from CA creation or request signing."""

    cert_path: Path
    key_path: Path
    combined_path: Path | None = None


@dataclass
class BindingsResult:
    """Result from language bindings generation."""

    language: str
    server_path: Path
    client_path: Path
    valid_until: str
