"""Path resolution for named artifacts inside the layout."""

import os
from pathlib import Path

from .config import (
    CA_NAME,
    EXT_CERT,
    EXT_CERT_AND_KEY,
    EXT_KEY,
    EXT_REQUEST,
    Layout,
)
from .errors import UsageError
from .models import ArtifactKind, ArtifactPaths


def is_literal_path(name_or_file: str) -> bool:
    """Return True if the argument names a file rather than a layout artifact.

    Arguments starting with '.' or the path separator are taken verbatim.
    """
    return name_or_file.startswith((".", os.sep))


def resolve_artifact(layout: Layout, name: str | None) -> ArtifactPaths:
    """Map a logical name to its certificate, key, request and combined paths.

    Raises:
        UsageError: If name is missing or contains a path separator
    """
    if not name:
        raise UsageError("missing required certificate name")
    if os.sep in name or name in (".", ".."):
        raise UsageError(f"invalid certificate name: {name!r}")

    return ArtifactPaths(
        name=name,
        cert=layout.cert / f"{name}{EXT_CERT}",
        key=layout.key / f"{name}{EXT_KEY}",
        request=layout.root / f"{name}{EXT_REQUEST}",
        combined=layout.key / f"{name}{EXT_CERT_AND_KEY}",
    )


def resolve_ca(layout: Layout) -> ArtifactPaths:
    """Return the paths of the CA artifacts."""
    return resolve_artifact(layout, CA_NAME)


def resolve_target(layout: Layout, name_or_file: str | None, kind: ArtifactKind) -> Path:
    """Resolve a CLI argument to the file an informational query reads.

    Args:
        layout: Layout to resolve names against
        name_or_file: Artifact name, or a literal path starting with '.' or '/'
        kind: Whether the name refers to a certificate or a key

    Raises:
        UsageError: If name_or_file is missing
    """
    if not name_or_file:
        raise UsageError("missing required NAME or FILENAME argument")
    if is_literal_path(name_or_file):
        return Path(name_or_file)

    paths = resolve_artifact(layout, name_or_file)
    if kind is ArtifactKind.KEY:
        return paths.key
    return paths.cert


def resolve_ca_certificate(layout: Layout, name_or_file: str | None) -> Path:
    """Resolve the CA certificate used to build language bindings."""
    if not name_or_file:
        raise UsageError("missing required CA certificate")
    return resolve_target(layout, name_or_file, ArtifactKind.CERT)


def list_artifacts(directory: Path, suffix: str) -> list[str]:
    """Return sorted base names of the files in directory ending with suffix."""
    if not directory.is_dir():
        return []
    return sorted(p.name for p in directory.glob(f"*{suffix}") if p.is_file())
