"""Tests for paths module."""

from pathlib import Path

import pytest

from easycert.lib.config import Layout
from easycert.lib.errors import UsageError
from easycert.lib.models import ArtifactKind
from easycert.lib.paths import (
    is_literal_path,
    list_artifacts,
    resolve_artifact,
    resolve_ca,
    resolve_ca_certificate,
    resolve_target,
)


class TestResolveArtifact:
    """Tests for resolve_artifact."""

    def test_suffixes_per_kind(self, layout: Layout) -> None:
        """Certificate, key, request and combined files get their fixed suffixes."""
        paths = resolve_artifact(layout, "www")

        assert paths.cert == layout.cert / "www.crt"
        assert paths.key == layout.key / "www.key"
        assert paths.request == layout.root / "www.csr"
        assert paths.combined == layout.key / "www.pem"

    def test_deterministic(self, layout: Layout) -> None:
        """Same name resolves to the same paths every time."""
        assert resolve_artifact(layout, "www") == resolve_artifact(layout, "www")

    def test_ca_uses_reserved_name(self, layout: Layout) -> None:
        paths = resolve_ca(layout)
        assert paths.cert == layout.cert / "ca.crt"
        assert paths.key == layout.key / "ca.key"

    @pytest.mark.parametrize("name", [None, ""])
    def test_missing_name_rejected(self, layout: Layout, name: str | None) -> None:
        with pytest.raises(UsageError, match="missing required"):
            resolve_artifact(layout, name)

    @pytest.mark.parametrize("name", ["a/b", "..", "."])
    def test_path_like_name_rejected(self, layout: Layout, name: str) -> None:
        with pytest.raises(UsageError, match="invalid certificate name"):
            resolve_artifact(layout, name)


class TestResolveTarget:
    """Tests for resolve_target and resolve_ca_certificate."""

    @pytest.mark.parametrize("arg", ["./www.crt", "../x.pem", "/etc/ssl/x.pem"])
    def test_literal_paths_pass_through(self, layout: Layout, arg: str) -> None:
        assert is_literal_path(arg)
        assert resolve_target(layout, arg, ArtifactKind.CERT) == Path(arg)
        assert resolve_target(layout, arg, ArtifactKind.KEY) == Path(arg)

    def test_name_as_certificate(self, layout: Layout) -> None:
        assert resolve_target(layout, "www", ArtifactKind.CERT) == layout.cert / "www.crt"

    def test_name_as_key(self, layout: Layout) -> None:
        assert resolve_target(layout, "www", ArtifactKind.KEY) == layout.key / "www.key"

    def test_missing_target_rejected(self, layout: Layout) -> None:
        with pytest.raises(UsageError, match="NAME or FILENAME"):
            resolve_target(layout, None, ArtifactKind.CERT)

    def test_ca_certificate_by_name_or_file(self, layout: Layout) -> None:
        assert resolve_ca_certificate(layout, "ca") == layout.cert / "ca.crt"
        assert resolve_ca_certificate(layout, "/tmp/root.crt") == Path("/tmp/root.crt")

    def test_ca_certificate_required(self, layout: Layout) -> None:
        with pytest.raises(UsageError, match="CA certificate"):
            resolve_ca_certificate(layout, "")


class TestListArtifacts:
    """Tests for list_artifacts."""

    def test_returns_base_names_only(self, tmp_path: Path) -> None:
        """Listing returns file names, never full paths."""
        for name in ("b.crt", "a.crt", "c.key"):
            (tmp_path / name).write_text("x")

        names = list_artifacts(tmp_path, ".crt")

        assert names == ["a.crt", "b.crt"]
        assert all("/" not in name for name in names)

    def test_missing_directory_lists_nothing(self, tmp_path: Path) -> None:
        assert list_artifacts(tmp_path / "absent", ".crt") == []

    def test_ignores_directories(self, tmp_path: Path) -> None:
        (tmp_path / "dir.csr").mkdir()
        (tmp_path / "www.csr").write_text("x")

        assert list_artifacts(tmp_path, ".csr") == ["www.csr"]
