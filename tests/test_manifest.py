"""Tests for cargo_stage.manifest."""

from __future__ import annotations

from pathlib import Path

import pytest

from cargo_stage.errors import StageError, StageIOError
from cargo_stage.manifest import rewrite_manifest_lines, stage_manifest


class TestRewriteManifestLines:
    def test_rewrites_header_version(self) -> None:
        lines = ['name = "x"\n', 'version = "1.2.3"\n', 'edition = "2021"\n', "[dependencies]\n"]

        result = rewrite_manifest_lines(lines, "0.1.0")

        assert result == [
            'name = "x"\n',
            'version = "0.1.0"\n',
            'edition = "2021"\n',
            "[dependencies]\n",
        ]

    def test_lines_after_header_untouched(self) -> None:
        lines = [
            "[package]\n",
            'name = "x"\n',
            'edition = "2021"\n',
            'version = "1.2.3"\n',
            'foo = { version = "3.4" }\n',
        ]

        result = rewrite_manifest_lines(lines, "0.1.0")

        assert result == lines

    def test_custom_header_size(self) -> None:
        lines = ['version = "1.0.0"\n', 'version = "2.0.0"\n']

        result = rewrite_manifest_lines(lines, "0.1.0", header_lines=1)

        assert result == ['version = "0.1.0"\n', 'version = "2.0.0"\n']

    def test_short_manifest(self) -> None:
        assert rewrite_manifest_lines(['version = "5"'], "0.1.0") == ['version = "0.1.0"']

    def test_empty_manifest(self) -> None:
        assert rewrite_manifest_lines([], "0.1.0") == []

    def test_idempotent(self) -> None:
        lines = ["[package]\n", 'name = "x"\n', 'version = "1.2.3"\n', "\n"]

        once = rewrite_manifest_lines(lines, "0.1.0")
        twice = rewrite_manifest_lines(once, "0.1.0")

        assert once == twice


class TestStageManifest:
    def test_writes_staged_copy(self, cargo_project: Path) -> None:
        source = cargo_project / "Cargo.toml"
        dest = cargo_project / "Cargo.edit"
        original = source.read_text()

        count = stage_manifest(source, dest, "0.1.0")

        assert count == 1
        staged = dest.read_text()
        assert 'version = "0.1.0"' in staged
        assert 'serde = { version = "1.0.1", features = ["derive"] }' in staged
        assert source.read_text() == original

    def test_preserves_crlf(self, tmp_path: Path) -> None:
        source = tmp_path / "Cargo.toml"
        source.write_bytes(b'[package]\r\nversion = "1.0.0"\r\n\r\n[dependencies]\r\n')
        dest = tmp_path / "Cargo.edit"

        stage_manifest(source, dest, "0.1.0")

        assert dest.read_bytes() == b'[package]\r\nversion = "0.1.0"\r\n\r\n[dependencies]\r\n'

    def test_non_utf8_bytes_pass_through(self, tmp_path: Path) -> None:
        source = tmp_path / "Cargo.toml"
        source.write_bytes(b'[package]\nversion = "1.0.0"\n# caf\xe9\n')
        dest = tmp_path / "Cargo.edit"

        stage_manifest(source, dest, "0.1.0")

        assert dest.read_bytes() == b'[package]\nversion = "0.1.0"\n# caf\xe9\n'

    def test_missing_source(self, tmp_path: Path) -> None:
        with pytest.raises(StageIOError, match="Cannot open"):
            stage_manifest(tmp_path / "Cargo.toml", tmp_path / "Cargo.edit", "0.1.0")

    def test_unwritable_dest(self, cargo_project: Path) -> None:
        dest = cargo_project / "missing-dir" / "Cargo.edit"

        with pytest.raises(StageIOError):
            stage_manifest(cargo_project / "Cargo.toml", dest, "0.1.0")

    def test_refuses_to_overwrite_source(self, cargo_project: Path) -> None:
        source = cargo_project / "Cargo.toml"

        with pytest.raises(StageError, match="Refusing"):
            stage_manifest(source, source, "0.1.0")
