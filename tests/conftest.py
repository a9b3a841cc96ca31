"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from cargo_stage.models import StageConfig

MANIFEST = """\
[package]
name = "ledoxide"
version = "2.0.0"
edition = "2021"

[dependencies]
serde = { version = "1.0.1", features = ["derive"] }
"""

LOCKFILE = """\
# This file is automatically @generated by Cargo.
# It is not intended for manual editing.
version = 3

[[package]]
name = "ledoxide"
version = "2.0.0"
dependencies = [
 "other",
]

[[package]]
name = "other"
version = "9.9.9"
source = "registry+https://github.com/rust-lang/crates.io-index"
"""


@pytest.fixture
def cargo_project(tmp_path: Path) -> Path:
    """Create a directory holding a Cargo.toml and Cargo.lock."""
    (tmp_path / "Cargo.toml").write_text(MANIFEST)
    (tmp_path / "Cargo.lock").write_text(LOCKFILE)
    return tmp_path


@pytest.fixture
def stage_config(cargo_project: Path) -> StageConfig:
    """Config pointing at the temporary project."""
    return StageConfig(
        manifest=cargo_project / "Cargo.toml",
        lockfile=cargo_project / "Cargo.lock",
        staged_manifest=cargo_project / "Cargo.edit",
        staged_lockfile=cargo_project / "Cargo.edit.lock",
        target_package="ledoxide",
        output_dir=cargo_project / "target" / "release",
        artifact_dest=cargo_project / "app" / "binary",
    )


@pytest.fixture
def make_executable():
    """Return a helper that writes a file with the executable bits set."""

    def _make(path: Path, content: bytes = b"\x7fELF") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        path.chmod(0o755)
        return path

    return _make
