"""Data models for cargo-stage.

These Pydantic models carry the configuration and the results of the
staging and artifact resolution steps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from .versions import validate_placeholder

DEFAULT_PLACEHOLDER = "0.1.0"
DEFAULT_HEADER_LINES = 3


class StageConfig(BaseModel):
    """Everything the rewriters and the resolver need to know.

    Attributes:
        manifest: Path to the original Cargo.toml.
        lockfile: Path to the original Cargo.lock.
        staged_manifest: Where the staged manifest is written.
        staged_lockfile: Where the staged lockfile is written.
        target_package: Name of the package whose lockfile entries are
            normalized. None means "not known yet"; staging requires it.
        placeholder: Version substituted for every eligible version field.
        header_lines: Number of leading manifest lines eligible for rewrite.
        output_dir: Directory the compiler writes release binaries to.
        artifact_dest: Where the resolved binary is copied.
        features: Cargo features enabled for the build command.
    """

    manifest: Path = Path("Cargo.toml")
    lockfile: Path = Path("Cargo.lock")
    staged_manifest: Path = Path("Cargo.edit")
    staged_lockfile: Path = Path("Cargo.edit.lock")
    target_package: str | None = None
    placeholder: str = DEFAULT_PLACEHOLDER
    header_lines: int = Field(default=DEFAULT_HEADER_LINES, ge=0)
    output_dir: Path = Path("target/release")
    artifact_dest: Path = Path("/app/binary")
    features: list[str] = Field(default_factory=list)

    @field_validator("placeholder")
    @classmethod
    def _check_placeholder(cls, value: str) -> str:
        return validate_placeholder(value)


class StageResult(BaseModel):
    """Outcome of a staging run.

    Attributes:
        staged_manifest: Path of the written manifest copy.
        staged_lockfile: Path of the written lockfile copy.
        manifest_rewrites: Number of header lines whose version was replaced.
        lock_rewrites: Number of target package blocks whose version was replaced.
    """

    staged_manifest: Path
    staged_lockfile: Path
    manifest_rewrites: int
    lock_rewrites: int


class ResolvedArtifact(BaseModel):
    """The binary picked for promotion and how it was found."""

    source: Path
    dest: Path
    strategy: Literal["metadata", "scan"]
