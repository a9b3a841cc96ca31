"""Artifact resolution.

The name of the release binary isn't known up front: it comes from the
package's declared target, which may differ from the package name. So
resolution is two-tier:

1. Ask ``cargo metadata`` for the primary target name and copy the file
   of that name out of the output directory.
2. If anything about step 1 fails, scan the output directory for
   executable files and copy the first one.

Each step is tried once; there are no retries.
"""

from __future__ import annotations

import json
import os
import shutil
import stat
import subprocess
from pathlib import Path
from typing import Protocol

from .errors import ArtifactNotFoundError, MetadataError, StageIOError
from .models import ResolvedArtifact
from .shell import capture


class TargetNameSource(Protocol):
    """Anything that can name the binary the build produced."""

    def resolve_primary_target_name(self) -> str:
        """Return the target name, or raise MetadataError."""
        ...


class CargoMetadataSource:
    """Reads the primary target name from ``cargo metadata``."""

    def __init__(self, manifest: Path | None = None) -> None:
        self.manifest = manifest

    def resolve_primary_target_name(self) -> str:
        args = ["cargo", "metadata", "--no-deps", "--format-version", "1"]
        if self.manifest is not None:
            args.extend(["--manifest-path", str(self.manifest)])

        try:
            output = capture(*args)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise MetadataError(f"cargo metadata failed: {exc}") from exc

        try:
            packages = json.loads(output)["packages"]
        except (json.JSONDecodeError, KeyError, TypeError) as exc:
            raise MetadataError(f"Unreadable cargo metadata: {exc}") from exc

        return primary_target_name(packages)


def primary_target_name(packages: list[dict]) -> str:
    """Pick the first binary target of the first package.

    Raises:
        MetadataError: If there are no packages, the first has no binary,
            or the metadata isn't shaped as expected.
    """
    if not isinstance(packages, list) or not packages:
        raise MetadataError("cargo metadata reported no packages")
    package = packages[0]
    if not isinstance(package, dict):
        raise MetadataError(f"Unexpected package entry in cargo metadata: {package!r}")
    for target in package.get("targets") or []:
        if not isinstance(target, dict) or "bin" not in (target.get("kind") or []):
            continue
        name = target.get("name")
        if not isinstance(name, str) or not name:
            raise MetadataError(f"Binary target without a name in {package.get('name')!r}")
        return name
    raise MetadataError(f"Package {package.get('name')!r} has no binary target")


def scan_executables(directory: Path) -> list[Path]:
    """List regular files with an executable bit, not recursing, sorted by name."""
    found: list[Path] = []
    for entry in os.scandir(directory):
        if not entry.is_file(follow_symlinks=False):
            continue
        if entry.stat(follow_symlinks=False).st_mode & (
            stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH
        ):
            found.append(Path(entry.path))
    return sorted(found, key=lambda p: p.name)


def _copy(source: Path, dest: Path) -> None:
    if dest.is_dir():
        raise StageIOError(f"Destination {dest} is a directory")
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, dest)


def resolve_artifact(
    output_dir: Path,
    dest: Path,
    source: TargetNameSource,
) -> ResolvedArtifact:
    """Copy the build's binary from output_dir to dest.

    Args:
        output_dir: Directory holding the compiled artifacts.
        dest: Fixed destination path for the binary.
        source: Where to get the primary target name from.

    Returns:
        The chosen file, its destination and the strategy that found it.

    Raises:
        ArtifactNotFoundError: If the metadata lookup fails and the scan
            finds no executable file.
        StageIOError: If dest is a directory or the copy fails.
    """
    output_dir = Path(output_dir)
    dest = Path(dest)

    try:
        name = source.resolve_primary_target_name()
        candidate = output_dir / name
        if not candidate.is_file():
            raise MetadataError(f"{candidate} does not exist")
        _copy(candidate, dest)
    except Exception as exc:
        print(f"  Metadata lookup failed ({exc}); scanning {output_dir}")
    else:
        print(f"  {candidate} → {dest} (from cargo metadata)")
        return ResolvedArtifact(source=candidate, dest=dest, strategy="metadata")

    try:
        executables = scan_executables(output_dir)
    except OSError as exc:
        raise ArtifactNotFoundError(f"Cannot scan {output_dir}: {exc}") from exc
    if not executables:
        raise ArtifactNotFoundError(f"No executable files in {output_dir}")
    if len(executables) > 1:
        names = ", ".join(p.name for p in executables)
        print(f"  Multiple executables found ({names}); using the first")

    chosen = executables[0]
    try:
        _copy(chosen, dest)
    except OSError as exc:
        raise StageIOError(f"Cannot copy {chosen} to {dest}: {exc}") from exc
    print(f"  {chosen} → {dest} (from directory scan)")
    return ResolvedArtifact(source=chosen, dest=dest, strategy="scan")
