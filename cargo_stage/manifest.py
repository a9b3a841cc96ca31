"""Manifest staging.

The version of the package itself lives in the first few lines of
Cargo.toml (right under ``[package]``). Only those lines are eligible,
so dependency tables further down keep their pinned versions.
"""

from __future__ import annotations

from pathlib import Path

from .errors import StageError, StageIOError
from .models import DEFAULT_HEADER_LINES
from .versions import VERSION_FIELD, replace_version_field


def rewrite_manifest_lines(
    lines: list[str],
    placeholder: str,
    header_lines: int = DEFAULT_HEADER_LINES,
) -> list[str]:
    """Replace version fields in the header region of a manifest.

    Args:
        lines: Manifest lines, line endings included.
        placeholder: Version to substitute.
        header_lines: How many leading lines are eligible.

    Returns:
        New list of lines; lines past the header are passed through as is.
    """
    head = [replace_version_field(line, placeholder) for line in lines[:header_lines]]
    return head + lines[header_lines:]


def stage_manifest(
    source: Path,
    dest: Path,
    placeholder: str,
    header_lines: int = DEFAULT_HEADER_LINES,
) -> int:
    """Write a copy of the manifest with its header version normalized.

    Args:
        source: Original manifest, never modified.
        dest: Path of the staged copy.
        placeholder: Version to substitute.
        header_lines: How many leading lines are eligible.

    Returns:
        Number of header lines holding a version field, now the placeholder.

    Raises:
        StageError: If source and dest are the same file.
        StageIOError: If source can't be read or dest can't be written.
    """
    if Path(source).resolve() == Path(dest).resolve():
        raise StageError(f"Refusing to overwrite original manifest {source}")

    # Bytes that aren't UTF-8 are carried through to the staged copy unchanged
    try:
        with open(source, encoding="utf-8", errors="surrogateescape", newline="") as fh:
            lines = fh.readlines()
    except OSError as exc:
        raise StageIOError(f"Cannot open {source}: {exc.strerror}") from exc

    staged = rewrite_manifest_lines(lines, placeholder, header_lines)

    try:
        with open(dest, "w", encoding="utf-8", errors="surrogateescape", newline="") as fh:
            fh.writelines(staged)
    except OSError as exc:
        raise StageIOError(f"Cannot open {dest}: {exc.strerror}") from exc

    return sum(1 for line in lines[:header_lines] if VERSION_FIELD.search(line))
