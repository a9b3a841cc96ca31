"""Lockfile staging.

Cargo.lock is a flat list of ``[[package]]`` blocks:

    [[package]]
    name = "ledoxide"
    version = "2.0.0"
    dependencies = [...]

A block is rewritten only when the marker, the target name and a version
field sit on three consecutive lines. Every other block, and any text
before the first marker, is written back byte-for-byte.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel

from .errors import StageError, StageIOError
from .versions import VERSION_FIELD, replace_version_field

PACKAGE_MARKER = "[[package]]"
_NAME_FIELD = re.compile(r'name = "([^"]*)"')


def _content(line: str) -> str:
    return line.rstrip("\r\n")


class LockBlock(BaseModel):
    """Raw lines of one lockfile block, line endings included.

    The first block of a file may be a preamble (the ``# This file is
    automatically @generated`` header and ``version = 3``), which has no
    package marker and is never a target.
    """

    lines: list[str]

    @property
    def is_package(self) -> bool:
        return bool(self.lines) and _content(self.lines[0]) == PACKAGE_MARKER

    @property
    def name(self) -> str | None:
        """Package name, if it directly follows the marker."""
        if not self.is_package or len(self.lines) < 2:
            return None
        match = _NAME_FIELD.fullmatch(_content(self.lines[1]))
        return match.group(1) if match else None

    @property
    def version(self) -> str | None:
        """Dotted-numeric version, if it directly follows the name."""
        if self.name is None or len(self.lines) < 3:
            return None
        match = VERSION_FIELD.fullmatch(_content(self.lines[2]))
        return match.group(2) if match else None

    def is_target(self, package: str) -> bool:
        return self.name == package and self.version is not None

    def with_version(self, placeholder: str) -> LockBlock:
        """Return a copy with the version line set to placeholder."""
        lines = list(self.lines)
        lines[2] = replace_version_field(lines[2], placeholder)
        return LockBlock(lines=lines)

    def render(self) -> str:
        return "".join(self.lines)


def split_blocks(text: str) -> list[LockBlock]:
    """Split lockfile text into blocks, each starting at a package marker.

    Joining the rendered blocks gives back the original text exactly.
    """
    blocks: list[LockBlock] = []
    current: list[str] = []
    for line in text.splitlines(keepends=True):
        if _content(line) == PACKAGE_MARKER and current:
            blocks.append(LockBlock(lines=current))
            current = []
        current.append(line)
    if current:
        blocks.append(LockBlock(lines=current))
    return blocks


def rewrite_lock_text(text: str, package: str, placeholder: str) -> tuple[str, int]:
    """Normalize the version of every block belonging to package.

    Args:
        text: Whole lockfile contents.
        package: Target package name, compared literally.
        placeholder: Version to substitute.

    Returns:
        Tuple of (new text, number of target blocks found).
    """
    out: list[str] = []
    count = 0
    for block in split_blocks(text):
        if block.is_target(package):
            block = block.with_version(placeholder)
            count += 1
        out.append(block.render())
    return "".join(out), count


def stage_lockfile(source: Path, dest: Path, package: str, placeholder: str) -> int:
    """Write a copy of the lockfile with the target package's version normalized.

    Returns:
        Number of target blocks in the lockfile (zero is fine).

    Raises:
        StageError: If source and dest are the same file.
        StageIOError: If source can't be read or dest can't be written.
    """
    if Path(source).resolve() == Path(dest).resolve():
        raise StageError(f"Refusing to overwrite original lockfile {source}")

    try:
        with open(source, encoding="utf-8", errors="surrogateescape", newline="") as fh:
            text = fh.read()
    except OSError as exc:
        raise StageIOError(f"Cannot open {source}: {exc.strerror}") from exc

    staged, count = rewrite_lock_text(text, package, placeholder)

    try:
        with open(dest, "w", encoding="utf-8", errors="surrogateescape", newline="") as fh:
            fh.write(staged)
    except OSError as exc:
        raise StageIOError(f"Cannot open {dest}: {exc.strerror}") from exc

    return count
