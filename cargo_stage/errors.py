"""Exceptions raised by cargo-stage.

Library functions raise these; the pipeline wrappers turn them into a
non-zero exit via ``shell.fatal``.
"""

from __future__ import annotations


class StageError(Exception):
    """Base class for all cargo-stage failures."""


class StageIOError(StageError):
    """An input could not be read or an output could not be written."""


class MetadataError(StageError):
    """The build metadata lookup failed.

    Always recovered locally by falling back to a directory scan.
    """


class ArtifactNotFoundError(StageError):
    """Neither the metadata lookup nor the directory scan produced a binary."""
