"""Version field matching.

Only dotted-numeric versions ("1.2.3", "10.0") are recognized. Anything
else (pre-releases, build metadata, non-literal values) is left alone.
"""

from __future__ import annotations

import re

import semver

VERSION_FIELD = re.compile(r'(version = ")([0-9.]+)(")')
_DOTTED_NUMERIC = re.compile(r"[0-9.]+")


def is_dotted_numeric(value: str) -> bool:
    """Return True if value consists only of digits and dots."""
    return _DOTTED_NUMERIC.fullmatch(value) is not None


def replace_version_field(line: str, placeholder: str) -> str:
    """Replace the value of the first version field in a line.

    The surrounding text, including the line ending, is kept as is.

    Examples:
        'version = "1.2.3"\\n' → 'version = "0.1.0"\\n'
        'name = "x"\\n' → 'name = "x"\\n'
    """
    return VERSION_FIELD.sub(
        lambda m: f"{m.group(1)}{placeholder}{m.group(3)}", line, count=1
    )


def validate_placeholder(value: str) -> str:
    """Check that a placeholder can stand in for a real version.

    It must be dotted-numeric, so staging an already staged file changes
    nothing, and a valid semantic version, since cargo rejects anything else.

    Raises:
        ValueError: If the placeholder fails either check.
    """
    if not is_dotted_numeric(value):
        raise ValueError(f"placeholder must be dotted-numeric, got {value!r}")
    if not semver.Version.is_valid(value):
        raise ValueError(f"placeholder must be a valid semantic version, got {value!r}")
    return value
