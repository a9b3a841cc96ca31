"""Cargo.toml reading and configuration loading.

Uses tomlkit to read the manifest. Settings come from three layers, later
ones winning:

1. Defaults on StageConfig
2. An optional ``[package.metadata.cargo-stage]`` table in Cargo.toml
3. Explicit overrides (command line flags)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit
from pydantic import ValidationError
from tomlkit.exceptions import TOMLKitError

from .errors import StageError
from .models import StageConfig

METADATA_TABLE = "cargo-stage"

# Cargo.toml keys use kebab-case
SETTING_KEYS = {
    "lockfile": "lockfile",
    "staged-manifest": "staged_manifest",
    "staged-lockfile": "staged_lockfile",
    "target-package": "target_package",
    "placeholder": "placeholder",
    "header-lines": "header_lines",
    "output-dir": "output_dir",
    "artifact-dest": "artifact_dest",
    "features": "features",
}

PATH_FIELDS = (
    "manifest",
    "lockfile",
    "staged_manifest",
    "staged_lockfile",
    "output_dir",
    "artifact_dest",
)


def load_manifest(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a Cargo.toml file.

    Raises:
        StageError: If the file can't be read or is not valid TOML.
    """
    try:
        return tomlkit.parse(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, TOMLKitError) as exc:
        raise StageError(f"Cannot parse {path}: {exc}") from exc


def get_package_name(doc: tomlkit.TOMLDocument) -> str | None:
    """Extract [package].name, or None for virtual manifests."""
    name = doc.get("package", {}).get("name")
    return str(name) if name is not None else None


def get_stage_settings(doc: tomlkit.TOMLDocument) -> dict[str, Any]:
    """Read [package.metadata.cargo-stage] as StageConfig field values.

    Raises:
        StageError: If the table has keys cargo-stage doesn't know.
    """
    table = doc.get("package", {}).get("metadata", {}).get(METADATA_TABLE, {})
    unknown = sorted(set(table) - set(SETTING_KEYS))
    if unknown:
        raise StageError(
            f"Unknown keys in [package.metadata.{METADATA_TABLE}]: {', '.join(unknown)}"
        )
    return {SETTING_KEYS[key]: tomlkit.item(value).unwrap() for key, value in table.items()}


def load_config(root: Path, *, strict: bool = True, **overrides: Any) -> StageConfig:
    """Build the configuration for a run rooted at root.

    Overrides set to None are ignored. Relative paths are resolved against
    root. A missing manifest is not an error here, since artifact resolution
    doesn't need one; staging fails later when it can't open it. With
    strict=False an unreadable manifest or settings table is reported and
    skipped instead of raising.

    Raises:
        StageError: If the manifest can't be parsed or a value is invalid.
    """
    root = Path(root)
    explicit = {key: value for key, value in overrides.items() if value is not None}
    manifest = root / explicit.get("manifest", StageConfig.model_fields["manifest"].default)

    values: dict[str, Any] = {}
    if manifest.is_file():
        try:
            doc = load_manifest(manifest)
            package_name = get_package_name(doc)
            if package_name is not None:
                values["target_package"] = package_name
            values.update(get_stage_settings(doc))
        except StageError as exc:
            if strict:
                raise
            print(f"  Ignoring settings from {manifest}: {exc}")
            values = {}
    values.update(explicit)

    try:
        config = StageConfig(**values)
    except ValidationError as exc:
        raise StageError(f"Invalid configuration:\n{exc}") from exc

    return config.model_copy(
        update={field: root / getattr(config, field) for field in PATH_FIELDS}
    )
