"""CLI entry point for cargo-stage."""

from __future__ import annotations

import argparse
from importlib.metadata import version as pkg_version
from pathlib import Path

from cargo_stage.errors import StageError
from cargo_stage.models import StageConfig
from cargo_stage.pipeline import run_build, run_resolve, run_stage
from cargo_stage.shell import fatal
from cargo_stage.toml import load_config

__version__ = pkg_version("cargo-stage")

# argparse dest → StageConfig field
OVERRIDES = (
    "manifest",
    "lockfile",
    "staged_manifest",
    "staged_lockfile",
    "target_package",
    "placeholder",
    "output_dir",
    "artifact_dest",
    "features",
)


def _load(args: argparse.Namespace, strict: bool = True) -> StageConfig:
    """Build the run configuration from the manifest and the parsed flags."""
    overrides = {name: getattr(args, name, None) for name in OVERRIDES}
    try:
        return load_config(Path.cwd(), strict=strict, **overrides)
    except StageError as exc:
        fatal(str(exc))


def cmd_stage(args: argparse.Namespace) -> None:
    """Write staged copies of the manifest and lockfile."""
    run_stage(_load(args))


def cmd_resolve(args: argparse.Namespace) -> None:
    """Copy the compiled binary to its destination."""
    # Copying the binary doesn't depend on Cargo.toml being well formed
    run_resolve(_load(args, strict=False))


def cmd_build(args: argparse.Namespace) -> None:
    """Compile in release mode, then resolve the binary."""
    run_build(_load(args))


def _add_artifact_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory holding compiled binaries. (default: target/release)",
    )
    parser.add_argument(
        "--dest",
        dest="artifact_dest",
        type=Path,
        default=None,
        help="Where to copy the resolved binary. (default: /app/binary)",
    )


def cli(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="cargo-stage",
        description="Stage version-normalized Cargo files and resolve release binaries.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--manifest",
        type=Path,
        default=None,
        help="Path to Cargo.toml. (default: Cargo.toml)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # stage subcommand
    stage_parser = subparsers.add_parser(
        "stage", help="Write staged copies of Cargo.toml and Cargo.lock."
    )
    stage_parser.add_argument(
        "--lockfile", type=Path, default=None, help="Path to Cargo.lock."
    )
    stage_parser.add_argument(
        "--staged-manifest",
        type=Path,
        default=None,
        help="Output path for the staged manifest. (default: Cargo.edit)",
    )
    stage_parser.add_argument(
        "--staged-lockfile",
        type=Path,
        default=None,
        help="Output path for the staged lockfile. (default: Cargo.edit.lock)",
    )
    stage_parser.add_argument(
        "-p",
        "--package",
        dest="target_package",
        default=None,
        help="Package whose lockfile entries are normalized. (default: [package].name)",
    )
    stage_parser.add_argument(
        "--placeholder",
        default=None,
        help="Version to substitute. (default: 0.1.0)",
    )
    stage_parser.set_defaults(func=cmd_stage)

    # resolve subcommand
    resolve_parser = subparsers.add_parser(
        "resolve", help="Copy the compiled binary to its destination."
    )
    _add_artifact_args(resolve_parser)
    resolve_parser.set_defaults(func=cmd_resolve)

    # build subcommand
    build_parser = subparsers.add_parser(
        "build", help="Compile in release mode, then resolve the binary."
    )
    build_parser.add_argument(
        "-F",
        "--features",
        nargs="+",
        default=None,
        metavar="FEATURE",
        help="Cargo features to enable (e.g., cuda).",
    )
    _add_artifact_args(build_parser)
    build_parser.set_defaults(func=cmd_build)

    args = parser.parse_args(argv)
    args.func(args)
