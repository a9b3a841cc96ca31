"""Staging and build pipeline: stage → compile → resolve.

1. Stage copies of Cargo.toml and Cargo.lock with the target package's
   version set to a placeholder (originals untouched)
2. Compile the package with ``cargo build --release``
3. Resolve which produced binary is the artifact and copy it out

The staged files are an explicit output for whatever consumes them; the
compile step builds from the original manifest and doesn't pick them up.
"""

from __future__ import annotations

from .artifact import CargoMetadataSource, TargetNameSource, resolve_artifact
from .errors import StageError
from .lockfile import stage_lockfile
from .manifest import stage_manifest
from .models import ResolvedArtifact, StageConfig, StageResult
from .shell import fatal, run, step


def stage(config: StageConfig) -> StageResult:
    """Write the staged manifest and lockfile.

    The two rewrites share nothing, so their order doesn't matter.

    Raises:
        StageError: If no target package is known, or on any I/O failure.
    """
    if not config.target_package:
        raise StageError(
            "No target package: set [package].name in the manifest or pass --package"
        )

    step("Staging manifest")
    manifest_rewrites = stage_manifest(
        config.manifest,
        config.staged_manifest,
        config.placeholder,
        config.header_lines,
    )
    print(f"  {config.manifest} → {config.staged_manifest}")
    print(f"  {manifest_rewrites} version field(s) set to {config.placeholder}")

    step(f"Staging lockfile for {config.target_package}")
    lock_rewrites = stage_lockfile(
        config.lockfile,
        config.staged_lockfile,
        config.target_package,
        config.placeholder,
    )
    print(f"  {config.lockfile} → {config.staged_lockfile}")
    print(f"  {lock_rewrites} package block(s) set to {config.placeholder}")

    return StageResult(
        staged_manifest=config.staged_manifest,
        staged_lockfile=config.staged_lockfile,
        manifest_rewrites=manifest_rewrites,
        lock_rewrites=lock_rewrites,
    )


def compile_package(config: StageConfig) -> None:
    """Build the package in release mode, streaming cargo's output.

    Raises:
        StageError: If cargo exits non-zero.
    """
    step("Compiling")
    args = ["cargo", "build", "--release", "--manifest-path", str(config.manifest)]
    if config.features:
        args.extend(["--features", ",".join(config.features)])
    result = run(*args, check=False)
    if result.returncode != 0:
        raise StageError(f"cargo build failed with exit code {result.returncode}")


def resolve(
    config: StageConfig, source: TargetNameSource | None = None
) -> ResolvedArtifact:
    """Copy the compiled binary to config.artifact_dest.

    Args:
        config: Run configuration.
        source: Target name lookup; defaults to asking cargo metadata.
    """
    step("Resolving build artifact")
    if source is None:
        source = CargoMetadataSource(config.manifest)
    return resolve_artifact(config.output_dir, config.artifact_dest, source)


def run_stage(config: StageConfig) -> None:
    """Stage the manifest and lockfile, exiting non-zero on failure."""
    try:
        stage(config)
    except StageError as exc:
        fatal(str(exc))


def run_resolve(config: StageConfig) -> None:
    """Resolve the artifact, exiting non-zero if none is found."""
    try:
        resolve(config)
    except StageError as exc:
        fatal(str(exc))


def run_build(config: StageConfig) -> None:
    """Compile, then resolve the artifact."""
    try:
        compile_package(config)
        resolve(config)
    except StageError as exc:
        fatal(str(exc))

    print(f"\n{'=' * 60}\nDone!\n{'=' * 60}")
