"""Subprocess and terminal output helpers.

cargo is the only external tool cargo-stage drives: ``capture`` is used for
``cargo metadata`` (JSON on stdout), ``run`` for ``cargo build`` (progress
goes straight to the terminal).
"""

from __future__ import annotations

import subprocess
import sys
from typing import NoReturn


def capture(*args: str, check: bool = True) -> str:
    """Run a command quietly and hand back what it printed.

    Args:
        *args: Command line, e.g. ("cargo", "metadata", "--no-deps").
        check: Raise CalledProcessError when the command exits non-zero.

    Returns:
        The command's stdout with surrounding whitespace removed.
    """
    result = subprocess.run(args, capture_output=True, text=True, check=check)
    return result.stdout.strip()


def run(*args: str, check: bool = True) -> subprocess.CompletedProcess[bytes]:
    """Run a command with its output attached to our terminal.

    Compilation can take minutes, so cargo's own progress lines are shown
    as they happen rather than collected.

    Args:
        *args: Command line, e.g. ("cargo", "build", "--release").
        check: Raise CalledProcessError when the command exits non-zero.
    """
    return subprocess.run(args, check=check)


def step(msg: str) -> None:
    """Print a banner announcing the next phase (staging, compiling, resolving)."""
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def fatal(msg: str) -> NoReturn:
    """Report msg on stderr and stop with exit status 1.

    The container build sees the non-zero status and aborts.
    """
    print(f"ERROR: {msg}", file=sys.stderr)
    sys.exit(1)
