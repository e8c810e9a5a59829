"""Subprocess runner shared by the git, bazel and make adapters."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, Optional

# runner(args, *, cwd, timeout=None) -> stdout
#
# Implementations raise subprocess.CalledProcessError on non-zero exit,
# FileNotFoundError when the executable is missing and
# subprocess.TimeoutExpired when the timeout elapses.
Runner = Callable[..., str]


def run_command(
    args: Iterable[str],
    *,
    cwd: Path | str,
    timeout: Optional[float] = None,
) -> str:
    """Run a command to completion and return its standard output."""
    completed = subprocess.run(
        list(args),
        cwd=str(cwd),
        check=True,
        text=True,
        capture_output=True,
        timeout=timeout,
    )
    return completed.stdout


def describe_failure(exc: BaseException) -> str:
    """Return the most useful one-line description of a failed command."""
    if isinstance(exc, subprocess.CalledProcessError):
        stderr = (exc.stderr or "").strip() if isinstance(exc.stderr, str) else ""
        stdout = (exc.output or "").strip() if isinstance(exc.output, str) else ""
        detail = stderr or stdout
        if detail:
            return f"exit status {exc.returncode}: {detail}"
        return f"exit status {exc.returncode}"
    if isinstance(exc, subprocess.TimeoutExpired):
        return f"timed out after {exc.timeout} seconds"
    if isinstance(exc, FileNotFoundError):
        return f"executable not found ({exc.filename or exc})"
    return str(exc)


__all__ = ["Runner", "describe_failure", "run_command"]
