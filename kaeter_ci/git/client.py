"""Thin wrapper around the git commands kaeter-ci needs."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Iterable, Optional

from ..errors import GitCommandError
from ..shell import Runner, describe_failure, run_command


class GitClient:
    """Reads commit messages and resolves repository locations."""

    def __init__(
        self,
        runner: Runner | None = None,
        *,
        executable: str = "git",
        timeout: Optional[float] = None,
    ) -> None:
        self._runner = runner or run_command
        self.executable = executable
        self.timeout = timeout

    def commit_message(self, root: Path | str, revision: str) -> str:
        """Return the raw message body of ``revision``."""
        return self._git(root, "log", "-n", "1", "--pretty=format:%B", revision)

    def top_level(self, path: Path | str) -> Path:
        """Return the root of the work tree containing ``path``."""
        output = self._git(path, "rev-parse", "--show-toplevel")
        return Path(output.strip())

    def _git(self, cwd: Path | str, *args: str) -> str:
        argv = [self.executable, *args]
        return self._run(argv, cwd=Path(cwd))

    def _run(self, args: Iterable[str], *, cwd: Path) -> str:
        argv = list(args)
        try:
            return self._runner(argv, cwd=cwd, timeout=self.timeout)
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError) as exc:
            raise GitCommandError(
                f"`{' '.join(argv)}` failed: {describe_failure(exc)}",
                args=argv,
                returncode=getattr(exc, "returncode", None),
            ) from exc


__all__ = ["GitClient"]
