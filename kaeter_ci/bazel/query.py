"""Adapter for `bazel query`."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from ..errors import BuildGraphQueryError
from ..logging import get_logger
from ..shell import Runner, describe_failure, run_command

KEEP_GOING = "--keep_going"
NO_TOOL_DEPS = "--notool_deps"


class BazelQuery:
    """Runs build graph queries and returns one result per line.

    Any non-zero exit is fatal, including the exit code 3 bazel uses for an
    incomplete result under ``--keep_going``.
    """

    def __init__(
        self,
        runner: Runner | None = None,
        *,
        executable: str = "bazel",
        timeout: Optional[float] = None,
    ) -> None:
        self._runner = runner or run_command
        self.executable = executable
        self.timeout = timeout
        self.logger = get_logger("bazel.query")

    def query(self, root: Path | str, expression: str, flags: Sequence[str] = ()) -> List[str]:
        argv = [self.executable, "query", *flags, expression]
        self.logger.debug("Running %s", argv)
        try:
            output = self._runner(argv, cwd=Path(root), timeout=self.timeout)
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError) as exc:
            raise BuildGraphQueryError(
                f"`{' '.join(argv)}` failed: {describe_failure(exc)}",
                args=argv,
                returncode=getattr(exc, "returncode", None),
                output=exc.output if isinstance(getattr(exc, "output", None), str) else "",
            ) from exc
        return [line.strip() for line in output.splitlines() if line.strip()]


__all__ = ["KEEP_GOING", "NO_TOOL_DEPS", "BazelQuery"]
