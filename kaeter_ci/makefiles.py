"""Dry runs of the build steps declared in a module's Makefile."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import DryRunError
from .logging import get_logger
from .shell import Runner, describe_failure, run_command

DEFAULT_MAKEFILES: Sequence[str] = ("Makefile.kaeter", "Makefile")


def find_makefile(module_dir: Path, candidates: Sequence[str] = DEFAULT_MAKEFILES) -> str:
    """Return the first candidate present in ``module_dir``.

    The last candidate is the generic fallback and is returned even when it
    does not exist, so that make reports the missing file itself.
    """
    for name in candidates[:-1]:
        if (module_dir / name).is_file():
            return name
    return candidates[-1]


class MakeDryRun:
    """Lists the commands a make target would execute without running them."""

    def __init__(
        self,
        runner: Runner | None = None,
        *,
        executable: str = "make",
        timeout: Optional[float] = None,
    ) -> None:
        self._runner = runner or run_command
        self.executable = executable
        self.timeout = timeout
        self.logger = get_logger("makefiles")

    def dry_run(self, module_dir: Path | str, makefile: str, step: str) -> List[str]:
        argv = [self.executable, "--file", makefile, "--dry-run", step]
        self.logger.debug("Make command: %s in %s", argv, module_dir)
        try:
            output = self._runner(argv, cwd=Path(module_dir), timeout=self.timeout)
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError) as exc:
            raise DryRunError(
                f"reading the {step} commands from {makefile} in {module_dir} failed: "
                f"{describe_failure(exc)}",
                args=argv,
                returncode=getattr(exc, "returncode", None),
            ) from exc
        return output.split("\n")


__all__ = ["DEFAULT_MAKEFILES", "MakeDryRun", "find_makefile"]
