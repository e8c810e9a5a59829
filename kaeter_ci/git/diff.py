"""Categorized file diffs between two revisions."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import Dict, Iterable, Optional

from ..errors import GitCommandError
from ..logging import get_logger
from ..models import Files
from ..shell import Runner, describe_failure, run_command

ADDED = "A"
MODIFIED = "M"
DELETED = "D"

_SPACES = re.compile(r"\s+")
_STATUS_COLUMNS = 2


def parse_name_status(output: str) -> Dict[str, str]:
    """Map each path in ``git diff --name-status`` output to its status letter.

    Lines are ``<status>\\t<path>``; statuses other than A, M and D (and
    lines in any other shape) are ignored.
    """
    changes: Dict[str, str] = {}
    for line in output.splitlines():
        words = _SPACES.split(line.strip(), maxsplit=_STATUS_COLUMNS - 1)
        if len(words) != _STATUS_COLUMNS:
            continue
        status, path = words
        if status in (ADDED, MODIFIED, DELETED):
            changes[path] = status
    return changes


def files_from_statuses(statuses: Dict[str, str]) -> Files:
    return Files.of(
        added=(path for path, status in statuses.items() if status == ADDED),
        modified=(path for path, status in statuses.items() if status == MODIFIED),
        removed=(path for path, status in statuses.items() if status == DELETED),
    )


class FileDiffer:
    """Lists added, modified and removed files between two revisions."""

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
        self.logger = get_logger("git.diff")

    def diff(self, root: Path | str, from_rev: str, to_rev: str) -> Files:
        args = [self.executable, "diff", "--no-renames", "--name-status", from_rev, to_rev]
        output = self._run(args, cwd=Path(root))
        files = files_from_statuses(parse_name_status(output))
        self.logger.debug("Added: %s", list(files.added))
        self.logger.debug("Modified: %s", list(files.modified))
        self.logger.debug("Removed: %s", list(files.removed))
        return files

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


__all__ = ["ADDED", "DELETED", "MODIFIED", "FileDiffer", "files_from_statuses", "parse_name_status"]
