"""File level change detection."""

from __future__ import annotations

from pathlib import Path

from ..git.diff import FileDiffer
from ..logging import get_logger
from ..models import Files


class FileChecker:
    """Produces the added/modified/removed paths between two revisions."""

    def __init__(self, differ: FileDiffer | None = None) -> None:
        self.differ = differ or FileDiffer()
        self.logger = get_logger("change.files")

    def check(self, root: Path | str, previous_commit: str, current_commit: str) -> Files:
        if previous_commit == current_commit:
            self.logger.debug("Revisions are identical, nothing changed")
            return Files()
        files = self.differ.diff(root, previous_commit, current_commit)
        self.logger.info(
            "%d added, %d modified, %d removed files",
            len(files.added),
            len(files.modified),
            len(files.removed),
        )
        return files


__all__ = ["FileChecker"]
