"""Bazel change detection: build files, affected source files and targets."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Iterable, List, Sequence

from ..bazel.query import KEEP_GOING, NO_TOOL_DEPS, BazelQuery
from ..labels import (
    PACKAGE_PREFIX,
    is_external,
    label_to_path,
    packages_from_targets,
    sorted_unique,
)
from ..logging import get_logger
from ..models import BazelChange, Files

BAZEL_EXTENSION_SUFFIX = ".bzl"
BUILD_FILE_NAMES = frozenset({"BUILD", "BUILD.bazel"})
WORKSPACE_FILES = frozenset({"WORKSPACE", "WORKSPACE.bazel"})
DEFAULT_THIRD_PARTY = "//3rdparty/..."


def source_files_query(third_party: str = DEFAULT_THIRD_PARTY) -> str:
    return f'kind("source file", deps(//...) except deps({third_party}))'


def rdeps_query(source_files: Sequence[str]) -> str:
    quoted = " ".join(f"'{path}'" for path in source_files)
    return (
        f"rdeps(//..., set({quoted})) "
        f"except kind('source file', rdeps(//..., set({quoted})))"
    )


def detect_bazel_sources(paths: Iterable[str]) -> List[str]:
    return sorted_unique(path for path in paths if PurePosixPath(path).suffix == BAZEL_EXTENSION_SUFFIX)


def detect_build_files(paths: Iterable[str]) -> List[str]:
    return sorted_unique(path for path in paths if PurePosixPath(path).name in BUILD_FILE_NAMES)


def workspace_changed(modified: Iterable[str]) -> bool:
    return any(path in WORKSPACE_FILES for path in modified)


class BazelChecker:
    """Derives the Bazel view of a change set.

    Only changed files that the build graph knows about count as affected
    sources; documentation and other files outside the graph are left out on
    purpose.
    """

    def __init__(
        self,
        root: Path | str,
        query: BazelQuery | None = None,
        *,
        third_party: str = DEFAULT_THIRD_PARTY,
    ) -> None:
        self.root = Path(root)
        self.query = query or BazelQuery()
        self.third_party = third_party
        self.logger = get_logger("change.bazel")

    def check(self, files: Files) -> BazelChange:
        changed = files.added_or_modified()
        if not changed:
            return BazelChange()

        source_files = self._affected_source_files(changed)
        targets: List[str] = []
        if source_files:
            targets = self._targets_from_source_files(source_files)
        else:
            self.logger.debug("No Bazel source file changed, skipping the rdeps query")

        return BazelChange(
            bazel_sources=tuple(detect_bazel_sources(changed)),
            workspace=workspace_changed(files.modified),
            source_files=tuple(source_files),
            build_files=tuple(detect_build_files(changed)),
            targets=tuple(targets),
            packages=tuple(packages_from_targets(targets)),
        )

    def _affected_source_files(self, changed: Sequence[str]) -> List[str]:
        query = source_files_query(self.third_party)
        self.logger.debug("Query for source files: %s", query)
        results = self.query.query(self.root, query, [KEEP_GOING, NO_TOOL_DEPS])
        # External sources such as jars are not part of this repository.
        known = {label_to_path(label) for label in results if not is_external(label)}
        affected = sorted_unique(path for path in changed if path in known)
        for path in affected:
            self.logger.debug("Affected Bazel source file: %s", path)
        return affected

    def _targets_from_source_files(self, source_files: Sequence[str]) -> List[str]:
        query = rdeps_query(source_files)
        self.logger.debug("Query for targets: %s", query)
        results = self.query.query(self.root, query, [KEEP_GOING])
        targets = sorted_unique(label for label in results if label.startswith(PACKAGE_PREFIX))
        self.logger.info("%d affected Bazel targets", len(targets))
        return targets


__all__ = [
    "BAZEL_EXTENSION_SUFFIX",
    "BUILD_FILE_NAMES",
    "DEFAULT_THIRD_PARTY",
    "WORKSPACE_FILES",
    "BazelChecker",
    "detect_bazel_sources",
    "detect_build_files",
    "rdeps_query",
    "source_files_query",
    "workspace_changed",
]
