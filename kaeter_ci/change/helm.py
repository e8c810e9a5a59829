"""Helm chart change detection."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Sequence

from ..labels import has_prefix, sorted_unique, with_trailing_slash
from ..logging import get_logger
from ..models import Files, HelmChange

CHART_FILE = "Chart.yaml"

_EXCLUDED_DIRS = {".git", "node_modules"}

logger = get_logger("change.helm")


def find_helm_charts(root: Path | str, chart_file: str = CHART_FILE) -> List[str]:
    """Return the repository-relative directories holding a chart, slash terminated."""
    repo_root = Path(root).resolve()
    charts: List[str] = []
    for dirpath, dirnames, filenames in os.walk(repo_root):
        dirnames[:] = sorted(
            name for name in dirnames if name not in _EXCLUDED_DIRS and not name.startswith("bazel-")
        )
        if chart_file not in filenames:
            continue
        relative = Path(dirpath).relative_to(repo_root).as_posix()
        chart = "" if relative == "." else with_trailing_slash(relative)
        logger.debug("Found chart at %s", chart or "/")
        charts.append(chart)
    return charts


def match_files_and_charts(files: Iterable[str], charts: Sequence[str]) -> List[str]:
    """Return the charts that contain at least one of ``files``."""
    paths = list(files)
    return sorted_unique(
        chart for chart in charts if any(has_prefix(path, chart) for path in paths)
    )


class HelmChecker:
    """Matches changed paths against known chart directories."""

    def check(self, files: Files, charts: Sequence[str]) -> HelmChange:
        normalized = [with_trailing_slash(chart) if chart else chart for chart in charts]
        matched = match_files_and_charts(files.touched(), normalized)
        logger.debug("Affected charts: %s", matched)
        return HelmChange(charts=tuple(matched))


__all__ = ["CHART_FILE", "HelmChecker", "find_helm_charts", "match_files_and_charts"]
