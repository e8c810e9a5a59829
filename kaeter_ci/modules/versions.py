"""Parsing of kaeter versions.yaml files."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from ..errors import VersionsFileError

AUTORELEASE_COMMIT = "AUTORELEASE"


@dataclass(frozen=True)
class ReleaseEntry:
    """One released (or pending) version listed in a versions file."""

    version: str
    timestamp: str
    commit_id: str


@dataclass(frozen=True)
class VersionsFile:
    """The parts of a versions file that change detection relies on."""

    id: str
    module_type: str
    versioning: str
    releases: List[ReleaseEntry] = field(default_factory=list)
    annotations: Dict[str, str] = field(default_factory=dict)
    dependencies: List[str] = field(default_factory=list)

    def auto_release(self) -> Optional[str]:
        """Return the version of the pending autorelease, if there is one."""
        pending = [entry for entry in self.releases if entry.commit_id == AUTORELEASE_COMMIT]
        if len(pending) > 1:
            raise VersionsFileError(f"more than 1 autorelease found for {self.id}")
        return pending[0].version if pending else None


def parse_versions(text: str) -> VersionsFile:
    """Parse the YAML contents of a versions file."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise VersionsFileError(f"invalid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise VersionsFileError("versions file must contain a mapping at the root")

    module_id = _as_str(data.get("id"))
    if not module_id:
        raise VersionsFileError("module does not have an identifier")

    return VersionsFile(
        id=module_id,
        module_type=_as_str(data.get("type")) or "",
        versioning=_as_str(data.get("versioning")) or "",
        releases=_parse_releases(data.get("versions")),
        annotations=_parse_annotations(data.get("metadata")),
        dependencies=_parse_dependencies(data.get("dependencies")),
    )


def _parse_releases(raw: Any) -> List[ReleaseEntry]:
    if raw is None:
        return []
    if not isinstance(raw, dict):
        raise VersionsFileError("'versions' must be a mapping of version to release data")
    releases: List[ReleaseEntry] = []
    # Release data is "<timestamp>|<commit>" optionally followed by "|<tags>".
    for version, release_data in raw.items():
        parts = str(release_data).split("|")
        if len(parts) < 2 or not parts[1]:
            raise VersionsFileError(f"malformed release data for version {version}: {release_data}")
        releases.append(ReleaseEntry(version=str(version), timestamp=parts[0], commit_id=parts[1]))
    return releases


def _parse_annotations(raw: Any) -> Dict[str, str]:
    if not isinstance(raw, dict):
        return {}
    annotations = raw.get("annotations")
    if not isinstance(annotations, dict):
        return {}
    return {str(key): str(value) for key, value in annotations.items()}


def _parse_dependencies(raw: Any) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw]
    if not isinstance(raw, list):
        raise VersionsFileError("'dependencies' must be a list of paths")
    return [str(item) for item in raw if item is not None]


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


__all__ = ["AUTORELEASE_COMMIT", "ReleaseEntry", "VersionsFile", "parse_versions"]
