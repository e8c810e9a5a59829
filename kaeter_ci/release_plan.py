"""Release plans embedded in commit messages and pull request descriptions."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Sequence

import yaml

from .errors import ReleasePlanError

# (?s) lets the dot cross lines; the plan is the fenced YAML block that
# follows the "Release Plan:" marker.
_RELEASE_PLAN_PATTERN = re.compile(
    r"(?s).*Release Plan:(?:\n|\r\n?){1,2}```(?:lang=yaml)?(?:\n|\r\n?){1,2}(.*)```"
)


@dataclass(frozen=True)
class ReleaseTarget:
    """A single module version scheduled for release."""

    module_id: str
    version: str

    def marshal(self) -> str:
        return f"{self.module_id}:{self.version}"


@dataclass(frozen=True)
class ReleasePlan:
    """One or more modules to be released together."""

    releases: Sequence[ReleaseTarget] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "ReleasePlan":
        return cls(releases=())

    def __bool__(self) -> bool:
        return bool(self.releases)


def release_plan_from_commit_message(message: str) -> ReleasePlan:
    """Extract the YAML release plan fenced inside a commit message."""
    match = _RELEASE_PLAN_PATTERN.match(message)
    if match is None:
        raise ReleasePlanError("could not extract release plan from commit message")
    return release_plan_from_yaml(match.group(1))


def release_plan_from_yaml(text: str) -> ReleasePlan:
    """Parse ``releases: [<module id>:<version>, ...]``.

    Module ids may themselves contain colons; the version is whatever follows
    the last one.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ReleasePlanError(f"invalid release plan YAML: {exc}") from exc

    raw_releases = data.get("releases") if isinstance(data, dict) else None
    if not raw_releases or not isinstance(raw_releases, list):
        raise ReleasePlanError("did not find any releases in the release plan")

    releases: List[ReleaseTarget] = []
    for raw in raw_releases:
        entry = str(raw)
        module_id, sep, version = entry.rpartition(":")
        if not sep or not module_id:
            raise ReleasePlanError(f"invalid release target: {entry}")
        releases.append(ReleaseTarget(module_id=module_id, version=version))
    return ReleasePlan(releases=tuple(releases))


__all__ = [
    "ReleasePlan",
    "ReleaseTarget",
    "release_plan_from_commit_message",
    "release_plan_from_yaml",
]
