"""Core data models shared across kaeter-ci components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .release_plan import ReleasePlan

CONVENTION_BUILD_TYPE = "Makefile"


def _normalised(paths: Iterable[str]) -> tuple[str, ...]:
    return tuple(sorted(set(paths)))


@dataclass(frozen=True)
class Files:
    """Paths added, modified and removed between two revisions."""

    added: Sequence[str] = ()
    modified: Sequence[str] = ()
    removed: Sequence[str] = ()

    @classmethod
    def of(
        cls,
        *,
        added: Iterable[str] = (),
        modified: Iterable[str] = (),
        removed: Iterable[str] = (),
    ) -> "Files":
        """Build a change set with every category sorted and deduplicated."""
        return cls(
            added=_normalised(added),
            modified=_normalised(modified),
            removed=_normalised(removed),
        )

    def added_or_modified(self) -> List[str]:
        return [*self.added, *self.modified]

    def touched(self) -> List[str]:
        return [*self.added, *self.modified, *self.removed]

    def is_empty(self) -> bool:
        return not (self.added or self.modified or self.removed)


@dataclass(frozen=True)
class BazelChange:
    """Bazel-level view of a change."""

    bazel_sources: Sequence[str] = ()
    workspace: bool = False
    source_files: Sequence[str] = ()
    build_files: Sequence[str] = ()
    targets: Sequence[str] = ()
    packages: Sequence[str] = ()


@dataclass(frozen=True)
class KaeterModule:
    """A versioned module described by a versions.yaml file."""

    id: str
    path: str
    type: str
    annotations: Optional[Mapping[str, str]] = None
    auto_release: Optional[str] = None
    dependencies: Sequence[str] = ()

    @property
    def is_convention_build(self) -> bool:
        return self.type == CONVENTION_BUILD_TYPE


@dataclass(frozen=True)
class KaeterChange:
    """Affected modules keyed by module id."""

    modules: Mapping[str, KaeterModule] = field(default_factory=dict)


@dataclass(frozen=True)
class HelmChange:
    """Chart roots containing at least one changed file."""

    charts: Sequence[str] = ()


@dataclass(frozen=True)
class CommitMsg:
    """Information extracted from the current commit message."""

    tags: Sequence[str] = ()
    release_plan: ReleasePlan = field(default_factory=ReleasePlan.empty)


@dataclass(frozen=True)
class PullRequest:
    """Pull request metadata supplied by the caller."""

    title: str = ""
    body: str = ""
    release_plan: ReleasePlan = field(default_factory=ReleasePlan.empty)

    def assumed_commit_message(self) -> str:
        """The title and body combined, as they would appear once merged."""
        return f"{self.title}\n{self.body}"


@dataclass(frozen=True)
class Information:
    """Summary of all changes between two revisions."""

    files: Files = field(default_factory=Files)
    bazel: BazelChange = field(default_factory=BazelChange)
    kaeter: KaeterChange = field(default_factory=KaeterChange)
    helm: HelmChange = field(default_factory=HelmChange)
    commit: CommitMsg = field(default_factory=CommitMsg)
    pull_request: Optional[PullRequest] = None


def modules_by_id(modules: Iterable[KaeterModule]) -> Dict[str, KaeterModule]:
    """Index modules by id; a later duplicate id replaces the earlier one."""
    return {module.id: module for module in modules}


__all__ = [
    "CONVENTION_BUILD_TYPE",
    "BazelChange",
    "CommitMsg",
    "Files",
    "HelmChange",
    "Information",
    "KaeterChange",
    "KaeterModule",
    "PullRequest",
    "modules_by_id",
]
