"""Kaeter module change detection."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from ..labels import (
    PACKAGE_LABEL_PATTERN,
    REPO_LABEL_PATTERN,
    any_has_prefix,
    package_label_for_path,
    with_trailing_slash,
)
from ..logging import get_logger
from ..makefiles import DEFAULT_MAKEFILES, MakeDryRun, find_makefile
from ..models import BazelChange, Files, KaeterChange, KaeterModule

BAZEL_COMMAND = "bazel"
BAZEL_SUBCOMMANDS = ("build", "run")
DEFAULT_STEPS: Sequence[str] = ("snapshot", "release")


def extract_bazel_targets(package: str, lines: Iterable[str]) -> List[str]:
    """Pick out what looks like the Bazel targets invoked by shell commands.

    Only lines mentioning ``bazel`` together with ``build`` or ``run`` are
    considered. A fully qualified label wins; otherwise a package relative
    ``:target`` is resolved against ``package``.
    """
    targets: List[str] = []
    for line in lines:
        if BAZEL_COMMAND not in line or not any(sub in line for sub in BAZEL_SUBCOMMANDS):
            continue
        full = REPO_LABEL_PATTERN.search(line)
        if full is not None:
            if full.group(0) not in targets:
                targets.append(full.group(0))
            continue
        relative = PACKAGE_LABEL_PATTERN.search(line)
        if relative is not None:
            label = f"{package}{relative.group(0)}"
            if label not in targets:
                targets.append(label)
    return sorted(targets)


def module_prefix(module: KaeterModule) -> str:
    """Return the path prefix every file inside the module starts with."""
    if module.path in ("", "."):
        return ""
    return with_trailing_slash(module.path)


class TargetMiner(ABC):
    """Strategy that guesses which Bazel targets a module's build recipe uses."""

    @abstractmethod
    def mine(self, root: Path, module: KaeterModule) -> List[str]:
        """Return candidate target labels, sorted and deduplicated."""


class MakefileTargetMiner(TargetMiner):
    """Mines the dry-run output of a module's snapshot and release steps.

    This is a text heuristic: a label that shows up in a ``bazel build`` or
    ``bazel run`` line is assumed to be part of the module's recipe.
    """

    def __init__(
        self,
        dry_run: MakeDryRun | None = None,
        *,
        makefiles: Sequence[str] = DEFAULT_MAKEFILES,
        steps: Sequence[str] = DEFAULT_STEPS,
    ) -> None:
        self.dry_run = dry_run or MakeDryRun()
        self.makefiles = tuple(makefiles)
        self.steps = tuple(steps)

    def mine(self, root: Path, module: KaeterModule) -> List[str]:
        module_dir = root / module.path
        makefile = find_makefile(module_dir, self.makefiles)
        commands: List[str] = []
        for step in self.steps:
            commands.extend(self.dry_run.dry_run(module_dir, makefile, step))
        # Relative ":name" labels resolve against "//<path>", not a single-slash
        # "/<path>", so they compare equal to bazel query output.
        return extract_bazel_targets(package_label_for_path(module.path), commands)


class KaeterChecker:
    """Decides which kaeter modules a change affects.

    A module is affected when:

    * a touched file lives below the module directory (any module type),
    * a touched file lives below one of the module's declared dependencies,
    * or, for Makefile modules, one of the Bazel targets mined from its build
      recipe is among the affected targets.
    """

    def __init__(self, root: Path | str, miner: TargetMiner | None = None) -> None:
        self.root = Path(root)
        self.miner = miner or MakefileTargetMiner()
        self.logger = get_logger("change.kaeter")

    def check(
        self,
        files: Files,
        bazel: BazelChange,
        modules: Sequence[KaeterModule],
    ) -> KaeterChange:
        touched = files.touched()
        affected_targets = set(bazel.targets)
        affected: Dict[str, KaeterModule] = {}

        for module in modules:
            self.logger.debug("Inspecting module %s", module.id)
            if self._touched_by_files(module, touched):
                affected.setdefault(module.id, module)
            elif self._touched_by_targets(module, affected_targets):
                affected.setdefault(module.id, module)

        self.logger.info("%d of %d modules affected", len(affected), len(modules))
        return KaeterChange(modules=dict(sorted(affected.items())))

    def _touched_by_files(self, module: KaeterModule, touched: Sequence[str]) -> bool:
        prefix = module_prefix(module)
        if touched and any_has_prefix(touched, prefix):
            self.logger.debug("Files below %s affect module %s", prefix or "/", module.id)
            return True
        for dependency in module.dependencies:
            if any_has_prefix(touched, dependency):
                self.logger.debug("Dependency %s affects module %s", dependency, module.id)
                return True
        return False

    def _touched_by_targets(self, module: KaeterModule, affected_targets: set[str]) -> bool:
        if not module.is_convention_build:
            self.logger.debug("Module %s (%s) has no Makefile to mine", module.id, module.type)
            return False
        if not affected_targets:
            # Membership can never succeed, spare the make invocations.
            return False
        candidates = self.miner.mine(self.root, module)
        self.logger.debug("Bazel targets referenced by %s: %s", module.id, candidates)
        for target in candidates:
            if target in affected_targets:
                self.logger.debug("Target %s affects module %s", target, module.id)
                return True
        return False


__all__ = [
    "KaeterChecker",
    "MakefileTargetMiner",
    "TargetMiner",
    "extract_bazel_targets",
    "module_prefix",
]
