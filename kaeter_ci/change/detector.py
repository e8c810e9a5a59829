"""Pipeline that runs every change checker in dependency order."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Sequence, TypeVar

from ..errors import CheckFailedError, KaeterCIError
from ..logging import get_logger
from ..models import BazelChange, Information, KaeterModule, PullRequest
from .bazel import BazelChecker
from .commit import CommitChecker, pull_request_check
from .files import FileChecker
from .helm import HelmChecker, find_helm_charts
from .kaeter import KaeterChecker

T = TypeVar("T")


class Detector:
    """Computes the change information between two revisions.

    Checkers run in a fixed order because each one consumes the output of the
    ones before it: files, then Bazel, then kaeter modules, then Helm charts,
    then the commit message. The first failing checker aborts the run.
    """

    def __init__(
        self,
        root: Path | str,
        previous_commit: str,
        current_commit: str,
        *,
        modules: Sequence[KaeterModule] = (),
        charts: Optional[Sequence[str]] = None,
        pull_request: Optional[PullRequest] = None,
        skip_bazel: bool = False,
        file_checker: FileChecker | None = None,
        bazel_checker: BazelChecker | None = None,
        kaeter_checker: KaeterChecker | None = None,
        helm_checker: HelmChecker | None = None,
        commit_checker: CommitChecker | None = None,
    ) -> None:
        self.root = Path(root)
        self.previous_commit = previous_commit
        self.current_commit = current_commit
        self.modules = list(modules)
        self.charts = list(charts) if charts is not None else None
        self.pull_request = pull_request
        self.skip_bazel = skip_bazel
        self.file_checker = file_checker or FileChecker()
        self.bazel_checker = bazel_checker or BazelChecker(self.root)
        self.kaeter_checker = kaeter_checker or KaeterChecker(self.root)
        self.helm_checker = helm_checker or HelmChecker()
        self.commit_checker = commit_checker or CommitChecker(self.root)
        self.logger = get_logger("change.detector")

    def check(self) -> Information:
        self.logger.info(
            "Detecting changes in %s between %s and %s",
            self.root,
            self.previous_commit,
            self.current_commit,
        )

        files = self._run(
            "files",
            lambda: self.file_checker.check(self.root, self.previous_commit, self.current_commit),
        )

        if self.skip_bazel:
            self.logger.info("Skipping Bazel change detection")
            bazel = BazelChange()
        else:
            bazel = self._run("bazel", lambda: self.bazel_checker.check(files))

        kaeter = self._run("kaeter", lambda: self.kaeter_checker.check(files, bazel, self.modules))

        charts = self.charts
        if charts is None:
            charts = self._run("helm", lambda: find_helm_charts(self.root))
        helm = self._run("helm", lambda: self.helm_checker.check(files, charts))

        commit = self._run("commit", lambda: self.commit_checker.check(self.current_commit))

        pull_request = None
        if self.pull_request is not None:
            pull_request = pull_request_check(self.pull_request.title, self.pull_request.body)

        return Information(
            files=files,
            bazel=bazel,
            kaeter=kaeter,
            helm=helm,
            commit=commit,
            pull_request=pull_request,
        )

    def _run(self, name: str, step: Callable[[], T]) -> T:
        self.logger.debug("Running %s checker", name)
        try:
            return step()
        except (KaeterCIError, OSError) as exc:
            self.logger.error("%s checker failed: %s", name, exc)
            raise CheckFailedError(name, exc) from exc


__all__ = ["Detector"]
