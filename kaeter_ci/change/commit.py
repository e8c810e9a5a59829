"""Commit message and pull request checks."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List

from ..errors import ReleasePlanError
from ..git.client import GitClient
from ..labels import remove_trailing_empty
from ..logging import get_logger
from ..models import CommitMsg, PullRequest
from ..release_plan import ReleasePlan, release_plan_from_commit_message

# Up to three adjacent [tags]; the optional groups do not participate in the
# match when fewer tags are present.
TAG_PATTERN = re.compile(
    r"(?:\[([a-z0-9]{1,24})\])(?:\[([a-z0-9]{1,24})\])?(?:\[([a-z0-9]{1,24})\])?"
)

logger = get_logger("change.commit")


def extract_tags(message: str) -> List[str]:
    """Return the leftmost run of up to three ``[tag]`` groups in ``message``."""
    match = TAG_PATTERN.search(message)
    if match is None:
        return []
    return remove_trailing_empty(match.groups())


def release_plan_or_empty(message: str) -> ReleasePlan:
    try:
        return release_plan_from_commit_message(message)
    except ReleasePlanError as exc:
        logger.debug("No release plan: %s", exc)
        return ReleasePlan.empty()


class CommitChecker:
    """Extracts tags and the release plan from the current commit message."""

    def __init__(self, root: Path | str, git: GitClient | None = None) -> None:
        self.root = Path(root)
        self.git = git or GitClient()

    def check(self, current_commit: str) -> CommitMsg:
        message = self.git.commit_message(self.root, current_commit)
        tags = extract_tags(message)
        if tags:
            logger.debug("Captured tags are: %s", ",".join(tags))
        else:
            logger.debug("No tags specified in current commit message:\n%s", message)
        return CommitMsg(tags=tuple(tags), release_plan=release_plan_or_empty(message))


def pull_request_check(title: str, body: str) -> PullRequest:
    """Pass the pull request through and read the release plan it announces.

    The title and body together become the merge commit message, so a release
    plan in them tells what is about to be released.
    """
    pull_request = PullRequest(title=title, body=body)
    message = pull_request.assumed_commit_message()
    logger.debug("Extracting release plan from pull request data: %s", message)
    return PullRequest(title=title, body=body, release_plan=release_plan_or_empty(message))


__all__ = ["TAG_PATTERN", "CommitChecker", "extract_tags", "pull_request_check", "release_plan_or_empty"]
