"""Tests for release plans carried by commit messages."""

from __future__ import annotations

import pytest

from kaeter_ci.errors import ReleasePlanError
from kaeter_ci.release_plan import (
    ReleasePlan,
    ReleaseTarget,
    release_plan_from_commit_message,
    release_plan_from_yaml,
)

COMMIT_WITH_RELEASE = (
    "[release] unittest\n"
    "Release Plan:\n"
    "```lang=yaml\n"
    "releases:\n"
    "- ch.open.kaeter:unit-test:0.1.0\n"
    "```"
)


def test_release_plan_from_commit_message() -> None:
    plan = release_plan_from_commit_message(COMMIT_WITH_RELEASE)
    assert plan.releases == (ReleaseTarget(module_id="ch.open.kaeter:unit-test", version="0.1.0"),)
    assert plan


def test_release_plan_without_language_hint() -> None:
    message = "[release] two\n\nRelease Plan:\n\n```\nreleases:\n- a:1.0.0\n- b:2.0.0\n```\n"
    plan = release_plan_from_commit_message(message)
    assert [target.marshal() for target in plan.releases] == ["a:1.0.0", "b:2.0.0"]


def test_missing_release_plan_raises() -> None:
    with pytest.raises(ReleasePlanError):
        release_plan_from_commit_message("[feature] nothing to release")


@pytest.mark.parametrize(
    "text",
    [
        "releases: []\n",
        "other: value\n",
        "releases:\n- no-version-separator\n",
        "releases: [unclosed\n",
    ],
)
def test_invalid_release_plan_yaml(text: str) -> None:
    with pytest.raises(ReleasePlanError):
        release_plan_from_yaml(text)


def test_empty_plan_is_falsy() -> None:
    assert not ReleasePlan.empty()
    assert ReleasePlan.empty().releases == ()
