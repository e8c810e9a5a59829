"""Tests for the JSON changeset format."""

from __future__ import annotations

import json
from pathlib import Path

from kaeter_ci.changeset import (
    information_to_dict,
    modules_to_dict,
    write_changeset,
    write_modules,
)
from kaeter_ci.models import (
    BazelChange,
    CommitMsg,
    Files,
    HelmChange,
    Information,
    KaeterChange,
    KaeterModule,
    PullRequest,
)
from kaeter_ci.release_plan import ReleasePlan, ReleaseTarget

IMAGE = KaeterModule(
    id="ch.open:image",
    path="deploy/image",
    type="Makefile",
    annotations={"owner": "platform"},
    auto_release="1.1.0",
    dependencies=("libs/common",),
)
DOCS = KaeterModule(id="docs", path="docs", type="Other")


def _information(pull_request: PullRequest | None = None) -> Information:
    return Information(
        files=Files.of(added=["a.go"], modified=["svc/api/main.go"], removed=["old.txt"]),
        bazel=BazelChange(
            source_files=("svc/api/main.go",),
            targets=("//svc/api:server",),
            packages=("//svc/api",),
            workspace=True,
        ),
        kaeter=KaeterChange(modules={IMAGE.id: IMAGE, DOCS.id: DOCS}),
        helm=HelmChange(charts=("charts/api/",)),
        commit=CommitMsg(
            tags=("release",),
            release_plan=ReleasePlan(releases=(ReleaseTarget("ch.open:image", "1.1.0"),)),
        ),
        pull_request=pull_request,
    )


def test_field_names() -> None:
    payload = information_to_dict(_information())

    assert payload["files"] == {"added": ["a.go"], "modified": ["svc/api/main.go"], "removed": ["old.txt"]}
    assert payload["bazel"] == {
        "bazelSources": [],
        "workspace": True,
        "sourceFiles": ["svc/api/main.go"],
        "buildFiles": [],
        "targets": ["//svc/api:server"],
        "packages": ["//svc/api"],
    }
    assert payload["kaeter"]["modules"]["ch.open:image"] == {
        "id": "ch.open:image",
        "path": "deploy/image",
        "type": "Makefile",
        "annotations": {"owner": "platform"},
        "autoRelease": "1.1.0",
        "dependencies": ["libs/common"],
    }
    assert payload["kaeter"]["modules"]["docs"] == {"id": "docs", "path": "docs", "type": "Other"}
    assert payload["helm"] == {"charts": ["charts/api/"]}
    assert payload["commit"] == {
        "tags": ["release"],
        "releasePlan": {"releases": [{"moduleId": "ch.open:image", "version": "1.1.0"}]},
    }
    assert "pullRequest" not in payload


def test_pull_request_fields() -> None:
    payload = information_to_dict(_information(PullRequest(title="Title", body="")))
    assert payload["pullRequest"] == {"title": "Title", "releasePlan": {"releases": []}}


def test_written_changeset_is_stable(tmp_path: Path) -> None:
    first = write_changeset(_information(), tmp_path / "out" / "changeset.json")
    content = first.read_text(encoding="utf-8")
    write_changeset(_information(), first)

    assert first.read_text(encoding="utf-8") == content
    assert content.endswith("}\n")
    assert list(json.loads(content)) == ["bazel", "commit", "files", "helm", "kaeter"]


def test_modules_file(tmp_path: Path) -> None:
    path = write_modules([DOCS, IMAGE], tmp_path / "modules.json")
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert sorted(payload["modules"]) == ["ch.open:image", "docs"]
    assert modules_to_dict([DOCS])["docs"]["type"] == "Other"
