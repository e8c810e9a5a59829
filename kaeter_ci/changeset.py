"""JSON serialization of change information and module lists."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

from .models import Information, KaeterModule, modules_by_id
from .release_plan import ReleasePlan


def information_to_dict(info: Information) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "files": {
            "added": list(info.files.added),
            "modified": list(info.files.modified),
            "removed": list(info.files.removed),
        },
        "bazel": {
            "bazelSources": list(info.bazel.bazel_sources),
            "workspace": info.bazel.workspace,
            "sourceFiles": list(info.bazel.source_files),
            "buildFiles": list(info.bazel.build_files),
            "targets": list(info.bazel.targets),
            "packages": list(info.bazel.packages),
        },
        "kaeter": {"modules": modules_to_dict(info.kaeter.modules.values())},
        "helm": {"charts": list(info.helm.charts)},
        "commit": {
            "tags": list(info.commit.tags),
            "releasePlan": _release_plan_to_dict(info.commit.release_plan),
        },
    }
    if info.pull_request is not None:
        pull_request: Dict[str, Any] = {
            "releasePlan": _release_plan_to_dict(info.pull_request.release_plan)
        }
        if info.pull_request.title:
            pull_request["title"] = info.pull_request.title
        if info.pull_request.body:
            pull_request["body"] = info.pull_request.body
        payload["pullRequest"] = pull_request
    return payload


def module_to_dict(module: KaeterModule) -> Dict[str, Any]:
    data: Dict[str, Any] = {"id": module.id, "path": module.path, "type": module.type}
    if module.annotations:
        data["annotations"] = dict(module.annotations)
    if module.auto_release:
        data["autoRelease"] = module.auto_release
    if module.dependencies:
        data["dependencies"] = list(module.dependencies)
    return data


def modules_to_dict(modules: Iterable[KaeterModule]) -> Dict[str, Dict[str, Any]]:
    return {key: module_to_dict(module) for key, module in modules_by_id(modules).items()}


def dumps(payload: Mapping[str, Any]) -> str:
    """Serialize deterministically so identical runs produce identical bytes."""
    return json.dumps(payload, indent=2, sort_keys=True) + "\n"


def write_changeset(info: Information, path: Path) -> Path:
    return _write(path, dumps(information_to_dict(info)))


def write_modules(modules: Iterable[KaeterModule], path: Path) -> Path:
    return _write(path, dumps({"modules": modules_to_dict(modules)}))


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _release_plan_to_dict(plan: ReleasePlan) -> Dict[str, List[Dict[str, str]]]:
    return {
        "releases": [
            {"moduleId": target.module_id, "version": target.version} for target in plan.releases
        ]
    }


__all__ = [
    "dumps",
    "information_to_dict",
    "module_to_dict",
    "modules_to_dict",
    "write_changeset",
    "write_modules",
]
