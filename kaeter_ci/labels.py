"""Helpers for Bazel labels and repository-relative paths."""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence

from .errors import LabelError

LABEL_CHARACTERS = "A-Za-z0-9_-"

# //my/package:target, //my/package
REPO_LABEL_PATTERN = re.compile(
    rf"//(?:[{LABEL_CHARACTERS}]+/)*[{LABEL_CHARACTERS}]+(?::[{LABEL_CHARACTERS}]+)?"
)
# :target, relative to the current package
PACKAGE_LABEL_PATTERN = re.compile(rf":[{LABEL_CHARACTERS}]+")

PACKAGE_PREFIX = "//"
EXTERNAL_PREFIX = "@"


def is_external(label: str) -> bool:
    """Return True for labels pointing outside the main repository."""
    return label.startswith(EXTERNAL_PREFIX)


def split_label(label: str) -> tuple[str, str]:
    """Split ``//pkg:name`` into ``("//pkg", "name")``.

    A label without a colon is a package label and yields an empty name.
    Package paths never contain a colon, so more than one colon means the
    label is malformed and is rejected rather than guessed at.
    """
    if label.count(":") > 1:
        raise LabelError(f"Ambiguous target label '{label}': more than one ':'")
    package, _, name = label.partition(":")
    return package, name


def package_of(label: str) -> str:
    """Return the package portion of a target label."""
    return split_label(label)[0]


def label_to_path(label: str) -> str:
    """Convert a source file label into a repository-relative path.

    ``//pkg/sub:file.go`` becomes ``pkg/sub/file.go`` and a file in the root
    package (``//:WORKSPACE``) becomes ``WORKSPACE``.
    """
    stripped = label.lstrip("/")
    package, sep, name = stripped.partition(":")
    if not sep:
        return package
    if not package:
        return name
    return f"{package}/{name}"


def package_label_for_path(relative_path: str) -> str:
    """Return the package label (``//a/b``) of a repository-relative directory."""
    normalized = relative_path.replace("\\", "/").strip("/")
    if normalized == ".":
        normalized = ""
    return f"{PACKAGE_PREFIX}{normalized}"


def with_trailing_slash(path: str) -> str:
    """Normalize a directory path so prefix tests only match whole components."""
    normalized = path.replace("\\", "/")
    return normalized if normalized.endswith("/") else f"{normalized}/"


def has_prefix(path: str, prefix: str) -> bool:
    return path.replace("\\", "/").startswith(prefix)


def any_has_prefix(paths: Iterable[str], prefix: str) -> bool:
    return any(has_prefix(path, prefix) for path in paths)


def unique(items: Iterable[str]) -> List[str]:
    """Deduplicate while preserving first-seen order."""
    seen: set[str] = set()
    result: List[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        result.append(item)
    return result


def sorted_unique(items: Iterable[str]) -> List[str]:
    return sorted(set(items))


def packages_from_targets(targets: Sequence[str]) -> List[str]:
    """Project target labels onto their packages, sorted and deduplicated."""
    return sorted(unique(package_of(target) for target in targets))


def remove_trailing_empty(values: Sequence[str | None]) -> List[str]:
    """Cut a list of optional regex groups at the first group that did not match."""
    result: List[str] = []
    for value in values:
        if not value:
            break
        result.append(value)
    return result


__all__ = [
    "PACKAGE_LABEL_PATTERN",
    "REPO_LABEL_PATTERN",
    "any_has_prefix",
    "has_prefix",
    "is_external",
    "label_to_path",
    "package_label_for_path",
    "package_of",
    "packages_from_targets",
    "remove_trailing_empty",
    "sorted_unique",
    "split_label",
    "unique",
    "with_trailing_slash",
]
