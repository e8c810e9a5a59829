"""Discovery of kaeter modules in a repository."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Sequence

from ..errors import ModuleDiscoveryError, VersionsFileError
from ..logging import get_logger
from ..models import KaeterModule
from .versions import parse_versions

DEFAULT_VERSIONS_FILES: Sequence[str] = ("versions.yaml", "versions.yml")

_EXCLUDED_DIRS = {".git", ".hg", ".svn", "node_modules", "__pycache__"}
# bazel-bin, bazel-out, bazel-<workspace> and friends are build output trees.
_EXCLUDED_DIR_PREFIXES = ("bazel-",)

logger = get_logger("modules")


def find_versions_files(
    root: Path, names: Sequence[str] = DEFAULT_VERSIONS_FILES
) -> List[Path]:
    """Return every versions file below ``root`` in a stable order."""
    if not root.is_dir():
        raise ModuleDiscoveryError(f"unable to search {root} for modules: not a directory")

    wanted = set(names)
    found: List[Path] = []

    def _raise(error: OSError) -> None:
        raise ModuleDiscoveryError(f"unable to search {root} for modules: {error}") from error

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames[:] = sorted(
            name
            for name in dirnames
            if name not in _EXCLUDED_DIRS and not name.startswith(_EXCLUDED_DIR_PREFIXES)
        )
        for filename in sorted(filenames):
            if filename in wanted:
                found.append(Path(dirpath) / filename)
    return found


def read_module(versions_path: Path, root: Path) -> KaeterModule:
    """Turn a single versions file into a module description.

    Raises VersionsFileError for a malformed file and ModuleDiscoveryError when
    the module declares a dependency path that does not exist.
    """
    module_dir = versions_path.parent
    relative = module_dir.relative_to(root).as_posix()
    try:
        text = versions_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise VersionsFileError(f"could not read {versions_path}: {exc}") from exc
    try:
        versions = parse_versions(text)
        auto_release = versions.auto_release()
    except VersionsFileError as exc:
        raise VersionsFileError(f"could not load {relative}: {exc}") from exc

    missing = [dep for dep in versions.dependencies if not (root / dep).exists()]
    if missing:
        raise ModuleDiscoveryError(
            f"invalid dependency path in {versions.id} ({relative}): {', '.join(missing)}"
        )

    return KaeterModule(
        id=versions.id,
        path=relative,
        type=versions.module_type,
        annotations=dict(versions.annotations) or None,
        auto_release=auto_release,
        dependencies=tuple(versions.dependencies),
    )


def discover_modules(
    root: Path | str, versions_files: Sequence[str] = DEFAULT_VERSIONS_FILES
) -> List[KaeterModule]:
    """Find and parse every kaeter module below ``root``.

    A malformed versions file is skipped with a warning so that one broken
    module does not block change detection for the rest of the repository.
    """
    repo_root = Path(root).resolve()
    modules: List[KaeterModule] = []
    for versions_path in find_versions_files(repo_root, versions_files):
        try:
            module = read_module(versions_path, repo_root)
        except VersionsFileError as exc:
            logger.warning("Skipping module at %s: %s", versions_path, exc)
            continue
        logger.debug("Found module %s at %s", module.id, module.path)
        modules.append(module)
    return modules


__all__ = ["DEFAULT_VERSIONS_FILES", "discover_modules", "find_versions_files", "read_module"]
