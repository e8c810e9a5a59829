"""Kaeter module discovery."""

from .discovery import DEFAULT_VERSIONS_FILES, discover_modules, find_versions_files, read_module
from .versions import VersionsFile, parse_versions

__all__ = [
    "DEFAULT_VERSIONS_FILES",
    "VersionsFile",
    "discover_modules",
    "find_versions_files",
    "parse_versions",
    "read_module",
]
