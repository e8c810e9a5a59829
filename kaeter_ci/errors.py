"""Error types raised by kaeter-ci components."""

from __future__ import annotations

from typing import Sequence


class KaeterCIError(RuntimeError):
    """Base class for every error raised by kaeter-ci."""


class CommandError(KaeterCIError):
    """Raised when an external command fails to run or exits non-zero."""

    def __init__(
        self,
        message: str,
        *,
        args: Sequence[str] = (),
        returncode: int | None = None,
        output: str = "",
    ) -> None:
        super().__init__(message)
        self.command = list(args)
        self.returncode = returncode
        self.output = output


class GitCommandError(CommandError):
    """A git invocation failed."""


class BuildGraphQueryError(CommandError):
    """A Bazel query failed."""


class DryRunError(CommandError):
    """A make dry run of a build step failed."""


class LabelError(KaeterCIError, ValueError):
    """Raised for target labels that cannot be split unambiguously."""


class ModuleDiscoveryError(KaeterCIError):
    """Raised when module discovery cannot complete for the repository."""


class VersionsFileError(KaeterCIError):
    """Raised when a single versions file cannot be turned into a module."""


class ReleasePlanError(KaeterCIError):
    """Raised when a commit message carries no usable release plan."""


class CheckFailedError(KaeterCIError):
    """Raised by the detector when one of its checkers fails."""

    def __init__(self, checker: str, cause: Exception) -> None:
        super().__init__(f"{checker} checker failed: {cause}")
        self.checker = checker
        self.cause = cause


__all__ = [
    "BuildGraphQueryError",
    "CheckFailedError",
    "CommandError",
    "DryRunError",
    "GitCommandError",
    "KaeterCIError",
    "LabelError",
    "ModuleDiscoveryError",
    "ReleasePlanError",
    "VersionsFileError",
]
