"""Change checkers and the detector that chains them."""

from .bazel import BazelChecker
from .commit import CommitChecker, extract_tags, pull_request_check
from .detector import Detector
from .files import FileChecker
from .helm import HelmChecker, find_helm_charts
from .kaeter import KaeterChecker, MakefileTargetMiner, TargetMiner

__all__ = [
    "BazelChecker",
    "CommitChecker",
    "Detector",
    "FileChecker",
    "HelmChecker",
    "KaeterChecker",
    "MakefileTargetMiner",
    "TargetMiner",
    "extract_tags",
    "find_helm_charts",
    "pull_request_check",
]
