"""CLI entrypoints for kaeter-ci commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .bazel.query import BazelQuery
from .change import (
    BazelChecker,
    CommitChecker,
    Detector,
    FileChecker,
    HelmChecker,
    KaeterChecker,
    MakefileTargetMiner,
    find_helm_charts,
)
from .changeset import write_changeset, write_modules
from .config import ConfigError, KaeterCIConfig, load_config
from .errors import KaeterCIError
from .git.client import GitClient
from .git.diff import FileDiffer
from .logging import LOG_LEVEL_NAMES, configure_logging, get_logger
from .makefiles import MakeDryRun
from .models import Information, KaeterModule, PullRequest
from .modules import discover_modules


def _add_revision_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--previous-commit",
        default="HEAD~1",
        help="Commit to compare against (defaults to HEAD~1).",
    )
    parser.add_argument(
        "--latest-commit",
        default="HEAD",
        help="Commit holding the changes to inspect (defaults to HEAD).",
    )
    parser.add_argument(
        "--skip-bazel",
        action="store_true",
        help="Do not query Bazel; modules are matched on paths only.",
    )
    parser.add_argument(
        "--pr-title",
        default=None,
        help="Title of the pull request being checked, if any.",
    )
    parser.add_argument(
        "--pr-body",
        default=None,
        help="Body of the pull request being checked, if any.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kaeter-ci",
        description="Detect which build targets, modules and charts a change affects.",
    )
    parser.add_argument(
        "-p",
        "--path",
        default=".",
        help="Path inside the repository to inspect (defaults to current directory).",
    )
    parser.add_argument(
        "-l",
        "--log-level",
        default="info",
        choices=LOG_LEVEL_NAMES,
        help="Log level (defaults to info).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Shortcut for --log-level debug.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Configuration file (defaults to .kaeter-ci.yml at the repository root).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        help="Compute the changes between two commits and write them as JSON.",
    )
    _add_revision_options(check_parser)
    check_parser.add_argument(
        "--output",
        default=None,
        help="Where to write the changeset (defaults to changeset.json).",
    )

    modules_parser = subparsers.add_parser(
        "modules",
        help="List every kaeter module in the repository as JSON.",
    )
    modules_parser.add_argument(
        "--output",
        default=None,
        help="Where to write the module list (defaults to modules.json).",
    )

    detect_parser = subparsers.add_parser(
        "detect-all",
        help="Discover modules and compute changes in a single pass.",
    )
    _add_revision_options(detect_parser)
    detect_parser.add_argument(
        "--changes-output",
        default=None,
        help="Where to write the changeset (defaults to changeset.json).",
    )
    detect_parser.add_argument(
        "--modules-output",
        default=None,
        help="Where to write the module list (defaults to modules.json).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for kaeter-ci commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        level=args.log_level,
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )
    logger = get_logger("cli")

    try:
        git = GitClient()
        root = git.top_level(Path(args.path).expanduser().resolve())
        if args.config:
            config = load_config(Path(args.config), required=True)
        else:
            config = load_config(root)
        git = GitClient(timeout=config.command_timeout)

        if args.command == "check":
            modules = discover_modules(root, config.modules.versions_files)
            info = _detect(root, config, git, args, modules)
            output = _resolve_output(root, args.output or config.output.changeset)
            write_changeset(info, output)
            print(f"Changeset written to {_relativize(output)}")
        elif args.command == "modules":
            modules = discover_modules(root, config.modules.versions_files)
            output = _resolve_output(root, args.output or config.output.modules)
            write_modules(modules, output)
            print(f"{len(modules)} modules written to {_relativize(output)}")
        elif args.command == "detect-all":
            modules = discover_modules(root, config.modules.versions_files)
            info = _detect(root, config, git, args, modules)
            changes_output = _resolve_output(
                root, args.changes_output or config.output.changeset
            )
            modules_output = _resolve_output(root, args.modules_output or config.output.modules)
            write_modules(modules, modules_output)
            write_changeset(info, changes_output)
            print(f"{len(modules)} modules written to {_relativize(modules_output)}")
            print(f"Changeset written to {_relativize(changes_output)}")
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except ConfigError as exc:
        parser.exit(1, f"kaeter-ci: invalid configuration: {exc}\n")
    except KaeterCIError as exc:
        logger.debug("Command failed", exc_info=True)
        parser.exit(
            1, f"kaeter-ci {args.command} failed: {exc}\nRun with --verbose for more details.\n"
        )
    except OSError as exc:
        parser.exit(1, f"kaeter-ci {args.command} failed: {exc}\n")


def _detect(
    root: Path,
    config: KaeterCIConfig,
    git: GitClient,
    args: argparse.Namespace,
    modules: List[KaeterModule],
) -> Information:
    timeout = config.command_timeout
    differ = FileDiffer(timeout=timeout)
    query = BazelQuery(executable=config.bazel.executable, timeout=timeout)
    miner = MakefileTargetMiner(
        MakeDryRun(executable=config.make.executable, timeout=timeout),
        makefiles=config.make.makefiles,
        steps=config.make.steps,
    )

    detector = Detector(
        root,
        args.previous_commit,
        args.latest_commit,
        modules=modules,
        charts=find_helm_charts(root, config.helm.chart_file),
        pull_request=_pull_request(args),
        skip_bazel=bool(args.skip_bazel) or config.bazel.skip,
        file_checker=FileChecker(differ),
        bazel_checker=BazelChecker(root, query, third_party=config.bazel.third_party),
        kaeter_checker=KaeterChecker(root, miner),
        helm_checker=HelmChecker(),
        commit_checker=CommitChecker(root, git),
    )
    return detector.check()


def _pull_request(args: argparse.Namespace) -> Optional[PullRequest]:
    if args.pr_title is None and args.pr_body is None:
        return None
    return PullRequest(title=args.pr_title or "", body=args.pr_body or "")


def _resolve_output(root: Path, output: str) -> Path:
    path = Path(output).expanduser()
    return path if path.is_absolute() else root / path


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
