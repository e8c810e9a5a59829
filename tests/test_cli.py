"""CLI parser and command tests."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest

from kaeter_ci import cli
from kaeter_ci.cli import _build_parser
from tests._fixtures.repo_builder import FakeRunner, RepoBuilder


def test_cli_defaults_for_check() -> None:
    args = _build_parser().parse_args(["check"])
    assert args.command == "check"
    assert args.previous_commit == "HEAD~1"
    assert args.latest_commit == "HEAD"
    assert args.output is None
    assert args.skip_bazel is False
    assert args.pr_title is None
    assert args.path == "."
    assert args.log_level == "info"
    assert args.log_file is None


def test_cli_global_options_before_command() -> None:
    args = _build_parser().parse_args(["-p", "repo", "-l", "trace", "-v", "detect-all", "--skip-bazel"])
    assert args.path == "repo"
    assert args.log_level == "trace"
    assert args.verbose is True
    assert args.command == "detect-all"
    assert args.skip_bazel is True


def test_cli_rejects_unknown_log_level() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args(["--log-level", "loud", "check"])


def test_cli_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args([])


def _install_runner(monkeypatch: pytest.MonkeyPatch, runner: FakeRunner) -> None:
    for module in ("kaeter_ci.git.client", "kaeter_ci.git.diff", "kaeter_ci.bazel.query", "kaeter_ci.makefiles"):
        monkeypatch.setattr(f"{module}.run_command", runner)


def _repo_runner(root: Path) -> FakeRunner:
    def bazel(argv):  # type: ignore[no-untyped-def]
        if argv[-1].startswith("kind("):
            return "//svc/api:main.go\n"
        return "//svc/api:server\n"

    return FakeRunner(
        {
            ("git", "rev-parse", "--show-toplevel"): f"{root}\n",
            ("git", "diff"): "M\tsvc/api/main.go\nM\tcharts/api/values.yaml\n",
            ("git", "log"): "[kaeter][ci] update api",
            ("bazel", "query"): bazel,
            ("make",): "bazel run //svc/api:server\n",
        }
    )


def test_check_writes_changeset(repo_builder: RepoBuilder, monkeypatch: pytest.MonkeyPatch) -> None:
    root = repo_builder.path()
    repo_builder.module("deploy/api", "api-image")
    repo_builder.module("docs", "docs", module_type="Other")
    repo_builder.write({"charts/api/Chart.yaml": "name: api\n"})
    runner = _repo_runner(root)
    _install_runner(monkeypatch, runner)

    cli.main(["-p", str(root), "check", "--pr-title", "[release] api"])

    payload = json.loads((root / "changeset.json").read_text(encoding="utf-8"))
    assert payload["files"]["modified"] == ["charts/api/values.yaml", "svc/api/main.go"]
    assert payload["bazel"]["targets"] == ["//svc/api:server"]
    assert list(payload["kaeter"]["modules"]) == ["api-image"]
    assert payload["helm"]["charts"] == ["charts/api/"]
    assert payload["commit"]["tags"] == ["kaeter", "ci"]
    assert payload["pullRequest"] == {"title": "[release] api", "releasePlan": {"releases": []}}
    assert ["git", "diff", "--no-renames", "--name-status", "HEAD~1", "HEAD"] in runner.commands()


def test_config_drives_executables(repo_builder: RepoBuilder, monkeypatch: pytest.MonkeyPatch) -> None:
    root = repo_builder.path()
    repo_builder.write({".kaeter-ci.yml": "bazel:\n  skip: true\noutput:\n  changeset: out/changes.json\n"})
    runner = _repo_runner(root)
    _install_runner(monkeypatch, runner)

    cli.main(["-p", str(root), "check"])

    assert (root / "out" / "changes.json").is_file()
    assert not any(argv[0] == "bazel" for argv in runner.commands())


def test_modules_command(repo_builder: RepoBuilder, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    root = repo_builder.path()
    repo_builder.module("deploy/api", "api-image")
    _install_runner(monkeypatch, _repo_runner(root))
    output = tmp_path / "modules.json"

    cli.main(["-p", str(root), "modules", "--output", str(output)])

    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload == {"modules": {"api-image": {"id": "api-image", "path": "deploy/api", "type": "Makefile"}}}


def test_detect_all_writes_both_files(repo_builder: RepoBuilder, monkeypatch: pytest.MonkeyPatch) -> None:
    root = repo_builder.path()
    repo_builder.module("deploy/api", "api-image")
    _install_runner(monkeypatch, _repo_runner(root))

    cli.main(["-p", str(root), "detect-all", "--changes-output", "c.json", "--modules-output", "m.json"])

    assert "api-image" in json.loads((root / "m.json").read_text(encoding="utf-8"))["modules"]
    assert json.loads((root / "c.json").read_text(encoding="utf-8"))["commit"]["tags"] == ["kaeter", "ci"]


def test_failure_exits_without_output(
    repo_builder: RepoBuilder, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    root = repo_builder.path()
    runner = _repo_runner(root)
    runner.responses[("bazel", "query")] = subprocess.CalledProcessError(2, ["bazel"], stderr="no WORKSPACE")
    _install_runner(monkeypatch, runner)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["-p", str(root), "check"])

    assert excinfo.value.code == 1
    assert "bazel checker failed" in capsys.readouterr().err
    assert not (root / "changeset.json").exists()


def test_invalid_config_exits(repo_builder: RepoBuilder, monkeypatch: pytest.MonkeyPatch) -> None:
    root = repo_builder.path()
    repo_builder.write({".kaeter-ci.yml": "- not a mapping\n"})
    _install_runner(monkeypatch, _repo_runner(root))

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["-p", str(root), "modules"])

    assert excinfo.value.code == 1


def test_missing_explicit_config_exits(
    repo_builder: RepoBuilder, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    root = repo_builder.path()
    _install_runner(monkeypatch, _repo_runner(root))

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["-p", str(root), "--config", str(root / "ci.yml"), "modules"])

    assert excinfo.value.code == 1
    assert "does not exist" in capsys.readouterr().err
    assert not (root / "modules.json").exists()


def test_log_file_receives_records(
    repo_builder: RepoBuilder, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    root = repo_builder.path()
    repo_builder.module("deploy/api", "api-image")
    _install_runner(monkeypatch, _repo_runner(root))
    log_file = tmp_path / "kaeter-ci.log"

    cli.main(["-p", str(root), "--log-file", str(log_file), "check"])

    content = log_file.read_text(encoding="utf-8")
    assert "kaeter_ci.change" in content
    assert "2 modified" in content
