"""Configuration loading for kaeter-ci (.kaeter-ci.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".kaeter-ci.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class BazelConfig:
    """Bazel query settings."""

    executable: str = "bazel"
    third_party: str = "//3rdparty/..."
    skip: bool = False


@dataclass
class MakeConfig:
    """Convention-build (Makefile) settings."""

    executable: str = "make"
    makefiles: List[str] = field(default_factory=lambda: ["Makefile.kaeter", "Makefile"])
    steps: List[str] = field(default_factory=lambda: ["snapshot", "release"])


@dataclass
class ModulesConfig:
    """Versioned module discovery settings."""

    versions_files: List[str] = field(default_factory=lambda: ["versions.yaml", "versions.yml"])


@dataclass
class HelmConfig:
    """Helm chart discovery settings."""

    chart_file: str = "Chart.yaml"


@dataclass
class OutputConfig:
    """Default locations of the produced artifacts."""

    changeset: str = "changeset.json"
    modules: str = "modules.json"


@dataclass
class KaeterCIConfig:
    """Represents the settings defined in .kaeter-ci.yml."""

    root: Path
    bazel: BazelConfig = field(default_factory=BazelConfig)
    make: MakeConfig = field(default_factory=MakeConfig)
    modules: ModulesConfig = field(default_factory=ModulesConfig)
    helm: HelmConfig = field(default_factory=HelmConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    command_timeout: Optional[float] = None


def load_config(config_path: Path, *, required: bool = False) -> KaeterCIConfig:
    """Load configuration from disk, falling back to defaults when absent.

    With ``required`` a missing file is an error instead.
    """
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        if required:
            raise ConfigError(f"config file {config_file} does not exist")
        return KaeterCIConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = KaeterCIConfig(root=root)

    bazel_data = _as_dict(data.get("bazel"))
    if bazel_data:
        config.bazel.executable = _as_str(bazel_data.get("executable")) or config.bazel.executable
        config.bazel.third_party = _as_str(bazel_data.get("third_party")) or config.bazel.third_party
        skip = _as_bool(bazel_data.get("skip"))
        if skip is not None:
            config.bazel.skip = skip

    make_data = _as_dict(data.get("make"))
    if make_data:
        config.make.executable = _as_str(make_data.get("executable")) or config.make.executable
        config.make.makefiles = _as_str_list(make_data.get("makefiles")) or config.make.makefiles
        config.make.steps = _as_str_list(make_data.get("steps")) or config.make.steps

    modules_data = _as_dict(data.get("modules"))
    if modules_data:
        config.modules.versions_files = (
            _as_str_list(modules_data.get("versions_files")) or config.modules.versions_files
        )

    helm_data = _as_dict(data.get("helm"))
    if helm_data:
        config.helm.chart_file = _as_str(helm_data.get("chart_file")) or config.helm.chart_file

    output_data = _as_dict(data.get("output"))
    if output_data:
        config.output.changeset = _as_str(output_data.get("changeset")) or config.output.changeset
        config.output.modules = _as_str(output_data.get("modules")) or config.output.modules

    commands_data = _as_dict(data.get("commands"))
    if commands_data:
        timeout = _as_float(commands_data.get("timeout"))
        if timeout is not None and timeout <= 0:
            raise ConfigError("commands.timeout must be a positive number of seconds")
        config.command_timeout = timeout

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "BazelConfig",
    "ConfigError",
    "HelmConfig",
    "KaeterCIConfig",
    "MakeConfig",
    "ModulesConfig",
    "OutputConfig",
    "load_config",
]
