from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .models import ConfigError

ENV_PREFIX = "FT_BENCH_"
SETTINGS_SECTION = "benchmark"


@dataclass(frozen=True)
class BenchSettings:
    """Fixed parameters of the update-and-benchmark cycle."""

    repo_dir: str = "."
    branch: str = "master"
    remote: str = "origin"
    build_target: str = "neard"
    binary_path: str = "target/release/"
    near_home: str = "~/.near"
    num_nodes: int = 1
    num_shards: int = 1
    venv_dir: str = ".venv"
    requirements: str = "pytest/requirements.txt"
    loadtest_package: str = "locust"
    loadtest_process: str = "locust"
    locust_dir: str = "pytest/tests/loadtest/locust"
    scenario: str = "locustfiles/ft.py"
    host: str = "127.0.0.1:3030"
    users: int = 3500
    spawn_rate: int = 10
    processes: int = 8
    funding_key_env: str = "KEY"
    results_dir: str = "results"

    @property
    def repo_path(self) -> Path:
        return Path(self.repo_dir).expanduser().resolve()

    def in_repo(self, relative: str) -> Path:
        path = Path(relative).expanduser()
        if path.is_absolute():
            return path
        return self.repo_path / path

    @property
    def near_home_path(self) -> Path:
        return Path(self.near_home).expanduser()

    @property
    def upstream_ref(self) -> str:
        return f"{self.remote}/{self.branch}"


def _is_int_field(field_type: Any) -> bool:
    return field_type in (int, "int")


def _from_file(name: str, field_type: Any, value: Any, source: str) -> Any:
    # YAML already typed the value; only exact types are accepted.
    if _is_int_field(field_type):
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        raise ConfigError(f"{source}: {name} must be an integer, got {value!r}")
    if isinstance(value, str):
        return value
    raise ConfigError(f"{source}: {name} must be a string, got {value!r}")


def _from_env(name: str, field_type: Any, value: str, source: str) -> Any:
    if _is_int_field(field_type):
        try:
            return int(value.strip())
        except ValueError:
            raise ConfigError(f"{source}: {name} must be an integer, got {value!r}") from None
    return value


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    section = data.get(SETTINGS_SECTION, {}) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"{path}: '{SETTINGS_SECTION}' must be a mapping")
    return section


def load_settings(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    required: bool = False,
) -> BenchSettings:
    """
    Load settings from ``path`` and ``FT_BENCH_*`` overrides.

    A missing ``path`` means defaults unless ``required`` is set.

    Values from the environment win over the file, the file wins over the
    built-in defaults.
    """
    environ = os.environ if environ is None else environ
    fields = {field.name: field for field in dataclasses.fields(BenchSettings)}
    values: Dict[str, Any] = {}

    if path is not None and required and not Path(path).is_file():
        raise ConfigError(f"Settings file not found: {path}")
    if path is not None and Path(path).is_file():
        for key, value in _read_yaml(Path(path)).items():
            if key not in fields:
                raise ConfigError(f"{path}: unknown setting '{key}'")
            values[key] = _from_file(key, fields[key].type, value, str(path))

    for name, field in fields.items():
        env_key = f"{ENV_PREFIX}{name.upper()}"
        if env_key in environ:
            values[name] = _from_env(name, field.type, environ[env_key], env_key)

    return BenchSettings(**values)
