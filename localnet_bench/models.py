from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from .config import BenchSettings


class ConfigError(ValueError):
    """Raised when settings or the run configuration cannot be used."""


@dataclass(slots=True, frozen=True)
class RevisionPair:
    """Local and upstream commit identifiers of the tracked branch."""

    local: str
    remote: str

    @property
    def up_to_date(self) -> bool:
        return self.local == self.remote


class TerminationOutcome(enum.Enum):
    KILLED = "killed"
    NOT_RUNNING = "not_running"
    ERROR = "error"


@dataclass(slots=True, frozen=True)
class TerminationResult:
    target: str
    outcome: TerminationOutcome
    detail: str = ""


@dataclass(slots=True, frozen=True)
class LocalnetHandle:
    """A running local network started by the orchestrator."""

    home: Path
    binary_path: Path
    num_nodes: int
    num_shards: int
    rpc_host: str

    @property
    def localnet_dir(self) -> Path:
        return self.home / "localnet"

    def node_dir(self, index: int = 0) -> Path:
        return self.localnet_dir / f"node{index}"

    def validator_key_path(self, index: int = 0) -> Path:
        return self.node_dir(index) / "validator_key.json"

    @property
    def rpc_url(self) -> str:
        return f"http://{self.rpc_host}"


@dataclass(slots=True, frozen=True)
class BenchEnvironment:
    """An isolated python environment provisioned for the load generator."""

    venv_dir: Path

    @property
    def bin_dir(self) -> Path:
        return self.venv_dir / "bin"

    @property
    def python(self) -> Path:
        return self.bin_dir / "python"

    def executable(self, name: str) -> Path:
        return self.bin_dir / name

    def environ(self, base: Dict[str, str]) -> Dict[str, str]:
        """
        Return ``base`` adjusted the way ``activate`` adjusts a shell.
        """
        env = dict(base)
        env["VIRTUAL_ENV"] = str(self.venv_dir)
        env["PATH"] = f"{self.bin_dir}:{base.get('PATH', '')}".rstrip(":")
        env.pop("PYTHONHOME", None)
        return env


@dataclass(slots=True, frozen=True)
class RunConfiguration:
    """Fully resolved parameters of one benchmark invocation."""

    funding_key: Path
    host: str
    scenario: str
    users: int
    spawn_rate: int
    processes: int
    funding_key_env: str = "KEY"

    @staticmethod
    def resolve(settings: "BenchSettings", localnet: LocalnetHandle) -> "RunConfiguration":
        funding_key = localnet.validator_key_path(0)
        if not funding_key.is_file():
            raise ConfigError(f"Validator key not found at {funding_key}")
        for name in ("users", "spawn_rate", "processes"):
            value = getattr(settings, name)
            if value <= 0:
                raise ConfigError(f"{name} must be positive, got {value}")
        if not settings.host:
            raise ConfigError("host must not be empty")
        return RunConfiguration(
            funding_key=funding_key,
            host=localnet.rpc_host,
            scenario=settings.scenario,
            users=settings.users,
            spawn_rate=settings.spawn_rate,
            processes=settings.processes,
            funding_key_env=settings.funding_key_env,
        )


@dataclass(slots=True)
class RunRecord:
    """Summary of one completed cycle, persisted to the results directory."""

    revisions: RevisionPair
    exit_code: int
    specs: Dict[str, str]
    node_version: Optional[str] = None
    timestamp: int = 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "local": self.revisions.local,
            "remote": self.revisions.remote,
            "exitCode": self.exit_code,
            "nodeVersion": self.node_version,
            "specs": self.specs,
            "timestamp": self.timestamp,
        }
