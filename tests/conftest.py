import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# The entry script lives at the repository root next to the package.
_project_root = Path(__file__).parent.parent
sys.path.insert(0, str(_project_root))

from localnet_bench.commands import CommandResult  # noqa: E402
from localnet_bench.config import BenchSettings  # noqa: E402
from localnet_bench.models import TerminationOutcome, TerminationResult  # noqa: E402


def label(args: List[str]) -> str:
    """Short, stable name for a recorded command."""
    if args[0] == "git":
        return args[1]
    if args[0] == "make":
        return "build"
    if args[0] == "nearup":
        return f"nearup {args[1]}"
    if args[0].endswith("/locust"):
        return "locust"
    if args[1:3] == ["-m", "venv"]:
        return "venv"
    if args[1:4] == ["-m", "pip", "install"]:
        return "pip requirements" if "-r" in args else "pip package"
    return " ".join(args)


class FakeCommands:
    """Recording stand-in for CommandRunner."""

    def __init__(
        self,
        local: str = "abc123",
        remote: str = "abc123",
        statuses: Optional[Dict[str, int]] = None,
        termination: TerminationOutcome = TerminationOutcome.NOT_RUNNING,
    ):
        self.revisions = {"master": local, "origin/master": remote}
        self.statuses = statuses or {}
        self.termination = termination
        self.calls: List[str] = []
        self.commands: List[List[str]] = []
        self.envs: List[Optional[Dict[str, str]]] = []
        self.cwds: List[Optional[Path]] = []

    def run(self, command, cwd=None, env=None) -> CommandResult:
        args = [str(part) for part in command]
        name = label(args)
        self.calls.append(name)
        self.commands.append(args)
        self.envs.append(dict(env) if env is not None else None)
        self.cwds.append(cwd)
        return CommandResult(self.statuses.get(name, 0))

    def capture(self, command, cwd=None) -> CommandResult:
        args = [str(part) for part in command]
        self.calls.append(label(args))
        self.commands.append(args)
        self.envs.append(None)
        self.cwds.append(cwd)
        ref = args[-1]
        if ref not in self.revisions:
            return CommandResult(128)
        return CommandResult(self.statuses.get("rev-parse", 0), self.revisions[ref])

    def terminate(self, name: str) -> TerminationResult:
        self.calls.append(f"kill {name}")
        self.commands.append(["kill", name])
        self.envs.append(None)
        self.cwds.append(None)
        return TerminationResult(name, self.termination)


@pytest.fixture
def settings(tmp_path: Path) -> BenchSettings:
    return BenchSettings(
        repo_dir=str(tmp_path / "repo"),
        near_home=str(tmp_path / "near"),
        results_dir=str(tmp_path / "results"),
    )


@pytest.fixture
def validator_key(settings: BenchSettings) -> Path:
    key = settings.near_home_path / "localnet" / "node0" / "validator_key.json"
    key.parent.mkdir(parents=True)
    key.write_text('{"account_id": "node0"}')
    return key


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    import os

    for key in list(os.environ):
        if key.startswith("FT_BENCH_"):
            monkeypatch.delenv(key)
