from __future__ import annotations

from .commands import CommandResult, CommandRunner
from .config import BenchSettings
from .models import RevisionPair


class RevisionError(RuntimeError):
    def __init__(self, ref: str, returncode: int):
        super().__init__(f"Could not resolve revision '{ref}'")
        self.ref = ref
        self.returncode = returncode


def fetch(commands: CommandRunner, settings: BenchSettings) -> CommandResult:
    return commands.run(["git", "fetch", settings.remote], cwd=settings.repo_path)


def resolve_revision(commands: CommandRunner, settings: BenchSettings, ref: str) -> str:
    result = commands.capture(["git", "rev-parse", ref], cwd=settings.repo_path)
    if not result.ok or not result.stdout:
        raise RevisionError(ref, result.returncode or 1)
    return result.stdout.splitlines()[0].strip()


def compare_revisions(commands: CommandRunner, settings: BenchSettings) -> RevisionPair:
    local = resolve_revision(commands, settings, settings.branch)
    remote = resolve_revision(commands, settings, settings.upstream_ref)
    return RevisionPair(local=local, remote=remote)


def pull(commands: CommandRunner, settings: BenchSettings) -> CommandResult:
    return commands.run(["git", "pull"], cwd=settings.repo_path)
