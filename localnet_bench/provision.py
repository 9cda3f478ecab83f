from __future__ import annotations

import sys
from typing import Tuple

from .commands import CommandResult, CommandRunner
from .config import BenchSettings
from .models import BenchEnvironment


def build_node(commands: CommandRunner, settings: BenchSettings) -> CommandResult:
    return commands.run(["make", settings.build_target], cwd=settings.repo_path)


def provision_environment(
    commands: CommandRunner, settings: BenchSettings, python: str = sys.executable
) -> Tuple[CommandResult, BenchEnvironment]:
    """
    Create the venv and install the pinned requirements plus the load tool.

    Stops at the first failing command and returns its result.
    """
    env = BenchEnvironment(venv_dir=settings.in_repo(settings.venv_dir))
    steps = [
        [python, "-m", "venv", env.venv_dir],
        [env.python, "-m", "pip", "install", "-r", settings.in_repo(settings.requirements)],
        [env.python, "-m", "pip", "install", settings.loadtest_package],
    ]
    result = CommandResult(0)
    for command in steps:
        result = commands.run(command, cwd=settings.repo_path)
        if not result.ok:
            break
    return result, env
