from __future__ import annotations

import os
from typing import List, Mapping, Optional

from .commands import CommandResult, CommandRunner
from .config import BenchSettings
from .models import BenchEnvironment, RunConfiguration


def build_locust_command(env: BenchEnvironment, run_config: RunConfiguration) -> List[str]:
    return [
        str(env.executable("locust")),
        "-H",
        run_config.host,
        "-f",
        run_config.scenario,
        f"--funding-key={run_config.funding_key}",
        "-u",
        str(run_config.users),
        "-r",
        str(run_config.spawn_rate),
        "--processes",
        str(run_config.processes),
        "--headless",
    ]


def get_command_env(
    env: BenchEnvironment,
    run_config: RunConfiguration,
    base: Optional[Mapping[str, str]] = None,
):
    command_env = env.environ(dict(os.environ if base is None else base))
    command_env[run_config.funding_key_env] = str(run_config.funding_key)
    return command_env


def run_locust(
    commands: CommandRunner,
    settings: BenchSettings,
    env: BenchEnvironment,
    run_config: RunConfiguration,
) -> CommandResult:
    return commands.run(
        build_locust_command(env, run_config),
        cwd=settings.in_repo(settings.locust_dir),
        env=get_command_env(env, run_config),
    )
