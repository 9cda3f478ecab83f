from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

from .models import TerminationResult
from .processes import terminate_by_name

# What a shell reports for a command it cannot find.
COMMAND_NOT_FOUND = 127

Arg = Union[str, Path]


@dataclass(slots=True)
class CommandResult:
    returncode: int
    stdout: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def format_command(command: Sequence[Arg]) -> str:
    return " ".join(shlex.quote(str(part)) for part in command)


class CommandRunner:
    """
    Thin wrapper over ``subprocess`` used for every external tool.

    Output of the invoked tools is not captured (except for ``capture``) so
    that their messages reach the terminal verbatim.
    """

    def __init__(self, cwd: Optional[Path] = None):
        self.cwd = cwd

    def run(
        self,
        command: Sequence[Arg],
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> CommandResult:
        args = [str(part) for part in command]
        logging.info("+ %s", format_command(args))
        try:
            completed = subprocess.run(args, cwd=cwd or self.cwd, env=env, check=False)
        except FileNotFoundError:
            logging.error("%s: command not found", args[0])
            return CommandResult(COMMAND_NOT_FOUND)
        return CommandResult(completed.returncode)

    def capture(self, command: Sequence[Arg], cwd: Optional[Path] = None) -> CommandResult:
        args = [str(part) for part in command]
        logging.info("+ %s", format_command(args))
        try:
            completed = subprocess.run(
                args, cwd=cwd or self.cwd, capture_output=True, text=True, check=False
            )
        except FileNotFoundError:
            logging.error("%s: command not found", args[0])
            return CommandResult(COMMAND_NOT_FOUND)
        if completed.stderr:
            print(completed.stderr, end="")
        return CommandResult(completed.returncode, completed.stdout.strip())

    def terminate(self, name: str) -> TerminationResult:
        logging.info("+ kill -9 %s", name)
        return terminate_by_name(name)
