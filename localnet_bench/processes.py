from __future__ import annotations

import logging
from typing import List

import psutil

from .models import TerminationOutcome, TerminationResult


def _matches(proc: psutil.Process, name: str) -> bool:
    info = proc.info
    if info.get("name") == name:
        return True
    # Python entry points (locust) show up as the interpreter, match on argv.
    cmdline = info.get("cmdline") or []
    return any(arg == name or arg.endswith(f"/{name}") for arg in cmdline[:2])


def find_processes(name: str) -> List[psutil.Process]:
    found = []
    for proc in psutil.process_iter(["pid", "name", "cmdline"]):
        try:
            if _matches(proc, name):
                found.append(proc)
        except (psutil.NoSuchProcess, psutil.ZombieProcess):
            continue
    return found


def terminate_by_name(name: str) -> TerminationResult:
    """
    Forcefully kill every process called ``name``.

    A missing target is a normal outcome, not an error.
    """
    procs = find_processes(name)
    if not procs:
        return TerminationResult(name, TerminationOutcome.NOT_RUNNING)

    killed = 0
    errors = []
    for proc in procs:
        try:
            proc.kill()
            killed += 1
        except psutil.NoSuchProcess:
            continue
        except psutil.AccessDenied as exc:
            errors.append(f"pid {proc.pid}: {exc}")

    if errors:
        return TerminationResult(name, TerminationOutcome.ERROR, "; ".join(errors))
    if killed == 0:
        return TerminationResult(name, TerminationOutcome.NOT_RUNNING)
    logging.debug("Killed %d '%s' process(es)", killed, name)
    return TerminationResult(name, TerminationOutcome.KILLED, f"{killed} process(es)")
