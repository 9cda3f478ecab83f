from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import requests

from .commands import CommandResult, CommandRunner
from .config import BenchSettings
from .models import LocalnetHandle, TerminationOutcome, TerminationResult

ORCHESTRATOR = "nearup"
STATUS_TIMEOUT = 10


def stop_localnet(commands: CommandRunner) -> TerminationResult:
    result = commands.run([ORCHESTRATOR, "stop"])
    if result.ok:
        return TerminationResult(ORCHESTRATOR, TerminationOutcome.KILLED)
    return TerminationResult(
        ORCHESTRATOR, TerminationOutcome.ERROR, f"exit status {result.returncode}"
    )


def start_localnet(
    commands: CommandRunner, settings: BenchSettings
) -> Tuple[CommandResult, LocalnetHandle]:
    """
    Start a fresh local network from the freshly built binary.

    Any previous network state under the near home is overridden.
    """
    handle = LocalnetHandle(
        home=settings.near_home_path,
        binary_path=settings.in_repo(settings.binary_path),
        num_nodes=settings.num_nodes,
        num_shards=settings.num_shards,
        rpc_host=settings.host,
    )
    command = [
        ORCHESTRATOR,
        "run",
        "localnet",
        "--binary-path",
        handle.binary_path,
        "--num-nodes",
        str(handle.num_nodes),
        "--num-shards",
        str(handle.num_shards),
        "--home",
        handle.localnet_dir,
        "--override",
    ]
    result = commands.run(command, cwd=settings.repo_path)
    return result, handle


def node_status(handle: LocalnetHandle) -> Optional[Dict[str, Any]]:
    """
    Query the ``/status`` endpoint of the first node once.

    Returns None when the node does not answer; this never fails the run.
    """
    url = f"{handle.rpc_url}/status"
    try:
        resp = requests.get(url, timeout=STATUS_TIMEOUT)
        resp.raise_for_status()
        return resp.json()
    except (requests.RequestException, ValueError) as e:
        logging.warning("Could not query node status at %s: %s", url, e)
        return None


def node_version(status: Optional[Dict[str, Any]]) -> Optional[str]:
    if not status:
        return None
    version = status.get("version") or {}
    if not isinstance(version, dict):
        return None
    build = version.get("build")
    number = version.get("version")
    if build and number:
        return f"{number} ({build})"
    return number or build
