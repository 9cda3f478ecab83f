"""
Update-and-benchmark cycle for a local node.

The cycle is a strict linear pipeline: fetch, compare revisions, pull,
stop the previous experiment, rebuild, restart the local network, provision
the load generator and run it once.  The only early exit that is not a
failure is an already up-to-date checkout.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .commands import CommandResult, CommandRunner
from .config import BenchSettings
from .localnet import node_status, node_version, start_localnet, stop_localnet
from .loadtest import run_locust
from .models import (
    BenchEnvironment,
    LocalnetHandle,
    RevisionPair,
    RunConfiguration,
    RunRecord,
    TerminationOutcome,
    TerminationResult,
)
from .provision import build_node, provision_environment
from .results import save_run_record
from .system import log_computer_specs
from .vcs import RevisionError, compare_revisions, fetch, pull

UP_TO_DATE_MESSAGE = (
    "The repository is up to date with the remote. No rebuilds or restarts needed."
)
BEHIND_MESSAGE = "The local repository is behind the remote. Pulling changes..."


class StepFailedError(RuntimeError):
    """A fatal step exited with a non-zero status."""

    def __init__(self, step: str, returncode: int):
        super().__init__(f"Step '{step}' failed with exit status {returncode}")
        self.step = step
        self.returncode = returncode


def _check(step: str, result: CommandResult) -> None:
    if not result.ok:
        raise StepFailedError(step, result.returncode)


def _report_termination(result: TerminationResult) -> None:
    if result.outcome is TerminationOutcome.KILLED:
        logging.info("Stopped %s", result.target)
    elif result.outcome is TerminationOutcome.NOT_RUNNING:
        logging.info("No running %s process, nothing to stop", result.target)
    else:
        logging.warning("Failed to stop %s (%s), continuing", result.target, result.detail)


class UpdateAndBenchRunner:
    def __init__(
        self,
        settings: BenchSettings,
        commands: Optional[CommandRunner] = None,
        python: str = sys.executable,
    ):
        self.settings = settings
        self.commands = commands or CommandRunner(cwd=settings.repo_path)
        self.python = python

    def refresh_remote(self) -> None:
        _check("fetch", fetch(self.commands, self.settings))

    def compare_revisions(self) -> RevisionPair:
        try:
            revisions = compare_revisions(self.commands, self.settings)
        except RevisionError as e:
            logging.error(str(e))
            raise StepFailedError("resolve revision", e.returncode) from e
        logging.info("Local %s: %s, remote %s: %s", self.settings.branch, revisions.local,
                     self.settings.upstream_ref, revisions.remote)
        return revisions

    def synchronize(self) -> None:
        _check("pull", pull(self.commands, self.settings))

    def stop_previous_experiment(self) -> None:
        _report_termination(self.commands.terminate(self.settings.loadtest_process))
        _report_termination(stop_localnet(self.commands))

    def build_node(self) -> None:
        _check("build", build_node(self.commands, self.settings))

    def start_localnet(self) -> LocalnetHandle:
        result, handle = start_localnet(self.commands, self.settings)
        _check("start localnet", result)
        return handle

    def provision_environment(self) -> BenchEnvironment:
        result, env = provision_environment(self.commands, self.settings, self.python)
        _check("provision environment", result)
        return env

    def resolve_run_configuration(self, localnet: LocalnetHandle) -> RunConfiguration:
        run_config = RunConfiguration.resolve(self.settings, localnet)
        logging.info("Using funding key %s", run_config.funding_key)
        return run_config

    def run_benchmark(self, env: BenchEnvironment, run_config: RunConfiguration) -> int:
        return run_locust(self.commands, self.settings, env, run_config).returncode

    def run(self) -> int:
        """
        Run the whole cycle and return the benchmark's exit status.

        Raises StepFailedError on the first fatal step and ConfigError if the
        run configuration cannot be resolved.
        """
        self.refresh_remote()
        revisions = self.compare_revisions()
        if revisions.up_to_date:
            logging.info(UP_TO_DATE_MESSAGE)
            return 0

        logging.info(BEHIND_MESSAGE)
        self.synchronize()
        self.stop_previous_experiment()
        self.build_node()
        localnet = self.start_localnet()
        env = self.provision_environment()
        run_config = self.resolve_run_configuration(localnet)

        specs = log_computer_specs()
        version = node_version(node_status(localnet))
        exit_code = self.run_benchmark(env, run_config)
        if exit_code != 0:
            logging.error("Benchmark exited with status %d", exit_code)

        save_run_record(
            RunRecord(revisions=revisions, exit_code=exit_code, specs=specs, node_version=version),
            self.settings.in_repo(self.settings.results_dir),
        )
        return exit_code
