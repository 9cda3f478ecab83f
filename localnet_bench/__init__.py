"""
Helpers for the ft-benchmark update cycle.

Each module wraps one external collaborator (git, nearup, make, pip,
locust) so that ``runner.UpdateAndBenchRunner`` only sequences them and
interprets their exit status.
"""

from . import commands, config, loadtest, localnet, processes, provision, results, system, vcs
from .config import BenchSettings, load_settings
from .models import (
    BenchEnvironment,
    ConfigError,
    LocalnetHandle,
    RevisionPair,
    RunConfiguration,
    TerminationOutcome,
    TerminationResult,
)
from .runner import StepFailedError, UpdateAndBenchRunner

__all__ = [
    "commands",
    "config",
    "loadtest",
    "localnet",
    "processes",
    "provision",
    "results",
    "system",
    "vcs",
    "BenchEnvironment",
    "BenchSettings",
    "ConfigError",
    "LocalnetHandle",
    "RevisionPair",
    "RunConfiguration",
    "StepFailedError",
    "TerminationOutcome",
    "TerminationResult",
    "UpdateAndBenchRunner",
    "load_settings",
]
