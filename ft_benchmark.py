#!/usr/bin/env python3
"""
Pull the latest master, rebuild neard, restart a one-node localnet and run
the fungible-token locust benchmark against it.

Does nothing (exit 0) when the checkout is already up to date with the
remote.  Meant to be run periodically from the repository root.
"""
import argparse
import logging
import sys
from pathlib import Path

from localnet_bench import ConfigError, StepFailedError, UpdateAndBenchRunner, load_settings

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "ft_benchmark.yaml"


def exit_status(returncode: int) -> int:
    # Same as a shell: a child killed by a signal reports 128 + signal number.
    if returncode < 0:
        return 128 - returncode
    return returncode


def main(argv=None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    parser = argparse.ArgumentParser(
        description="Update, rebuild and benchmark a local node.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Settings file (default: {DEFAULT_CONFIG_PATH.name}); "
        "FT_BENCH_* environment variables override it.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity.",
    )

    args = parser.parse_args(argv)
    logging.getLogger().setLevel(args.log_level.upper())

    try:
        if args.config is None:
            settings = load_settings(DEFAULT_CONFIG_PATH)
        else:
            settings = load_settings(args.config, required=True)
        return exit_status(UpdateAndBenchRunner(settings).run())
    except StepFailedError as e:
        logging.error(str(e))
        # A failed step must never exit 0.
        return exit_status(e.returncode) or 1
    except ConfigError as e:
        logging.error("Invalid configuration: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
