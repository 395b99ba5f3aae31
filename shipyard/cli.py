"""
CLI
===
Command table for the local build/test script and the pipeline runner.

    shipyard [COMMAND]

One positional command, no flags. No command, `help`, or an unknown
command prints usage and exits 0. Aborting failures exit 1.
"""
import argparse
import logging
import sys
from typing import Callable, Optional

from shipyard.agents.local_cycle import LocalCycle
from shipyard.agents.pipeline_runner import PipelineRunner
from shipyard.core import config
from shipyard.core.constants import COMPOSE_DEV_SERVICE, COMPOSE_PROD_SERVICE
from shipyard.core.errors import ShipyardError
from shipyard.models.pipeline_report import STATUS_SUCCESS
from shipyard.parser.pipeline_config import load_pipeline_config
from shipyard.services.compose_service import compose_up
from shipyard.services.toolchain_check import run_doctor
from shipyard.utils.logging_config import log_success, setup_logging

logger = logging.getLogger("shipyard.cli")

PROG = "shipyard"

USAGE = f"""Usage: {PROG} [COMMAND]

Commands:
  prod         Build and test production image
  dev          Build and test development image
  both         Build and test both images
  sizes        Show current image sizes
  cleanup      Stop and remove test containers
  compose-dev  Run development with docker-compose
  compose-prod Run production with docker-compose
  pipeline     Run the CI pipeline stages (checkout .. deploy, then cleanup)
  doctor       Check that the CI toolchain is installed
  help         Show this help message

Examples:
  {PROG} prod      # Build and test production image
  {PROG} both      # Build and test both images
  {PROG} sizes     # Show image sizes"""


def cmd_help(cycle: LocalCycle) -> int:
    print(USAGE)
    return 0


def cmd_prod(cycle: LocalCycle) -> int:
    cycle.run_production()
    logger.info("Production container running. Use '%s cleanup' to stop when done.", PROG)
    return 0


def cmd_dev(cycle: LocalCycle) -> int:
    cycle.run_development()
    logger.info("Development container running. Use '%s cleanup' to stop when done.", PROG)
    return 0


def cmd_both(cycle: LocalCycle) -> int:
    cycle.run_both()
    logger.info("Both containers running. Use '%s cleanup' to stop when done.", PROG)
    return 0


def cmd_sizes(cycle: LocalCycle) -> int:
    cycle.show_sizes()
    return 0


def cmd_cleanup(cycle: LocalCycle) -> int:
    cycle.cleanup()
    return 0


def cmd_compose_dev(cycle: LocalCycle) -> int:
    logger.info("Starting development environment with docker-compose...")
    compose_up(COMPOSE_DEV_SERVICE, cwd=cycle.build_context)
    log_success(logger, "Development environment started! Visit: http://localhost:%d",
                config.DEV_HOST_PORT)
    return 0


def cmd_compose_prod(cycle: LocalCycle) -> int:
    logger.info("Starting production environment with docker-compose...")
    compose_up(COMPOSE_PROD_SERVICE, cwd=cycle.build_context)
    log_success(logger, "Production environment started! Visit: http://localhost:80")
    return 0


def cmd_pipeline(cycle: LocalCycle) -> int:
    pipeline_config = load_pipeline_config()
    report = PipelineRunner(pipeline_config).run()

    print("")
    print(f"{'STAGE':<14}{'STATUS':<9}{'TIME':>8}")
    for stage in report.stages + report.post:
        print(f"{stage.name:<14}{stage.status:<9}{stage.duration_seconds:>7.1f}s")
    print("")
    return 0 if report.status == STATUS_SUCCESS else 1


def cmd_doctor(cycle: LocalCycle) -> int:
    return run_doctor()


COMMANDS: dict[str, Callable[[LocalCycle], int]] = {
    "prod": cmd_prod,
    "dev": cmd_dev,
    "both": cmd_both,
    "sizes": cmd_sizes,
    "cleanup": cmd_cleanup,
    "compose-dev": cmd_compose_dev,
    "compose-prod": cmd_compose_prod,
    "pipeline": cmd_pipeline,
    "doctor": cmd_doctor,
    "help": cmd_help,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROG, add_help=False, usage=USAGE)
    parser.add_argument("command", nargs="?", default="help")
    return parser


def run_command(command: str, cycle: Optional[LocalCycle] = None) -> int:
    handler = COMMANDS.get(command, cmd_help)
    cycle = cycle or LocalCycle()
    try:
        return handler(cycle)
    except ShipyardError as e:
        logger.error("%s", e)
        return 1


def main(argv: Optional[list[str]] = None) -> int:
    args, _ = build_parser().parse_known_args(argv)
    setup_logging(level=logging.INFO, log_to_file=args.command in COMMANDS and args.command != "help",
                  log_dir=config.LOG_DIR)
    return run_command(args.command)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
