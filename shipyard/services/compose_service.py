"""
Compose Service
===============
Brings up one docker-compose service in the background.

Equivalent shell:
    docker compose up -d <service>

The docker SDK has no compose support, so this shells out. The command is
configurable (COMPOSE_COMMAND) for hosts that still ship the standalone
`docker-compose` binary.
"""
import shlex
import logging
import subprocess
from typing import Optional

from shipyard.core.config import COMPOSE_COMMAND
from shipyard.core.errors import ComposeError

logger = logging.getLogger(__name__)


def build_compose_command(service: str, compose_command: str = COMPOSE_COMMAND) -> list[str]:
    return shlex.split(compose_command) + ["up", "-d", service]


def compose_up(
    service: str,
    compose_command: str = COMPOSE_COMMAND,
    cwd: Optional[str] = None,
) -> None:
    command = build_compose_command(service, compose_command)
    logger.debug("Running %s", " ".join(command))
    try:
        result = subprocess.run(command, cwd=cwd, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise ComposeError(f"{command[0]} not found; set COMPOSE_COMMAND") from e

    if result.returncode != 0:
        raise ComposeError(
            f"{' '.join(command)} exited with {result.returncode}: {result.stderr.strip()}"
        )
