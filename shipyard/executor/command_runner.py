"""
Command Runner
==============
Host-side subprocess execution for the pipeline's git and npm steps.
"""
import logging
import subprocess
from typing import Optional

from shipyard.core.errors import CommandError

logger = logging.getLogger(__name__)


def run_command(command: list[str], cwd: Optional[str] = None) -> subprocess.CompletedProcess:
    """Run ``command`` and raise CommandError on a non-zero exit."""
    logger.debug("Running %s (cwd=%s)", " ".join(command), cwd or ".")
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise CommandError(command, 127, f"{command[0]}: command not found") from e

    if result.returncode != 0:
        raise CommandError(command, result.returncode, result.stderr)
    return result


def run_with_fallback(
    primary: list[str],
    fallback: list[str],
    cwd: Optional[str] = None,
) -> subprocess.CompletedProcess:
    """`primary || fallback`: try the first command, run the second if it fails."""
    try:
        return run_command(primary, cwd=cwd)
    except CommandError as e:
        logger.warning("%s failed (exit %d), falling back to %s",
                       " ".join(primary), e.returncode, " ".join(fallback))
        return run_command(fallback, cwd=cwd)
