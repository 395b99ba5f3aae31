"""
Toolchain Check
===============
Read-only counterpart of the Jenkins setup script: reports which of the
CI toolchain is present on this host. Nothing is installed.

Checked tools:
    java     — required by Jenkins
    node/npm — React builds
    docker   — image builds and smoke tests
    git      — source checkout
    jenkins  — CI server (package install or brew jenkins-lts)

Required for the local cycle: docker, git, node.
"""
import os
import sys
import shutil
import logging
import subprocess
from dataclasses import dataclass
from typing import Optional

from shipyard.services.smoke_test import probe_http, is_ok_status

logger = logging.getLogger(__name__)

REQUIRED_TOOLS = ["docker", "git", "node"]

# tool -> version flag. java prints its version on stderr.
TOOL_VERSION_FLAGS: list[tuple[str, str]] = [
    ("java", "-version"),
    ("node", "--version"),
    ("npm", "--version"),
    ("docker", "--version"),
    ("git", "--version"),
    ("jenkins", "--version"),
]

JENKINS_HOME = {
    "macos": "/opt/homebrew/var/lib/jenkins",
    "linux": "/var/lib/jenkins",
}
JENKINS_URL = "http://localhost:8080"


@dataclass
class ToolStatus:
    name: str
    installed: bool
    version: str = ""
    path: str = ""


def detect_os(platform: Optional[str] = None) -> Optional[str]:
    """Return "macos", "linux", or None for anything else."""
    platform = platform or sys.platform
    if platform == "darwin":
        return "macos"
    if platform.startswith("linux"):
        return "linux"
    return None


def check_tool(name: str, version_flag: str = "--version") -> ToolStatus:
    path = shutil.which(name)
    if not path:
        return ToolStatus(name=name, installed=False)

    version = ""
    try:
        result = subprocess.run(
            [path, version_flag], capture_output=True, text=True, timeout=15,
        )
        output = (result.stdout or result.stderr).strip()
        version = output.splitlines()[0] if output else ""
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("Version check for %s failed: %s", name, e)
    return ToolStatus(name=name, installed=True, version=version, path=path)


def jenkins_password_file(os_name: Optional[str]) -> Optional[str]:
    home = JENKINS_HOME.get(os_name or "")
    if not home:
        return None
    return os.path.join(home, "secrets", "initialAdminPassword")


def run_doctor() -> int:
    """Print the toolchain report. Returns 0 when every required tool is present."""
    os_name = detect_os()
    if os_name:
        logger.info("Detected %s", "macOS" if os_name == "macos" else "Linux")
    else:
        logger.error("Unsupported operating system: %s", sys.platform)

    statuses = [check_tool(name, flag) for name, flag in TOOL_VERSION_FLAGS]
    print("")
    print(f"{'TOOL':<10}{'STATUS':<11}VERSION")
    for status in statuses:
        state = "installed" if status.installed else "missing"
        print(f"{status.name:<10}{state:<11}{status.version}")
    print("")

    password_file = jenkins_password_file(os_name)
    if password_file:
        if os.path.exists(password_file):
            logger.info("Jenkins initial admin password file: %s", password_file)
        else:
            logger.warning("Could not find Jenkins initial admin password file")
            logger.info("You may need to check: %s", password_file)

    if is_ok_status(probe_http(f"{JENKINS_URL}/login")):
        logger.info("Jenkins is answering at %s", JENKINS_URL)
    else:
        logger.warning("Jenkins is not answering at %s", JENKINS_URL)

    missing = [s.name for s in statuses if s.name in REQUIRED_TOOLS and not s.installed]
    if missing:
        logger.error("Missing required tools: %s", ", ".join(missing))
        return 1
    return 0
