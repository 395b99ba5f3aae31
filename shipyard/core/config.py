"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    IMAGE_PREFIX         — Repository prefix used by the size report (default: react-app)
    PROD_IMAGE           — Production image repository (default: react-app-prod)
    DEV_IMAGE            — Development image repository (default: react-app-dev)
    IMAGE_TAG            — Moving tag applied to every build (default: latest)
    BUILD_NUMBER         — CI build number; when set, every build is also tagged with it
    BUILD_CONTEXT        — Directory holding the Dockerfile (default: current directory)
    REGISTRY_URL         — Registry host for the pipeline push stage (push skipped when unset)
    DEPLOY_ENABLED       — Run the pipeline deploy stage (default: false)
    LOG_DIR              — Directory for the persistent log file (default: logs)

Timing Philosophy:
    Startup waits are fixed sleeps, not readiness checks: 5s for the nginx
    runtime (PROD_STARTUP_WAIT), 10s for the Vite dev server (DEV_STARTUP_WAIT).
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


IMAGE_PREFIX = os.getenv("IMAGE_PREFIX", "react-app")
PROD_IMAGE = os.getenv("PROD_IMAGE", f"{IMAGE_PREFIX}-prod")
DEV_IMAGE = os.getenv("DEV_IMAGE", f"{IMAGE_PREFIX}-dev")
IMAGE_TAG = os.getenv("IMAGE_TAG", "latest")
BUILD_NUMBER = os.getenv("BUILD_NUMBER") or None
BUILD_CONTEXT = os.getenv("BUILD_CONTEXT", ".")

# Host-side ports for the smoke-test containers
PROD_HOST_PORT = int(os.getenv("PROD_HOST_PORT", 8080))
DEV_HOST_PORT = int(os.getenv("DEV_HOST_PORT", 5173))

# Fixed startup windows in seconds
PROD_STARTUP_WAIT = float(os.getenv("PROD_STARTUP_WAIT", 5))
DEV_STARTUP_WAIT = float(os.getenv("DEV_STARTUP_WAIT", 10))

HTTP_PROBE_TIMEOUT = float(os.getenv("HTTP_PROBE_TIMEOUT", 5))

COMPOSE_COMMAND = os.getenv("COMPOSE_COMMAND", "docker compose")

# Pipeline
REPO_URL = os.getenv("REPO_URL") or None
REGISTRY_URL = os.getenv("REGISTRY_URL") or None
DEPLOY_ENABLED = _env_bool("DEPLOY_ENABLED")
DEPLOY_PORT = int(os.getenv("DEPLOY_PORT", 80))
PRUNE_ON_CLEANUP = _env_bool("PRUNE_ON_CLEANUP")
PIPELINE_FILE = os.getenv("PIPELINE_FILE", "shipyard.yml")

LOG_DIR = os.getenv("LOG_DIR", "logs")
