"""
Constants
Fixed names shared by the local cycle, the pipeline runner and the CLI.
"""
PRODUCTION = "production"
DEVELOPMENT = "development"
VARIANTS = [PRODUCTION, DEVELOPMENT]

PROD_TEST_CONTAINER = "react-app-prod-test"
DEV_TEST_CONTAINER = "react-app-dev-test"
TEST_CONTAINERS = [PROD_TEST_CONTAINER, DEV_TEST_CONTAINER]

DEPLOY_CONTAINER = "react-app-prod"

PROD_CONTAINER_PORT = 80
DEV_CONTAINER_PORT = 5173
DEV_MOUNT_TARGET = "/app"

# docker-compose service names
COMPOSE_DEV_SERVICE = "react-app-dev"
COMPOSE_PROD_SERVICE = "react-app-prod"

# Pipeline stages, in execution order. "cleanup" always runs afterwards.
STAGE_CHECKOUT = "checkout"
STAGE_INSTALL = "install"
STAGE_BUILD = "build"
STAGE_DOCKER_BUILD = "docker-build"
STAGE_SMOKE_TEST = "smoke-test"
STAGE_PUSH = "push"
STAGE_DEPLOY = "deploy"
STAGE_CLEANUP = "cleanup"

PIPELINE_STAGES = [
    STAGE_CHECKOUT,
    STAGE_INSTALL,
    STAGE_BUILD,
    STAGE_DOCKER_BUILD,
    STAGE_SMOKE_TEST,
    STAGE_PUSH,
    STAGE_DEPLOY,
]

# Directories a React build may emit (Vite first, then CRA)
BUILD_OUTPUT_DIRS = ["dist", "build"]
