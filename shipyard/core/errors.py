"""
Errors
======
Exceptions that abort a command. Best-effort steps never raise these;
they log and continue instead.
"""


class ShipyardError(RuntimeError):
    """Base class for every aborting failure."""


class EngineUnavailableError(ShipyardError):
    """The Docker daemon could not be reached."""


class BuildError(ShipyardError):
    """An image build failed."""

    def __init__(self, variant: str, message: str, build_log: str = "") -> None:
        self.variant = variant
        self.build_log = build_log
        super().__init__(f"{variant} image build failed: {message}")


class ContainerStartError(ShipyardError):
    """A test or deploy container could not be started."""


class CommandError(ShipyardError):
    """A host command (git, npm) exited non-zero."""

    def __init__(self, command: list[str], returncode: int, stderr: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(
            f"Command {' '.join(command)} failed with exit code {returncode}: {stderr.strip()}"
        )


class ComposeError(ShipyardError):
    """docker compose returned an error."""


class PipelineConfigError(ShipyardError):
    """The pipeline file could not be parsed or names an unknown stage."""
