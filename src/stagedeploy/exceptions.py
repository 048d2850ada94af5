"""
stagedeploy.exceptions — Error hierarchy for the deploy orchestrator.

Library code raises these; only the CLI entry point turns them into a
process exit status.
"""

from __future__ import annotations


class DeployError(RuntimeError):
    """Base class for orchestrator failures."""


class ConfigError(DeployError):
    """Raised when the deployment config file cannot be read or is invalid."""


class MissingEnvironmentError(DeployError):
    """Raised when a required environment variable is not set."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{name} environment variable must be set")


class UnknownStageError(DeployError):
    """Raised when a stage name is not one of the fixed stages."""

    def __init__(self, stage: str) -> None:
        self.stage = stage
        super().__init__(f"Unknown stage: {stage}")


class UnknownMicrostackError(DeployError):
    """Raised when a microstack does not belong to the stage it was routed to."""

    def __init__(self, microstack: str, stage: str | None = None) -> None:
        self.microstack = microstack
        self.stage = stage
        if stage is None:
            message = f"unknown stage for microstack: {microstack}"
        else:
            message = f"unknown {stage} microstack: {microstack}"
        super().__init__(message)


class CommandError(DeployError):
    """Raised when an external command exits non-zero or cannot be started."""

    def __init__(self, *, command: list[str], returncode: int | None, message: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        cmd_display = " ".join(self.command)
        if not message:
            message = f"Command failed ({returncode}): {cmd_display}"
        super().__init__(message)
