"""
stagedeploy.runner — Narrow interface over external command execution.

The orchestrator only ever sees CommandRunner, so tests can substitute a
recording fake for the real subprocess runner.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from stagedeploy.exceptions import CommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    command: tuple[str, ...]
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):
    def run(
        self, command: list[str], *, env: Mapping[str, str] | None = None
    ) -> CommandResult: ...


class SubprocessRunner:
    """Runs commands with inherited stdout/stderr so tool output streams live.

    env entries are overlaid on the current process environment.
    """

    def __init__(self, *, cwd: Path | None = None) -> None:
        self.cwd = cwd

    def run(self, command: list[str], *, env: Mapping[str, str] | None = None) -> CommandResult:
        cmd_display = " ".join(command)
        logger.info("Running: %s", cmd_display)

        child_env = None
        if env:
            child_env = {**os.environ, **env}

        try:
            completed = subprocess.run(
                command,
                cwd=str(self.cwd) if self.cwd else None,
                env=child_env,
                check=False,
            )
        except OSError as exc:
            raise CommandError(
                command=command,
                returncode=None,
                message=f"Could not start {command[0]}: {exc}",
            ) from exc

        return CommandResult(command=tuple(command), returncode=completed.returncode)


def run_checked(
    runner: CommandRunner, command: list[str], *, env: Mapping[str, str] | None = None
) -> CommandResult:
    """Run a command and raise CommandError on a non-zero exit."""
    result = runner.run(command, env=env)
    if not result.ok:
        raise CommandError(command=command, returncode=result.returncode)
    return result
