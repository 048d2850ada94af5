"""
stagedeploy.pulumi_cli — The Pulumi CLI verbs the orchestrator uses.

Every method raises CommandError when the CLI exits non-zero; callers decide
whether that is fatal.
"""

from __future__ import annotations

from collections.abc import Mapping

from stagedeploy.models import NON_INTERACTIVE_ACTIONS
from stagedeploy.runner import CommandResult, CommandRunner, run_checked


def action_args(action: str) -> list[str]:
    """Arguments for a stage action; up/down run without the confirmation prompt."""
    if action in NON_INTERACTIVE_ACTIONS:
        return [action, "--yes"]
    return [action]


class PulumiCli:
    def __init__(
        self,
        runner: CommandRunner,
        *,
        executable: str = "pulumi",
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.runner = runner
        self.executable = executable
        self.env: dict[str, str] = dict(env or {})

    def _run(self, *args: str) -> CommandResult:
        return run_checked(self.runner, [self.executable, *args], env=self.env or None)

    def login(self, backend_url: str) -> CommandResult:
        return self._run("login", backend_url)

    def stack_init(self, stack_name: str) -> CommandResult:
        return self._run("stack", "init", stack_name)

    def stack_select(self, stack_name: str) -> CommandResult:
        return self._run("stack", "select", stack_name)

    def config_set(self, key: str, value: str) -> CommandResult:
        return self._run("config", "set", key, value)

    def action(self, action: str) -> CommandResult:
        return self._run(*action_args(action))
