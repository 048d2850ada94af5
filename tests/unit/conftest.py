"""Shared fixtures for the stagedeploy unit tests."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path

import pytest
from stagedeploy.runner import CommandResult

REGION = "us-east-1"


class RecordingRunner:
    """CommandRunner stand-in that records every command instead of executing it.

    fail_when decides, per command, whether to report a non-zero exit.
    """

    def __init__(self, fail_when: Callable[[list[str]], bool] | None = None) -> None:
        self.calls: list[list[str]] = []
        self.envs: list[dict[str, str]] = []
        self.fail_when = fail_when

    def run(self, command: list[str], *, env: Mapping[str, str] | None = None) -> CommandResult:
        self.calls.append(list(command))
        self.envs.append(dict(env or {}))
        failed = self.fail_when is not None and self.fail_when(command)
        return CommandResult(command=tuple(command), returncode=1 if failed else 0)

    def calls_for(self, *prefix: str) -> list[list[str]]:
        return [call for call in self.calls if call[1 : 1 + len(prefix)] == list(prefix)]


@pytest.fixture(autouse=True)
def aws_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set minimal AWS env vars required by boto3 and moto."""
    monkeypatch.setenv("AWS_REGION", REGION)
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.delenv("PULUMI_BIN", raising=False)
    monkeypatch.delenv("CONFIG_FILE", raising=False)


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text("environment: dev\ncustomer: acme\n", encoding="utf-8")
    return path
