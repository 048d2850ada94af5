"""
tests/unit/test_program.py — Stage router run inside `pulumi up`.

pulumi.Config, pulumi.export and pulumi.log.info are replaced with recorders
so the program can run without the Pulumi engine.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pulumi
import pytest
from stagedeploy import program
from stagedeploy.exceptions import DeployError, MissingEnvironmentError, UnknownMicrostackError
from stagedeploy.models import MICROSTACKS_BY_STAGE, DeployConfig

_CFG = DeployConfig(environment="dev", customer="acme")


@pytest.fixture
def pulumi_log(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    messages: list[str] = []
    monkeypatch.setattr(pulumi.log, "info", lambda msg, *args, **kwargs: messages.append(msg))
    return messages


@pytest.fixture
def exports(monkeypatch: pytest.MonkeyPatch) -> dict[str, Any]:
    exported: dict[str, Any] = {}
    monkeypatch.setattr(pulumi, "export", lambda name, value: exported.__setitem__(name, value))
    return exported


def _stack_config(monkeypatch: pytest.MonkeyPatch, values: dict[str, str]) -> None:
    class _FakeConfig:
        def __init__(self, name: str | None = None) -> None:
            self.name = name

        def get(self, key: str) -> str | None:
            return values.get(key)

    monkeypatch.setattr(pulumi, "Config", _FakeConfig)


class TestHandlerTable:
    def test_handlers_cover_every_microstack(self):
        for stage, microstacks in MICROSTACKS_BY_STAGE.items():
            assert tuple(program.STAGE_HANDLERS[stage]) == microstacks

    def test_handler_names(self):
        assert program.deploy_eks_addons.__name__ == "deploy_eks_addons"
        assert program.deploy_acls.__name__ == "deploy_acls"


class TestDispatch:
    def test_routes_microstack_to_its_stage(self, pulumi_log: list[str]) -> None:
        stage = program.dispatch(_CFG, "rds")

        assert stage == "core"
        assert pulumi_log == [
            "Deploying rds microstack in core stage for customer: acme",
            "Deploying RDS microstack",
        ]

    @pytest.mark.parametrize(
        ("microstack", "message"),
        [
            ("networking", "Deploying Networking microstack"),
            ("certificates", "Deploying Certificates microstack"),
            ("ingress-classes", "Deploying Ingress Classes microstack"),
        ],
    )
    def test_placeholders_only_log(
        self, pulumi_log: list[str], microstack: str, message: str
    ) -> None:
        program.dispatch(_CFG, microstack)
        assert pulumi_log[-1] == message

    def test_unknown_microstack(self, pulumi_log: list[str]) -> None:
        with pytest.raises(UnknownMicrostackError, match="unknown stage for microstack: lambda"):
            program.dispatch(_CFG, "lambda")

    def test_microstack_outside_stage(self) -> None:
        with pytest.raises(UnknownMicrostackError, match="unknown vpc microstack: rds"):
            program.deploy_stage_microstack("vpc", _CFG, "rds")


class TestMain:
    def test_runs_selected_microstack(
        self,
        monkeypatch: pytest.MonkeyPatch,
        config_file: Path,
        pulumi_log: list[str],
        exports: dict[str, Any],
    ) -> None:
        monkeypatch.setenv("CONFIG_FILE", str(config_file))
        _stack_config(monkeypatch, {"microstack": "helm-charts"})

        program.main()

        assert exports == {"customer": "acme", "stage": "apps", "microstack": "helm-charts"}
        assert pulumi_log[-1] == "Deploying Helm Charts microstack"

    def test_requires_config_file_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _stack_config(monkeypatch, {"microstack": "acls"})
        with pytest.raises(MissingEnvironmentError, match="CONFIG_FILE"):
            program.main()

    def test_requires_microstack_config(
        self, monkeypatch: pytest.MonkeyPatch, config_file: Path
    ) -> None:
        monkeypatch.setenv("CONFIG_FILE", str(config_file))
        _stack_config(monkeypatch, {})
        with pytest.raises(DeployError, match="microstack must be set"):
            program.main()
