"""
stagedeploy.models — Stages, microstacks and derived names.

The stage → microstack table is the single source of ordering for both the
bootstrap and deploy paths and for the Pulumi program's stage router.
STAGE_BY_MICROSTACK is derived from it, never written by hand.

Naming:
    stack name   {customer}-{stage}-{microstack}-{region}
    bucket name  pulumi-state-{environment}-{customer}
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

UNKNOWN_STAGE = "unknown"
BUCKET_PREFIX = "pulumi-state"

# Pulumi actions that prompt for confirmation unless --yes is passed.
NON_INTERACTIVE_ACTIONS: frozenset[str] = frozenset({"up", "down"})


class Stage(StrEnum):
    VPC = "vpc"
    CORE = "core"
    APPS = "apps"


# ---------------------------------------------------------------------------
# Static routing tables
# ---------------------------------------------------------------------------

STAGE_ORDER: tuple[Stage, ...] = (Stage.VPC, Stage.CORE, Stage.APPS)

MICROSTACKS_BY_STAGE: Mapping[Stage, tuple[str, ...]] = MappingProxyType(
    {
        Stage.VPC: ("networking", "acls"),
        Stage.CORE: (
            "s3",
            "route53",
            "rds",
            "eks",
            "opensearch",
            "cloudfront",
            "certificates",
        ),
        Stage.APPS: ("eks-addons", "helm-charts", "storage-classes", "ingress-classes"),
    }
)

STAGE_BY_MICROSTACK: Mapping[str, Stage] = MappingProxyType(
    {
        microstack: stage
        for stage in STAGE_ORDER
        for microstack in MICROSTACKS_BY_STAGE[stage]
    }
)


@dataclass(frozen=True)
class DeployConfig:
    """Deployment configuration loaded from the YAML config file.

    Only environment and customer are interpreted; any other keys are kept
    in extra for the Pulumi program.
    """

    environment: str
    customer: str
    extra: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}), compare=False, hash=False
    )

    def __post_init__(self) -> None:
        if not isinstance(self.extra, MappingProxyType):
            object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @property
    def bucket_name(self) -> str:
        return bucket_name(self.environment, self.customer)

    @property
    def backend_url(self) -> str:
        return backend_url(self.environment, self.customer)

    def stack_name(self, stage: str, microstack: str, region: str) -> str:
        return stack_name(self.customer, stage, microstack, region)


def microstacks_for_stage(stage: str) -> tuple[str, ...]:
    """Return the ordered microstacks for a stage; empty for an unknown stage."""
    try:
        return MICROSTACKS_BY_STAGE[Stage(stage)]
    except ValueError:
        return ()


def stage_for_microstack(microstack: str) -> str:
    """Return the stage owning a microstack, or "unknown"."""
    stage = STAGE_BY_MICROSTACK.get(microstack)
    return str(stage) if stage is not None else UNKNOWN_STAGE


def is_stage(name: str) -> bool:
    return name in {str(stage) for stage in STAGE_ORDER}


def stack_name(customer: str, stage: str, microstack: str, region: str) -> str:
    return f"{customer}-{stage}-{microstack}-{region}"


def bucket_name(environment: str, customer: str) -> str:
    return f"{BUCKET_PREFIX}-{environment}-{customer}"


def backend_url(environment: str, customer: str) -> str:
    return f"s3://{bucket_name(environment, customer)}"


def all_stacks(customer: str, region: str) -> list[tuple[Stage, str, str]]:
    """Every (stage, microstack, stack name) triple in deployment order."""
    return [
        (stage, microstack, stack_name(customer, stage, microstack, region))
        for stage in STAGE_ORDER
        for microstack in MICROSTACKS_BY_STAGE[stage]
    ]
