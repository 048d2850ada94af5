"""
stagedeploy.program — Pulumi program run by `pulumi up/down/preview`.

The orchestrator selects one stack per microstack and sets the `microstack`
stack config key; this program reads it, derives the stage from the same
static table, and dispatches to the microstack's handler. CONFIG_FILE points
at the YAML config the orchestrator was given.

The handlers are placeholders: they log and return without declaring
resources.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from types import MappingProxyType

import pulumi

from stagedeploy.config import CONFIG_FILE_ENV, load_config
from stagedeploy.exceptions import DeployError, MissingEnvironmentError, UnknownMicrostackError
from stagedeploy.models import DeployConfig, Stage, stage_for_microstack

MicrostackHandler = Callable[[DeployConfig], None]


def _placeholder(label: str) -> MicrostackHandler:
    def handler(cfg: DeployConfig) -> None:
        pulumi.log.info(f"Deploying {label} microstack")

    handler.__name__ = "deploy_" + label.lower().replace(" ", "_")
    handler.__doc__ = f"Placeholder for the {label} microstack; declares no resources."
    return handler


# vpc
deploy_networking = _placeholder("Networking")
deploy_acls = _placeholder("ACLs")

# core
deploy_s3 = _placeholder("S3")
deploy_route53 = _placeholder("Route53")
deploy_rds = _placeholder("RDS")
deploy_eks = _placeholder("EKS")
deploy_opensearch = _placeholder("OpenSearch")
deploy_cloudfront = _placeholder("CloudFront")
deploy_certificates = _placeholder("Certificates")

# apps
deploy_eks_addons = _placeholder("EKS Addons")
deploy_helm_charts = _placeholder("Helm Charts")
deploy_storage_classes = _placeholder("Storage Classes")
deploy_ingress_classes = _placeholder("Ingress Classes")


STAGE_HANDLERS: Mapping[Stage, Mapping[str, MicrostackHandler]] = MappingProxyType(
    {
        Stage.VPC: {
            "networking": deploy_networking,
            "acls": deploy_acls,
        },
        Stage.CORE: {
            "s3": deploy_s3,
            "route53": deploy_route53,
            "rds": deploy_rds,
            "eks": deploy_eks,
            "opensearch": deploy_opensearch,
            "cloudfront": deploy_cloudfront,
            "certificates": deploy_certificates,
        },
        Stage.APPS: {
            "eks-addons": deploy_eks_addons,
            "helm-charts": deploy_helm_charts,
            "storage-classes": deploy_storage_classes,
            "ingress-classes": deploy_ingress_classes,
        },
    }
)


def deploy_stage_microstack(stage: str, cfg: DeployConfig, microstack: str) -> None:
    """Run the handler for a microstack within an already-resolved stage."""
    try:
        handlers = STAGE_HANDLERS[Stage(stage)]
    except ValueError:
        raise UnknownMicrostackError(microstack) from None

    handler = handlers.get(microstack)
    if handler is None:
        raise UnknownMicrostackError(microstack, stage)
    handler(cfg)


def dispatch(cfg: DeployConfig, microstack: str) -> str:
    """Route a microstack to its stage handler. Returns the stage name."""
    stage = stage_for_microstack(microstack)
    pulumi.log.info(
        f"Deploying {microstack} microstack in {stage} stage for customer: {cfg.customer}"
    )
    deploy_stage_microstack(stage, cfg, microstack)
    return stage


def main() -> None:
    config_file = os.environ.get(CONFIG_FILE_ENV, "").strip()
    if not config_file:
        raise MissingEnvironmentError(CONFIG_FILE_ENV)

    cfg = load_config(config_file)

    microstack = pulumi.Config().get("microstack")
    if not microstack:
        raise DeployError("microstack must be set in Pulumi config")

    stage = dispatch(cfg, microstack)
    pulumi.export("customer", cfg.customer)
    pulumi.export("stage", stage)
    pulumi.export("microstack", microstack)
