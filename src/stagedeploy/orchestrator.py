"""
stagedeploy.orchestrator — Bootstrap and per-stage deploy sequences.

Bootstrap:
    ensure state bucket → enable versioning → pulumi login → stack init for
    every microstack of every stage. Stack init failures (usually "already
    exists") are logged and skipped.

Stage deploy:
    pulumi login → for each microstack of the stage, in order:
    stack select → config set microstack → pulumi <action>.
    The first failing command aborts the run; nothing after it is attempted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from stagedeploy.config import CONFIG_FILE_ENV
from stagedeploy.exceptions import CommandError, UnknownStageError
from stagedeploy.models import DeployConfig, all_stacks, is_stage, microstacks_for_stage
from stagedeploy.pulumi_cli import PulumiCli
from stagedeploy.runner import CommandRunner
from stagedeploy.state_bucket import ensure_state_bucket

logger = logging.getLogger(__name__)

MICROSTACK_CONFIG_KEY = "microstack"


@dataclass
class BootstrapResult:
    bucket: str
    bucket_created: bool
    initialised: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


@dataclass
class DeployResult:
    stage: str
    action: str
    completed: list[str] = field(default_factory=list)


def bootstrap(
    cfg: DeployConfig,
    region: str,
    *,
    runner: CommandRunner,
    s3_client: Any,
    executable: str = "pulumi",
) -> BootstrapResult:
    """Create the state bucket and a Pulumi stack for every microstack."""
    bucket = cfg.bucket_name
    logger.info("Creating S3 state bucket: %s", bucket)
    created = ensure_state_bucket(s3_client, bucket, region)

    pulumi = PulumiCli(runner, executable=executable)
    logger.info("Configuring Pulumi backend: %s", cfg.backend_url)
    pulumi.login(cfg.backend_url)

    result = BootstrapResult(bucket=bucket, bucket_created=created)
    logger.info("Creating stacks...")
    for _stage, _microstack, name in all_stacks(cfg.customer, region):
        logger.info("Creating stack: %s", name)
        try:
            pulumi.stack_init(name)
        except CommandError as exc:
            logger.warning("Stack %s may already exist, continuing... (%s)", name, exc)
            result.skipped.append(name)
            continue
        result.initialised.append(name)

    logger.info(
        "Initialization complete: %d created, %d skipped",
        len(result.initialised),
        len(result.skipped),
    )
    return result


def deploy_stage(
    stage: str,
    action: str,
    config_file: str | Path,
    cfg: DeployConfig,
    region: str,
    *,
    runner: CommandRunner,
    executable: str = "pulumi",
) -> DeployResult:
    """Run a Pulumi action on each microstack of a stage, stopping at the first failure."""
    if not is_stage(stage):
        raise UnknownStageError(stage)

    microstacks = microstacks_for_stage(stage)
    env = {CONFIG_FILE_ENV: str(Path(config_file).resolve())}
    pulumi = PulumiCli(runner, executable=executable, env=env)

    logger.info("Logging into S3 backend: %s", cfg.backend_url)
    pulumi.login(cfg.backend_url)

    logger.info("Deploying stage: %s with action: %s", stage, action)
    logger.info("Microstacks to process: %s", ", ".join(microstacks))

    result = DeployResult(stage=stage, action=action)
    for microstack in microstacks:
        name = cfg.stack_name(stage, microstack, region)
        logger.info("Processing microstack: %s (%s)", microstack, name)

        pulumi.stack_select(name)
        pulumi.config_set(MICROSTACK_CONFIG_KEY, microstack)
        pulumi.action(action)

        result.completed.append(microstack)
        logger.info("Completed %s %s", microstack, action)

    logger.info("Successfully completed stage %s %s", stage, action)
    return result
