"""
stagedeploy — Sequences Pulumi stacks across fixed deployment stages.

Stages run in the order vpc → core → apps; each stage owns an ordered list of
microstacks, and every microstack maps to exactly one Pulumi stack.
"""

from stagedeploy.exceptions import (
    CommandError,
    ConfigError,
    DeployError,
    MissingEnvironmentError,
    UnknownMicrostackError,
    UnknownStageError,
)
from stagedeploy.models import (
    MICROSTACKS_BY_STAGE,
    STAGE_BY_MICROSTACK,
    STAGE_ORDER,
    DeployConfig,
    Stage,
    bucket_name,
    microstacks_for_stage,
    stack_name,
    stage_for_microstack,
)

__all__ = [
    "MICROSTACKS_BY_STAGE",
    "STAGE_BY_MICROSTACK",
    "STAGE_ORDER",
    "CommandError",
    "ConfigError",
    "DeployConfig",
    "DeployError",
    "MissingEnvironmentError",
    "Stage",
    "UnknownMicrostackError",
    "UnknownStageError",
    "bucket_name",
    "microstacks_for_stage",
    "stack_name",
    "stage_for_microstack",
]
