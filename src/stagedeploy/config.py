"""
stagedeploy.config — Config file loading and environment pre-flight checks.

Both run before any remote call is made.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from types import MappingProxyType

import yaml

from stagedeploy.exceptions import ConfigError, MissingEnvironmentError
from stagedeploy.models import DeployConfig

logger = logging.getLogger(__name__)

REGION_ENV = "AWS_REGION"
CONFIG_FILE_ENV = "CONFIG_FILE"
PULUMI_BIN_ENV = "PULUMI_BIN"

_REQUIRED_KEYS: tuple[str, ...] = ("environment", "customer")


def _scalar_value(config_path: Path, key: str, value: object) -> str:
    """Coerce a required scalar to a non-empty string.

    Numbers are accepted as written (environment: 2024). YAML 1.1 booleans
    (on/off/yes/no/true/false) are rejected because their original spelling
    is lost; they must be quoted.
    """
    if value is None:
        raise ConfigError(f"config file {config_path} is missing required key {key!r}")
    if isinstance(value, bool):
        raise ConfigError(
            f"config file {config_path}: {key!r} parsed as a boolean; quote the value"
        )
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        raise ConfigError(
            f"config file {config_path}: {key!r} must be a string, "
            f"got {type(value).__name__}"
        )
    if not value.strip():
        raise ConfigError(f"config file {config_path}: {key!r} must not be empty")
    return value.strip()


def load_config(path: str | Path) -> DeployConfig:
    """Read and validate a YAML deployment config."""
    config_path = Path(path)
    try:
        raw = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"failed to read config file {config_path}: {exc}") from exc

    try:
        parsed = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"failed to parse config file {config_path}: {exc}") from exc

    if not isinstance(parsed, dict):
        raise ConfigError(f"config file {config_path} must contain a mapping")

    values = {key: _scalar_value(config_path, key, parsed.get(key)) for key in _REQUIRED_KEYS}

    extra = {key: value for key, value in parsed.items() if key not in _REQUIRED_KEYS}
    logger.debug("Loaded config %s (keys: %s)", config_path, sorted(map(str, parsed)))
    return DeployConfig(
        environment=values["environment"],
        customer=values["customer"],
        extra=MappingProxyType(extra),
    )


def require_env(name: str) -> str:
    """Read an environment variable and fail fast if missing or blank."""
    value = os.environ.get(name, "").strip()
    if not value:
        raise MissingEnvironmentError(name)
    return value


def require_aws_region() -> str:
    """Read AWS_REGION from environment and fail fast if missing."""
    return require_env(REGION_ENV)


def pulumi_executable() -> str:
    return os.environ.get(PULUMI_BIN_ENV, "").strip() or "pulumi"
