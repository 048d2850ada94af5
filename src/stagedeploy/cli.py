"""
cli.py — Command-line entry point for the stage deploy orchestrator.

Usage:
    cmd-deploy init --config <file>
    cmd-deploy {vpc|core|apps} {up|down|preview} --config <file>

This is the only place errors become a process exit status.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from stagedeploy.config import load_config, pulumi_executable, require_aws_region
from stagedeploy.exceptions import DeployError
from stagedeploy.models import STAGE_ORDER
from stagedeploy.orchestrator import bootstrap, deploy_stage
from stagedeploy.runner import CommandRunner, SubprocessRunner
from stagedeploy.state_bucket import make_s3_client

logger = logging.getLogger("stagedeploy")

PROG = "cmd-deploy"
STAGE_CHOICES: tuple[str, ...] = tuple(str(stage) for stage in STAGE_ORDER)

USAGE = f"""Usage:
  {PROG} init --config <file>
  {PROG} {{vpc|core|apps}} {{up|down|preview}} --config <file>

Examples:
  {PROG} init --config configs/sample-config.yaml
  {PROG} vpc up --config configs/sample-config.yaml
  {PROG} core preview --config configs/sample-config.yaml
"""


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Sequence Pulumi stacks across the vpc, core and apps stages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=USAGE,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init", help="Create the state bucket and all microstack stacks")
    init.add_argument("--config", required=True, help="Path to the YAML config file")

    for stage in STAGE_CHOICES:
        stage_parser = sub.add_parser(stage, help=f"Run a Pulumi action on the {stage} stage")
        stage_parser.add_argument(
            "action",
            help="Pulumi action, e.g. up, down or preview (passed through as-is)",
        )
        stage_parser.add_argument("--config", required=True, help="Path to the YAML config file")

    return parser.parse_args(argv)


def run_init(config_path: str, *, runner: CommandRunner, s3_client: Any = None) -> int:
    logger.info("Initializing infrastructure...")
    cfg = load_config(config_path)
    region = require_aws_region()
    if s3_client is None:
        s3_client = make_s3_client(region)

    result = bootstrap(
        cfg,
        region,
        runner=runner,
        s3_client=s3_client,
        executable=pulumi_executable(),
    )
    logger.info("Initialization complete! State backend: s3://%s", result.bucket)
    return 0


def run_stage(stage: str, action: str, config_path: str, *, runner: CommandRunner) -> int:
    cfg = load_config(config_path)
    region = require_aws_region()
    deploy_stage(
        stage,
        action,
        config_path,
        cfg,
        region,
        runner=runner,
        executable=pulumi_executable(),
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    args_list = sys.argv[1:] if argv is None else argv
    if not args_list:
        print(USAGE)
        return 1

    args = parse_args(args_list)
    configure_logging()
    runner = SubprocessRunner()

    try:
        if args.command == "init":
            return run_init(args.config, runner=runner)
        return run_stage(args.command, args.action, args.config, runner=runner)
    except (DeployError, ClientError, BotoCoreError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
