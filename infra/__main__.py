"""Pulumi entry point; see stagedeploy.program."""

from stagedeploy.program import main

main()
