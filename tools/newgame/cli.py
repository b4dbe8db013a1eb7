#!/usr/bin/env python3
"""New game provisioning CLI."""

from __future__ import annotations

import argparse

from tools.newgame.commands import run
from tools.newgame.core import logging
from tools.newgame.core.errors import NewGameError, RunDeclined
from tools.newgame.core.runner import CommandRunner, RunnerError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toy-game",
        description="Create a throwaway Azure game environment with Terragrunt",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print mutating commands without executing them",
    )

    subparsers = parser.add_subparsers(dest="command")
    run.register_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 2

    runner = CommandRunner(dry_run=bool(args.dry_run))
    try:
        return int(args.func(args, runner))
    except RunDeclined as exc:
        logging.info(str(exc))
        return 0
    except (NewGameError, RunnerError) as exc:
        logging.error(f"Error: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
