"""CLI parser for the run command."""

from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path

from tools.newgame.core import logging
from tools.newgame.core.credentials import CredentialChecker
from tools.newgame.core.naming import GameNames
from tools.newgame.core.pipeline import execute_new_game
from tools.newgame.core.runner import CommandRunner
from tools.newgame.core.settings import NewGameSettings
from tools.newgame.core.validator import validate


def register_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser(
        "run",
        help="Validate credentials, scaffold the bootstrap tree and create the game stack",
    )
    parser.add_argument(
        "game_prefix",
        nargs="?",
        help=(
            "Game name prefix: lowercase letters with inner hyphens. "
            "Omit to generate a random descriptor-animal name."
        ),
    )
    parser.add_argument(
        "--work-dir",
        help="Directory to create the run's temporary directory in (default: system temp)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for random name generation",
    )
    parser.set_defaults(func=run)


def confirm_game_name(names: GameNames) -> bool:
    if not sys.stdin.isatty():
        return False
    choice = input("Do you want to continue with this game name? (y/n) ")
    return choice.strip() == "y"


def run(args: argparse.Namespace, runner: CommandRunner) -> int:
    settings = NewGameSettings()
    rng = random.Random(args.seed) if args.seed is not None else None

    game = validate(
        settings,
        args.game_prefix,
        CredentialChecker(runner),
        rng=rng,
        confirm=confirm_game_name,
    )

    work_dir = Path(args.work_dir).expanduser().resolve() if args.work_dir else None
    result = execute_new_game(game, settings, runner, work_dir=work_dir)

    logging.success(
        f"Game {logging.highlight(game.names.game_name)} created in {result.layout.temp_dir}"
    )
    return 0
