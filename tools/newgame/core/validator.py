"""Name and credential validation, run before any side effect."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable

from tools.newgame.core import logging
from tools.newgame.core.credentials import CredentialChecker
from tools.newgame.core.errors import RunDeclined
from tools.newgame.core.naming import GameNames, resolve_prefix
from tools.newgame.core.settings import NewGameSettings


@dataclass(frozen=True)
class ValidatedGame:
    names: GameNames
    subscription_name: str
    github_login: str


def resolve_names(
    settings: NewGameSettings,
    prefix: str | None,
    rng: random.Random | None = None,
) -> GameNames:
    settings.require_credentials()
    return GameNames(resolve_prefix(prefix, rng))


def verify_credentials(
    names: GameNames,
    settings: NewGameSettings,
    checker: CredentialChecker,
) -> ValidatedGame:
    subscription_name = checker.check_azure(settings.subscription_id)
    logging.info(
        f"Creating new game in Azure subscription {subscription_name} "
        f"( ID : {settings.subscription_id} )"
    )
    login = checker.check_github(settings.github_pat)
    logging.info(f"Creating new game as GitHub user: {login}")
    return ValidatedGame(names=names, subscription_name=subscription_name, github_login=login)


def validate(
    settings: NewGameSettings,
    prefix: str | None,
    checker: CredentialChecker,
    *,
    rng: random.Random | None = None,
    confirm: Callable[[GameNames], bool] | None = None,
) -> ValidatedGame:
    """Resolve the game name, optionally confirm it, then check credentials live.

    Raises ConfigurationError, InvalidInputError, RunDeclined or CredentialError,
    in that order of precedence.
    """
    names = resolve_names(settings, prefix, rng)
    logging.info(f"Selected game name: {logging.highlight(names.game_name)}")
    if confirm is not None and not settings.auto_start and not confirm(names):
        raise RunDeclined("Exiting...")
    return verify_credentials(names, settings, checker)
