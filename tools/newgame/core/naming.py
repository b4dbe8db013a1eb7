"""Game name resolution and derived resource names."""

from __future__ import annotations

import random
import re
from dataclasses import dataclass

from tools.newgame.core.errors import InvalidInputError

PREFIX_PATTERN = re.compile(r"^[a-z]+(-[a-z]+)*$")

DESCRIPTORS: tuple[str, ...] = (
    "fluffy",
    "tiny",
    "majestic",
    "sneaky",
    "curious",
    "sleepy",
    "playful",
    "spotted",
    "striped",
    "golden",
    "silver",
    "silent",
    "loud",
    "happy",
    "sad",
    "brave",
    "shy",
)

ANIMALS: tuple[str, ...] = (
    "dog",
    "cat",
    "rabbit",
    "hamster",
    "ferret",
    "parrot",
    "snake",
    "turtle",
    "fish",
    "lizard",
    "gerbil",
    "guineapig",
    "mouse",
    "rat",
    "hedgehog",
    "chinchilla",
    "iguana",
    "frog",
    "newt",
    "salamander",
)


def validate_prefix(prefix: str) -> str:
    """Return ``prefix`` unchanged if it is lowercase letters with inner hyphens."""
    if not PREFIX_PATTERN.fullmatch(prefix):
        raise InvalidInputError(f"Invalid game prefix: {prefix}")
    return prefix


def generate_prefix(rng: random.Random | None = None) -> str:
    rng = rng or random.Random()
    return f"{rng.choice(DESCRIPTORS)}-{rng.choice(ANIMALS)}"


def resolve_prefix(prefix: str | None, rng: random.Random | None = None) -> str:
    if prefix is not None:
        return validate_prefix(prefix)
    return generate_prefix(rng)


@dataclass(frozen=True)
class GameNames:
    """Every resource name derived from a validated game prefix."""

    prefix: str

    @property
    def game_name(self) -> str:
        return f"{self.prefix}-game"

    @property
    def resource_group(self) -> str:
        return f"{self.game_name}-rg"

    @property
    def storage_account(self) -> str:
        return f"{self.game_name}sa".replace("-", "")

    @property
    def state_container(self) -> str:
        return f"{self.game_name}sc".replace("-", "")

    @property
    def repository(self) -> str:
        return f"{self.game_name}-infra-live"

    @property
    def app_naming_prefix(self) -> str:
        return f"gm{self.game_name}"
