"""On-disk directory bookkeeping for one new-game run."""

from __future__ import annotations

import tempfile
from dataclasses import dataclass
from pathlib import Path

from tools.newgame.core.naming import GameNames
from tools.newgame.core.scaffold import Placement

TEMP_DIR_PREFIX = "toy-azure-game"


@dataclass(frozen=True)
class RunLayout:
    """Paths under ``<temp>/<game>-bootstrap``; nothing is created until ``prepare``."""

    temp_dir: Path
    names: GameNames
    placement: Placement = Placement()

    @classmethod
    def create(cls, names: GameNames, *, work_dir: Path | None = None) -> "RunLayout":
        if work_dir is not None:
            work_dir.mkdir(parents=True, exist_ok=True)
        temp_dir = tempfile.mkdtemp(
            prefix=f"{TEMP_DIR_PREFIX}-{names.prefix}-",
            dir=str(work_dir) if work_dir is not None else None,
        )
        return cls(temp_dir=Path(temp_dir), names=names)

    @property
    def bootstrap_base_dir(self) -> Path:
        return self.temp_dir / f"{self.names.game_name}-bootstrap"

    @property
    def terragrunt_dir(self) -> Path:
        return self.bootstrap_base_dir / "terragrunt"

    @property
    def scaffold_dir(self) -> Path:
        return self.terragrunt_dir / "scaffold"

    @property
    def sandbox_dir(self) -> Path:
        return self.terragrunt_dir / self.placement.subscription

    @property
    def state_bootstrap_dir(self) -> Path:
        return (
            self.sandbox_dir
            / self.placement.region
            / self.placement.env
            / "state"
            / "self_bootstrapped_state"
        )

    @property
    def destroy_script(self) -> Path:
        return self.bootstrap_base_dir / "destroy.sh"

    def prepare(self) -> None:
        self.scaffold_dir.mkdir(parents=True, exist_ok=True)
