from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from tools.newgame.core.runner import CompletedCommand
from tools.newgame.core.settings import NewGameSettings

REQUIRED_ENV = {
    "TF_VAR_github_org": "acme-games",
    "TF_VAR_github_pat": "ghp_test",
    "ARM_SUBSCRIPTION_ID": "11111111-2222-3333-4444-555555555555",
}


@dataclass
class FakeRunner:
    dry_run: bool = False
    returncodes: dict[str, int] = field(default_factory=dict)
    stdout: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.commands: list[tuple[list[str], bool]] = []
        self.cwds: list[Path | None] = []
        self.command_envs: list[dict[str, str] | None] = []
        self.messages: list[str] = []

    def emit(self, message: str) -> None:
        self.messages.append(message)

    def run(
        self,
        cmd,
        *,
        cwd=None,
        env=None,
        capture_output: bool = False,
        stream_output: bool = False,
        run_in_dry_run: bool = False,
    ) -> CompletedCommand:
        del capture_output, stream_output
        command = [str(token) for token in cmd]
        self.commands.append((command, run_in_dry_run))
        self.cwds.append(cwd)
        self.command_envs.append(dict(env) if isinstance(env, dict) else None)
        key = " ".join(command[:3])
        rc = self.returncodes.get(key, 0)
        return CompletedCommand(tuple(command), rc, self.stdout.get(key, ""), "")


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def required_env(monkeypatch) -> dict[str, str]:
    for name, value in REQUIRED_ENV.items():
        monkeypatch.setenv(name, value)
    for name in ("TASM_REF", "TGO_REF", "SKIP_CREATE_STACK", "AUTO_START_NEW_GAME"):
        monkeypatch.delenv(name, raising=False)
    return dict(REQUIRED_ENV)


@pytest.fixture
def settings(required_env) -> NewGameSettings:
    return NewGameSettings(_env_file=None)
