"""Ordered Terragrunt invocation for a validated game."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from tools.newgame.core import logging
from tools.newgame.core.errors import ExternalToolError
from tools.newgame.core.layout import RunLayout
from tools.newgame.core.runner import CommandRunner, RunnerError
from tools.newgame.core.scaffold import SCAFFOLDER_SOURCE, ScaffoldInputs, render_scaffold
from tools.newgame.core.settings import NewGameSettings
from tools.newgame.core.validator import ValidatedGame

NON_INTERACTIVE = "--terragrunt-non-interactive"


@dataclass(frozen=True)
class Step:
    name: str
    cmd: tuple[str, ...]
    cwd: Path


@dataclass(frozen=True)
class StepResult:
    step: str
    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True)
class NewGameResult:
    layout: RunLayout
    steps: tuple[StepResult, ...]
    destroy_script: Path
    stack_created: bool


def run_steps(
    steps: Sequence[Step],
    runner: CommandRunner,
    *,
    env: dict[str, str],
) -> list[StepResult]:
    """Run ``steps`` in order and stop at the first non-zero exit."""
    results: list[StepResult] = []
    for step in steps:
        logging.step(f"[{step.name}] {step.cwd}")
        try:
            completed = runner.run(step.cmd, cwd=step.cwd, env=env, stream_output=True)
        except RunnerError as exc:
            raise ExternalToolError(step.name, 127, str(exc)) from exc
        result = StepResult(step.name, completed.returncode, completed.output)
        results.append(result)
        if not result.ok:
            raise ExternalToolError(step.name, result.returncode, result.output)
    return results


def bootstrap_steps(layout: RunLayout, orchestrator_b64: str, tgo_ref: str) -> list[Step]:
    return [
        Step(
            "scaffold",
            (
                "terragrunt",
                "scaffold",
                f"{SCAFFOLDER_SOURCE}?ref={tgo_ref}",
                f"--var=InputJsonB64={orchestrator_b64}",
                NON_INTERACTIVE,
            ),
            layout.scaffold_dir,
        ),
        Step(
            "apply-bootstrap",
            ("terragrunt", "run-all", "apply", NON_INTERACTIVE),
            layout.scaffold_dir,
        ),
        Step("self-bootstrap", ("./self_bootstrap.sh",), layout.state_bootstrap_dir),
    ]


def stack_step(layout: RunLayout) -> Step:
    return Step(
        "apply-stack",
        ("terragrunt", "run-all", "apply", NON_INTERACTIVE),
        layout.sandbox_dir,
    )


def destroy_commands(layout: RunLayout) -> list[str]:
    return [
        f"cd {layout.terragrunt_dir}; terragrunt run-all destroy {NON_INTERACTIVE}; cd -",
        f"cd {layout.state_bootstrap_dir}; ./destroy_state.sh; cd -",
    ]


def write_destroy_script(layout: RunLayout) -> Path:
    commands = destroy_commands(layout)
    script = layout.destroy_script
    script.parent.mkdir(parents=True, exist_ok=True)
    script.write_text(
        "\n".join(["#!/bin/bash", "# Destroy commands:", *commands]) + "\n",
        encoding="utf-8",
    )
    script.chmod(0o755)
    return script


def command_env(game: ValidatedGame, settings: NewGameSettings) -> dict[str, str]:
    return {
        "GAME_PREFIX": game.names.prefix,
        "GAME_NAME": game.names.game_name,
        "TASM_REF": settings.tasm_ref,
        "TGO_REF": settings.tgo_ref,
    }


def execute_new_game(
    game: ValidatedGame,
    settings: NewGameSettings,
    runner: CommandRunner,
    *,
    work_dir: Path | None = None,
) -> NewGameResult:
    layout = RunLayout.create(game.names, work_dir=work_dir)
    layout.prepare()

    rendered = render_scaffold(
        ScaffoldInputs(
            names=game.names,
            github_org=settings.github_org,
            subscription_id=settings.subscription_id,
            module_ref=settings.tasm_ref,
            scaffolding_root=str(layout.bootstrap_base_dir),
        )
    )
    for path in rendered.write(layout.scaffold_dir):
        runner.emit(f"Wrote {path}")

    env = command_env(game, settings)
    results = run_steps(
        bootstrap_steps(layout, rendered.orchestrator_b64, settings.tgo_ref),
        runner,
        env=env,
    )
    logging.success(f"State bootstrap complete in: {layout.state_bootstrap_dir}")

    destroy_script = write_destroy_script(layout)
    runner.emit("Destroy commands:")
    for line in destroy_commands(layout):
        runner.emit(line)
    runner.emit(str(destroy_script))

    stack_created = False
    if settings.skip_create_stack:
        logging.info("SKIP_CREATE_STACK is set - not creating stack.")
    else:
        logging.info("SKIP_CREATE_STACK is not set - creating stack.")
        results.extend(run_steps([stack_step(layout)], runner, env=env))
        stack_created = True

    return NewGameResult(
        layout=layout,
        steps=tuple(results),
        destroy_script=destroy_script,
        stack_created=stack_created,
    )
