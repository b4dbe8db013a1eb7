"""Command execution helpers for the new-game pipeline."""

from __future__ import annotations

import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Sequence

# Inline scaffold payloads are long base64 blobs; keep echoed commands readable.
_MAX_ECHO_TOKEN = 96


@dataclass(frozen=True)
class CompletedCommand:
    """Normalized command execution result."""

    cmd: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


class RunnerError(RuntimeError):
    """Raised when a command cannot be executed at all."""


class CommandRunner:
    """Thin subprocess wrapper with dry-run support and command echo."""

    def __init__(
        self,
        *,
        dry_run: bool = False,
        printer: Callable[[str], None] | None = None,
    ) -> None:
        self.dry_run = dry_run
        self._printer = printer or _print_flush

    def format_cmd(self, cmd: Sequence[str]) -> str:
        return "$ " + " ".join(_shorten(shlex.quote(str(token))) for token in cmd)

    def emit(self, message: str) -> None:
        self._printer(message)

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        capture_output: bool = False,
        stream_output: bool = False,
        run_in_dry_run: bool = False,
    ) -> CompletedCommand:
        """Run ``cmd`` and return its result without raising on non-zero exit.

        ``stream_output`` echoes every line (stderr merged into stdout) as it
        arrives and also keeps it in the returned ``stdout``.
        """
        tokens = tuple(str(token) for token in cmd)
        rendered = self.format_cmd(tokens)
        if self.dry_run and not run_in_dry_run:
            self.emit(f"[dry-run] {rendered}")
            return CompletedCommand(tokens, 0, "", "")

        run_env = os.environ.copy()
        if env:
            run_env.update({str(key): str(value) for key, value in env.items()})

        try:
            if stream_output:
                return self._run_streaming(tokens, rendered, cwd=cwd, env=run_env)

            completed = subprocess.run(
                list(tokens),
                cwd=str(cwd) if cwd else None,
                env=run_env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE if capture_output else None,
                stderr=subprocess.PIPE if capture_output else None,
                text=True,
                check=False,
                errors="replace",
            )
        except OSError as exc:
            raise RunnerError(f"failed to execute {rendered}: {exc}") from exc

        return CompletedCommand(
            tokens,
            completed.returncode,
            completed.stdout or "",
            completed.stderr or "",
        )

    def _run_streaming(
        self,
        tokens: tuple[str, ...],
        rendered: str,
        *,
        cwd: Path | None,
        env: dict[str, str],
    ) -> CompletedCommand:
        self.emit(rendered)
        proc = subprocess.Popen(
            list(tokens),
            cwd=str(cwd) if cwd else None,
            env=env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
            errors="replace",
        )
        assert proc.stdout is not None
        captured: list[str] = []
        for raw_line in proc.stdout:
            line = raw_line.rstrip("\n")
            captured.append(line)
            self.emit(line)
        rc = proc.wait()
        return CompletedCommand(tokens, rc, "\n".join(captured), "")


def _shorten(token: str) -> str:
    if len(token) <= _MAX_ECHO_TOKEN:
        return token
    return f"{token[:_MAX_ECHO_TOKEN]}...({len(token)} chars)"


def _print_flush(message: str) -> None:
    print(message, flush=True)
