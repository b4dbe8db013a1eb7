"""
Launch script process management.

Spawns the new-game command as an opaque subprocess and relays its output,
either buffered until exit or as a sequence of server-sent events. Success is
decided by exit status only.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import AsyncIterator, Callable, Mapping, Optional, Sequence

logger = logging.getLogger("launcher.script")

# Per-line read limit for streamed output.
STREAM_LINE_LIMIT = 1024 * 1024

STDERR_PREFIX = "[stderr] "


@dataclass(frozen=True)
class LaunchResult:
    returncode: int
    output: str

    @property
    def success(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True)
class LaunchEvent:
    """One server-sent event: start, output, error or complete."""

    event: str
    data: str

    @property
    def terminal(self) -> bool:
        return self.event in ("error", "complete")

    def encode(self) -> str:
        lines = self.data.splitlines() or [""]
        body = "".join(f"data: {line}\n" for line in lines)
        return f"event: {self.event}\n{body}\n"


def exit_message(returncode: int) -> str:
    return f"Script execution failed: exit status {returncode}"


class LaunchStream:
    """
    Output relay for one running process.

    Two reader tasks drain stdout and stderr line by line into a single queue;
    a supervising task waits for exit, calls ``on_exit`` and then enqueues the
    terminal event. The supervisor keeps running if the consumer goes away.
    """

    def __init__(
        self,
        process: asyncio.subprocess.Process,
        on_exit: Callable[[], None],
    ) -> None:
        self.process = process
        self._on_exit = on_exit
        self._queue: asyncio.Queue[LaunchEvent] = asyncio.Queue()
        self.task = asyncio.create_task(self._supervise())

    async def _read_line(self, reader: asyncio.StreamReader) -> Optional[bytes]:
        """
        Next line without its newline, or None at EOF.

        Lines longer than STREAM_LINE_LIMIT are drained in chunks and
        truncated to the limit rather than failing the relay.
        """
        line = bytearray()
        while True:
            try:
                chunk = await reader.readuntil(b"\n")
            except asyncio.IncompleteReadError as e:
                if not e.partial and not line:
                    return None
                chunk = e.partial
            except asyncio.LimitOverrunError as e:
                chunk = await reader.read(e.consumed)
                line.extend(chunk[: max(0, STREAM_LINE_LIMIT - len(line))])
                continue
            else:
                chunk = chunk[:-1]
            line.extend(chunk[: max(0, STREAM_LINE_LIMIT - len(line))])
            return bytes(line)

    async def _pump(self, reader: Optional[asyncio.StreamReader], prefix: str) -> None:
        if reader is None:
            return
        while True:
            raw = await self._read_line(reader)
            if raw is None:
                return
            line = raw.decode("utf-8", errors="replace").rstrip("\r")
            await self._queue.put(LaunchEvent("output", f"{prefix}{line}"))

    async def _supervise(self) -> None:
        terminal: Optional[LaunchEvent] = None
        try:
            results = await asyncio.gather(
                self._pump(self.process.stdout, ""),
                self._pump(self.process.stderr, STDERR_PREFIX),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, Exception):
                    logger.error(f"Failed while relaying launch output: {result}")
            returncode = await self.process.wait()
            if returncode == 0:
                terminal = LaunchEvent("complete", "Script completed successfully")
            else:
                terminal = LaunchEvent("error", exit_message(returncode))
            logger.info(
                "Launch script exited",
                extra={"pid": self.process.pid, "returncode": returncode},
            )
        finally:
            self._on_exit()
            self._queue.put_nowait(
                terminal or LaunchEvent("error", "Script execution failed: output relay stopped")
            )

    async def events(self) -> AsyncIterator[LaunchEvent]:
        yield LaunchEvent("start", "Script started")
        while True:
            event = await self._queue.get()
            yield event
            if event.terminal:
                return


class ScriptLauncher:
    """
    Builds and spawns the launch command.

    ``spawn_count`` counts successfully started processes.
    """

    def __init__(
        self,
        command: Sequence[str],
        *,
        workdir: Optional[str] = None,
        extra_env: Optional[Mapping[str, str]] = None,
    ) -> None:
        if not command:
            raise ValueError("launch command must not be empty")
        self.command = list(command)
        self.workdir = workdir
        self.extra_env = dict(extra_env or {"AUTO_START_NEW_GAME": "true"})
        self.spawn_count = 0
        self._tasks: set[asyncio.Task] = set()

    def build_command(self, game_prefix: Optional[str] = None) -> list[str]:
        if game_prefix and game_prefix.startswith("-"):
            raise ValueError(f"game prefix must not start with '-': {game_prefix}")
        if game_prefix:
            return [*self.command, game_prefix]
        return list(self.command)

    def build_env(self) -> dict[str, str]:
        env = os.environ.copy()
        env.update(self.extra_env)
        return env

    async def spawn(self, game_prefix: Optional[str] = None) -> asyncio.subprocess.Process:
        cmd = self.build_command(game_prefix)
        process = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=self.workdir,
            env=self.build_env(),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            limit=STREAM_LINE_LIMIT,
        )
        self.spawn_count += 1
        logger.info("Launch script started", extra={"pid": process.pid, "command": cmd})
        return process

    def _track(self, task: asyncio.Task) -> None:
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _communicate(
        self, process: asyncio.subprocess.Process, on_exit: Callable[[], None]
    ) -> LaunchResult:
        try:
            stdout, stderr = await process.communicate()
        finally:
            on_exit()
        logger.info(
            "Launch script exited",
            extra={"pid": process.pid, "returncode": process.returncode},
        )
        output = stdout.decode("utf-8", errors="replace") + stderr.decode(
            "utf-8", errors="replace"
        )
        return LaunchResult(returncode=process.returncode, output=output)

    async def collect(
        self, process: asyncio.subprocess.Process, on_exit: Callable[[], None]
    ) -> LaunchResult:
        """
        Wait for exit and return stdout followed by stderr.

        Collection runs in its own task so that ``on_exit`` fires only when
        the process has exited, even if the awaiting request is cancelled.
        """
        task = asyncio.create_task(self._communicate(process, on_exit))
        self._track(task)
        return await asyncio.shield(task)

    def relay(
        self, process: asyncio.subprocess.Process, on_exit: Callable[[], None]
    ) -> LaunchStream:
        stream = LaunchStream(process, on_exit)
        self._track(stream.task)
        return stream

    async def wait_idle(self) -> None:
        """Wait for every relayed process to exit."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
