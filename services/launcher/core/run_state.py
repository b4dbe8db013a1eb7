"""
Single-flight run state.

One RunGuard is owned by the application; it admits at most one launch at a
time and rejects (never queues) any other.
"""

import threading
from enum import Enum

from .exceptions import ConflictError


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class RunGuard:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = RunState.IDLE

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is RunState.RUNNING

    def compare_and_swap(self, expected: RunState, new: RunState) -> bool:
        with self._lock:
            if self._state is not expected:
                return False
            self._state = new
            return True

    def acquire(self) -> None:
        """Move Idle -> Running or raise ConflictError."""
        if not self.compare_and_swap(RunState.IDLE, RunState.RUNNING):
            raise ConflictError()

    def release(self) -> None:
        # Idempotent: releasing an idle guard is a no-op.
        self.compare_and_swap(RunState.RUNNING, RunState.IDLE)
