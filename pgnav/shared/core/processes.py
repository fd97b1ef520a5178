"""Process runner protocols and the default subprocess implementation."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class SyncProcess(Protocol):
    """Protocol for synchronous process handles."""

    returncode: int | None

    def communicate(self, timeout: float | None = None) -> tuple[str, str]:
        ...

    def kill(self) -> None:
        ...


@runtime_checkable
class SyncProcessRunner(Protocol):
    """Protocol for spawning synchronous processes."""

    def spawn(self, command: list[str], *, cwd: str | None = None) -> SyncProcess:
        ...


@dataclass
class SubprocessRunner:
    """Default runner using subprocess.Popen."""

    def spawn(self, command: list[str], *, cwd: str | None = None) -> subprocess.Popen[str]:
        return subprocess.Popen(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            cwd=cwd,
        )


@dataclass
class ProcessOutcome:
    returncode: int
    stdout: str
    stderr: str


def run_to_completion(
    runner: SyncProcessRunner,
    command: list[str],
    *,
    timeout: float | None = None,
) -> ProcessOutcome:
    """Spawn ``command`` and wait for it, killing it on timeout."""
    process = runner.spawn(command)
    try:
        stdout, stderr = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        process.kill()
        stdout, stderr = process.communicate()
    return ProcessOutcome(
        returncode=process.returncode if process.returncode is not None else -1,
        stdout=stdout or "",
        stderr=stderr or "",
    )
