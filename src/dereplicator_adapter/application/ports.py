"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts the composition root relies on so that the
run flow can be exercised with fakes and the concrete adapters stay
replaceable.

Contents
--------
* :class:`ProcessResult` – status code plus captured output of a child process.
* :class:`ExecutableResolver` – turns a command name into a canonical path.
* :class:`Workspace` – hands out a scoped temporary working directory.
* :class:`ProcessRunner` – runs the external tool synchronously.
* :class:`ResultRelocator` – moves the tool's result file to its destination.

System Role
-----------
These protocols enforce Dependency Inversion. Each adapter under
``dereplicator_adapter.adapters`` implements exactly one of them.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of one external process run.

    Attributes
    ----------
    returncode:
        Exit status of the child; signal terminations are reported as
        ``128 + signal`` like a POSIX shell does.
    output:
        Combined stdout/stderr text when captured, ``None`` when the child
        inherited the terminal.
    """

    returncode: int
    output: str | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@runtime_checkable
class ExecutableResolver(Protocol):
    """Locate the external tool.

    Why
    ----
    Keep search-path rules out of the run flow so tests can point the adapter
    at a fake tool.
    """

    def resolve(self, executable: str) -> Path:
        """Return the canonical absolute path of *executable* or raise ``ExecutableNotFound``."""


@runtime_checkable
class Workspace(Protocol):
    """Provide a working directory that is removed on every exit path."""

    def acquire(self) -> AbstractContextManager[Path]:
        """Return a context manager yielding a fresh, empty directory."""


@runtime_checkable
class ProcessRunner(Protocol):
    """Run an executable synchronously and report its status."""

    def run(self, executable: Path, arguments: Sequence[str], *, stream_output: bool) -> ProcessResult:
        """Block until the child exits; never retries."""


@runtime_checkable
class ResultRelocator(Protocol):
    """Copy the tool's result file out of the working directory."""

    def relocate(self, work_dir: Path, destination: Path) -> Path:
        """Replace *destination* with the result file and return its path."""
