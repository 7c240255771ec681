"""Shared fixtures for adapter tests.

``create_fake_dereplicator`` writes a small executable script that behaves like
``dereplicator.py`` as far as the adapter can tell: it records its argument
vector, optionally writes ``significant_matches.tsv`` into the ``-o``
directory, and exits with a chosen status. The in-process fakes cover the same
ground for tests that should not spawn processes.
"""

from __future__ import annotations

import json
import os
import sys
import textwrap
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Sequence

import pytest

from dereplicator_adapter.application.ports import ProcessResult
from dereplicator_adapter.domain.errors import ExecutableNotFound

RESULT_BYTES = b"PeptideA\t0.01\n"

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="fake tool relies on a POSIX shebang")


@dataclass
class FakeTool:
    """Handle on a generated fake Dereplicator script."""

    path: Path
    record: Path

    def invocation(self) -> dict[str, object]:
        """Return what the last run of the script recorded."""

        return json.loads(self.record.read_text(encoding="utf-8"))

    @property
    def was_called(self) -> bool:
        return self.record.exists()


def create_fake_dereplicator(
    directory: Path,
    *,
    name: str = "dereplicator.py",
    result: bytes | None = RESULT_BYTES,
    exit_code: int = 0,
    message: str = "Dereplicator v2.4.0 (fake) started",
) -> FakeTool:
    """Write an executable fake tool below *directory* and return a handle."""

    directory.mkdir(parents=True, exist_ok=True)
    script = directory / name
    record = directory / f"{name}.calls.json"
    body = textwrap.dedent(
        f"""\
        #!{sys.executable}
        import json
        import os
        import sys
        from pathlib import Path

        args = sys.argv[1:]
        out_dir = Path(args[args.index("-o") + 1])
        Path({str(record)!r}).write_text(
            json.dumps({{"argv": args, "out_dir_existed": out_dir.is_dir()}}),
            encoding="utf-8",
        )
        print({message!r})
        result = {result!r}
        if result is not None:
            (out_dir / "significant_matches.tsv").write_bytes(result)
        sys.exit({exit_code})
        """
    )
    script.write_text(body, encoding="utf-8")
    script.chmod(0o755)
    return FakeTool(path=script, record=record)


class StaticResolver:
    """Resolver returning a fixed path, or failing for names in *missing*."""

    def __init__(self, path: Path = Path("/opt/npdtools/bin/dereplicator.py"), *, missing: Sequence[str] = ()) -> None:
        self.path = path
        self.missing = set(missing)
        self.requested: list[str] = []

    def resolve(self, executable: str) -> Path:
        self.requested.append(executable)
        if not executable or executable in self.missing:
            raise ExecutableNotFound(executable)
        return self.path


@dataclass
class RecordingWorkspace:
    """Workspace creating numbered directories below *root* and removing them afterwards."""

    root: Path
    acquired: list[Path] = field(default_factory=list)

    @contextmanager
    def acquire(self) -> Iterator[Path]:
        work_dir = self.root / f"work-{len(self.acquired)}"
        work_dir.mkdir(parents=True)
        self.acquired.append(work_dir)
        try:
            yield work_dir
        finally:
            for child in work_dir.iterdir():
                child.unlink()
            work_dir.rmdir()


@dataclass
class FakeRunner:
    """In-process stand-in for the subprocess runner."""

    returncode: int = 0
    result: bytes | None = RESULT_BYTES
    output: str | None = "fake output"
    calls: list[tuple[Path, list[str], bool]] = field(default_factory=list)

    def run(self, executable: Path, arguments: Sequence[str], *, stream_output: bool) -> ProcessResult:
        self.calls.append((executable, list(arguments), stream_output))
        out_dir = Path(arguments[arguments.index("-o") + 1])
        if self.result is not None:
            (out_dir / "significant_matches.tsv").write_bytes(self.result)
        return ProcessResult(returncode=self.returncode, output=self.output)


def path_env(*directories: Path) -> dict[str, str]:
    """Return an environment whose ``PATH`` lists only *directories*."""

    return {"PATH": os.pathsep.join(str(directory) for directory in directories)}
