"""Executable lookup: search path, explicit paths, canonicalisation."""

from __future__ import annotations

from pathlib import Path

import pytest

from dereplicator_adapter.adapters.executable.default import DefaultExecutableResolver
from dereplicator_adapter.domain.errors import ExecutableNotFound
from tests.support import create_fake_dereplicator, path_env, posix_only

pytestmark = posix_only


def test_bare_name_is_found_on_path(tmp_path: Path) -> None:
    tool = create_fake_dereplicator(tmp_path / "bin")
    resolver = DefaultExecutableResolver(environ=path_env(tmp_path / "bin"))
    resolved = resolver.resolve("dereplicator.py")
    assert resolved == tool.path.resolve()
    assert resolved.is_absolute()


def test_explicit_path_is_canonicalised(tmp_path: Path) -> None:
    tool = create_fake_dereplicator(tmp_path / "npdtools" / "bin")
    link_dir = tmp_path / "links"
    link_dir.mkdir()
    link = link_dir / "dereplicator"
    link.symlink_to(tool.path)
    resolver = DefaultExecutableResolver(environ=path_env())
    assert resolver.resolve(str(link)) == tool.path.resolve()
    indirect = tmp_path / "npdtools" / ".." / "npdtools" / "bin" / "dereplicator.py"
    assert resolver.resolve(str(indirect)) == tool.path.resolve()


@pytest.mark.parametrize("value", ["", "   "])
def test_empty_executable_is_rejected(value: str) -> None:
    with pytest.raises(ExecutableNotFound):
        DefaultExecutableResolver(environ=path_env()).resolve(value)


def test_unknown_command_is_rejected(tmp_path: Path) -> None:
    resolver = DefaultExecutableResolver(environ=path_env(tmp_path))
    with pytest.raises(ExecutableNotFound) as info:
        resolver.resolve("dereplicator.py")
    assert info.value.executable == "dereplicator.py"


def test_non_executable_file_is_rejected(tmp_path: Path) -> None:
    script = tmp_path / "dereplicator.py"
    script.write_text("print('hi')\n", encoding="utf-8")
    script.chmod(0o644)
    with pytest.raises(ExecutableNotFound):
        DefaultExecutableResolver(environ=path_env(tmp_path)).resolve(str(script))
