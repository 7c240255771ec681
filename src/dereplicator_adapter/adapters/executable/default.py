"""Executable lookup for the Dereplicator wrapper script.

Purpose
-------
Implement :class:`dereplicator_adapter.application.ports.ExecutableResolver`.
Bare command names are looked up on the search path, paths with a directory
component are checked directly, and the hit is canonicalised (symlinks
resolved) before it is handed to the process runner.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Mapping

from ...domain.errors import ExecutableNotFound
from ...observability import log_debug, make_event


class DefaultExecutableResolver:
    """Resolve executables via :func:`shutil.which`.

    Parameters
    ----------
    environ:
        Mapping whose ``PATH`` entry is searched; defaults to :data:`os.environ`.
    """

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def resolve(self, executable: str) -> Path:
        """Return the canonical absolute path of *executable*.

        Raises
        ------
        ExecutableNotFound
            When *executable* is empty, is not found, or cannot be canonicalised.

        Examples
        --------
        >>> DefaultExecutableResolver(environ={"PATH": ""}).resolve("")
        Traceback (most recent call last):
        ...
        dereplicator_adapter.domain.errors.ExecutableNotFound: executable of Dereplicator could not be found (''). Please either add it to the PATH environment variable or provide it with --executable
        """

        if not executable.strip():
            raise ExecutableNotFound(executable)
        located = shutil.which(os.path.expanduser(executable), path=self._environ.get("PATH", os.defpath))
        if located is None:
            log_debug("executable_missing", **make_event("executable_resolved", executable))
            raise ExecutableNotFound(executable)
        try:
            canonical = Path(located).resolve(strict=True)
        except (OSError, RuntimeError) as exc:
            raise ExecutableNotFound(executable) from exc
        log_debug("executable_resolved", **make_event("executable_resolved", str(canonical), {"requested": executable}))
        return canonical
