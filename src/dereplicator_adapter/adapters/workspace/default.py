"""Scoped temporary working directory.

Implements :class:`dereplicator_adapter.application.ports.Workspace` on top of
:class:`tempfile.TemporaryDirectory`: the directory exists only inside the
``with`` block and is removed on every exit path, exceptions included.
"""

from __future__ import annotations

import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Final, Iterator

from ...observability import log_debug, make_event

WORK_DIR_PREFIX: Final[str] = "dereplicator_adapter_"


class TemporaryWorkspace:
    """Hand out auto-removing work directories below *root* (or the system default)."""

    def __init__(self, root: str | None = None) -> None:
        self.root = root

    @contextmanager
    def acquire(self) -> Iterator[Path]:
        with tempfile.TemporaryDirectory(prefix=WORK_DIR_PREFIX, dir=self.root) as name:
            work_dir = Path(name)
            log_debug("work_dir_acquired", **make_event("work_dir_acquired", name))
            try:
                yield work_dir
            finally:
                log_debug("work_dir_released", **make_event("work_dir_released", name))
