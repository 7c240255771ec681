"""Relocation of the Dereplicator result file.

Purpose
-------
Implement :class:`dereplicator_adapter.application.ports.ResultRelocator`.
The tool writes ``significant_matches.tsv`` into its output directory; this
adapter checks that the file exists, removes any previous destination file,
and copies the result byte for byte.

The existence check happens before the destination is touched, so a run that
produced no result leaves an existing ``--out`` file alone.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Final

from ...domain.errors import CopyIOError, ResultFileMissing
from ...observability import log_debug, log_error, make_event

RESULT_FILE_NAME: Final[str] = "significant_matches.tsv"


class FileCopyRelocator:
    """Copy ``significant_matches.tsv`` from the work directory to the destination."""

    def __init__(self, result_file_name: str = RESULT_FILE_NAME) -> None:
        self.result_file_name = result_file_name

    def relocate(self, work_dir: Path, destination: Path) -> Path:
        """Replace *destination* with the result file found in *work_dir*.

        Raises
        ------
        ResultFileMissing
            When the result file is absent; *destination* is left untouched.
        CopyIOError
            When removing the old destination or copying fails. A partially
            written destination is removed.

        Examples
        --------
        >>> from tempfile import TemporaryDirectory
        >>> tmp = TemporaryDirectory()
        >>> root = Path(tmp.name)
        >>> _ = (root / RESULT_FILE_NAME).write_bytes(b"PeptideA\\t0.01\\n")
        >>> target = FileCopyRelocator().relocate(root, root / "results.tsv")
        >>> target.read_bytes()
        b'PeptideA\\t0.01\\n'
        >>> tmp.cleanup()
        """

        source = work_dir / self.result_file_name
        if not source.is_file():
            log_error("result_file_missing", **make_event("result_copied", str(source)))
            raise ResultFileMissing(str(source))

        try:
            destination.unlink(missing_ok=True)
        except OSError as exc:
            raise CopyIOError(f"cannot remove existing output file {destination}: {exc}") from exc

        try:
            shutil.copyfile(source, destination)
        except OSError as exc:
            _discard_partial(destination)
            log_error("result_copy_failed", **make_event("result_copied", str(destination), {"error": str(exc)}))
            raise CopyIOError(f"cannot write output file {destination}: {exc}") from exc

        log_debug(
            "result_copied",
            **make_event("result_copied", str(destination), {"bytes": destination.stat().st_size}),
        )
        return destination


def _discard_partial(destination: Path) -> None:
    """Remove whatever a failed copy left behind at *destination*."""

    try:
        if destination.is_file():
            destination.unlink()
    except OSError as exc:
        log_error("partial_output_left", **make_event("result_copied", str(destination), {"error": str(exc)}))
