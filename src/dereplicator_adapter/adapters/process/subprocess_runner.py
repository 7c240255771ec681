"""Synchronous external process runner.

Purpose
-------
Implement :class:`dereplicator_adapter.application.ports.ProcessRunner` with
:func:`subprocess.run`. The call blocks until the child exits; there is no
timeout and no retry.

Output handling follows the explicit ``stream_output`` flag: streamed output
goes straight to the terminal, captured output (stdout and stderr merged) is
logged at debug level and attached to the result.
"""

from __future__ import annotations

import shlex
import subprocess
from pathlib import Path
from typing import Sequence

from ...application.ports import ProcessResult
from ...domain.errors import ExitCode, ExternalProcessFailed
from ...observability import log_debug, log_error, log_info, make_event


class SubprocessRunner:
    """Run the external tool with :mod:`subprocess` in the caller's working directory."""

    def run(self, executable: Path, arguments: Sequence[str], *, stream_output: bool) -> ProcessResult:
        """Run ``executable arguments...`` and return its status.

        Raises
        ------
        ExternalProcessFailed
            With :attr:`ExitCode.EXTERNAL_PROGRAM_ERROR` when the child cannot be
            started at all. A child that starts and fails is *not* raised here;
            its status is returned.
        """

        command = [str(executable), *arguments]
        log_info("external_process_started", **make_event("process_run", str(executable), {"command": shlex.join(command)}))
        try:
            if stream_output:
                completed = subprocess.run(command, check=False)
            else:
                completed = subprocess.run(
                    command,
                    check=False,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    text=True,
                    errors="replace",
                )
        except OSError as exc:
            log_error("external_process_launch_failed", **make_event("process_run", str(executable), {"error": str(exc)}))
            raise ExternalProcessFailed(
                ExitCode.EXTERNAL_PROGRAM_ERROR,
                f"could not start {executable}: {exc}",
            ) from exc

        returncode = _normalise_returncode(completed.returncode)
        output = None if stream_output else completed.stdout
        if output:
            log_debug("external_process_output", **make_event("process_run", str(executable), {"output": output}))
        log_info("external_process_finished", **make_event("process_run", str(executable), {"returncode": returncode}))
        return ProcessResult(returncode=returncode, output=output)


def _normalise_returncode(returncode: int) -> int:
    """Map signal terminations (negative codes) to the shell convention.

    Examples
    --------
    >>> _normalise_returncode(3), _normalise_returncode(-9)
    (3, 137)
    """

    return 128 - returncode if returncode < 0 else returncode
