"""Domain-level exception hierarchy and exit codes.

Purpose
-------
Expose the stable error taxonomy shared by adapters, the composition root, and
the CLI. Every exception carries the exit status the adapter reports for it, so
callers can translate failures into process exit codes without a lookup table.

Contents
--------
* :class:`ExitCode` – exit statuses owned by the adapter.
* :class:`AdapterError` – umbrella base class for all adapter failures.
* :class:`IllegalParameters` and its children – option validation failures.
* :class:`SettingsError` / :class:`InvalidFormat` / :class:`NotFound` – settings
  layer failures.
* :class:`ExecutableNotFound` – the external tool cannot be located.
* :class:`ExternalProcessFailed` – the external tool reported non-success.
* :class:`ResultFileMissing` – the tool succeeded but produced no result file.
* :class:`CopyIOError` – relocating the result file failed.

System Role
-----------
Adapters raise these exceptions; :func:`dereplicator_adapter.core.run` turns
them into exit statuses and the CLI prints them as a single status line.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit statuses reported by the adapter itself.

    The numbering follows the exit codes of the OpenMS tool family so wrapper
    scripts written against the original tool keep working. Statuses returned
    by the external process are passed through and are not members.
    """

    SUCCESS = 0
    CANNOT_WRITE_OUTPUT = 5
    ILLEGAL_PARAMETERS = 6
    MISSING_EXECUTABLE = 7
    EXTERNAL_PROGRAM_ERROR = 9
    RESULT_FILE_MISSING = 13


class AdapterError(Exception):
    """Base type for all exceptions emitted by ``dereplicator_adapter``.

    Why
    ----
    Provide a single catch-all type whose instances know their exit status.
    """

    exit_code: int = ExitCode.ILLEGAL_PARAMETERS


class IllegalParameters(AdapterError):
    """A required option is missing or has an unsupported value."""

    exit_code = ExitCode.ILLEGAL_PARAMETERS


class MissingInput(IllegalParameters):
    """No spectra input file was given."""

    def __init__(self) -> None:
        super().__init__("no input file (spectra) given")


class MissingDatabase(IllegalParameters):
    """No database directory was given."""

    def __init__(self) -> None:
        super().__init__("no database given")


class MissingOutput(IllegalParameters):
    """No output file was given."""

    def __init__(self) -> None:
        super().__init__("no output file (results) given")


class UnsupportedFormat(IllegalParameters):
    """A file option has an extension outside its allow-list.

    Attributes
    ----------
    option:
        Name of the offending option (``"in"`` or ``"out"``).
    path:
        The rejected path.
    """

    def __init__(self, option: str, path: str, allowed: tuple[str, ...]) -> None:
        self.option = option
        self.path = path
        super().__init__(f"file '{path}' given for -{option} has an unsupported format; allowed: {', '.join(allowed)}")


class SettingsError(AdapterError):
    """Signifies that adapter settings could not be assembled.

    Raised for values of the wrong type; parse problems and missing settings
    files use the subclasses below.
    """

    exit_code = ExitCode.ILLEGAL_PARAMETERS


class InvalidFormat(SettingsError):
    """Raised when a settings file cannot be parsed into structured data."""


class NotFound(SettingsError):
    """Raised when a settings file named on the command line does not exist."""


class ExecutableNotFound(AdapterError):
    """The Dereplicator executable could not be located or canonicalised.

    Kept separate from :class:`IllegalParameters` so callers can tell a
    forgotten option from a tool that is not installed.
    """

    exit_code = ExitCode.MISSING_EXECUTABLE

    def __init__(self, executable: str) -> None:
        self.executable = executable
        super().__init__(
            f"executable of Dereplicator could not be found ('{executable}'). "
            "Please either add it to the PATH environment variable or provide it with --executable"
        )


class ExternalProcessFailed(AdapterError):
    """The external tool exited with a non-success status.

    The instance ``exit_code`` equals the child's status so it can be passed
    through unchanged. ``output`` holds what the tool printed when its output
    was captured, ``None`` when it went straight to the terminal.
    """

    def __init__(self, returncode: int, message: str | None = None, *, output: str | None = None) -> None:
        self.returncode = returncode
        self.exit_code = returncode
        self.output = output
        super().__init__(message or f"Dereplicator exited with status {returncode}")


class ResultFileMissing(AdapterError):
    """The external tool succeeded but did not write its result file."""

    exit_code = ExitCode.RESULT_FILE_MISSING

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Dereplicator finished but wrote no result file at {path}")


class CopyIOError(AdapterError):
    """Copying the result file to the requested destination failed."""

    exit_code = ExitCode.CANNOT_WRITE_OUTPUT


__all__ = [
    "AdapterError",
    "CopyIOError",
    "ExecutableNotFound",
    "ExitCode",
    "ExternalProcessFailed",
    "IllegalParameters",
    "InvalidFormat",
    "MissingDatabase",
    "MissingInput",
    "MissingOutput",
    "NotFound",
    "ResultFileMissing",
    "SettingsError",
    "UnsupportedFormat",
]
