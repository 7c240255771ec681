"""Public package surface of the Dereplicator command line adapter.

``dereplicator_adapter`` wraps the external Dereplicator tool (NPDtools): it
validates the file options, runs the tool inside a temporary directory, and
copies the ``significant_matches.tsv`` it produces to the requested output
file. Import :func:`run` for a status-returning API or
:func:`run_dereplicator` for the raising variant.
"""

from __future__ import annotations

from .core import RunReport, build_arguments, load_settings, load_settings_raw, run, run_dereplicator
from .domain.errors import (
    AdapterError,
    CopyIOError,
    ExecutableNotFound,
    ExitCode,
    ExternalProcessFailed,
    IllegalParameters,
    MissingDatabase,
    MissingInput,
    MissingOutput,
    ResultFileMissing,
    SettingsError,
    UnsupportedFormat,
)
from .domain.options import RunOptions
from .domain.settings import AdapterSettings
from .observability import bind_trace_id, get_logger

__all__ = [
    "AdapterError",
    "AdapterSettings",
    "CopyIOError",
    "ExecutableNotFound",
    "ExitCode",
    "ExternalProcessFailed",
    "IllegalParameters",
    "MissingDatabase",
    "MissingInput",
    "MissingOutput",
    "ResultFileMissing",
    "RunOptions",
    "RunReport",
    "SettingsError",
    "UnsupportedFormat",
    "bind_trace_id",
    "build_arguments",
    "get_logger",
    "load_settings",
    "load_settings_raw",
    "run",
    "run_dereplicator",
]
