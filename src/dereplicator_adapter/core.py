"""Composition root for ``dereplicator_adapter``.

Purpose
-------
Provide the entry points that orchestrate option validation, executable
resolution, the scoped work directory, the external process, and result
relocation, while emitting structured observability signals.

Contents
--------
* :class:`RunReport` – summary of a successful run.
* :func:`load_settings` / :func:`load_settings_raw` – layered settings.
* :func:`build_arguments` – the fixed argument vector handed to the tool.
* :func:`run_dereplicator` – raising API used by the CLI.
* :func:`run` – status-returning API for programmatic callers.

System Role
-----------
Connects the adapters (search path, temp directory, subprocess, file copy)
with the domain value objects. The run walks ``validated →
executable_resolved → work_dir_acquired → process_run → result_copied`` once,
top to bottom; any failure ends it.
"""

from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .adapters.env.default import ENV_PREFIX, DefaultEnvLoader
from .adapters.executable.default import DefaultExecutableResolver
from .adapters.file_loaders.structured import loader_for
from .adapters.process.subprocess_runner import SubprocessRunner
from .adapters.results.default import RESULT_FILE_NAME, FileCopyRelocator
from .adapters.workspace.default import TemporaryWorkspace
from .application.merge import merge_layers
from .application.ports import ExecutableResolver, ProcessRunner, ResultRelocator, Workspace
from .domain.errors import AdapterError, ExitCode, ExternalProcessFailed, SettingsError
from .domain.options import RunOptions, validate_options
from .domain.settings import DEFAULTS, AdapterSettings
from .observability import log_debug, log_error, log_info, make_event, new_trace_id


@dataclass(frozen=True)
class RunReport:
    """What a successful run did.

    Attributes
    ----------
    executable:
        Canonical path of the tool that was started.
    arguments:
        Argument vector passed to the tool (without the executable).
    output_path:
        Where the result file was copied to.
    """

    executable: Path
    arguments: tuple[str, ...]
    output_path: Path

    @property
    def status_line(self) -> str:
        return f"Everything is fine! Results are in {self.output_path}"


def load_settings_raw(
    *,
    config_file: str | None = None,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
) -> tuple[dict[str, object], dict[str, dict[str, object]]]:
    """Return merged settings data and provenance.

    Layers, lowest precedence first: ``defaults``, ``file`` (*config_file*),
    ``env`` (``DEREPLICATOR_ADAPTER_*``), ``cli`` (*overrides*; ``None`` values
    are skipped so unset options do not mask lower layers).

    Examples
    --------
    >>> data, meta = load_settings_raw(environ={}, overrides={"debug_level": 1, "executable": None})
    >>> data["debug_level"], meta["debug_level"]["layer"], meta["executable"]["layer"]
    (1, 'cli', 'defaults')
    """

    layers: list[tuple[str, Mapping[str, object], str | None]] = [("defaults", DEFAULTS, None)]
    if config_file:
        layers.append(("file", loader_for(config_file).load(config_file), config_file))
    env_data = DefaultEnvLoader(environ=environ).load(ENV_PREFIX)
    if env_data:
        layers.append(("env", env_data, None))
    cli_data = {key: value for key, value in (overrides or {}).items() if value is not None}
    if cli_data:
        layers.append(("cli", cli_data, None))
    merged, meta = merge_layers(layers)
    log_debug("settings_merged", stage="settings", path=config_file, total_layers=len(layers))
    return merged, meta


def load_settings(
    *,
    config_file: str | None = None,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
) -> AdapterSettings:
    """Return the effective :class:`AdapterSettings` (see :func:`load_settings_raw`).

    Examples
    --------
    >>> load_settings(environ={"DEREPLICATOR_ADAPTER_EXECUTABLE": "/opt/dereplicator.py"}).executable
    '/opt/dereplicator.py'
    """

    data, _ = load_settings_raw(config_file=config_file, environ=environ, overrides=overrides)
    return AdapterSettings.from_mapping(data)


def build_arguments(options: RunOptions, work_dir: Path | str) -> list[str]:
    """Return the argument vector for the tool, always in the same order.

    Examples
    --------
    >>> build_arguments(RunOptions("sample.mzML", "/db/nrps", "results.tsv"), "/tmp/work")
    ['sample.mzML', '-o', '/tmp/work', '--db-path', '/db/nrps']
    """

    return [options.input_path, "-o", str(work_dir), "--db-path", options.database]


def run_dereplicator(
    options: RunOptions,
    settings: AdapterSettings | None = None,
    *,
    resolver: ExecutableResolver | None = None,
    workspace: Workspace | None = None,
    runner: ProcessRunner | None = None,
    relocator: ResultRelocator | None = None,
) -> RunReport:
    """Run Dereplicator for *options* and copy its result to ``options.output_path``.

    Why
    ----
    The CLI needs both the report and the typed failure to print a single
    status line; programmatic callers that only want a status use :func:`run`.

    Parameters
    ----------
    options:
        Paths of the run. ``options.executable`` overrides ``settings.executable``.
    settings:
        Effective settings; defaults to :class:`AdapterSettings` defaults.
    resolver / workspace / runner / relocator:
        Adapter overrides, mainly for tests.

    Raises
    ------
    IllegalParameters
        Before any side effect, when ``in``/``database``/``out`` is missing or
        has an unsupported extension.
    ExecutableNotFound
        Before the work directory is created.
    ExternalProcessFailed
        With the tool's own status; the destination file is not touched.
    ResultFileMissing / CopyIOError
        When relocating the result fails.
    SettingsError
        When the work directory cannot be created below ``temp_root``.
    """

    settings = settings or AdapterSettings()
    new_trace_id()
    validate_options(options)
    log_debug("stage_reached", **make_event("validated", options.input_path))

    resolver = resolver or DefaultExecutableResolver()
    workspace = workspace or TemporaryWorkspace(settings.temp_root)
    runner = runner or SubprocessRunner()
    relocator = relocator or FileCopyRelocator()

    requested = options.executable if options.executable is not None else settings.executable
    executable = resolver.resolve(requested)
    log_debug("stage_reached", **make_event("executable_resolved", str(executable)))

    destination = Path(options.output_path)
    with ExitStack() as stack:
        try:
            work_dir = stack.enter_context(workspace.acquire())
        except OSError as exc:
            raise SettingsError(f"cannot create a work directory below {settings.temp_root!r}: {exc}") from exc
        log_debug("stage_reached", **make_event("work_dir_acquired", str(work_dir)))
        arguments = build_arguments(options, work_dir)
        result = runner.run(executable, arguments, stream_output=settings.streams_output)
        if not result.ok:
            if result.output:
                log_error("external_process_output", **make_event("process_run", str(executable), {"output": result.output}))
            raise ExternalProcessFailed(result.returncode, output=result.output)
        log_debug("stage_reached", **make_event("process_run", str(executable), {"returncode": result.returncode}))
        relocator.relocate(work_dir, destination)
        log_debug("stage_reached", **make_event("result_copied", str(destination)))

    report = RunReport(executable=executable, arguments=tuple(arguments), output_path=destination)
    log_info("run_finished", **make_event("done", str(destination), {"result_file": RESULT_FILE_NAME}))
    return report


def run(options: RunOptions, settings: AdapterSettings | None = None, **adapters: object) -> int:
    """Run the adapter and return the exit status instead of raising.

    Returns :attr:`ExitCode.SUCCESS`, the adapter's own status for its
    failures, or the external tool's status passed through unchanged.

    Examples
    --------
    >>> run(RunOptions(input_path="", database="/db", output_path="out.tsv"))
    6
    """

    try:
        run_dereplicator(options, settings, **adapters)  # type: ignore[arg-type]
    except AdapterError as exc:
        log_error("run_failed", **make_event("failed", options.output_path or None, {"error": str(exc), "kind": type(exc).__name__}))
        return int(exc.exit_code)
    return int(ExitCode.SUCCESS)


__all__ = [
    "RunReport",
    "build_arguments",
    "load_settings",
    "load_settings_raw",
    "run",
    "run_dereplicator",
]
