"""CLI adapter for ``dereplicator_adapter`` built on ``lib_cli_exit_tools``.

Purpose
-------
Expose the Dereplicator wrapper as a command line tool: validate the file
options, run the external tool in a temporary directory, and copy its
``significant_matches.tsv`` to the requested output file.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_run` – runs Dereplicator (:func:`dereplicator_adapter.core.run_dereplicator`).
* :func:`cli_settings` – prints the effective settings, optionally with provenance.
* :func:`cli_info` – prints distribution metadata and the citation to use.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. Adapter failures are printed as a single
``Fatal error: ...`` line and turned into the failure's exit status;
unexpected exceptions go through ``lib_cli_exit_tools`` so traceback handling
stays consistent across commands.
"""

from __future__ import annotations

import json
import logging
import sys
from importlib import metadata
from pathlib import Path
from typing import Final, NoReturn, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .core import load_settings, load_settings_raw, run_dereplicator
from .domain.errors import AdapterError, CopyIOError, ExternalProcessFailed
from .domain.options import INPUT_FORMATS, OUTPUT_FORMATS, RunOptions, validate_options
from .domain.settings import DEFAULT_EXECUTABLE, AdapterSettings
from .observability import routed_logging

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

PROG_NAME: Final[str] = "dereplicator-adapter"
DISTRIBUTION: Final[str] = "dereplicator_adapter"

CITATION: Final[tuple[str, ...]] = (
    "Mohimani H, Gurevich A, et al",
    "Dereplication of peptidic natural products through database search of mass spectra",
    "Nature Chemical Biology 2017; 13: 30-37.",
    "doi:10.1038/nchembio.2219",
)


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` when not installed."""

    try:
        return metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Dereplication of peptidic natural products through database search of mass spectra",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name=PROG_NAME,
    message="dereplicator-adapter version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print distribution metadata and the publication to cite."""

    try:
        meta = metadata.metadata(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        click.echo(f"{DISTRIBUTION} (metadata unavailable)")
    else:
        click.echo(f"Info for {meta.get('Name', DISTRIBUTION)}:")
        click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
        click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
        summary = meta.get("Summary")
        if summary:
            click.echo(f"  Summary         : {summary}")
    click.echo("Please cite:")
    for line in CITATION:
        click.echo(f"  {line}")


@cli.command("run", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--in",
    "input_path",
    default="",
    metavar="<file>",
    help=f"Spectra input file ({', '.join(INPUT_FORMATS)}). Required.",
)
@click.option(
    "--database",
    default="",
    metavar="<dir>",
    help="Molecular database directory with chemical structures in MOL format and a library.info file. Required.",
)
@click.option(
    "--out",
    "output_path",
    default="",
    metavar="<file>",
    help=f"Output file ({', '.join(OUTPUT_FORMATS)}); identification results are saved here. Required.",
)
@click.option(
    "--executable",
    default=None,
    metavar="<exe>",
    help=f"Python wrapper for Dereplicator [default: {DEFAULT_EXECUTABLE}]. May be skipped if it is on the PATH.",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Settings file (.toml, .json, .yaml) providing defaults for executable, debug_level, temp_root",
)
@click.option(
    "--debug",
    "debug_level",
    type=click.IntRange(min=0),
    default=None,
    help="Debug level; 1 or higher shows the tool's own output and debug log records",
)
@click.option(
    "--log",
    "log_file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Also write log records to this file",
)
@click.option(
    "--temp-root",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Directory in which the temporary work directory is created",
)
def cli_run(
    input_path: str,
    database: str,
    output_path: str,
    executable: Optional[str],
    config_file: Optional[Path],
    debug_level: Optional[int],
    log_file: Optional[Path],
    temp_root: Optional[Path],
) -> None:
    """Run Dereplicator on a spectra file and save its significant matches.

    The tool is started as ``<exe> <in> -o <tmpdir> --db-path <database>``;
    its ``significant_matches.tsv`` is copied to ``--out``. A param file mode
    is not supported; all settings come from the command line, the
    ``--config`` file, or ``DEREPLICATOR_ADAPTER_*`` environment variables.
    """

    try:
        settings = load_settings(
            config_file=str(config_file) if config_file is not None else None,
            overrides={
                "debug_level": debug_level,
                "temp_root": str(temp_root) if temp_root is not None else None,
            },
        )
    except AdapterError as exc:
        _fail(exc)

    options = RunOptions(
        input_path=input_path,
        database=database,
        output_path=output_path,
        executable=executable,
    )
    try:
        validate_options(options)
    except AdapterError as exc:
        _fail(exc)
    try:
        handlers = _log_handlers(settings, log_file)
    except OSError as exc:
        _fail(CopyIOError(f"cannot open log file {log_file}: {exc}"))
    with routed_logging(handlers, _log_level(settings)):
        try:
            report = run_dereplicator(options, settings)
        except AdapterError as exc:
            _fail(exc)
    click.echo(report.status_line)


@cli.command("settings", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--config",
    "config_file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Settings file (.toml, .json, .yaml) to include",
)
@click.option(
    "--indent",
    type=int,
    default=None,
    help="Pretty-print JSON output with the provided indent size",
)
@click.option(
    "--provenance/--no-provenance",
    default=False,
    help="Include the layer that supplied each setting",
)
def cli_settings(config_file: Optional[Path], indent: Optional[int], provenance: bool) -> None:
    """Print the effective settings as JSON.

    Layers are applied in the order defaults, settings file, environment.
    """

    try:
        data, meta = load_settings_raw(config_file=str(config_file) if config_file is not None else None)
        settings = AdapterSettings.from_mapping(data)
    except AdapterError as exc:
        _fail(exc)
    if provenance:
        known = {key: meta[key] for key in settings.as_dict() if key in meta}
        payload: dict[str, object] = {"settings": settings.as_dict(), "provenance": known}
        click.echo(json.dumps(payload, indent=indent, separators=(",", ":")))
        return
    click.echo(json.dumps(settings.as_dict(), indent=indent))


def _fail(exc: AdapterError) -> NoReturn:
    """Print the single-line failure status and exit with the error's code.

    Captured output of a failed tool run is printed first so its own
    diagnostics are not lost at the default debug level.
    """

    if isinstance(exc, ExternalProcessFailed) and exc.output:
        click.echo(exc.output.rstrip("\n"), err=True)
    click.echo(f"Fatal error: {exc}", err=True)
    raise SystemExit(int(exc.exit_code))


def _log_level(settings: AdapterSettings) -> int:
    return logging.DEBUG if settings.debug_level >= 1 else logging.INFO


def _log_handlers(settings: AdapterSettings, log_file: Optional[Path]) -> list[logging.Handler]:
    """Return the handlers requested by ``--debug`` and ``--log``."""

    handlers: list[logging.Handler] = []
    if settings.debug_level >= 1:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    return handlers


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name=PROG_NAME,
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
