"""Run options and their validation rules.

Purpose
-------
Hold the user-supplied paths for one Dereplicator run and check them before
any side effect happens. Validation is purely lexical: paths are checked for
presence and for an allowed extension, never for existence on disk.

Contents
--------
* :data:`INPUT_FORMATS` / :data:`OUTPUT_FORMATS` – extension allow-lists.
* :class:`RunOptions` – immutable value object describing one invocation.
* :func:`validate_options` – fail-fast validation raising domain errors.
* :func:`has_valid_format` – case-insensitive extension check.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from typing import Final

from .errors import MissingDatabase, MissingInput, MissingOutput, UnsupportedFormat

INPUT_FORMATS: Final[tuple[str, ...]] = ("mzXML", "MGF", "mzML", "mzdata")
OUTPUT_FORMATS: Final[tuple[str, ...]] = ("csv", "tsv", "txt")


@dataclass(frozen=True)
class RunOptions:
    """Paths describing a single Dereplicator invocation.

    Attributes
    ----------
    input_path:
        Spectra file handed to the tool (``--in``).
    database:
        Molecular database directory containing MOL files and ``library.info``.
    output_path:
        Destination of the ``significant_matches.tsv`` copy (``--out``).
    executable:
        Optional override for the tool location; ``None`` defers to settings.
    """

    input_path: str = ""
    database: str = ""
    output_path: str = ""
    executable: str | None = None


def has_valid_format(path: str, allowed: tuple[str, ...]) -> bool:
    """Return ``True`` when the suffix of *path* is one of *allowed*.

    Examples
    --------
    >>> has_valid_format("sample.MZML", INPUT_FORMATS)
    True
    >>> has_valid_format("results.xlsx", OUTPUT_FORMATS)
    False
    """

    suffix = PurePath(path).suffix.lstrip(".").lower()
    return suffix in {entry.lower() for entry in allowed}


def validate_options(options: RunOptions) -> RunOptions:
    """Validate *options* and return them unchanged.

    Emptiness is checked first for ``in``, ``database`` and ``out`` in that
    order, then the ``in``/``out`` extensions. The first failure is raised.

    Raises
    ------
    MissingInput / MissingDatabase / MissingOutput
        When the corresponding path is empty.
    UnsupportedFormat
        When ``in`` or ``out`` has an extension outside its allow-list.

    Examples
    --------
    >>> validate_options(RunOptions("a.mzML", "/db", "out.tsv")).output_path
    'out.tsv'
    >>> validate_options(RunOptions("a.mzML", "", "out.tsv"))
    Traceback (most recent call last):
    ...
    dereplicator_adapter.domain.errors.MissingDatabase: no database given
    """

    if not options.input_path:
        raise MissingInput()
    if not options.database:
        raise MissingDatabase()
    if not options.output_path:
        raise MissingOutput()
    if not has_valid_format(options.input_path, INPUT_FORMATS):
        raise UnsupportedFormat("in", options.input_path, INPUT_FORMATS)
    if not has_valid_format(options.output_path, OUTPUT_FORMATS):
        raise UnsupportedFormat("out", options.output_path, OUTPUT_FORMATS)
    return options
