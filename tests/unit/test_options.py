"""Option validation: presence first, then extension allow-lists."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from dereplicator_adapter.domain.errors import MissingDatabase, MissingInput, MissingOutput, UnsupportedFormat
from dereplicator_adapter.domain.options import INPUT_FORMATS, OUTPUT_FORMATS, RunOptions, has_valid_format, validate_options


def test_valid_options_pass_through() -> None:
    options = RunOptions("sample.mzML", "/db/nrps", "results.tsv")
    assert validate_options(options) is options


@pytest.mark.parametrize(
    ("options", "error"),
    [
        (RunOptions("", "/db", "out.tsv"), MissingInput),
        (RunOptions("a.mzML", "", "out.tsv"), MissingDatabase),
        (RunOptions("a.mzML", "/db", ""), MissingOutput),
        (RunOptions("", "", ""), MissingInput),
        (RunOptions("a.mzML", "", ""), MissingDatabase),
    ],
)
def test_first_missing_parameter_wins(options: RunOptions, error: type[Exception]) -> None:
    with pytest.raises(error):
        validate_options(options)


def test_missing_parameters_are_reported_before_formats() -> None:
    with pytest.raises(MissingOutput):
        validate_options(RunOptions("a.raw", "/db", ""))


@pytest.mark.parametrize("name", ["a.mzXML", "a.mgf", "a.MGF", "a.mzml", "a.mzData", "/data/run 1/a.mzdata"])
def test_supported_input_formats(name: str) -> None:
    assert has_valid_format(name, INPUT_FORMATS)


@pytest.mark.parametrize("name", ["a.raw", "a", "a.mzML.gz", "mzML"])
def test_unsupported_input_formats(name: str) -> None:
    with pytest.raises(UnsupportedFormat) as info:
        validate_options(RunOptions(name, "/db", "out.tsv"))
    assert info.value.option == "in"


def test_unsupported_output_format() -> None:
    with pytest.raises(UnsupportedFormat) as info:
        validate_options(RunOptions("a.mzML", "/db", "out.xlsx"))
    assert info.value.option == "out"
    assert "csv, tsv, txt" in str(info.value)


@given(
    stem=st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789_-", min_size=1, max_size=12),
    input_format=st.sampled_from(INPUT_FORMATS),
    output_format=st.sampled_from(OUTPUT_FORMATS),
    upper=st.booleans(),
)
def test_allowed_extensions_validate_in_any_case(stem: str, input_format: str, output_format: str, upper: bool) -> None:
    def _case(ext: str) -> str:
        return ext.upper() if upper else ext.lower()

    options = RunOptions(f"{stem}.{_case(input_format)}", "/db", f"{stem}.{_case(output_format)}")
    assert validate_options(options) == options
