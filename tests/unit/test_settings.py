from __future__ import annotations

import pytest

from dereplicator_adapter.domain.errors import SettingsError
from dereplicator_adapter.domain.settings import DEFAULT_EXECUTABLE, AdapterSettings


def test_defaults() -> None:
    settings = AdapterSettings()
    assert settings.executable == DEFAULT_EXECUTABLE == "dereplicator.py"
    assert settings.debug_level == 0
    assert settings.temp_root is None
    assert settings.streams_output is False


def test_debug_level_enables_streaming() -> None:
    assert AdapterSettings(debug_level=1).streams_output is True
    assert AdapterSettings(debug_level=100).streams_output is True


def test_from_mapping_ignores_unknown_keys() -> None:
    settings = AdapterSettings.from_mapping({"executable": "/opt/dereplicator.py", "debug_level": 2, "threads": 8})
    assert settings == AdapterSettings(executable="/opt/dereplicator.py", debug_level=2)


def test_from_mapping_treats_none_as_unset() -> None:
    settings = AdapterSettings.from_mapping({"debug_level": None, "temp_root": ""})
    assert settings.debug_level == 0
    assert settings.temp_root is None


def test_null_executable_becomes_empty() -> None:
    assert AdapterSettings.from_mapping({"executable": None}).executable == ""


@pytest.mark.parametrize(
    "payload",
    [
        {"debug_level": -1},
        {"debug_level": True},
        {"debug_level": 1.5},
        {"debug_level": "high"},
        {"executable": 3},
        {"temp_root": 7},
    ],
)
def test_from_mapping_rejects_bad_types(payload: dict[str, object]) -> None:
    with pytest.raises(SettingsError):
        AdapterSettings.from_mapping(payload)


def test_as_dict_round_trip() -> None:
    settings = AdapterSettings(executable="x", debug_level=1, temp_root="/scratch")
    assert AdapterSettings.from_mapping(settings.as_dict()) == settings
