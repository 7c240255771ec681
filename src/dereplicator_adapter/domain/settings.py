"""Adapter settings value object.

Purpose
-------
Represent the merged settings for a run as an immutable object so the
composition root can pass verbosity and tool location explicitly instead of
toggling module-level state.

Contents
--------
* :data:`DEFAULT_EXECUTABLE` – command name used when nothing else is set.
* :data:`DEFAULTS` – the lowest-precedence settings layer.
* :class:`AdapterSettings` – the value object and its mapping constructor.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Final, Mapping

from .errors import SettingsError

DEFAULT_EXECUTABLE: Final[str] = "dereplicator.py"

DEFAULTS: Final[Mapping[str, object]] = {
    "executable": DEFAULT_EXECUTABLE,
    "debug_level": 0,
    "temp_root": None,
}


@dataclass(frozen=True)
class AdapterSettings:
    """Settings shared by every run of the adapter.

    Attributes
    ----------
    executable:
        Path or bare command name of the Dereplicator wrapper script.
    debug_level:
        ``0`` captures the tool's output and logs it; ``>= 1`` lets the tool
        write straight to the terminal and enables debug logging in the CLI.
    temp_root:
        Directory below which the temporary work directory is created;
        ``None`` uses the platform default.
    """

    executable: str = DEFAULT_EXECUTABLE
    debug_level: int = 0
    temp_root: str | None = None

    @property
    def streams_output(self) -> bool:
        """Whether the external tool should inherit the terminal."""

        return self.debug_level >= 1

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AdapterSettings":
        """Build settings from a merged mapping, ignoring unknown keys.

        Examples
        --------
        >>> AdapterSettings.from_mapping({"debug_level": 2, "colour": "red"}).debug_level
        2
        >>> AdapterSettings.from_mapping({"debug_level": "loud"})
        Traceback (most recent call last):
        ...
        dereplicator_adapter.domain.errors.SettingsError: debug_level must be a non-negative integer, got 'loud'
        """

        executable = data.get("executable", DEFAULT_EXECUTABLE)
        if executable is None:
            executable = ""
        if not isinstance(executable, str):
            raise SettingsError(f"executable must be a string, got {executable!r}")

        debug_level = data.get("debug_level", 0)
        if debug_level is None:
            debug_level = 0
        if isinstance(debug_level, bool) or not isinstance(debug_level, int) or debug_level < 0:
            raise SettingsError(f"debug_level must be a non-negative integer, got {debug_level!r}")

        temp_root = data.get("temp_root")
        if temp_root is not None and not isinstance(temp_root, str):
            raise SettingsError(f"temp_root must be a string, got {temp_root!r}")

        return cls(executable=executable, debug_level=debug_level, temp_root=temp_root or None)

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-friendly dictionary of the settings."""

        return asdict(self)
