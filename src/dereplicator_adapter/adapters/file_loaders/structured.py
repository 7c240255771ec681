"""Structured settings file loaders.

Purpose
-------
Convert the ``--config`` settings file into a Python mapping that the merge
layer understands. Loaders are small wrappers around ``tomllib``/``json``/
``yaml.safe_load`` so error handling and observability live in one place.

Contents
--------
* :class:`BaseFileLoader` – shared helpers for reading files and validating
  mapping outputs.
* :class:`TOMLFileLoader` / :class:`JSONFileLoader` / :class:`YAMLFileLoader`.
* :func:`loader_for` – picks a loader from the file suffix.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

try:  # Python >= 3.11
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore[no-redef]

import yaml

from ...domain.errors import InvalidFormat, NotFound
from ...observability import log_debug, log_error


class BaseFileLoader:
    """Common utilities shared by the structured file loaders."""

    def load(self, path: str) -> Mapping[str, object]:
        """Read *path* and return a mapping or raise ``InvalidFormat``."""

        raise NotImplementedError

    def _read(self, path: str) -> bytes:
        """Read *path* as bytes, raising :class:`NotFound` when the file is missing."""

        file_path = Path(path)
        if not file_path.is_file():
            raise NotFound(f"Settings file not found: {path}")
        payload = file_path.read_bytes()
        log_debug("settings_file_read", stage="settings", path=path, size=len(payload))
        return payload

    @staticmethod
    def _ensure_mapping(data: object, *, path: str) -> Mapping[str, object]:
        """Ensure *data* behaves like a mapping, otherwise raise ``InvalidFormat``.

        Examples
        --------
        >>> BaseFileLoader._ensure_mapping({"debug_level": 1}, path="demo")
        {'debug_level': 1}
        >>> BaseFileLoader._ensure_mapping([1, 2], path="demo")
        Traceback (most recent call last):
        ...
        dereplicator_adapter.domain.errors.InvalidFormat: File demo did not produce a mapping
        """

        if not isinstance(data, Mapping):
            raise InvalidFormat(f"File {path} did not produce a mapping")
        return data


class TOMLFileLoader(BaseFileLoader):
    """Load TOML documents using the standard library parser."""

    def load(self, path: str) -> Mapping[str, object]:
        try:
            text = self._read(path).decode("utf-8")
            data = tomllib.loads(text)
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
            log_error("settings_file_invalid", stage="settings", path=path, format="toml", error=str(exc))
            raise InvalidFormat(f"Invalid TOML in {path}: {exc}") from exc
        result = self._ensure_mapping(data, path=path)
        log_debug("settings_file_loaded", stage="settings", path=path, format="toml")
        return result


class JSONFileLoader(BaseFileLoader):
    """Load JSON documents."""

    def load(self, path: str) -> Mapping[str, object]:
        try:
            data = json.loads(self._read(path))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            log_error("settings_file_invalid", stage="settings", path=path, format="json", error=str(exc))
            raise InvalidFormat(f"Invalid JSON in {path}: {exc}") from exc
        result = self._ensure_mapping(data, path=path)
        log_debug("settings_file_loaded", stage="settings", path=path, format="json")
        return result


class YAMLFileLoader(BaseFileLoader):
    """Load YAML documents; an empty document yields an empty mapping."""

    def load(self, path: str) -> Mapping[str, object]:
        try:
            data = yaml.safe_load(self._read(path))
        except yaml.YAMLError as exc:
            log_error("settings_file_invalid", stage="settings", path=path, format="yaml", error=str(exc))
            raise InvalidFormat(f"Invalid YAML in {path}: {exc}") from exc
        if data is None:
            data = {}
        result = self._ensure_mapping(data, path=path)
        log_debug("settings_file_loaded", stage="settings", path=path, format="yaml")
        return result


_FILE_LOADERS = {
    ".toml": TOMLFileLoader(),
    ".json": JSONFileLoader(),
    ".yaml": YAMLFileLoader(),
    ".yml": YAMLFileLoader(),
}


def loader_for(path: str) -> BaseFileLoader:
    """Return the loader registered for the suffix of *path*.

    Raises
    ------
    InvalidFormat
        When the suffix is not one of ``.toml``, ``.json``, ``.yaml``, ``.yml``.
    """

    loader = _FILE_LOADERS.get(Path(path).suffix.lower())
    if loader is None:
        raise InvalidFormat(f"Unsupported settings file type: {path} (use .toml, .json, .yaml or .yml)")
    return loader
