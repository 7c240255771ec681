"""Environment variable settings adapter.

Purpose
-------
Translate process environment variables into the ``env`` settings layer, the
highest-precedence layer below explicit command-line options.

Key behaviours
--------------
* Enforces a prefix (:data:`ENV_PREFIX`) so only relevant keys are captured.
* Lower-cases the remaining key (``..._DEBUG_LEVEL`` → ``debug_level``).
* Performs light type coercion for common scalar types (bools, ints, floats,
  ``null``/``none``), except for the path-valued keys in
  :data:`VERBATIM_KEYS`.
"""

from __future__ import annotations

import os
from typing import Final, Mapping

from ...observability import log_debug


def default_env_prefix(slug: str) -> str:
    """Return the canonical environment prefix for *slug*.

    Examples
    --------
    >>> default_env_prefix('dereplicator-adapter')
    'DEREPLICATOR_ADAPTER'
    """

    return slug.replace("-", "_").upper()


ENV_PREFIX: Final[str] = default_env_prefix("dereplicator-adapter")

#: Path-valued settings are taken as written, so ``123`` or ``none`` stay strings.
VERBATIM_KEYS: Final[frozenset[str]] = frozenset({"executable", "temp_root"})


class DefaultEnvLoader:
    """Load environment variables that belong to the adapter namespace."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the loader with a specific ``environ`` mapping for testability."""

        self._environ = os.environ if environ is None else environ

    def load(self, prefix: str = ENV_PREFIX) -> dict[str, object]:
        """Return variables carrying *prefix*, keyed by their lower-cased remainder.

        Examples
        --------
        >>> env = {
        ...     'DEREPLICATOR_ADAPTER_DEBUG_LEVEL': '3',
        ...     'DEREPLICATOR_ADAPTER_EXECUTABLE': '/opt/npdtools/bin/dereplicator.py',
        ...     'PATH': '/usr/bin',
        ... }
        >>> payload = DefaultEnvLoader(environ=env).load()
        >>> payload['debug_level'], payload['executable']
        (3, '/opt/npdtools/bin/dereplicator.py')
        """

        prefix = f"{prefix}_" if prefix and not prefix.endswith("_") else prefix
        collected: dict[str, object] = {}
        for key, value in self._environ.items():
            if prefix and not key.startswith(prefix):
                continue
            stripped = key[len(prefix) :] if prefix else key
            if not stripped:
                continue
            name = stripped.lower()
            collected[name] = value if name in VERBATIM_KEYS else _coerce(value)
        log_debug("env_settings_loaded", stage="settings", path=None, keys=sorted(collected.keys()))
        return collected


def _coerce(value: str) -> object:
    """Coerce textual environment values to Python primitives where possible.

    Examples
    --------
    >>> _coerce('true'), _coerce('10'), _coerce('3.5'), _coerce('hello')
    (True, 10, 3.5, 'hello')
    """

    lowered = value.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if lowered in {"null", "none"}:
        return None
    try:
        if value.isdigit() or (value.startswith("-") and value[1:].isdigit()):
            return int(value)
        return float(value)
    except ValueError:
        return value
