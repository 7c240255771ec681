"""Application-layer merge policy for adapter settings.

Purpose
-------
Fold the settings layers (``defaults → file → env → cli``) into one mapping
while recording which layer supplied each key. Free of I/O so it can be reused
by alternative composition roots and tested in isolation.

Contents
    - ``merge_layers``: public entry point driven by a simple loop.
    - ``_set_value``: records a value together with its provenance.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Iterable


def merge_layers(
    layers: Iterable[tuple[str, Mapping[str, object], str | None]],
) -> tuple[dict[str, object], dict[str, dict[str, object]]]:
    """Merge settings *layers* honouring precedence and provenance.

    Parameters
    ----------
    layers:
        Iterable of ``(layer_name, mapping, source_path)`` tuples ordered from
        lowest to highest precedence.

    Returns
    -------
    tuple[dict[str, object], dict[str, dict[str, object]]]
        ``(merged, provenance)``; provenance maps each key to
        ``{"layer", "path", "key"}``.

    Examples
    --------
    >>> merged, meta = merge_layers([
    ...     ("defaults", {"debug_level": 0}, None),
    ...     ("env", {"debug_level": 2}, None),
    ... ])
    >>> merged["debug_level"], meta["debug_level"]["layer"]
    (2, 'env')
    """

    merged: dict[str, object] = {}
    meta: dict[str, dict[str, object]] = {}

    for layer_name, data, path in layers:
        for key, value in data.items():
            _set_value(merged, meta, str(key), value, layer_name, path)
    return merged, meta


def _set_value(
    target: dict[str, object],
    meta: dict[str, dict[str, object]],
    key: str,
    value: object,
    layer: str,
    path: str | None,
) -> None:
    """Assign *value* and update provenance for *key*."""

    target[key] = dict(value) if isinstance(value, Mapping) else value
    meta[key] = {"layer": layer, "path": path, "key": key}
