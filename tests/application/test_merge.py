from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from dereplicator_adapter.application.merge import merge_layers

KEYS = st.sampled_from(["executable", "debug_level", "temp_root"])
VALUES = st.one_of(st.integers(min_value=0, max_value=5), st.text(alphabet="abcdefghijklmnopqrstuvwxyz/._-", min_size=1, max_size=8), st.none())
LAYER = st.dictionaries(KEYS, VALUES, max_size=3)


def test_precedence_overwrites() -> None:
    layers = [
        ("defaults", {"executable": "dereplicator.py", "debug_level": 0}, None),
        ("file", {"debug_level": 1}, "settings.toml"),
        ("env", {"executable": "/opt/dereplicator.py"}, None),
    ]
    merged, meta = merge_layers(layers)
    assert merged == {"executable": "/opt/dereplicator.py", "debug_level": 1}
    assert meta["debug_level"] == {"layer": "file", "path": "settings.toml", "key": "debug_level"}
    assert meta["executable"]["layer"] == "env"


def test_merge_does_not_mutate_inputs() -> None:
    defaults = {"debug_level": 0}
    merge_layers([("defaults", defaults, None), ("cli", {"debug_level": 3}, None)])
    assert defaults == {"debug_level": 0}


@given(st.lists(st.tuples(st.sampled_from(["defaults", "file", "env", "cli"]), LAYER), max_size=4))
def test_last_layer_defining_a_key_wins(layers) -> None:
    payload = [(name, data, None) for name, data in layers]
    merged, meta = merge_layers(payload)
    for key in merged:
        owner = [(name, data) for name, data in layers if key in data][-1]
        assert merged[key] == owner[1][key]
        assert meta[key]["layer"] == owner[0]
