"""Allow ``python -m dereplicator_adapter run --in ... --database ... --out ...``."""

from __future__ import annotations

import sys

from .cli import main


def _module_main() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":  # pragma: no cover - exercised via python -m in a subprocess
    raise SystemExit(_module_main())
