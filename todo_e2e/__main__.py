"""Allow running the suite via ``python -m todo_e2e``."""
from __future__ import annotations

from todo_e2e.cli import main


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
