"""Module entry point for ``python -m flybook_db``."""

from __future__ import annotations

from flybook_db.adapters.inbound.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
