"""
Database setup commands.

These commands wrap scripts/setup_database.py.

Usage:
    uv run db-init          # Create tables
    uv run db-seed-demo     # Seed with demo data
    uv run db-reset         # Drop tables (add --yes to skip the prompt)
    uv run db-verify        # Print row counts
"""

from __future__ import annotations

import sys
from pathlib import Path

from cli._runner import run

_SCRIPTS_DIR = Path(__file__).parent.parent / "scripts"
_SETUP_DB_SCRIPT = _SCRIPTS_DIR / "setup_database.py"


def _setup_database(*args: str) -> None:
    run([sys.executable, str(_SETUP_DB_SCRIPT), *args])


def init() -> None:
    _setup_database("init")


def seed_demo() -> None:
    _setup_database("seed", "--demo")


def reset() -> None:
    extra = ["--yes"] if "--yes" in sys.argv[1:] else []
    _setup_database("reset", *extra)


def verify() -> None:
    _setup_database("verify")
