#!/usr/bin/env python3
"""
Invoice Dashboard Database Setup

Creates, seeds, resets and verifies the development database.

Usage:
    # Create tables
    uv run python scripts/setup_database.py init

    # Insert demo customers, invoices and revenue
    uv run python scripts/setup_database.py seed --demo

    # Drop all tables (asks for confirmation unless --yes)
    uv run python scripts/setup_database.py reset --yes

    # Print row counts
    uv run python scripts/setup_database.py verify

Environment Variables:
    DATABASE_URL_ADMIN    - Admin connection (preferred for schema changes)
    DATABASE_URL_APP      - App user connection (fallback)
"""

from __future__ import annotations

import argparse
import sys
import uuid
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from sqlalchemy import delete, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

# Add app to path for imports
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from app.core.db import get_engine  # noqa: E402
from app.db.models import Base, Customer, Invoice, Revenue  # noqa: E402


# ANSI colors for terminal output
class Colors:
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    BLUE = "\033[94m"
    BOLD = "\033[1m"
    END = "\033[0m"


def log_info(msg: str) -> None:
    print(f"{Colors.BLUE}[INFO]{Colors.END} {msg}")


def log_success(msg: str) -> None:
    print(f"{Colors.GREEN}[OK]{Colors.END} {msg}")


def log_warning(msg: str) -> None:
    print(f"{Colors.YELLOW}[WARN]{Colors.END} {msg}")


def log_error(msg: str) -> None:
    print(f"{Colors.RED}[ERROR]{Colors.END} {msg}")


@dataclass
class SetupResult:
    """Result of a setup step."""

    success: bool
    message: str


# Demo data: fixed ids so repeated seeding is idempotent
DEMO_CUSTOMERS = [
    ("d6e15727-9fe1-4961-8c5b-ea44a9bd81aa", "Evil Rabbit", "evil@rabbit.com", "/customers/evil-rabbit.png"),
    ("3958dc9e-712f-4377-85e9-fec4b6a6442a", "Delba de Oliveira", "delba@oliveira.com", "/customers/delba-de-oliveira.png"),
    ("3958dc9e-742f-4377-85e9-fec4b6a6442a", "Lee Robinson", "lee@robinson.com", "/customers/lee-robinson.png"),
    ("76d65c26-f784-44a2-ac19-586678f7c2f2", "Michael Novotny", "michael@novotny.com", "/customers/michael-novotny.png"),
    ("cc27c14a-0acf-4f4a-a6c9-d45682c144b9", "Amy Burns", "amy@burns.com", "/customers/amy-burns.png"),
    ("13d07535-c59e-4157-a011-f8d2ef4e0cbb", "Balazs Orban", "balazs@orban.com", None),
]

DEMO_INVOICES = [
    (0, 15795, "pending", date(2022, 12, 6)),
    (1, 20348, "pending", date(2022, 11, 14)),
    (4, 3040, "paid", date(2022, 10, 29)),
    (3, 44800, "paid", date(2023, 9, 10)),
    (5, 34577, "pending", date(2023, 8, 5)),
    (2, 54246, "pending", date(2023, 7, 16)),
    (0, 666, "pending", date(2023, 6, 27)),
    (3, 32545, "paid", date(2023, 6, 9)),
    (4, 1250, "paid", date(2023, 6, 17)),
    (5, 8546, "paid", date(2023, 6, 7)),
    (1, 500, "paid", date(2023, 8, 19)),
    (5, 8945, "paid", date(2023, 6, 3)),
    (2, 1000, "canceled", date(2022, 6, 5)),
]

DEMO_REVENUE = [
    ("Jan", 2000),
    ("Feb", 1800),
    ("Mar", 2200),
    ("Apr", 2500),
    ("May", 2300),
    ("Jun", 3200),
    ("Jul", 3500),
    ("Aug", 3700),
    ("Sep", 2500),
    ("Oct", 2800),
    ("Nov", 3000),
    ("Dec", 4800),
]


class DatabaseSetup:
    """Handles schema creation and demo data for the invoice dashboard."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def init(self) -> SetupResult:
        Base.metadata.create_all(self.engine)
        tables = ", ".join(t.name for t in Base.metadata.sorted_tables)
        return SetupResult(True, f"Tables ready: {tables}")

    def seed_demo(self) -> SetupResult:
        with Session(self.engine) as session, session.begin():
            # Children first so foreign keys stay valid on re-seed
            session.execute(delete(Invoice))
            session.execute(delete(Customer))
            session.execute(delete(Revenue))

            customers = [
                Customer(id=uuid.UUID(cid), name=name, email=email, image_url=image_url)
                for cid, name, email, image_url in DEMO_CUSTOMERS
            ]
            session.add_all(customers)
            session.flush()

            session.add_all(
                Invoice(customer_id=customers[idx].id, amount=amount, status=status, date=day)
                for idx, amount, status, day in DEMO_INVOICES
            )
            session.add_all(Revenue(month=month, revenue=value) for month, value in DEMO_REVENUE)

        return SetupResult(
            True,
            f"Seeded {len(DEMO_CUSTOMERS)} customers, {len(DEMO_INVOICES)} invoices, "
            f"{len(DEMO_REVENUE)} revenue rows",
        )

    def reset(self) -> SetupResult:
        Base.metadata.drop_all(self.engine)
        return SetupResult(True, "Dropped all tables")

    def verify(self) -> SetupResult:
        counts = {}
        with Session(self.engine) as session:
            for model in (Revenue, Customer, Invoice):
                counts[model.__tablename__] = session.execute(
                    select(func.count()).select_from(model)
                ).scalar_one()
        summary = ", ".join(f"{name}={count}" for name, count in counts.items())
        return SetupResult(True, f"Row counts: {summary}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Invoice dashboard database setup")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="Create tables")

    seed = sub.add_parser("seed", help="Insert data")
    seed.add_argument("--demo", action="store_true", help="Insert the demo data set")

    reset = sub.add_parser("reset", help="Drop all tables")
    reset.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    sub.add_parser("verify", help="Print row counts")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    setup = DatabaseSetup(get_engine())

    if args.command == "init":
        result = setup.init()
    elif args.command == "seed":
        if not args.demo:
            log_warning("Nothing to seed; pass --demo")
            return 1
        result = setup.seed_demo()
    elif args.command == "reset":
        if not args.yes:
            answer = input("Drop revenue, customers and invoices? [y/N] ")
            if answer.strip().lower() not in ("y", "yes"):
                log_info("Aborted")
                return 1
        result = setup.reset()
    else:
        result = setup.verify()

    if result.success:
        log_success(result.message)
        return 0
    log_error(result.message)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
