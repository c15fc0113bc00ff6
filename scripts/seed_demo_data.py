"""
Standalone script to seed a database with the demo academy.

Creates the tables if needed, then adds the bootstrap admin, two teachers,
three students, the subject catalog and a handful of lessons. Does nothing
when the database already contains teachers.

Usage:
    python scripts/seed_demo_data.py [--db-url URL] [--month YYYY-MM]

SECRET_KEY and FIRST_ADMIN_PASSWORD must be set in the environment or .env.
"""

import os
import sys
import argparse
import asyncio
import datetime

# --- Path Setup ---
# This allows the script to import modules from the 'src' directory
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from src.academy_ledger.common.config import settings
from src.academy_ledger.database import engine as db_engine
from src.academy_ledger.database.repository import SQLAlchemyLedgerRepository
from src.academy_ledger.database.seed import seed_demo_data, DEMO_PASSWORD


def parse_month(value: str) -> datetime.date:
    try:
        return datetime.datetime.strptime(value, "%Y-%m").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected YYYY-MM, got '{value}'")


async def main(db_url: str, month: datetime.date | None):
    db_engine.create_db_engine_and_session_factory(db_url)
    try:
        await db_engine.create_tables()
        async with db_engine.AsyncSessionLocal() as session:
            summary = await seed_demo_data(SQLAlchemyLedgerRepository(session), month)
            await session.commit()
    finally:
        await db_engine.dispose_db_engine()

    if summary["users"]:
        print(f"Seeded {summary['users']} users, {summary['subjects']} subjects and {summary['lessons']} lessons.")
        print(f"Demo users share the password '{DEMO_PASSWORD}'.")
    else:
        print("Database already has teachers. Nothing was seeded.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the demo academy.")
    parser.add_argument(
        "--db-url",
        default=settings.DATABASE_URL_PROD,
        help="SQLAlchemy async database URL (defaults to DATABASE_URL_PROD)"
    )
    parser.add_argument(
        "--month",
        type=parse_month,
        default=None,
        help="Month the demo lessons fall in, as YYYY-MM (defaults to the current month)"
    )
    args = parser.parse_args()
    asyncio.run(main(args.db_url, args.month))
