#!/usr/bin/env python
"""Create the database tables without running Alembic.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --reset   # drop everything first
"""

from __future__ import annotations

import asyncio

import click

from catalog_favorites.db.connection import (
    create_engine,
    create_tables,
    drop_tables,
    sanitize_database_url,
)
from catalog_favorites.settings import AppSettings


async def _init_db(settings: AppSettings, *, reset: bool) -> None:
    engine = create_engine(settings)
    try:
        if reset:
            await drop_tables(engine)
        await create_tables(engine)
    finally:
        await engine.dispose()


@click.command()
@click.option("--reset", is_flag=True, help="Drop existing tables before creating them.")
def init_db(reset: bool) -> None:
    """Create the users, products and favorites tables."""
    settings = AppSettings()
    click.echo(f"📦 Database: {sanitize_database_url(settings.resolved_database_url)}")
    if reset:
        click.echo("⚠️  Dropping existing tables...")
    asyncio.run(_init_db(settings, reset=reset))
    click.echo("✓ Database tables created successfully")


if __name__ == "__main__":
    init_db()
