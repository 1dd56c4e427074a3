#!/usr/bin/env python3
"""
Main CLI entry point for the Bookshelf API server.
"""

import asyncio
import os
import sys

import click
import uvicorn

from bookshelf import __version__
from bookshelf.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="bookshelf")
def cli() -> None:
    """Bookshelf CLI - manage the server and the database."""
    pass


@cli.command()
@click.option(
    "--host",
    default="0.0.0.0",
    help="Host to bind to (default: 0.0.0.0)",
)
@click.option(
    "--port",
    default=4000,
    type=int,
    help="Port to bind to (default: 4000)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
@click.option(
    "--workers",
    default=1,
    type=int,
    help="Number of worker processes (default: 1)",
)
@click.option(
    "--store",
    "store_backend",
    default=None,
    type=click.Choice(["memory", "database"]),
    help="Domain store backend (default: from BOOKSHELF_STORE_BACKEND)",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(
    host: str,
    port: int,
    reload: bool,
    workers: int,
    store_backend: str | None,
    log_level: str,
) -> None:
    """Start the Bookshelf API server."""
    configure_logging(debug=(log_level == "debug"), level=log_level)

    logger.info(
        "Starting Bookshelf API server",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        store_backend=store_backend,
        log_level=log_level,
    )

    # Settings are read again in each worker process, so pass choices via the environment
    if log_level == "debug":
        os.environ["BOOKSHELF_DEBUG"] = "true"
        os.environ["BOOKSHELF_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("BOOKSHELF_DEBUG", "false")
        os.environ.setdefault("BOOKSHELF_LOG_LEVEL", log_level)
    if store_backend:
        os.environ["BOOKSHELF_STORE_BACKEND"] = store_backend

    try:
        uvicorn.run(
            "bookshelf.api.app:app",
            host=host,
            port=port,
            reload=reload,
            workers=(workers if not reload else 1),  # reload doesn't work with multiple workers
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command("init-db")
def init_db() -> None:
    """Create the database tables without running migrations."""
    from bookshelf.database.connection import Database

    configure_logging()

    async def do_init():
        database = Database.from_settings()
        database.init()
        try:
            await database.create_all()
        finally:
            await database.dispose()

    try:
        asyncio.run(do_init())
    except Exception as e:
        logger.error("Failed to create database schema", error=str(e))
        click.echo(f"✗ Error creating database schema: {e}", err=True)
        sys.exit(1)

    click.echo("✓ Database schema created")


@cli.command()
def seed() -> None:
    """Seed the database with the sample catalogue."""
    configure_logging()
    seed_database()


def seed_database() -> None:
    from bookshelf.database.connection import Database
    from bookshelf.database.seed_data import seed_initial_data

    async def do_seed() -> dict[str, int]:
        database = Database.from_settings()
        database.init()
        try:
            async with database.session() as db:
                return await seed_initial_data(db)
        finally:
            await database.dispose()

    try:
        inserted = asyncio.run(do_seed())
    except Exception as e:
        logger.error("Failed to seed database", error=str(e))
        click.echo(f"✗ Error seeding database: {e}", err=True)
        sys.exit(1)

    click.echo("✓ Database seeded successfully")
    for table, count in inserted.items():
        click.echo(f"  {table}: {count} inserted")


@cli.group()
def migrate() -> None:
    """Manage the authors, categories and books schema with Alembic."""
    configure_logging()


@migrate.command("upgrade")
@click.argument("revision", default="head")
@click.option(
    "--seed",
    "seed_after",
    is_flag=True,
    default=False,
    help="Insert the sample catalogue once the schema is upgraded",
)
def migrate_upgrade(revision: str, seed_after: bool) -> None:
    """Upgrade the schema to REVISION (default: head)."""
    from alembic import command

    from bookshelf.database.migrations import alembic_config

    logger.info("Upgrading database", revision=revision)
    try:
        command.upgrade(alembic_config(), revision)
    except Exception as e:
        logger.error("Database upgrade failed", revision=revision, error=str(e))
        click.echo(f"✗ Error upgrading database: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Database upgraded to {revision}")
    if seed_after:
        seed_database()


@migrate.command("downgrade")
@click.argument("revision", default="-1")
def migrate_downgrade(revision: str) -> None:
    """Downgrade the schema to REVISION (default: one step back)."""
    from alembic import command

    from bookshelf.database.migrations import alembic_config

    logger.info("Downgrading database", revision=revision)
    try:
        command.downgrade(alembic_config(), revision)
    except Exception as e:
        logger.error("Database downgrade failed", revision=revision, error=str(e))
        click.echo(f"✗ Error downgrading database: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Database downgraded to {revision}")


@migrate.command("status")
def migrate_status() -> None:
    """Compare the database revision with the latest migration."""
    from bookshelf.database.connection import Database
    from bookshelf.database.migrations import alembic_config, current_revision, head_revision

    async def read_revision() -> str | None:
        database = Database.from_settings()
        database.init()
        try:
            return await current_revision(database)
        finally:
            await database.dispose()

    try:
        head = head_revision(alembic_config())
        current = asyncio.run(read_revision())
    except Exception as e:
        logger.error("Failed to read migration status", error=str(e))
        click.echo(f"✗ Error reading migration status: {e}", err=True)
        sys.exit(1)

    click.echo(f"Current revision: {current or '(none)'}")
    click.echo(f"Head revision: {head}")
    if current != head:
        click.echo("Database is behind; run `bookshelf migrate upgrade`", err=True)
        sys.exit(1)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
