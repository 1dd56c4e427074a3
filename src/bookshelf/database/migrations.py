"""
Alembic helpers for the bookshelf schema.
"""

from pathlib import Path

from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

from ..config import settings
from .connection import Database

# alembic.ini and alembic/ sit at the project root, next to src/
PROJECT_DIR = Path(__file__).resolve().parents[3]


def alembic_config(database_url: str | None = None) -> Config:
    """Build the Alembic config for ``database_url`` (defaults to settings)."""
    alembic_ini = PROJECT_DIR / "alembic.ini"
    if not alembic_ini.exists():
        raise FileNotFoundError(f"alembic.ini not found at {alembic_ini}")

    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(PROJECT_DIR / "alembic"))
    # ConfigParser interpolates '%', which may appear in encoded passwords
    url = database_url or settings.database_url
    config.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    return config


def head_revision(config: Config) -> str | None:
    return ScriptDirectory.from_config(config).get_current_head()


async def current_revision(database: Database) -> str | None:
    """Revision stamped in the database, or None before the first upgrade."""
    async with database.engine.connect() as conn:
        return await conn.run_sync(
            lambda sync_conn: MigrationContext.configure(sync_conn).get_current_revision()
        )
