"""Alembic environment for the NoteShare schema.

The database URL comes from ``sqlalchemy.url`` when one is configured
(``alembic -x`` or an ini override), otherwise from the app settings, which
read ``DATABASE_URL``. Async drivers (asyncpg, aiosqlite) are migrated
through an async engine.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.ext.asyncio import create_async_engine

from noteshare.config import get_settings
from noteshare.core.models import BaseModel

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = BaseModel.metadata


def database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or get_settings().database_url


def configure_and_run(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        # sqlite cannot ALTER most things in place
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()


async def migrate_async(url: str) -> None:
    engine = create_async_engine(url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(configure_and_run)
    finally:
        await engine.dispose()


def migrate_online() -> None:
    url = database_url()
    if make_url(url).get_dialect().is_async:
        asyncio.run(migrate_async(url))
        return

    engine = create_engine(url, poolclass=pool.NullPool)
    with engine.connect() as connection:
        configure_and_run(connection)


def migrate_offline() -> None:
    """Emit SQL to stdout instead of connecting."""
    context.configure(url=database_url(), target_metadata=target_metadata, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    migrate_offline()
else:
    migrate_online()
