import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine
from mp3_download_service.app.utils.env import get_or_raise_env
from mp3_download_service.infrastructure.database.models import Base
from mp3_download_service.infrastructure.database.session import (
    build_engine_arguments,
)

from alembic import context

config = context.config

if config.config_file_name:
    fileConfig(config.config_file_name)

# Import database models so that Alembic can detect them
#  And infere schema inside autogenerate
target_metadata = Base.metadata

DB_URL = get_or_raise_env("DB_URL")


def do_run_migrations(connection) -> None:
    """Run the migrations on an already opened connection."""
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """
    Run migrations in 'online' mode.

    The application uses an async driver, so the migrations run through
    an async engine and a synchronous connection proxy.

    """
    clean_db_url, connect_args = build_engine_arguments(DB_URL)
    connectable = create_async_engine(
        clean_db_url, connect_args=connect_args, poolclass=pool.NullPool
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_offline() -> None:
    """Emit the migration SQL without connecting to a database."""
    context.configure(
        url=DB_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
