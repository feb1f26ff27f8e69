from typing import AsyncGenerator
from urllib.parse import parse_qs, urlparse

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from mp3_download_service.app.utils.env import get_or_raise_env

DB_URL = get_or_raise_env("DB_URL")


def build_engine_arguments(db_url: str) -> tuple[str, dict]:
    """
    Split a database URL into a driver-friendly URL and connect args.

    Hosted Postgres URLs carry libpq parameters (sslmode, options) that
    asyncpg does not understand in the query string.
    """
    parsed_url = urlparse(db_url)
    query_params = parse_qs(parsed_url.query)
    parsed_args = {k: v[0] for k, v in query_params.items()}

    connect_args: dict = {}
    if "options" in parsed_args:
        connect_args["options"] = parsed_args["options"]
    if parsed_args.get("sslmode") == "require":
        connect_args["ssl"] = True

    if not parsed_args:
        return db_url, connect_args
    return parsed_url._replace(query="").geturl(), connect_args


clean_db_url, connect_args = build_engine_arguments(DB_URL)

engine = create_async_engine(
    clean_db_url,
    connect_args=connect_args,
    pool_recycle=1800,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine, autoflush=False, expire_on_commit=False, class_=AsyncSession
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session."""
    session = async_session_factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()
