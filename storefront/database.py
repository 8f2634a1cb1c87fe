from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy import create_engine
import os
from urllib.parse import urlparse, parse_qs, urlunparse

from storefront.config import settings


def clean_asyncpg_url(url: str) -> tuple[str, dict]:
    """
    Clean database URL for asyncpg compatibility.
    Converts postgresql:// to postgresql+asyncpg://, removes ALL query params
    (asyncpg doesn't support psycopg2-style params), and converts sslmode
    to connect_args format.
    Returns (cleaned_url, connect_args_dict)
    """
    # Heroku and Cloud SQL hand out plain postgresql:// URLs
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)

    if not url.startswith("postgresql+asyncpg://"):
        return url, {}

    parsed = urlparse(url)
    query_params = parse_qs(parsed.query)

    connect_args = {}
    if "sslmode" in query_params:
        sslmode = query_params.pop("sslmode")[0]
        connect_args["ssl"] = sslmode != "disable"
    else:
        hostname = parsed.hostname or ""
        if (".gcp" in hostname or "sql.googleapis.com" in hostname or
                ".amazonaws.com" in hostname or ".herokuapp.com" in hostname or
                os.getenv("DYNO") or os.getenv("GOOGLE_CLOUD_PROJECT")):
            connect_args["ssl"] = True

    cleaned_url = urlunparse(parsed._replace(query=""))
    return cleaned_url, connect_args


def derive_sync_url(url: str) -> str:
    """Map an async driver URL onto the matching sync driver URL."""
    if url.startswith("postgresql+asyncpg://"):
        return url.replace("postgresql+asyncpg://", "postgresql://", 1)
    if url.startswith("sqlite+aiosqlite://"):
        return url.replace("sqlite+aiosqlite://", "sqlite://", 1)
    return url


def pool_options(url: str) -> dict:
    # SQLite pools reject sizing arguments
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_pre_ping": True,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
    }


def build_async_engine(url: str, **kwargs):
    cleaned_url, connect_args = clean_asyncpg_url(url)
    return create_async_engine(
        cleaned_url,
        echo=False,
        connect_args=connect_args,
        **pool_options(cleaned_url),
        **kwargs,
    )


def build_session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


DATABASE_URL, asyncpg_connect_args = clean_asyncpg_url(settings.database_url)
DATABASE_URL_SYNC = settings.database_url_sync or derive_sync_url(DATABASE_URL)

# Async engine for FastAPI
async_engine = build_async_engine(DATABASE_URL)

# Sync engine for Celery workers
sync_engine = create_engine(
    DATABASE_URL_SYNC,
    echo=False,
    **pool_options(DATABASE_URL_SYNC),
)

AsyncSessionLocal = build_session_factory(async_engine)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=sync_engine,
)


class Base(DeclarativeBase):
    pass


# Dependency for FastAPI routes that need the session factory rather than a single session
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return AsyncSessionLocal
