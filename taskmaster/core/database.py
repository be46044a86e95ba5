import re

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import declarative_base

from .config import Settings

Base = declarative_base()

_PASSWORD_IN_URL = re.compile(r":([^:@/]+)@")


def mask_database_url(url: str) -> str:
    """Hide the password part of a connection string before it is logged."""
    return _PASSWORD_IN_URL.sub(":****@", url or "")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: Settings) -> AsyncEngine:
    if settings.use_postgres:
        connect_args = {
            # pgbouncer in transaction mode cannot hold prepared statements
            "statement_cache_size": 0,
            "server_settings": {"application_name": "taskmaster"},
        }
        if settings.DATABASE_SSL:
            connect_args["ssl"] = "require"
        return create_async_engine(
            settings.ASYNC_DATABASE_URL,
            echo=settings.DATABASE_ECHO,
            pool_pre_ping=True,
            connect_args=connect_args,
        )

    engine = create_async_engine(settings.ASYNC_DATABASE_URL, echo=settings.DATABASE_ECHO)
    event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine
