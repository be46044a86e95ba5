"""
Row store: a thin query/execute layer over one of two relational backends.

Statements are written with positional placeholders, either PostgreSQL style
(``$1, $2``) or qmark style (``?``), and a positional parameter list. The
adapter turns them into SQLAlchemy named binds, so the same statement text
runs unchanged on SQLite and PostgreSQL. Endpoint code never branches on the
backend.

Every call runs in its own transaction; there is no multi-statement
atomicity.
"""
import itertools
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from fastapi import Request
from sqlalchemy import MetaData, inspect, text
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.sql.elements import TextClause

from .config import Settings
from .database import build_engine, mask_database_url

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

_DOLLAR_PARAM = re.compile(r"\$(\d+)")
_INSERT = re.compile(r"^\s*INSERT\b", re.IGNORECASE)
_RETURNING = re.compile(r"\bRETURNING\b", re.IGNORECASE)


@dataclass(frozen=True)
class ExecResult:
    inserted_id: Optional[int]
    rowcount: int


def bind_positional(sql: str, params: Sequence[Any] = ()) -> Tuple[TextClause, Dict[str, Any]]:
    """Rewrite ``$N`` or ``?`` placeholders into ``:pN`` binds."""
    params = list(params or ())

    if _DOLLAR_PARAM.search(sql):
        rewritten = _DOLLAR_PARAM.sub(lambda m: f":p{m.group(1)}", sql)
    else:
        counter = itertools.count(1)
        rewritten = re.sub(r"\?", lambda m: f":p{next(counter)}", sql)

    values = {f"p{i}": value for i, value in enumerate(params, start=1)}
    return text(rewritten), values


class RowStore:
    """Backend-neutral operations; subclasses decide how inserted ids come back."""

    backend = "generic"

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def query_many(self, sql: str, params: Sequence[Any] = ()) -> List[Row]:
        stmt, values = bind_positional(sql, params)
        async with self.engine.begin() as conn:
            result = await conn.execute(stmt, values)
            return [dict(row._mapping) for row in result]

    async def query_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Row]:
        stmt, values = bind_positional(sql, params)
        async with self.engine.begin() as conn:
            result = await conn.execute(stmt, values)
            row = result.first()
            return dict(row._mapping) if row is not None else None

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecResult:
        sql = self._prepare_write(sql)
        stmt, values = bind_positional(sql, params)
        async with self.engine.begin() as conn:
            result = await conn.execute(stmt, values)
            inserted_id = self._inserted_id(sql, result)
            return ExecResult(inserted_id=inserted_id, rowcount=result.rowcount)

    async def create_all(self, metadata: MetaData) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    async def table_names(self) -> List[str]:
        async with self.engine.connect() as conn:
            return await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    async def dispose(self) -> None:
        await self.engine.dispose()

    def _prepare_write(self, sql: str) -> str:
        return sql

    def _inserted_id(self, sql: str, result) -> Optional[int]:
        raise NotImplementedError


class SqliteRowStore(RowStore):
    backend = "sqlite"

    def _inserted_id(self, sql, result):
        if _RETURNING.search(sql):
            row = result.first()
            return row[0] if row is not None else None
        if _INSERT.match(sql):
            return result.lastrowid
        return None


class PostgresRowStore(RowStore):
    backend = "postgres"

    def _prepare_write(self, sql):
        # asyncpg reports no lastrowid; ask for the key explicitly
        if _INSERT.match(sql) and not _RETURNING.search(sql):
            return sql.rstrip().rstrip(";") + " RETURNING id"
        return sql

    def _inserted_id(self, sql, result):
        if not _RETURNING.search(sql):
            return None
        row = result.first()
        return row[0] if row is not None else None


def create_row_store(settings: Settings) -> RowStore:
    engine = build_engine(settings)
    if settings.use_postgres:
        logger.info("Using PostgreSQL store at %s", mask_database_url(settings.DATABASE_URL))
        return PostgresRowStore(engine)
    logger.info("Using SQLite store at %s", settings.sqlite_file)
    return SqliteRowStore(engine)


def get_store(request: Request) -> RowStore:
    return request.app.state.store
