from typing import List, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from fastapi import Request
from pydantic_settings import BaseSettings

# Query parameters understood by poolers / libpq but rejected by asyncpg
_UNSUPPORTED_PG_PARAMS = {"pgbouncer", "sslmode"}


class Settings(BaseSettings):
    DATABASE_URL: Optional[str] = None
    SQLITE_PATH: str = "tasks.db"
    VERCEL: bool = False
    DATABASE_SSL: bool = True
    DATABASE_ECHO: bool = False

    AI_API_KEY: Optional[str] = None
    APP_URL: Optional[str] = None
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 3000
    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"
    CONFIGURE_LOGGING: bool = True

    DEFAULT_MASTER_USERNAME: str = "admin"
    DEFAULT_MASTER_PASSWORD: str = "admin123"
    DEFAULT_MASTER_NAME: str = "Administrador"
    INIT_DB_ON_REQUEST_PATHS: List[str] = []

    TIME_LOG_LIMIT: int = 50
    ENFORCE_TASK_LIFECYCLE: bool = False
    ENFORCE_TIME_LOG_SEQUENCE: bool = False

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def use_postgres(self) -> bool:
        return bool(self.DATABASE_URL)

    @property
    def backend_name(self) -> str:
        return "postgres" if self.use_postgres else "sqlite"

    @property
    def sqlite_file(self) -> str:
        return "/tmp/tasks.db" if self.VERCEL else self.SQLITE_PATH

    @property
    def ASYNC_DATABASE_URL(self) -> str:
        if not self.use_postgres:
            return f"sqlite+aiosqlite:///{self.sqlite_file}"

        parts = urlsplit(self.DATABASE_URL)
        scheme = parts.scheme
        if scheme in ("postgres", "postgresql"):
            scheme = "postgresql+asyncpg"
        query = urlencode(
            [(k, v) for k, v in parse_qsl(parts.query) if k not in _UNSUPPORTED_PG_PARAMS]
        )
        return urlunsplit((scheme, parts.netloc, parts.path, query, parts.fragment))

    @property
    def public_url(self) -> str:
        return self.APP_URL or f"http://localhost:{self.API_PORT}"


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
