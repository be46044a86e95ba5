import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from taskmaster.core.config import Settings
from taskmaster.core.database import mask_database_url
from taskmaster.core.seed import init_db
from taskmaster.core.store import create_row_store
from taskmaster.logging_setup import setup_logging
from taskmaster.routers import auth, feedback, system, tasks, time_logs, users

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title="TaskMaster Pro API", version="1.0.0")
    app.state.settings = settings
    app.state.store = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(tasks.router)
    app.include_router(time_logs.router)
    app.include_router(feedback.router)
    app.include_router(system.router)

    @app.on_event("startup")
    async def startup():
        if settings.CONFIGURE_LOGGING:
            setup_logging(settings.LOG_LEVEL, sql_echo=settings.DATABASE_ECHO)
        app.state.store = create_row_store(settings)
        await init_db(app.state.store, settings)

    @app.on_event("shutdown")
    async def shutdown():
        if app.state.store is not None:
            await app.state.store.dispose()
            app.state.store = None

    @app.middleware("http")
    async def ensure_db(request: Request, call_next):
        # Ephemeral hosts may wipe the SQLite file between requests
        prefixes = settings.INIT_DB_ON_REQUEST_PATHS
        if prefixes and any(request.url.path.startswith(p) for p in prefixes):
            try:
                await init_db(app.state.store, settings)
            except SQLAlchemyError as e:
                logger.error("DB init before %s failed: %s", request.url.path, mask_database_url(str(e)))
        return await call_next(request)

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(
            "Store error on %s %s: %s",
            request.method,
            request.url.path,
            mask_database_url(str(exc)),
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = app.state.settings
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    run()
