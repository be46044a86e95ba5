import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import SQLAlchemyError

from taskmaster.core.config import Settings, get_settings
from taskmaster.core.database import mask_database_url
from taskmaster.core.store import RowStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


@router.get("/")
async def root():
    return {"message": "TaskMaster API is running"}


@router.get("/api/docs")
async def api_docs(request: Request, settings: Settings = Depends(get_settings)):
    """OpenAPI description for programmatic clients, pointing at the public URL."""
    document = dict(request.app.openapi())
    document["servers"] = [{"url": settings.public_url}]
    return document


@router.get("/api/debug-db")
async def debug_db(
    store: RowStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Connectivity check used by the login screen."""
    try:
        tables = await store.table_names()
        admin = await store.query_one(
            "SELECT id FROM users WHERE username = $1",
            [settings.DEFAULT_MASTER_USERNAME],
        )
    except SQLAlchemyError as e:
        logger.error("Database check failed: %s", mask_database_url(str(e)))
        return {
            "status": "error",
            "database": store.backend,
            "message": "Could not reach the database",
            "details": mask_database_url(str(getattr(e, "orig", None) or e)),
        }
    return {
        "status": "ok",
        "database": store.backend,
        "tables": sorted(tables),
        "adminUser": "found" if admin else "NOT FOUND",
    }
