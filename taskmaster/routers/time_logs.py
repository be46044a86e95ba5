import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError

from taskmaster.core.config import Settings, get_settings
from taskmaster.core.lifecycle import (
    TransitionError,
    check_time_log_transition,
    derive_work_status,
)
from taskmaster.core.security import require_api_key
from taskmaster.core.store import RowStore, get_store
from taskmaster.schemas.time_log import TimeLogCreate, TimeLogResponse, WorkStatusResponse
from taskmaster.schemas.user import SuccessResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/time-logs",
    tags=["time-logs"],
    dependencies=[Depends(require_api_key)],
)

# id breaks ties between events logged within the same second
_LATEST_FIRST = "ORDER BY timestamp DESC, id DESC"


async def _latest_entry(store: RowStore, user_id: int):
    return await store.query_one(
        f"SELECT id, user_id, type, timestamp FROM time_logs WHERE user_id = $1 {_LATEST_FIRST} LIMIT 1",
        [user_id],
    )


@router.get("/{user_id}", response_model=List[TimeLogResponse])
async def list_time_logs(
    user_id: int,
    store: RowStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    return await store.query_many(
        f"SELECT id, user_id, type, timestamp FROM time_logs WHERE user_id = $1 {_LATEST_FIRST} LIMIT $2",
        [user_id, settings.TIME_LOG_LIMIT],
    )


@router.get("/{user_id}/status", response_model=WorkStatusResponse)
async def get_work_status(user_id: int, store: RowStore = Depends(get_store)):
    latest = await _latest_entry(store, user_id)
    return {
        "user_id": user_id,
        "status": derive_work_status(latest["type"] if latest else None),
        "last_type": latest["type"] if latest else None,
        "last_timestamp": latest["timestamp"] if latest else None,
    }


@router.post("", response_model=SuccessResponse)
async def append_time_log(
    entry: TimeLogCreate,
    store: RowStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    if settings.ENFORCE_TIME_LOG_SEQUENCE:
        latest = await _latest_entry(store, entry.user_id)
        current = derive_work_status(latest["type"] if latest else None)
        try:
            check_time_log_transition(current, entry.type)
        except TransitionError as e:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    try:
        await store.execute(
            "INSERT INTO time_logs (user_id, type) VALUES ($1, $2)",
            [entry.user_id, entry.type.value],
        )
    except IntegrityError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"User {entry.user_id} does not exist",
        )
    logger.debug("User %s logged %s", entry.user_id, entry.type.value)
    return {"success": True}
