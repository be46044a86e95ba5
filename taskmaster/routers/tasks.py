import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError

from taskmaster.core.config import Settings, get_settings
from taskmaster.core.lifecycle import TransitionError, check_task_transition
from taskmaster.core.security import require_api_key
from taskmaster.core.store import RowStore, get_store
from taskmaster.schemas.task import TaskCreate, TaskResponse, TaskStatusUpdate
from taskmaster.schemas.user import CreatedResponse, SuccessResponse, UserRole

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
    dependencies=[Depends(require_api_key)],
    responses={404: {"description": "Not found"}},
)

_TASK_COLUMNS = """
    SELECT t.id, t.title, t.description, t.assigned_to, t.status,
           t.failure_reason, t.due_date, u.name AS assigned_name
    FROM tasks t
    JOIN users u ON t.assigned_to = u.id
"""


@router.get("", response_model=List[TaskResponse])
async def list_tasks(
    user_id: Optional[int] = Query(None, alias="userId"),
    role: Optional[str] = None,
    store: RowStore = Depends(get_store),
):
    """Masters (or callers without an id) see every task, collaborators only their own."""
    if role == UserRole.master.value or user_id is None:
        return await store.query_many(_TASK_COLUMNS + " ORDER BY t.id")
    return await store.query_many(
        _TASK_COLUMNS + " WHERE t.assigned_to = $1 ORDER BY t.id", [user_id]
    )


@router.post("", response_model=CreatedResponse)
async def create_task(task_in: TaskCreate, store: RowStore = Depends(get_store)):
    try:
        result = await store.execute(
            "INSERT INTO tasks (title, description, assigned_to, due_date) VALUES ($1, $2, $3, $4)",
            [
                task_in.title,
                task_in.description,
                task_in.assigned_to,
                task_in.due_date.isoformat() if task_in.due_date else None,
            ],
        )
    except IntegrityError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Assigned user {task_in.assigned_to} does not exist",
        )
    logger.info("Created task id=%s for user %s", result.inserted_id, task_in.assigned_to)
    return {"id": result.inserted_id}


@router.patch("/{task_id}", response_model=SuccessResponse)
async def update_task_status(
    task_id: int,
    update: TaskStatusUpdate,
    store: RowStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    if settings.ENFORCE_TASK_LIFECYCLE:
        current = await store.query_one("SELECT status FROM tasks WHERE id = $1", [task_id])
        if current is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
        try:
            check_task_transition(current["status"], update.status, update.failure_reason)
        except TransitionError as e:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    result = await store.execute(
        "UPDATE tasks SET status = $1, failure_reason = $2 WHERE id = $3",
        [update.status.value, update.failure_reason or None, task_id],
    )
    if result.rowcount == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")

    logger.info("Task %s marked %s", task_id, update.status.value)
    return {"success": True}
