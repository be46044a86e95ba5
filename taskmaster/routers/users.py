import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError

from taskmaster.core.security import require_api_key
from taskmaster.core.store import RowStore, get_store
from taskmaster.schemas.user import CollaboratorCreate, CreatedResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    dependencies=[Depends(require_api_key)],
)


@router.get("", response_model=List[UserResponse])
async def list_collaborators(store: RowStore = Depends(get_store)):
    return await store.query_many(
        "SELECT id, username, role, name FROM users WHERE role = 'collaborator' ORDER BY id"
    )


@router.post("", response_model=CreatedResponse)
async def create_collaborator(user_in: CollaboratorCreate, store: RowStore = Depends(get_store)):
    try:
        result = await store.execute(
            "INSERT INTO users (username, password, role, name) VALUES ($1, $2, 'collaborator', $3)",
            [user_in.username, user_in.password, user_in.name],
        )
    except IntegrityError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists",
        )
    logger.info("Created collaborator '%s' id=%s", user_in.username, result.inserted_id)
    return {"id": result.inserted_id}
