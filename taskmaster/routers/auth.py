import logging

from fastapi import APIRouter, Depends, HTTPException, status

from taskmaster.core.store import RowStore, get_store
from taskmaster.schemas.user import LoginRequest, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login", response_model=UserResponse)
async def login(credentials: LoginRequest, store: RowStore = Depends(get_store)):
    """
    Check a username/password pair.

    No session or token is issued: the client keeps the returned identity and
    sends ``userId``/``role`` along with later calls.
    """
    user = await store.query_one(
        "SELECT id, username, role, name FROM users WHERE username = $1 AND password = $2",
        [credentials.username, credentials.password],
    )
    if not user:
        logger.info("Login failed for username '%s'", credentials.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    return user
