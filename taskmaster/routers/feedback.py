from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError

from taskmaster.core.security import require_api_key
from taskmaster.core.store import RowStore, get_store
from taskmaster.schemas.feedback import FeedbackCreate, FeedbackResponse
from taskmaster.schemas.user import SuccessResponse

router = APIRouter(
    prefix="/api/feedback",
    tags=["feedback"],
    dependencies=[Depends(require_api_key)],
)


@router.get("/{user_id}", response_model=List[FeedbackResponse])
async def list_feedback(user_id: int, store: RowStore = Depends(get_store)):
    return await store.query_many(
        "SELECT id, user_id, content, date FROM feedback WHERE user_id = $1 ORDER BY date DESC, id DESC",
        [user_id],
    )


@router.post("", response_model=SuccessResponse)
async def create_feedback(note: FeedbackCreate, store: RowStore = Depends(get_store)):
    note_date = note.date or date.today()
    try:
        await store.execute(
            "INSERT INTO feedback (user_id, content, date) VALUES ($1, $2, $3)",
            [note.user_id, note.content, note_date.isoformat()],
        )
    except IntegrityError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"User {note.user_id} does not exist",
        )
    return {"success": True}
