import datetime
from typing import Optional

from pydantic import BaseModel, Field


class FeedbackCreate(BaseModel):
    user_id: int = Field(..., alias="userId")
    content: str = Field(..., min_length=1)
    date: Optional[datetime.date] = None

    class Config:
        populate_by_name = True


class FeedbackResponse(BaseModel):
    id: int
    user_id: int
    content: str
    date: Optional[str] = None
