from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class TaskStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    failed = "failed"


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    assigned_to: int
    due_date: Optional[date] = None


class TaskStatusUpdate(BaseModel):
    status: TaskStatus
    failure_reason: Optional[str] = None


class TaskResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    assigned_to: int
    status: TaskStatus
    failure_reason: Optional[str] = None
    due_date: Optional[str] = None

    # Related data
    assigned_name: Optional[str] = None
