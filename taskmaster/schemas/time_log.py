from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field


class TimeLogType(str, Enum):
    start = "start"
    pause = "pause"
    resume = "resume"
    end = "end"


class WorkStatus(str, Enum):
    idle = "idle"
    working = "working"
    paused = "paused"
    ended = "ended"


class TimeLogCreate(BaseModel):
    user_id: int = Field(..., alias="userId")
    type: TimeLogType

    class Config:
        populate_by_name = True


class TimeLogResponse(BaseModel):
    id: int
    user_id: int
    type: TimeLogType
    # SQLite hands back the raw text column, PostgreSQL a datetime
    timestamp: Union[datetime, str, None] = None


class WorkStatusResponse(BaseModel):
    user_id: int
    status: WorkStatus
    last_type: Optional[TimeLogType] = None
    last_timestamp: Union[datetime, str, None] = None
