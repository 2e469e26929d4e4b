"""
Worker Schemas for request/response validation
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from punchclock.schemas.common import normalize_db_datetime


class WorkerBase(BaseModel):
    w_username: str = Field(..., min_length=1, max_length=100)
    w_full_name: Optional[str] = Field(None, max_length=255)


class WorkerCreate(WorkerBase):
    w_id: int  # Atlas SSO user id


class WorkerInDB(WorkerBase):
    model_config = ConfigDict(from_attributes=True)

    w_id: int
    w_created_at: datetime
    w_updated_at: Optional[datetime] = None

    @field_validator('w_created_at', 'w_updated_at', mode='before')
    @classmethod
    def fix_datetime_timezone(cls, v):
        return normalize_db_datetime(v)


class Worker(WorkerInDB):
    pass
