"""
Shift Schemas - Paired clock-in/clock-out views for dashboards and reports
"""
from typing import List, Optional, Literal
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from punchclock.schemas.clock_event import ClockEvent
from punchclock.schemas.common import normalize_db_datetime


class ActivityNote(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    an_id: int
    an_description: str
    an_created_at: Optional[datetime] = None

    @field_validator('an_created_at', mode='before')
    @classmethod
    def fix_datetime_timezone(cls, v):
        return normalize_db_datetime(v)


class Attachment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    at_id: int
    at_event_id: int
    at_kind: Literal["PHOTO", "VIDEO"]
    at_uri: str
    at_original_name: Optional[str] = None


class Shift(BaseModel):
    """One IN event and, when closed, the OUT event that references it"""
    status: Literal["OPEN", "CLOSED"]
    open_event: ClockEvent
    close_event: Optional[ClockEvent] = None
    duration_seconds: Optional[float] = None
    duration_minutes: Optional[int] = None
    notes: List[ActivityNote] = Field(default_factory=list)
    entry_media: List[Attachment] = Field(default_factory=list)
    exit_media: List[Attachment] = Field(default_factory=list)


class ActiveShift(BaseModel):
    """Worker currently on shift, for the live map"""
    w_id: int
    w_username: str
    w_full_name: Optional[str] = None
    open_event_id: int
    clocked_in_at: datetime
    ce_lat: Optional[float] = None
    ce_lon: Optional[float] = None
    ce_address: Optional[str] = None

    @field_validator('clocked_in_at', mode='before')
    @classmethod
    def fix_datetime_timezone(cls, v):
        return normalize_db_datetime(v)


class DashboardStats(BaseModel):
    active: int
    total: int


class EventDetails(BaseModel):
    """Notes and media stored against a single clock event"""
    ce_id: int
    notes: List[ActivityNote] = Field(default_factory=list)
    media: List[Attachment] = Field(default_factory=list)
