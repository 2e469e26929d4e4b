"""
Clock Event Schemas for clock actions and the raw event log
"""
from typing import Annotated, List, Optional, Literal
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from punchclock.schemas.common import normalize_db_datetime

# Matches the activity_notes.an_description column
NOTE_MAX_LENGTH = 2000


class ClockEventBase(BaseModel):
    ce_worker_id: int
    ce_kind: Literal["IN", "OUT"]
    ce_occurred_at: datetime
    ce_lat: Optional[float] = None
    ce_lon: Optional[float] = None
    ce_address: Optional[str] = None
    ce_linked_open_event_id: Optional[int] = None


class ClockEventInDB(ClockEventBase):
    model_config = ConfigDict(from_attributes=True)

    ce_id: int
    ce_created_at: Optional[datetime] = None

    @field_validator('ce_occurred_at', 'ce_created_at', mode='before')
    @classmethod
    def fix_datetime_timezone(cls, v):
        return normalize_db_datetime(v)


class ClockEvent(ClockEventInDB):
    pass


# Request/Response schemas for API endpoints
class MediaUpload(BaseModel):
    """Photo or video captured on the device, base64 or data URL encoded"""
    at_kind: Literal["PHOTO", "VIDEO"]
    data: str
    name: Optional[str] = Field(None, max_length=255)


class ClockActionRequest(BaseModel):
    """Request schema for clock-in and clock-out endpoints"""
    ce_lat: Optional[float] = Field(None, ge=-90, le=90)
    ce_lon: Optional[float] = Field(None, ge=-180, le=180)
    ce_address: Optional[str] = Field(None, max_length=500)
    notes: List[Annotated[str, Field(max_length=NOTE_MAX_LENGTH)]] = Field(default_factory=list)  # Activities performed during the shift
    media: List[MediaUpload] = Field(default_factory=list)

    @field_validator('notes')
    @classmethod
    def drop_blank_notes(cls, v):
        return [note.strip() for note in v if note and note.strip()]


class ClockActionResponse(BaseModel):
    """Response schema for an admitted clock action"""
    status: Literal["clocked-in", "clocked-out"]
    event: ClockEvent
    open_event_id: int
    attachments_stored: int = 0
    attachments_failed: int = 0
    message: str
