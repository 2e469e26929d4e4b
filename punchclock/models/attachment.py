"""
Attachment Model - Photo/video evidence captured with a clock event
"""
import enum

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from atams.db import Base

from punchclock.models.clock_event import EventId


class AttachmentKind(str, enum.Enum):
    PHOTO = "PHOTO"
    VIDEO = "VIDEO"


class Attachment(Base):
    """Attachment for timeclock schema - Table: timeclock.attachments"""
    __tablename__ = "attachments"
    __table_args__ = {"schema": "timeclock"}

    at_id = Column(EventId, primary_key=True, index=True, autoincrement=True)
    at_event_id = Column(EventId, ForeignKey("timeclock.clock_events.ce_id"), nullable=False, index=True)
    at_kind = Column(String(10), nullable=False)  # 'PHOTO' or 'VIDEO'
    at_uri = Column(String(500), nullable=False)
    at_original_name = Column(String(255), nullable=True)
    at_created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
