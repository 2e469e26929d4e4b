"""
Activity Note Model - Free-text activities reported for a shift
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from atams.db import Base

from punchclock.models.clock_event import EventId


class ActivityNote(Base):
    """Activity note for timeclock schema - Table: timeclock.activity_notes"""
    __tablename__ = "activity_notes"
    __table_args__ = {"schema": "timeclock"}

    an_id = Column(EventId, primary_key=True, index=True, autoincrement=True)
    an_event_id = Column(EventId, ForeignKey("timeclock.clock_events.ce_id"), nullable=False, index=True)  # Always the IN event
    an_description = Column(String(2000), nullable=False)
    an_created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
