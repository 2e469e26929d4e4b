"""
Clock Event Model - Append-only log of clock-in/clock-out actions
"""
import enum

from sqlalchemy import Column, BigInteger, Integer, String, DateTime, Float, ForeignKey
from sqlalchemy.sql import func
from atams.db import Base

# BIGINT primary keys only autoincrement on SQLite as INTEGER
EventId = BigInteger().with_variant(Integer, "sqlite")


class ClockEventKind(str, enum.Enum):
    IN = "IN"
    OUT = "OUT"


class ClockEvent(Base):
    """Clock Event model for timeclock schema - Table: timeclock.clock_events"""
    __tablename__ = "clock_events"
    __table_args__ = {"schema": "timeclock"}

    ce_id = Column(EventId, primary_key=True, index=True, autoincrement=True)
    ce_worker_id = Column(BigInteger, ForeignKey("timeclock.workers.w_id"), nullable=False, index=True)
    ce_kind = Column(String(3), nullable=False)  # 'IN' or 'OUT'
    ce_occurred_at = Column(DateTime(timezone=True), nullable=False, index=True)
    ce_lat = Column(Float, nullable=True)
    ce_lon = Column(Float, nullable=True)
    ce_address = Column(String(500), nullable=True)  # Reverse-geocoded by the client
    # Only on OUT events; an IN can be closed once
    ce_linked_open_event_id = Column(
        EventId,
        ForeignKey("timeclock.clock_events.ce_id"),
        nullable=True,
        unique=True,
    )
    ce_created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
