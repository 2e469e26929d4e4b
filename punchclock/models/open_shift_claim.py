"""
Open Shift Claim Model - One row per worker currently clocked in

Written in the same transaction as the IN event and removed with the OUT
event. The primary key makes a concurrent second clock-in fail on commit.
"""
from sqlalchemy import Column, BigInteger, DateTime, ForeignKey
from sqlalchemy.sql import func
from atams.db import Base

from punchclock.models.clock_event import EventId


class OpenShiftClaim(Base):
    """Open shift claim for timeclock schema - Table: timeclock.open_shift_claims"""
    __tablename__ = "open_shift_claims"
    __table_args__ = {"schema": "timeclock"}

    oc_worker_id = Column(BigInteger, ForeignKey("timeclock.workers.w_id"), primary_key=True, autoincrement=False)
    oc_event_id = Column(EventId, ForeignKey("timeclock.clock_events.ce_id"), nullable=False, unique=True)
    oc_claimed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
