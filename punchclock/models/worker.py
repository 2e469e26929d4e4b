"""
Worker Model - Employees allowed to clock in/out
"""
from sqlalchemy import Column, BigInteger, String, DateTime
from sqlalchemy.sql import func
from atams.db import Base


class Worker(Base):
    """Worker model for timeclock schema - Table: timeclock.workers"""
    __tablename__ = "workers"
    __table_args__ = {"schema": "timeclock"}

    w_id = Column(BigInteger, primary_key=True, index=True, autoincrement=False)  # Atlas SSO user id
    w_username = Column(String(100), nullable=False, unique=True, index=True)
    w_full_name = Column(String(255), nullable=True)
    w_created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    w_updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
