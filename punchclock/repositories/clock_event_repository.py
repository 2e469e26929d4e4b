"""
Clock Event Repository - Event Store for clock-in/clock-out events
"""
from typing import List, Optional, Tuple
from datetime import datetime
from sqlalchemy.orm import Session, aliased

from atams.db import BaseRepository
from punchclock.models.clock_event import ClockEvent, ClockEventKind
from punchclock.models.worker import Worker


class ClockEventRepository(BaseRepository[ClockEvent]):
    def __init__(self):
        super().__init__(ClockEvent)

    def append(self, db: Session, event: ClockEvent) -> ClockEvent:
        """
        Add a new event to the current transaction and flush it to get its id.
        The caller owns the commit.
        """
        db.add(event)
        db.flush()
        return event

    def query_by_worker(
        self,
        db: Session,
        worker_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[ClockEvent]:
        """Worker's events in [start, end), oldest first, insertion order on ties"""
        query = db.query(ClockEvent).filter(ClockEvent.ce_worker_id == worker_id)

        if start is not None:
            query = query.filter(ClockEvent.ce_occurred_at >= start)
        if end is not None:
            query = query.filter(ClockEvent.ce_occurred_at < end)

        return query.order_by(ClockEvent.ce_occurred_at.asc(), ClockEvent.ce_id.asc()).all()

    def get_worker_events(
        self,
        db: Session,
        worker_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        skip: int = 0,
        limit: int = 50
    ) -> List[ClockEvent]:
        """Worker's raw event log, newest first"""
        query = db.query(ClockEvent).filter(ClockEvent.ce_worker_id == worker_id)

        if start is not None:
            query = query.filter(ClockEvent.ce_occurred_at >= start)
        if end is not None:
            query = query.filter(ClockEvent.ce_occurred_at < end)

        return query.order_by(
            ClockEvent.ce_occurred_at.desc(), ClockEvent.ce_id.desc()
        ).offset(skip).limit(limit).all()

    def count_worker_events(
        self,
        db: Session,
        worker_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> int:
        query = db.query(ClockEvent).filter(ClockEvent.ce_worker_id == worker_id)

        if start is not None:
            query = query.filter(ClockEvent.ce_occurred_at >= start)
        if end is not None:
            query = query.filter(ClockEvent.ce_occurred_at < end)

        return query.count()

    def get_latest_for_worker(self, db: Session, worker_id: int) -> Optional[ClockEvent]:
        return db.query(ClockEvent).filter(
            ClockEvent.ce_worker_id == worker_id
        ).order_by(ClockEvent.ce_occurred_at.desc(), ClockEvent.ce_id.desc()).first()

    def get_closing_event(self, db: Session, open_event_id: int) -> Optional[ClockEvent]:
        return db.query(ClockEvent).filter(
            ClockEvent.ce_linked_open_event_id == open_event_id
        ).first()

    def _only_dangling_in(self, query):
        """
        Restrict a ClockEvent query to IN events not referenced by any OUT event.

        Anti-join: LEFT OUTER JOIN the closing OUT and keep rows where it is missing.
        """
        closer = aliased(ClockEvent)
        return query.outerjoin(
            closer, closer.ce_linked_open_event_id == ClockEvent.ce_id
        ).filter(
            ClockEvent.ce_kind == ClockEventKind.IN.value,
            closer.ce_id.is_(None)
        )

    def find_dangling_in_events(self, db: Session, worker_id: int) -> List[ClockEvent]:
        """Worker's dangling IN events, newest first"""
        return self._only_dangling_in(
            db.query(ClockEvent).filter(ClockEvent.ce_worker_id == worker_id)
        ).order_by(ClockEvent.ce_occurred_at.desc(), ClockEvent.ce_id.desc()).all()

    def find_all_dangling_in_events(self, db: Session) -> List[Tuple[ClockEvent, Worker]]:
        """Dangling IN events of every worker with the worker row, newest first"""
        return self._only_dangling_in(
            db.query(ClockEvent, Worker).join(Worker, Worker.w_id == ClockEvent.ce_worker_id)
        ).order_by(ClockEvent.ce_occurred_at.desc(), ClockEvent.ce_id.desc()).all()
