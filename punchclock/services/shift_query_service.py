"""
Shift Query Service - Read side: open shifts, shift history and event details
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from atams.exceptions import BadRequestException, NotFoundException
from punchclock.core.config import settings
from punchclock.models.clock_event import ClockEventKind
from punchclock.repositories.clock_event_repository import ClockEventRepository
from punchclock.repositories.activity_note_repository import ActivityNoteRepository
from punchclock.repositories.attachment_repository import AttachmentRepository
from punchclock.repositories.worker_repository import WorkerRepository
from punchclock.schemas.clock_event import ClockEvent
from punchclock.schemas.shift import (
    ActivityNote,
    Attachment,
    Shift,
    ActiveShift,
    DashboardStats,
    EventDetails
)
from punchclock.services.shift_reconciler import (
    ReconciledShift,
    find_open_shift,
    pair_events,
    select_open_event
)


def day_range(
    date_from: Optional[date],
    date_to: Optional[date],
    tz_name: Optional[str] = None
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """
    Turn an inclusive calendar-day range into a half-open UTC interval

    Args:
        date_from: First day included (None for no lower bound)
        date_to: Last day included (None for no upper bound)
        tz_name: IANA zone the days are counted in (defaults to settings.TIMEZONE)

    Returns:
        Tuple of (start, end) with start <= ts < end

    Raises:
        BadRequestException: If date_from is after date_to
    """
    if date_from and date_to and date_from > date_to:
        raise BadRequestException("date_from must be on or before date_to")

    tz = ZoneInfo(tz_name or settings.TIMEZONE)
    start = None
    end = None

    if date_from:
        start = datetime.combine(date_from, time.min, tzinfo=tz).astimezone(timezone.utc)
    if date_to:
        end = datetime.combine(date_to + timedelta(days=1), time.min, tzinfo=tz).astimezone(timezone.utc)

    return start, end


def whole_minutes(seconds: float) -> int:
    """Minutes rounded half up (150s is 3 minutes)"""
    return int(seconds // 60 + (seconds % 60 >= 30))


class ShiftQueryService:
    def __init__(
        self,
        event_repo: Optional[ClockEventRepository] = None,
        note_repo: Optional[ActivityNoteRepository] = None,
        attachment_repo: Optional[AttachmentRepository] = None,
        worker_repo: Optional[WorkerRepository] = None,
        history_max_events: Optional[int] = None
    ) -> None:
        self.event_repo = event_repo or ClockEventRepository()
        self.note_repo = note_repo or ActivityNoteRepository()
        self.attachment_repo = attachment_repo or AttachmentRepository()
        self.worker_repo = worker_repo or WorkerRepository()
        self.history_max_events = history_max_events or settings.HISTORY_MAX_EVENTS
        self.history_max_events = history_max_events or settings.HISTORY_MAX_EVENTS

    def _ensure_worker(self, db: Session, worker_id: int) -> None:
        if not self.worker_repo.get_by_id(db, worker_id):
            raise NotFoundException("Worker not found")

    def _present(self, db: Session, shifts: List[ReconciledShift]) -> List[Shift]:
        """Attach notes (stored on the IN event) and media of both events"""
        open_ids = [s.open_event.ce_id for s in shifts]
        close_ids = [s.close_event.ce_id for s in shifts if s.close_event is not None]

        notes = self.note_repo.get_by_events(db, open_ids)
        media = self.attachment_repo.get_by_events(db, open_ids + close_ids)

        presented = []
        for shift in shifts:
            open_id = shift.open_event.ce_id
            seconds = shift.duration_seconds

            presented.append(Shift(
                status=shift.status.value,
                open_event=ClockEvent.model_validate(shift.open_event),
                close_event=ClockEvent.model_validate(shift.close_event) if shift.close_event else None,
                duration_seconds=seconds,
                duration_minutes=whole_minutes(seconds) if seconds is not None else None,
                notes=[ActivityNote.model_validate(n) for n in notes.get(open_id, [])],
                entry_media=[Attachment.model_validate(a) for a in media.get(open_id, [])],
                exit_media=[
                    Attachment.model_validate(a) for a in media.get(shift.close_event.ce_id, [])
                ] if shift.close_event else []
            ))

        return presented

    def get_current_open_shift(self, db: Session, worker_id: int) -> Optional[Shift]:
        """
        Get the worker's open shift, if any

        Returns:
            Shift with status OPEN, or None when the worker is not on shift
        """
        shift = find_open_shift(self.event_repo.find_dangling_in_events(db, worker_id))
        if shift is None:
            return None
        return self._present(db, [shift])[0]

    def get_all_currently_open_shifts(self, db: Session) -> List[ActiveShift]:
        """One entry per worker currently on shift, latest clock-in first"""
        rows = self.event_repo.find_all_dangling_in_events(db)

        dangling_by_worker: Dict[int, list] = {}
        workers = {}
        for event, worker in rows:
            dangling_by_worker.setdefault(worker.w_id, []).append(event)
            workers[worker.w_id] = worker

        active = []
        for worker_id, dangling in dangling_by_worker.items():
            open_event = select_open_event(dangling)
            worker = workers[worker_id]
            active.append(ActiveShift(
                w_id=worker.w_id,
                w_username=worker.w_username,
                w_full_name=worker.w_full_name,
                open_event_id=open_event.ce_id,
                clocked_in_at=open_event.ce_occurred_at,
                ce_lat=open_event.ce_lat,
                ce_lon=open_event.ce_lon,
                ce_address=open_event.ce_address
            ))

        active.sort(key=lambda a: (a.clocked_in_at, a.open_event_id), reverse=True)
        return active

    def get_shift_history(
        self,
        db: Session,
        worker_id: int,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        skip: int = 0,
        limit: int = 50
    ) -> Tuple[List[Shift], int]:
        """
        Get the worker's shifts built from events in the date range, newest first

        Only events inside the range are paired, so a shift whose OUT falls
        after date_to is reported OPEN and an OUT whose IN falls before
        date_from is dropped. Without date_from only the most recent
        history_max_events events are paired.

        Returns:
            Tuple of (page of shifts, total shift count)
        """
        start, end = day_range(date_from, date_to)
        self._ensure_worker(db, worker_id)

        if start is None:
            latest = self.event_repo.get_worker_events(db, worker_id, end=end, limit=self.history_max_events)
            events = list(reversed(latest))
        else:
            events = self.event_repo.query_by_worker(db, worker_id, start, end)

        shifts = pair_events(events)
        page = shifts[skip:skip + limit]

        return self._present(db, page), len(shifts)

    def get_shift_detail(self, db: Session, worker_id: int, open_event_id: int) -> Shift:
        """
        Get one shift by its IN event, scoped to the worker

        Raises:
            NotFoundException: If the IN event does not exist or belongs to another worker
        """
        open_event = self.event_repo.get(db, open_event_id)
        if (
            open_event is None
            or open_event.ce_worker_id != worker_id
            or open_event.ce_kind != ClockEventKind.IN.value
        ):
            raise NotFoundException("Shift not found")

        shift = ReconciledShift(
            open_event=open_event,
            close_event=self.event_repo.get_closing_event(db, open_event_id)
        )
        return self._present(db, [shift])[0]

    def get_event_details(self, db: Session, event_id: int) -> EventDetails:
        event = self.event_repo.get(db, event_id)
        if event is None:
            raise NotFoundException("Clock event not found")

        return EventDetails(
            ce_id=event.ce_id,
            notes=[ActivityNote.model_validate(n) for n in self.note_repo.get_by_event(db, event_id)],
            media=[Attachment.model_validate(a) for a in self.attachment_repo.get_by_event(db, event_id)]
        )

    def get_worker_events(
        self,
        db: Session,
        worker_id: int,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        skip: int = 0,
        limit: int = 50
    ) -> Tuple[List[ClockEvent], int]:
        """Raw clock event log of a worker, newest first, with total count"""
        start, end = day_range(date_from, date_to)
        self._ensure_worker(db, worker_id)

        events = self.event_repo.get_worker_events(db, worker_id, start, end, skip=skip, limit=limit)
        total = self.event_repo.count_worker_events(db, worker_id, start, end)
        return [ClockEvent.model_validate(e) for e in events], total

    def get_dashboard_stats(self, db: Session) -> DashboardStats:
        return DashboardStats(
            active=len(self.get_all_currently_open_shifts(db)),
            total=self.worker_repo.count(db)
        )
