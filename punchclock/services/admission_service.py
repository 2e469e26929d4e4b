"""
Clock Admission Service - Decides whether a clock-in/clock-out is accepted

The open-shift fact is always derived from the event stream (dangling IN
events). The open_shift_claims primary key and the unique
ce_linked_open_event_id column turn a lost race into an IntegrityError, which
is reported as the same typed rejection as a plain read check.
"""
import enum
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from atams.exceptions import NotFoundException
from atams.logging import get_logger
from punchclock.core.config import settings
from punchclock.models.clock_event import ClockEvent, ClockEventKind
from punchclock.repositories.clock_event_repository import ClockEventRepository
from punchclock.repositories.open_shift_claim_repository import OpenShiftClaimRepository
from punchclock.repositories.activity_note_repository import ActivityNoteRepository
from punchclock.repositories.attachment_repository import AttachmentRepository
from punchclock.repositories.worker_repository import WorkerRepository
from punchclock.schemas.clock_event import ClockActionRequest, MediaUpload
from punchclock.services.attachment_store import AttachmentStoreError, LocalAttachmentStore
from punchclock.services.shift_reconciler import select_open_event

logger = get_logger(__name__)


class RejectionReason(str, enum.Enum):
    ALREADY_CLOCKED_IN = "ALREADY_CLOCKED_IN"
    NOT_CLOCKED_IN = "NOT_CLOCKED_IN"


@dataclass
class AdmissionResult:
    accepted: bool
    event: Optional[ClockEvent] = None
    rejection: Optional[RejectionReason] = None
    open_event_id: Optional[int] = None  # IN event of the shift this action opened, closed or collided with
    attachments_stored: int = 0
    attachments_failed: int = 0


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything stored is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ClockAdmissionService:
    def __init__(
        self,
        event_repo: Optional[ClockEventRepository] = None,
        claim_repo: Optional[OpenShiftClaimRepository] = None,
        note_repo: Optional[ActivityNoteRepository] = None,
        attachment_repo: Optional[AttachmentRepository] = None,
        worker_repo: Optional[WorkerRepository] = None,
        attachment_store: Optional[LocalAttachmentStore] = None,
        clock: Optional[Callable[[], datetime]] = None
    ) -> None:
        self.event_repo = event_repo or ClockEventRepository()
        self.claim_repo = claim_repo or OpenShiftClaimRepository()
        self.note_repo = note_repo or ActivityNoteRepository()
        self.attachment_repo = attachment_repo or AttachmentRepository()
        self.worker_repo = worker_repo or WorkerRepository()
        self.attachment_store = attachment_store or LocalAttachmentStore(
            settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX, settings.MAX_UPLOAD_BYTES
        )
        self.clock = clock or utc_now

    def submit_clock_action(
        self,
        db: Session,
        worker_id: int,
        kind: ClockEventKind,
        payload: Optional[ClockActionRequest] = None
    ) -> AdmissionResult:
        """
        Admit or reject a clock-in/clock-out for a worker

        Args:
            db: Database session
            worker_id: Worker performing the action
            kind: IN or OUT
            payload: Location, activity notes and media captured on the device

        Returns:
            AdmissionResult: accepted with the stored event, or rejected with
            ALREADY_CLOCKED_IN / NOT_CLOCKED_IN

        Raises:
            NotFoundException: If worker is not registered
        """
        kind = ClockEventKind(kind)
        payload = payload or ClockActionRequest()

        if not self.worker_repo.get_by_id(db, worker_id):
            raise NotFoundException("Worker not registered")

        open_event = select_open_event(self.event_repo.find_dangling_in_events(db, worker_id))

        if kind == ClockEventKind.IN:
            if open_event is not None:
                return self._reject(worker_id, RejectionReason.ALREADY_CLOCKED_IN, open_event.ce_id)
            return self._clock_in(db, worker_id, payload)

        if open_event is None:
            return self._reject(worker_id, RejectionReason.NOT_CLOCKED_IN)
        return self._clock_out(db, worker_id, open_event.ce_id, payload)

    def _clock_in(self, db: Session, worker_id: int, payload: ClockActionRequest) -> AdmissionResult:
        event = self._new_event(db, worker_id, ClockEventKind.IN, payload)

        try:
            self.event_repo.append(db, event)
            self.claim_repo.claim(db, worker_id, event.ce_id)
            self.note_repo.add_notes(db, event.ce_id, payload.notes)
            db.commit()
        except IntegrityError:
            # Another clock-in for this worker committed between our read and write
            db.rollback()
            winner = select_open_event(self.event_repo.find_dangling_in_events(db, worker_id))
            return self._reject(
                worker_id,
                RejectionReason.ALREADY_CLOCKED_IN,
                winner.ce_id if winner is not None else None
            )

        db.refresh(event)
        stored, failed = self._store_media(db, event.ce_id, payload.media)

        logger.info(
            f"Worker {worker_id} clocked in (event {event.ce_id})",
            extra={'extra_data': {
                'worker_id': worker_id,
                'event_id': event.ce_id,
                'notes': len(payload.notes),
                'attachments_stored': stored,
                'attachments_failed': failed
            }}
        )

        return AdmissionResult(
            accepted=True,
            event=event,
            open_event_id=event.ce_id,
            attachments_stored=stored,
            attachments_failed=failed
        )

    def _clock_out(
        self,
        db: Session,
        worker_id: int,
        open_event_id: int,
        payload: ClockActionRequest
    ) -> AdmissionResult:
        event = self._new_event(db, worker_id, ClockEventKind.OUT, payload)
        event.ce_linked_open_event_id = open_event_id

        try:
            self.event_repo.append(db, event)
            # 0 rows for shifts opened before claims were recorded
            self.claim_repo.release(db, worker_id)
            # Notes always belong to the IN event of the shift
            self.note_repo.add_notes(db, open_event_id, payload.notes)
            db.commit()
        except IntegrityError:
            # Another clock-out already closed this IN event
            db.rollback()
            return self._reject(worker_id, RejectionReason.NOT_CLOCKED_IN)

        db.refresh(event)
        stored, failed = self._store_media(db, event.ce_id, payload.media)

        logger.info(
            f"Worker {worker_id} clocked out (event {event.ce_id}, closes {open_event_id})",
            extra={'extra_data': {
                'worker_id': worker_id,
                'event_id': event.ce_id,
                'open_event_id': open_event_id,
                'notes': len(payload.notes),
                'attachments_stored': stored,
                'attachments_failed': failed
            }}
        )

        return AdmissionResult(
            accepted=True,
            event=event,
            open_event_id=open_event_id,
            attachments_stored=stored,
            attachments_failed=failed
        )

    def _new_event(
        self,
        db: Session,
        worker_id: int,
        kind: ClockEventKind,
        payload: ClockActionRequest
    ) -> ClockEvent:
        return ClockEvent(
            ce_worker_id=worker_id,
            ce_kind=kind.value,
            ce_occurred_at=self._next_timestamp(db, worker_id),
            ce_lat=payload.ce_lat,
            ce_lon=payload.ce_lon,
            ce_address=payload.ce_address
        )

    def _next_timestamp(self, db: Session, worker_id: int) -> datetime:
        """Server time, nudged past the worker's latest event so timestamps strictly increase"""
        now = _as_utc(self.clock())
        latest = self.event_repo.get_latest_for_worker(db, worker_id)
        if latest is not None:
            floor = _as_utc(latest.ce_occurred_at) + timedelta(microseconds=1)
            if now < floor:
                now = floor
        return now

    def _store_media(self, db: Session, event_id: int, media: List[MediaUpload]) -> Tuple[int, int]:
        """Store media one by one after the clock event is committed; failures are counted, not raised"""
        stored = 0
        failed = 0

        for item in media:
            try:
                uri = self.attachment_store.store(event_id, item.data, item.at_kind, item.name)
                self.attachment_repo.create(db, {
                    "at_event_id": event_id,
                    "at_kind": item.at_kind,
                    "at_uri": uri,
                    "at_original_name": item.name
                })
                stored += 1
            except (AttachmentStoreError, OSError, ValueError) as e:
                failed += 1
                logger.warning(
                    f"Failed to store {item.at_kind} for event {event_id}: {e}",
                    extra={'extra_data': {'event_id': event_id, 'original_name': item.name}}
                )
            except SQLAlchemyError as e:
                db.rollback()
                failed += 1
                logger.warning(
                    f"Failed to record {item.at_kind} for event {event_id}: {e}",
                    extra={'extra_data': {'event_id': event_id, 'original_name': item.name}}
                )

        return stored, failed

    def _reject(
        self,
        worker_id: int,
        reason: RejectionReason,
        open_event_id: Optional[int] = None
    ) -> AdmissionResult:
        logger.info(
            f"Clock action rejected for worker {worker_id}: {reason.value}",
            extra={'extra_data': {'worker_id': worker_id, 'reason': reason.value, 'open_event_id': open_event_id}}
        )
        return AdmissionResult(accepted=False, rejection=reason, open_event_id=open_event_id)
