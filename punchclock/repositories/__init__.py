from .worker_repository import WorkerRepository
from .clock_event_repository import ClockEventRepository
from .open_shift_claim_repository import OpenShiftClaimRepository
from .activity_note_repository import ActivityNoteRepository
from .attachment_repository import AttachmentRepository

__all__ = [
    "WorkerRepository",
    "ClockEventRepository",
    "OpenShiftClaimRepository",
    "ActivityNoteRepository",
    "AttachmentRepository"
]
