from .worker import Worker
from .clock_event import ClockEvent, ClockEventKind
from .open_shift_claim import OpenShiftClaim
from .activity_note import ActivityNote
from .attachment import Attachment, AttachmentKind

__all__ = [
    "Worker",
    "ClockEvent",
    "ClockEventKind",
    "OpenShiftClaim",
    "ActivityNote",
    "Attachment",
    "AttachmentKind"
]
