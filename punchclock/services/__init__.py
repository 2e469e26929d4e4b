from .worker_service import WorkerService
from .admission_service import ClockAdmissionService, AdmissionResult, RejectionReason
from .shift_query_service import ShiftQueryService
from .attachment_store import LocalAttachmentStore, AttachmentStoreError

__all__ = [
    "WorkerService",
    "ClockAdmissionService",
    "AdmissionResult",
    "RejectionReason",
    "ShiftQueryService",
    "LocalAttachmentStore",
    "AttachmentStoreError"
]
