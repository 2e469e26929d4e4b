from .worker import Worker, WorkerCreate
from .clock_event import (
    ClockEvent,
    MediaUpload,
    ClockActionRequest,
    ClockActionResponse
)
from .shift import (
    ActivityNote,
    Attachment,
    Shift,
    ActiveShift,
    DashboardStats,
    EventDetails
)
from .common import DataResponse, PaginationResponse

__all__ = [
    # Worker schemas
    "Worker",
    "WorkerCreate",
    # Clock event schemas
    "ClockEvent",
    "MediaUpload",
    "ClockActionRequest",
    "ClockActionResponse",
    # Shift schemas
    "ActivityNote",
    "Attachment",
    "Shift",
    "ActiveShift",
    "DashboardStats",
    "EventDetails",
    # Common schemas
    "DataResponse",
    "PaginationResponse"
]
