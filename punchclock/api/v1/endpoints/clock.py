"""
Clock Endpoints - Clock-in/clock-out and the worker's own shifts
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from punchclock.db.session import get_db
from punchclock.models.clock_event import ClockEventKind
from punchclock.services.admission_service import ClockAdmissionService, RejectionReason
from punchclock.services.shift_query_service import ShiftQueryService
from punchclock.schemas import (
    ClockActionRequest,
    ClockActionResponse,
    ClockEvent,
    Shift,
    DataResponse,
    PaginationResponse
)
from punchclock.api.deps import require_auth, require_min_role_level, parse_date_param, WORKER_ROLE_LEVEL
from punchclock.core.config import settings
from atams.encryption import encrypt_response_data
from atams.exceptions import ConflictException

router = APIRouter()
admission_service = ClockAdmissionService()
shift_query_service = ShiftQueryService()

_REJECTION_MESSAGES = {
    RejectionReason.ALREADY_CLOCKED_IN: "You are already clocked in",
    RejectionReason.NOT_CLOCKED_IN: "You are not clocked in",
}


def _submit(db: Session, worker_id: int, kind: ClockEventKind, request: ClockActionRequest) -> ClockActionResponse:
    result = admission_service.submit_clock_action(db, worker_id, kind, request)

    if not result.accepted:
        raise ConflictException(
            _REJECTION_MESSAGES[result.rejection],
            details={"reason": result.rejection.value, "open_event_id": result.open_event_id}
        )

    clocked_in = kind == ClockEventKind.IN
    message = "Clocked in successfully" if clocked_in else "Clocked out successfully"
    if result.attachments_failed:
        message += f" ({result.attachments_failed} attachment(s) could not be saved)"

    return ClockActionResponse(
        status="clocked-in" if clocked_in else "clocked-out",
        event=ClockEvent.model_validate(result.event),
        open_event_id=result.open_event_id,
        attachments_stored=result.attachments_stored,
        attachments_failed=result.attachments_failed,
        message=message
    )


@router.post(
    "/in",
    response_model=DataResponse[ClockActionResponse],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(WORKER_ROLE_LEVEL))]
)
async def clock_in(
    request: ClockActionRequest,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Clock in (start a shift)

    **Authentication:**
    - Requires valid user authentication (role level >= 1)

    **Process:**
    1. Reject if the worker already has an open shift
    2. Store IN event, open-shift claim and activity notes in one transaction
    3. Store photos/videos (failures are reported, never undo the clock-in)

    **Errors:**
    - 404: Worker not registered
    - 409: Already clocked in (details.reason = ALREADY_CLOCKED_IN)
    """
    action = _submit(db, current_user["user_id"], ClockEventKind.IN, request)

    return DataResponse(
        success=True,
        message=action.message,
        data=action
    )


@router.post(
    "/out",
    response_model=DataResponse[ClockActionResponse],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(WORKER_ROLE_LEVEL))]
)
async def clock_out(
    request: ClockActionRequest,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Clock out (close the open shift)

    **Authentication:**
    - Requires valid user authentication (role level >= 1)

    **Notes:**
    - Activity notes are stored against the clock-in event of the shift
    - Media are stored against the clock-out event

    **Errors:**
    - 404: Worker not registered
    - 409: Not clocked in (details.reason = NOT_CLOCKED_IN)
    """
    action = _submit(db, current_user["user_id"], ClockEventKind.OUT, request)

    return DataResponse(
        success=True,
        message=action.message,
        data=action
    )


@router.get(
    "/me/open-shift",
    response_model=DataResponse[Shift],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(WORKER_ROLE_LEVEL))]
)
async def get_my_open_shift(
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get current user's open shift

    **Response:**
    - Shift with status OPEN, notes and entry media
    - data is null when not clocked in
    """
    shift = shift_query_service.get_current_open_shift(db, current_user["user_id"])

    response = DataResponse(
        success=True,
        message="Open shift retrieved successfully" if shift else "Not clocked in",
        data=shift
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/me/shifts",
    response_model=PaginationResponse[Shift],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(WORKER_ROLE_LEVEL))]
)
async def get_my_shifts(
    date_from: Optional[str] = Query(None, description="Start date (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, description="End date (YYYY-MM-DD)"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(50, ge=1, le=500, description="Maximum records to return"),
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get current user's shift history, newest first

    **Query Parameters:**
    - date_from/date_to: Inclusive calendar days in the configured TIMEZONE
    - skip/limit: Pagination over shifts
    """
    shifts, total = shift_query_service.get_shift_history(
        db,
        current_user["user_id"],
        parse_date_param(date_from, "date_from"),
        parse_date_param(date_to, "date_to"),
        skip,
        limit
    )

    response = PaginationResponse(
        success=True,
        message="Shifts retrieved successfully",
        data=shifts,
        total=total,
        page=skip // limit + 1,
        size=limit,
        pages=(total + limit - 1) // limit
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/me/shifts/{open_event_id}",
    response_model=DataResponse[Shift],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(WORKER_ROLE_LEVEL))]
)
async def get_my_shift(
    open_event_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get one of the current user's shifts by its clock-in event id

    **Errors:**
    - 404: No such shift for this user
    """
    shift = shift_query_service.get_shift_detail(db, current_user["user_id"], open_event_id)

    response = DataResponse(
        success=True,
        message="Shift retrieved successfully",
        data=shift
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/me/events",
    response_model=PaginationResponse[ClockEvent],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(WORKER_ROLE_LEVEL))]
)
async def get_my_events(
    date_from: Optional[str] = Query(None, description="Start date (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, description="End date (YYYY-MM-DD)"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(50, ge=1, le=500, description="Maximum records to return"),
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get current user's raw clock events, newest first
    """
    events, total = shift_query_service.get_worker_events(
        db,
        current_user["user_id"],
        parse_date_param(date_from, "date_from"),
        parse_date_param(date_to, "date_to"),
        skip,
        limit
    )

    response = PaginationResponse(
        success=True,
        message="Events retrieved successfully",
        data=events,
        total=total,
        page=skip // limit + 1,
        size=limit,
        pages=(total + limit - 1) // limit
    )

    return encrypt_response_data(response, settings)
