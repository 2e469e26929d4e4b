"""
Admin Endpoints - Live dashboard, open shifts and worker shift history
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from punchclock.db.session import get_db
from punchclock.services.shift_query_service import ShiftQueryService
from punchclock.services.worker_service import WorkerService
from punchclock.schemas import (
    Shift,
    ClockEvent,
    ActiveShift,
    DashboardStats,
    EventDetails,
    DataResponse,
    PaginationResponse
)
from punchclock.api.deps import require_auth, require_min_role_level, parse_date_param, ADMIN_ROLE_LEVEL
from punchclock.core.config import settings
from atams.encryption import encrypt_response_data

router = APIRouter()
shift_query_service = ShiftQueryService()
worker_service = WorkerService()


@router.get(
    "/dashboard",
    response_model=DataResponse[DashboardStats],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(ADMIN_ROLE_LEVEL))]
)
async def get_dashboard(
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get workers on shift and total workers

    **Authorization:**
    - Requires role level >= 50 (Admin or above)
    """
    stats = shift_query_service.get_dashboard_stats(db)

    response = DataResponse(
        success=True,
        message="Dashboard stats retrieved successfully",
        data=stats
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/open-shifts",
    response_model=DataResponse[List[ActiveShift]],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(ADMIN_ROLE_LEVEL))]
)
async def get_open_shifts(
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get every worker currently on shift with clock-in location (live map)

    **Authorization:**
    - Requires role level >= 50 (Admin or above)
    """
    active = shift_query_service.get_all_currently_open_shifts(db)

    response = DataResponse(
        success=True,
        message="Open shifts retrieved successfully",
        data=active
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/workers/{worker_id}/open-shift",
    response_model=DataResponse[Shift],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(ADMIN_ROLE_LEVEL))]
)
async def get_worker_open_shift(
    worker_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get a worker's open shift (data is null when not clocked in)

    **Authorization:**
    - Requires role level >= 50 (Admin or above)
    """
    worker_service.get_worker(db, worker_id)
    shift = shift_query_service.get_current_open_shift(db, worker_id)

    response = DataResponse(
        success=True,
        message="Open shift retrieved successfully" if shift else "Worker is not clocked in",
        data=shift
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/workers/{worker_id}/shifts",
    response_model=PaginationResponse[Shift],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(ADMIN_ROLE_LEVEL))]
)
async def get_worker_shifts(
    worker_id: int,
    date_from: Optional[str] = Query(None, description="Start date (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, description="End date (YYYY-MM-DD)"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(50, ge=1, le=500, description="Maximum records to return"),
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get a worker's shift history, newest first

    **Authorization:**
    - Requires role level >= 50 (Admin or above)

    **Query Parameters:**
    - date_from/date_to: Inclusive calendar days in the configured TIMEZONE
    - skip/limit: Pagination over shifts
    """
    shifts, total = shift_query_service.get_shift_history(
        db,
        worker_id,
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
    "/workers/{worker_id}/events",
    response_model=PaginationResponse[ClockEvent],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(ADMIN_ROLE_LEVEL))]
)
async def get_worker_events(
    worker_id: int,
    date_from: Optional[str] = Query(None, description="Start date (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, description="End date (YYYY-MM-DD)"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(50, ge=1, le=500, description="Maximum records to return"),
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get a worker's raw clock events, newest first

    **Authorization:**
    - Requires role level >= 50 (Admin or above)
    """
    events, total = shift_query_service.get_worker_events(
        db,
        worker_id,
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

@router.get(
    "/events/{event_id}/details",
    response_model=DataResponse[EventDetails],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(ADMIN_ROLE_LEVEL))]
)
async def get_event_details(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get notes and media stored against one clock event

    **Authorization:**
    - Requires role level >= 50 (Admin or above)
    """
    details = shift_query_service.get_event_details(db, event_id)

    response = DataResponse(
        success=True,
        message="Event details retrieved successfully",
        data=details
    )

    return encrypt_response_data(response, settings)
