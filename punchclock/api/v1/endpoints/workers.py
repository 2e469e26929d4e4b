"""
Workers Endpoints - Worker directory management
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from punchclock.db.session import get_db
from punchclock.services.worker_service import WorkerService
from punchclock.schemas import Worker, WorkerCreate, DataResponse, PaginationResponse
from punchclock.api.deps import require_auth, require_min_role_level, ADMIN_ROLE_LEVEL
from punchclock.core.config import settings
from atams.encryption import encrypt_response_data

router = APIRouter()
worker_service = WorkerService()


@router.get(
    "/",
    response_model=PaginationResponse[Worker],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(ADMIN_ROLE_LEVEL))]
)
async def list_workers(
    search: str = Query("", description="Search workers by username or name"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum records to return"),
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get list of workers with pagination and search

    **Authorization:**
    - Requires role level >= 50 (Admin or above)
    """
    workers = worker_service.list_workers(db, search=search, skip=skip, limit=limit)
    total = worker_service.count_workers(db, search=search)

    response = PaginationResponse(
        success=True,
        message="Workers retrieved successfully",
        data=workers,
        total=total,
        page=skip // limit + 1,
        size=limit,
        pages=(total + limit - 1) // limit
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/{worker_id}",
    response_model=DataResponse[Worker],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(ADMIN_ROLE_LEVEL))]
)
async def get_worker(
    worker_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get single worker by ID

    **Authorization:**
    - Requires role level >= 50 (Admin or above)
    """
    worker = worker_service.get_worker(db, worker_id)

    response = DataResponse(
        success=True,
        message="Worker retrieved successfully",
        data=worker
    )

    return encrypt_response_data(response, settings)


@router.post(
    "/",
    response_model=DataResponse[Worker],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_min_role_level(ADMIN_ROLE_LEVEL))]
)
async def create_worker(
    worker: WorkerCreate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Register a worker

    **Authorization:**
    - Requires role level >= 50 (Admin or above)

    **Validation:**
    - w_id: Atlas SSO user id, unique
    - w_username: required, unique
    """
    new_worker = worker_service.create_worker(db, worker)

    return DataResponse(
        success=True,
        message="Worker created successfully",
        data=new_worker
    )
