from fastapi import APIRouter
from punchclock.api.v1.endpoints import clock, admin, workers

api_router = APIRouter()

# Register routes
api_router.include_router(clock.router, prefix="/clock", tags=["Clock"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(workers.router, prefix="/workers", tags=["Workers"])
