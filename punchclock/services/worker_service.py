"""
Worker Service - Business logic for the worker directory
"""
from typing import List
from sqlalchemy.orm import Session

from punchclock.repositories.worker_repository import WorkerRepository
from punchclock.schemas.worker import WorkerCreate, Worker
from atams.exceptions import NotFoundException, ConflictException


class WorkerService:
    def __init__(self) -> None:
        self.repo = WorkerRepository()

    def list_workers(self, db: Session, search: str = "", skip: int = 0, limit: int = 100) -> List[Worker]:
        workers = self.repo.get_workers_with_search(db, search=search, skip=skip, limit=limit)
        return [Worker.model_validate(w) for w in workers]

    def count_workers(self, db: Session, search: str = "") -> int:
        return self.repo.count_workers_with_search(db, search=search)

    def get_worker(self, db: Session, worker_id: int) -> Worker:
        worker = self.repo.get_by_id(db, worker_id)
        if not worker:
            raise NotFoundException("Worker not found")
        return Worker.model_validate(worker)

    def create_worker(self, db: Session, payload: WorkerCreate) -> Worker:
        if self.repo.get_by_id(db, payload.w_id):
            raise ConflictException("Worker with this ID already exists")
        if self.repo.get_by_username(db, payload.w_username):
            raise ConflictException("Worker with this username already exists")

        obj = self.repo.create(db, {
            "w_id": payload.w_id,
            "w_username": payload.w_username,
            "w_full_name": payload.w_full_name,
        })
        return Worker.model_validate(obj)
