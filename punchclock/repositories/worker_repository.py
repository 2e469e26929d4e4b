"""
Worker Repository - Data access layer for workers
"""
from typing import Optional, List
from sqlalchemy.orm import Session

from atams.db import BaseRepository
from punchclock.models.worker import Worker


class WorkerRepository(BaseRepository[Worker]):
    def __init__(self):
        super().__init__(Worker)

    def get_by_id(self, db: Session, worker_id: int) -> Optional[Worker]:
        return db.query(Worker).filter(Worker.w_id == worker_id).first()

    def get_by_username(self, db: Session, username: str) -> Optional[Worker]:
        return db.query(Worker).filter(Worker.w_username == username).first()

    def get_workers_with_search(self, db: Session, search: str = "", skip: int = 0, limit: int = 100) -> List[Worker]:
        """Get workers ordered by name with optional search on username/full name"""
        query = db.query(Worker)

        if search:
            pattern = f"%{search}%"
            query = query.filter(
                Worker.w_username.ilike(pattern) | Worker.w_full_name.ilike(pattern)
            )

        return query.order_by(Worker.w_full_name, Worker.w_username).offset(skip).limit(limit).all()

    def count_workers_with_search(self, db: Session, search: str = "") -> int:
        query = db.query(Worker)

        if search:
            pattern = f"%{search}%"
            query = query.filter(
                Worker.w_username.ilike(pattern) | Worker.w_full_name.ilike(pattern)
            )

        return query.count()
