"""
Open Shift Claim Repository - Storage-level guard against double clock-in
"""
from sqlalchemy.orm import Session

from atams.db import BaseRepository
from punchclock.models.open_shift_claim import OpenShiftClaim


class OpenShiftClaimRepository(BaseRepository[OpenShiftClaim]):
    def __init__(self):
        super().__init__(OpenShiftClaim)

    def claim(self, db: Session, worker_id: int, event_id: int) -> None:
        """
        Claim the worker's open-shift slot inside the current transaction.
        Raises IntegrityError when another transaction already holds it.
        """
        db.add(OpenShiftClaim(oc_worker_id=worker_id, oc_event_id=event_id))
        db.flush()

    def release(self, db: Session, worker_id: int) -> int:
        """Release the worker's slot; returns the number of rows removed (0 for legacy shifts)"""
        return db.query(OpenShiftClaim).filter(
            OpenShiftClaim.oc_worker_id == worker_id
        ).delete(synchronize_session=False)
