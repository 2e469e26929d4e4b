"""
Attachment Repository - Data access layer for clock event media
"""
from typing import Dict, List
from sqlalchemy.orm import Session

from atams.db import BaseRepository
from punchclock.models.attachment import Attachment


class AttachmentRepository(BaseRepository[Attachment]):
    def __init__(self):
        super().__init__(Attachment)

    def get_by_event(self, db: Session, event_id: int) -> List[Attachment]:
        return db.query(Attachment).filter(
            Attachment.at_event_id == event_id
        ).order_by(Attachment.at_created_at, Attachment.at_id).all()

    def get_by_events(self, db: Session, event_ids: List[int]) -> Dict[int, List[Attachment]]:
        """Attachments grouped by event id"""
        grouped: Dict[int, List[Attachment]] = {}
        if not event_ids:
            return grouped

        attachments = db.query(Attachment).filter(
            Attachment.at_event_id.in_(event_ids)
        ).order_by(Attachment.at_created_at, Attachment.at_id).all()

        for attachment in attachments:
            grouped.setdefault(attachment.at_event_id, []).append(attachment)
        return grouped
