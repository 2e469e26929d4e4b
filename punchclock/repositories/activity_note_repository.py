"""
Activity Note Repository - Data access layer for shift activity notes
"""
from typing import Dict, Iterable, List
from sqlalchemy.orm import Session

from atams.db import BaseRepository
from punchclock.models.activity_note import ActivityNote


class ActivityNoteRepository(BaseRepository[ActivityNote]):
    def __init__(self):
        super().__init__(ActivityNote)

    def add_notes(self, db: Session, event_id: int, descriptions: Iterable[str]) -> List[ActivityNote]:
        """Add notes to the current transaction; the caller owns the commit"""
        notes = [ActivityNote(an_event_id=event_id, an_description=d) for d in descriptions]
        db.add_all(notes)
        db.flush()
        return notes

    def get_by_event(self, db: Session, event_id: int) -> List[ActivityNote]:
        return db.query(ActivityNote).filter(
            ActivityNote.an_event_id == event_id
        ).order_by(ActivityNote.an_created_at, ActivityNote.an_id).all()

    def get_by_events(self, db: Session, event_ids: List[int]) -> Dict[int, List[ActivityNote]]:
        """Notes grouped by event id, in creation order"""
        grouped: Dict[int, List[ActivityNote]] = {}
        if not event_ids:
            return grouped

        notes = db.query(ActivityNote).filter(
            ActivityNote.an_event_id.in_(event_ids)
        ).order_by(ActivityNote.an_created_at, ActivityNote.an_id).all()

        for note in notes:
            grouped.setdefault(note.an_event_id, []).append(note)
        return grouped
