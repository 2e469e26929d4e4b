"""
Shift Reconciler - Pairs raw clock events into shifts

Pure functions over ClockEvent rows (or any object exposing ce_id, ce_kind,
ce_occurred_at, ce_linked_open_event_id). Nothing here touches the database;
callers fetch events from the Event Store and pass them in.
"""
import enum
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from atams.logging import get_logger
from punchclock.models.clock_event import ClockEvent, ClockEventKind

logger = get_logger(__name__)

# Log codes for structural inconsistencies; resolved here, never raised
INCONSISTENT_STATE = "INCONSISTENT_STATE"
ORPHANED_CLOSE_EVENT = "ORPHANED_CLOSE_EVENT"


class ShiftStatus(str, enum.Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


@dataclass
class ReconciledShift:
    open_event: ClockEvent
    close_event: Optional[ClockEvent] = None

    @property
    def status(self) -> ShiftStatus:
        return ShiftStatus.OPEN if self.close_event is None else ShiftStatus.CLOSED

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.close_event is None:
            return None
        return (self.close_event.ce_occurred_at - self.open_event.ce_occurred_at).total_seconds()


def select_open_event(dangling: Sequence[ClockEvent]) -> Optional[ClockEvent]:
    """
    Pick the open IN event among a worker's dangling IN events.

    Latest timestamp wins (id breaks ties); any others are orphans left over
    from a broken write path and are ignored.
    """
    if not dangling:
        return None

    ordered = sorted(dangling, key=lambda e: (e.ce_occurred_at, e.ce_id), reverse=True)
    chosen = ordered[0]

    if len(ordered) > 1:
        logger.warning(
            f"{INCONSISTENT_STATE}: worker {chosen.ce_worker_id} has {len(ordered)} dangling IN events, "
            f"using {chosen.ce_id} and ignoring {[e.ce_id for e in ordered[1:]]}",
            extra={'extra_data': {
                'code': INCONSISTENT_STATE,
                'worker_id': chosen.ce_worker_id,
                'open_event_id': chosen.ce_id,
                'ignored_event_ids': [e.ce_id for e in ordered[1:]]
            }}
        )

    return chosen


def find_open_shift(dangling: Sequence[ClockEvent]) -> Optional[ReconciledShift]:
    open_event = select_open_event(dangling)
    if open_event is None:
        return None
    return ReconciledShift(open_event=open_event)


def pair_events(events: Iterable[ClockEvent]) -> List[ReconciledShift]:
    """
    Build the shift history of one worker, newest first.

    Events are walked oldest first. An IN opens a pending shift keyed by its id;
    an OUT closes the pending shift its link points to. An OUT whose link is
    missing from the pending set is dropped, never attached to another IN.
    Pending shifts left after the walk stay OPEN.
    """
    # sorted() is stable: same-timestamp events keep the store's insertion order
    chronological = sorted(events, key=lambda e: e.ce_occurred_at)

    pending: Dict[int, ReconciledShift] = {}
    built: List[ReconciledShift] = []

    for event in chronological:
        if event.ce_kind == ClockEventKind.IN.value:
            shift = ReconciledShift(open_event=event)
            pending[event.ce_id] = shift
            built.append(shift)
            continue

        shift = None
        if event.ce_linked_open_event_id is not None:
            shift = pending.pop(event.ce_linked_open_event_id, None)

        if shift is None:
            logger.debug(
                f"{ORPHANED_CLOSE_EVENT}: dropping OUT event {event.ce_id} "
                f"(linked to {event.ce_linked_open_event_id})",
                extra={'extra_data': {
                    'code': ORPHANED_CLOSE_EVENT,
                    'worker_id': event.ce_worker_id,
                    'event_id': event.ce_id,
                    'linked_open_event_id': event.ce_linked_open_event_id
                }}
            )
            continue

        shift.close_event = event

    if len(pending) > 1:
        logger.warning(
            f"{INCONSISTENT_STATE}: {len(pending)} open shifts in history, events {sorted(pending)}",
            extra={'extra_data': {'code': INCONSISTENT_STATE, 'open_event_ids': sorted(pending)}}
        )

    built.reverse()
    return built
