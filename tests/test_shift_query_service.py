from datetime import date, datetime, timezone

import pytest

from atams.exceptions import BadRequestException, NotFoundException
from punchclock.models import ActivityNote, Attachment, ClockEvent, ClockEventKind
from punchclock.schemas import ClockActionRequest
from punchclock.services.shift_query_service import ShiftQueryService, day_range, whole_minutes


def at(day, hour, minute=0):
    return datetime(2024, 1, day, hour, minute, tzinfo=timezone.utc)


def add_event(db, worker_id, kind, when, link=None, address=None):
    event = ClockEvent(
        ce_worker_id=worker_id,
        ce_kind=kind,
        ce_occurred_at=when,
        ce_linked_open_event_id=link,
        ce_address=address,
    )
    db.add(event)
    db.commit()
    return event


@pytest.fixture
def queries():
    return ShiftQueryService()


def test_worker_without_events_has_no_shifts(db, make_worker, queries):
    make_worker(1)

    assert queries.get_current_open_shift(db, 1) is None
    assert queries.get_shift_history(db, 1) == ([], 0)
    assert queries.get_worker_events(db, 1) == ([], 0)


def test_history_of_unknown_worker_is_not_found(db, queries):
    with pytest.raises(NotFoundException):
        queries.get_shift_history(db, 99)


def test_open_shift_includes_notes_and_entry_media(db, make_worker, admission, queries):
    make_worker(1)
    result = admission.submit_clock_action(
        db, 1, ClockEventKind.IN, ClockActionRequest(notes=["Site visit"])
    )
    db.add(Attachment(at_event_id=result.open_event_id, at_kind="PHOTO", at_uri="/uploads/a.jpg"))
    db.commit()

    shift = queries.get_current_open_shift(db, 1)

    assert shift.status == "OPEN"
    assert shift.open_event.ce_id == result.open_event_id
    assert shift.close_event is None
    assert shift.duration_seconds is None
    assert [n.an_description for n in shift.notes] == ["Site visit"]
    assert [m.at_uri for m in shift.entry_media] == ["/uploads/a.jpg"]
    assert shift.exit_media == []


def test_history_pairs_shifts_newest_first(db, make_worker, queries):
    make_worker(1)
    in1 = add_event(db, 1, "IN", at(1, 8))
    out1 = add_event(db, 1, "OUT", at(1, 17), link=in1.ce_id)
    in2 = add_event(db, 1, "IN", at(2, 8))
    add_event(db, 1, "OUT", at(2, 12, 30), link=in2.ce_id)
    db.add(Attachment(at_event_id=out1.ce_id, at_kind="VIDEO", at_uri="/uploads/out.webm"))
    db.add(ActivityNote(an_event_id=in1.ce_id, an_description="Inventory"))
    db.commit()

    shifts, total = queries.get_shift_history(db, 1)

    assert total == 2
    assert [s.open_event.ce_id for s in shifts] == [in2.ce_id, in1.ce_id]
    assert shifts[0].duration_minutes == 270
    assert shifts[1].duration_seconds == 32400
    assert [m.at_uri for m in shifts[1].exit_media] == ["/uploads/out.webm"]
    assert [n.an_description for n in shifts[1].notes] == ["Inventory"]
    assert shifts[0].notes == []


def test_history_pagination_reports_total(db, make_worker, queries):
    make_worker(1)
    for day in (1, 2, 3):
        opened = add_event(db, 1, "IN", at(day, 8))
        add_event(db, 1, "OUT", at(day, 16), link=opened.ce_id)

    page, total = queries.get_shift_history(db, 1, skip=1, limit=1)

    assert total == 3
    assert len(page) == 1
    assert page[0].open_event.ce_occurred_at == at(2, 8)


def test_history_date_range_uses_only_events_in_range(db, make_worker, queries):
    make_worker(1)
    in1 = add_event(db, 1, "IN", at(1, 8))
    add_event(db, 1, "OUT", at(1, 17), link=in1.ce_id)
    in2 = add_event(db, 1, "IN", at(2, 22))
    add_event(db, 1, "OUT", at(3, 6), link=in2.ce_id)

    day_two, _ = queries.get_shift_history(db, 1, date(2024, 1, 2), date(2024, 1, 2))
    day_three, _ = queries.get_shift_history(db, 1, date(2024, 1, 3), date(2024, 1, 3))
    both, _ = queries.get_shift_history(db, 1, date(2024, 1, 1), date(2024, 1, 3))

    # OUT after the range: the shift shows as open
    assert [(s.open_event.ce_id, s.status) for s in day_two] == [(in2.ce_id, "OPEN")]
    # OUT whose IN is before the range: dropped
    assert day_three == []
    assert [s.status for s in both] == ["CLOSED", "CLOSED"]


def test_history_rejects_inverted_range(db, make_worker, queries):
    make_worker(1)

    with pytest.raises(BadRequestException):
        queries.get_shift_history(db, 1, date(2024, 1, 5), date(2024, 1, 1))


def test_day_range_counts_days_in_configured_timezone():
    start, end = day_range(date(2024, 1, 1), date(2024, 1, 1), "America/Sao_Paulo")

    assert start == datetime(2024, 1, 1, 3, 0, tzinfo=timezone.utc)
    assert end == datetime(2024, 1, 2, 3, 0, tzinfo=timezone.utc)
    assert day_range(None, None) == (None, None)


def test_latest_dangling_in_is_the_open_shift(db, make_worker, queries):
    make_worker(1)
    older = add_event(db, 1, "IN", at(1, 8))
    newer = add_event(db, 1, "IN", at(1, 9))

    assert queries.get_current_open_shift(db, 1).open_event.ce_id == newer.ce_id

    # Once the newer one is closed the older orphan becomes the open shift
    add_event(db, 1, "OUT", at(1, 10), link=newer.ce_id)
    assert queries.get_current_open_shift(db, 1).open_event.ce_id == older.ce_id


def test_all_open_shifts_lists_each_worker_once(db, make_worker, queries):
    make_worker(1, full_name="Ana Souza")
    make_worker(2, full_name="Bruno Lima")
    make_worker(3)
    add_event(db, 1, "IN", at(1, 7))
    latest_for_one = add_event(db, 1, "IN", at(1, 9), address="Rua A, 10")
    only_for_two = add_event(db, 2, "IN", at(1, 8))
    closed = add_event(db, 3, "IN", at(1, 6))
    add_event(db, 3, "OUT", at(1, 10), link=closed.ce_id)

    active = queries.get_all_currently_open_shifts(db)

    assert [(a.w_id, a.open_event_id) for a in active] == [(1, latest_for_one.ce_id), (2, only_for_two.ce_id)]
    assert active[0].w_full_name == "Ana Souza"
    assert active[0].ce_address == "Rua A, 10"
    assert active[1].clocked_in_at == at(1, 8)


def test_dashboard_stats(db, make_worker, queries):
    make_worker(1)
    make_worker(2)
    add_event(db, 1, "IN", at(1, 8))

    stats = queries.get_dashboard_stats(db)

    assert stats.active == 1
    assert stats.total == 2


def test_shift_detail_is_scoped_to_worker(db, make_worker, queries):
    make_worker(1)
    make_worker(2)
    opened = add_event(db, 1, "IN", at(1, 8))
    closing = add_event(db, 1, "OUT", at(1, 12), link=opened.ce_id)

    shift = queries.get_shift_detail(db, 1, opened.ce_id)

    assert shift.status == "CLOSED"
    assert shift.close_event.ce_id == closing.ce_id
    assert shift.duration_seconds == 4 * 3600
    with pytest.raises(NotFoundException):
        queries.get_shift_detail(db, 2, opened.ce_id)
    with pytest.raises(NotFoundException):
        queries.get_shift_detail(db, 1, closing.ce_id)


def test_event_details_returns_notes_and_media_of_that_event(db, make_worker, queries):
    make_worker(1)
    opened = add_event(db, 1, "IN", at(1, 8))
    db.add(ActivityNote(an_event_id=opened.ce_id, an_description="Checked tools"))
    db.add(Attachment(at_event_id=opened.ce_id, at_kind="PHOTO", at_uri="/uploads/p.jpg", at_original_name="p.jpg"))
    db.commit()

    details = queries.get_event_details(db, opened.ce_id)

    assert details.ce_id == opened.ce_id
    assert [n.an_description for n in details.notes] == ["Checked tools"]
    assert [m.at_original_name for m in details.media] == ["p.jpg"]
    with pytest.raises(NotFoundException):
        queries.get_event_details(db, 9999)


def test_worker_events_are_newest_first(db, make_worker, queries):
    make_worker(1)
    opened = add_event(db, 1, "IN", at(1, 8))
    add_event(db, 1, "OUT", at(1, 9), link=opened.ce_id)
    add_event(db, 1, "IN", at(2, 8))

    events, total = queries.get_worker_events(db, 1, limit=2)
    on_day_one, day_one_total = queries.get_worker_events(db, 1, date(2024, 1, 1), date(2024, 1, 1))

    assert total == 3
    assert [e.ce_occurred_at for e in events] == [at(2, 8), at(1, 9)]
    assert day_one_total == 2
    assert [e.ce_kind for e in on_day_one] == ["OUT", "IN"]


def test_history_is_the_same_on_repeated_reads(db, make_worker, queries):
    make_worker(1)
    first_in = add_event(db, 1, "IN", at(1, 8))
    tied_in = add_event(db, 1, "IN", at(1, 8))
    add_event(db, 1, "OUT", at(1, 12), link=tied_in.ce_id)
    add_event(db, 1, "OUT", at(1, 13))
    add_event(db, 1, "IN", at(2, 8))
    add_event(db, 1, "IN", at(2, 9))

    first = queries.get_shift_history(db, 1)
    second = queries.get_shift_history(db, 1)

    assert first == second
    shifts, total = first
    assert total == 4
    assert [s.status for s in shifts] == ["OPEN", "OPEN", "CLOSED", "OPEN"]
    assert [s.open_event.ce_id for s in shifts[2:]] == [tied_in.ce_id, first_in.ce_id]


def test_duration_minutes_round_half_up(db, make_worker, queries):
    make_worker(1)
    opened = add_event(db, 1, "IN", at(1, 8))
    add_event(db, 1, "OUT", datetime(2024, 1, 1, 8, 2, 30, tzinfo=timezone.utc), link=opened.ce_id)

    shifts, _ = queries.get_shift_history(db, 1)

    assert shifts[0].duration_seconds == 150
    assert shifts[0].duration_minutes == 3


def test_whole_minutes():
    assert whole_minutes(89) == 1
    assert whole_minutes(90) == 2
    assert whole_minutes(150) == 3
    assert whole_minutes(29.9) == 0


def test_history_without_start_date_is_capped_to_latest_events(db, make_worker):
    make_worker(1)
    for day in (1, 2, 3):
        opened = add_event(db, 1, "IN", at(day, 8))
        add_event(db, 1, "OUT", at(day, 16), link=opened.ce_id)

    capped = ShiftQueryService(history_max_events=3)
    shifts, total = capped.get_shift_history(db, 1)
    ranged, ranged_total = capped.get_shift_history(db, 1, date(2024, 1, 1), date(2024, 1, 3))

    # Window holds OUT day 2, IN and OUT day 3; the OUT of day 2 loses its IN
    assert total == 1
    assert shifts[0].open_event.ce_occurred_at == at(3, 8)
    assert shifts[0].status == "CLOSED"
    assert ranged_total == 3
