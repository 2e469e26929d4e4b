import pytest

from atams.exceptions import ConflictException, NotFoundException
from punchclock.schemas import WorkerCreate
from punchclock.services.worker_service import WorkerService


@pytest.fixture
def workers():
    return WorkerService()


def test_create_and_get_worker(db, workers):
    created = workers.create_worker(db, WorkerCreate(w_id=10, w_username="ana", w_full_name="Ana Souza"))

    fetched = workers.get_worker(db, 10)

    assert created.w_id == 10
    assert fetched.w_username == "ana"
    assert fetched.w_created_at is not None


def test_duplicate_id_or_username_conflicts(db, workers):
    workers.create_worker(db, WorkerCreate(w_id=10, w_username="ana"))

    with pytest.raises(ConflictException):
        workers.create_worker(db, WorkerCreate(w_id=10, w_username="other"))
    with pytest.raises(ConflictException):
        workers.create_worker(db, WorkerCreate(w_id=11, w_username="ana"))


def test_unknown_worker_is_not_found(db, workers):
    with pytest.raises(NotFoundException):
        workers.get_worker(db, 404)


def test_list_workers_with_search(db, make_worker, workers):
    make_worker(1, username="ana", full_name="Ana Souza")
    make_worker(2, username="bruno", full_name="Bruno Lima")
    make_worker(3, username="carla", full_name="Carla Souza")

    found = workers.list_workers(db, search="souza")

    assert [w.w_username for w in found] == ["ana", "carla"]
    assert workers.count_workers(db, search="souza") == 2
    assert workers.count_workers(db) == 3
    assert len(workers.list_workers(db, skip=1, limit=1)) == 1
