from __future__ import annotations

import threading
from datetime import timezone

from mood_tracker.schemas import validate_submission
from mood_tracker.storage import SubmissionStore


def _input(email: str = "moon@example.com"):
    return validate_submission({"email": email, "horoscopeSign": "cancer", "mood": "dreamy"})


def test_ids_start_at_one_and_increase() -> None:
    store = SubmissionStore()

    ids = [store.create(_input()).id for _ in range(3)]

    assert ids == [1, 2, 3]
    assert len(store) == 3


def test_separate_stores_number_independently() -> None:
    first = SubmissionStore()
    second = SubmissionStore()

    first.create(_input())
    first.create(_input())

    assert second.create(_input()).id == 1


def test_get_returns_created_record() -> None:
    store = SubmissionStore()
    created = store.create(_input("sun@example.com"))

    fetched = store.get(created.id)

    assert fetched == created
    assert fetched is not None
    assert fetched.email == "sun@example.com"
    assert fetched.horoscope_sign == "cancer"
    assert fetched.mood == "dreamy"
    assert fetched.created_at.tzinfo == timezone.utc


def test_get_unknown_id_returns_none() -> None:
    store = SubmissionStore()
    store.create(_input())

    assert store.get(2) is None
    assert store.get(0) is None


def test_concurrent_creates_receive_unique_ids() -> None:
    store = SubmissionStore()
    data = _input()
    results: list[int] = []
    results_lock = threading.Lock()

    def worker() -> None:
        for _ in range(50):
            submission = store.create(data)
            with results_lock:
                results.append(submission.id)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(results) == list(range(1, 401))
    assert len(store) == 400
