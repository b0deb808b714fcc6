"""In-memory storage for accepted submissions."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Dict, Optional

from .models import Submission
from .schemas import SubmissionInput


class SubmissionStore:
    """Assign sequential identifiers to submissions and keep them for the process lifetime."""

    def __init__(self) -> None:
        self._submissions: Dict[int, Submission] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create(self, data: SubmissionInput) -> Submission:
        with self._lock:
            submission = Submission(
                id=self._next_id,
                email=data.email,
                horoscope_sign=data.horoscope_sign,
                mood=data.mood,
                created_at=self._now(),
            )
            self._submissions[submission.id] = submission
            self._next_id += 1
        return submission

    def get(self, submission_id: int) -> Optional[Submission]:
        with self._lock:
            return self._submissions.get(submission_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._submissions)

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)


__all__ = ["SubmissionStore"]
