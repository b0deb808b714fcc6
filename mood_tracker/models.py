"""Domain models for the mood tracker service."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Submission:
    """A stored form submission."""

    id: int
    email: str
    horoscope_sign: str
    mood: str
    created_at: datetime


__all__ = ["Submission"]
