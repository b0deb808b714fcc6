"""Validate, store and forward pipeline shared by the API and the web form."""

from __future__ import annotations

import logging
from typing import Any

from .models import Submission
from .schemas import validate_submission
from .storage import SubmissionStore
from .webhook import WebhookForwarder

logger = logging.getLogger("mood_tracker.service")


class SubmissionService:
    """Run one submission through validation, storage and webhook delivery.

    A submission that fails to forward stays in the store.
    """

    def __init__(self, store: SubmissionStore, forwarder: WebhookForwarder) -> None:
        self._store = store
        self._forwarder = forwarder

    async def submit(self, data: Any) -> Submission:
        validated = validate_submission(data)
        submission = self._store.create(validated)
        logger.info("Stored submission %s", submission.id)
        await self._forwarder.forward(submission)
        return submission


__all__ = ["SubmissionService"]
