"""Horoscope mood tracker: collect mood submissions and relay them to a webhook."""

from __future__ import annotations

from typing import Any

from .models import Submission
from .schemas import SubmissionInput, SubmissionValidationError, validate_submission
from .storage import SubmissionStore


def create_app(*args: Any, **kwargs: Any):
    """Factory function that returns the combined web + API application."""

    from .application import create_application as _create_application

    return _create_application(*args, **kwargs)


def create_api_app(*args: Any, **kwargs: Any):
    """Factory function for the API-only application."""

    from .api import create_app as _create_api_app

    return _create_api_app(*args, **kwargs)


__all__ = [
    "Submission",
    "SubmissionInput",
    "SubmissionStore",
    "SubmissionValidationError",
    "create_api_app",
    "create_app",
    "validate_submission",
]
