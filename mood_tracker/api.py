"""JSON API for accepting mood submissions."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .config import ServiceSettings, load_settings
from .schemas import FieldError, SubmissionValidationError
from .service import SubmissionService
from .storage import SubmissionStore
from .webhook import WebhookConfigurationError, WebhookDeliveryError, WebhookForwarder

logger = logging.getLogger("mood_tracker.api")

SUCCESS_MESSAGE = "Your cosmic data has been sent successfully! ✨"
VALIDATION_MESSAGE = "Please check your form data and try again."
CONFIGURATION_MESSAGE = "Webhook configuration error. Please contact support."
DELIVERY_MESSAGE = "Failed to send data to external service. Please try again."
UNEXPECTED_MESSAGE = "An unexpected error occurred. Please try again later."


class FieldErrorResponse(BaseModel):
    field: Optional[str]
    message: str
    code: str


class SubmissionCreatedResponse(BaseModel):
    message: str
    id: int


class ValidationErrorResponse(BaseModel):
    message: str
    errors: List[FieldErrorResponse]


class ErrorResponse(BaseModel):
    message: str


def build_service(settings: ServiceSettings, *, store: SubmissionStore | None = None) -> SubmissionService:
    """Create a :class:`SubmissionService` wired to the configured webhook."""

    forwarder = WebhookForwarder(settings.webhook_url, timeout=settings.webhook_timeout)
    return SubmissionService(store if store is not None else SubmissionStore(), forwarder)


def _validation_response(errors: List[Dict[str, Optional[str]]]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": VALIDATION_MESSAGE,
            "errors": errors,
        },
    )


def _server_error(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": message},
    )


def register_api_routes(app: FastAPI, service: SubmissionService) -> None:
    """Expose the submission endpoint on the provided FastAPI application."""

    @app.get("/health")
    async def healthcheck() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post(
        "/api/submissions",
        response_model=SubmissionCreatedResponse,
        responses={
            status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse},
            status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
        },
    )
    async def create_submission(request: Request):
        try:
            body = await request.json()
        except ValueError:
            return _validation_response(
                [FieldError(field=None, message="Request body must be valid JSON", code="json_invalid").to_dict()]
            )

        try:
            submission = await service.submit(body)
        except SubmissionValidationError as exc:
            return _validation_response(exc.to_list())
        except WebhookConfigurationError as exc:
            logger.error("Webhook configuration error: %s", exc)
            return _server_error(CONFIGURATION_MESSAGE)
        except WebhookDeliveryError as exc:
            logger.error("Webhook delivery failed: %s", exc)
            return _server_error(DELIVERY_MESSAGE)
        except Exception:
            logger.exception("Unexpected error while handling submission")
            return _server_error(UNEXPECTED_MESSAGE)

        return SubmissionCreatedResponse(message=SUCCESS_MESSAGE, id=submission.id)


def create_app(
    *,
    service: SubmissionService | None = None,
    settings: ServiceSettings | None = None,
) -> FastAPI:
    """Create the API-only application."""

    if service is None:
        service = build_service(settings if settings is not None else load_settings())

    app = FastAPI(
        title="Horoscope Mood Tracker API",
        description="Collects mood submissions and relays them to an automation webhook",
        version="1.0.0",
    )
    app.state.service = service
    register_api_routes(app, service)
    return app


__all__ = [
    "SubmissionCreatedResponse",
    "ValidationErrorResponse",
    "build_service",
    "create_app",
    "register_api_routes",
]
