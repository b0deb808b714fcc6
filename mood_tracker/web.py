"""Server-rendered submission form."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import parse_qs

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from .api import (
    CONFIGURATION_MESSAGE,
    DELIVERY_MESSAGE,
    SUCCESS_MESSAGE,
    UNEXPECTED_MESSAGE,
    VALIDATION_MESSAGE,
)
from .schemas import HOROSCOPE_SIGNS, MOOD_MAX_LENGTH, SubmissionValidationError, validate_submission
from .service import SubmissionService
from .webhook import WebhookConfigurationError, WebhookDeliveryError

logger = logging.getLogger("mood_tracker.web")

FORM_FIELDS = ("email", "horoscopeSign", "mood")


def _template_environment() -> Jinja2Templates:
    base_dir = Path(__file__).resolve().parent
    return Jinja2Templates(directory=str(base_dir / "templates"))


async def _parse_submission_form(request: Request) -> Dict[str, str]:
    body_bytes = await request.body()
    content_type = request.headers.get("content-type", "")
    charset = "utf-8"
    if "charset=" in content_type:
        charset = content_type.split("charset=", 1)[1].split(";", 1)[0].strip() or "utf-8"
    try:
        decoded = body_bytes.decode(charset)
    except (LookupError, UnicodeDecodeError):
        decoded = body_bytes.decode("utf-8", errors="ignore")
    data = parse_qs(decoded, keep_blank_values=True)
    return {name: data.get(name, [""])[0] for name in FORM_FIELDS}


def register_ui_routes(app: FastAPI, service: SubmissionService) -> None:
    """Expose the HTML submission form on the provided FastAPI app."""

    templates = _template_environment()
    router = APIRouter(include_in_schema=False)

    def _render(
        request: Request,
        *,
        state: str = "idle",
        values: Optional[Dict[str, str]] = None,
        field_errors: Optional[Dict[str, str]] = None,
        message: Optional[str] = None,
        submission_id: Optional[int] = None,
        status_code: int = status.HTTP_200_OK,
    ) -> HTMLResponse:
        context = {
            "state": state,
            "values": values or {name: "" for name in FORM_FIELDS},
            "field_errors": field_errors or {},
            "message": message,
            "submission_id": submission_id,
            "signs": HOROSCOPE_SIGNS,
            "mood_max_length": MOOD_MAX_LENGTH,
        }
        return templates.TemplateResponse(request, "index.html", context, status_code=status_code)

    @router.get("/", response_class=HTMLResponse, name="ui_form")
    async def submission_form(request: Request):
        return _render(request)

    @router.post("/", response_class=HTMLResponse, name="ui_form_submit")
    async def submission_form_submit(request: Request):
        values = await _parse_submission_form(request)

        try:
            validated = validate_submission(values)
        except SubmissionValidationError as exc:
            return _render(
                request,
                state="error",
                values=values,
                field_errors=exc.errors_by_field(),
                message=VALIDATION_MESSAGE,
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        try:
            submission = await service.submit(validated)
        except WebhookConfigurationError as exc:
            logger.error("Webhook configuration error: %s", exc)
            message = CONFIGURATION_MESSAGE
        except WebhookDeliveryError as exc:
            logger.error("Webhook delivery failed: %s", exc)
            message = DELIVERY_MESSAGE
        except Exception:
            logger.exception("Unexpected error while handling form submission")
            message = UNEXPECTED_MESSAGE
        else:
            return _render(
                request,
                state="success",
                message=SUCCESS_MESSAGE,
                submission_id=submission.id,
            )

        return _render(
            request,
            state="error",
            values=values,
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    app.include_router(router)


__all__ = ["register_ui_routes"]
