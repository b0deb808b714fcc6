"""Command-line interface for the horoscope mood tracker service."""

from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import httpx

from mood_tracker.api import VALIDATION_MESSAGE
from mood_tracker.schemas import HOROSCOPE_SIGNS, SubmissionValidationError, validate_submission

logger = logging.getLogger("mood_tracker.main")

_DEFAULT_SERVICE_URL = "http://localhost:8000"
_CLIENT_TIMEOUT = 15.0


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Horoscope mood tracker utilities")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP service")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address for the service")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port for the HTTP service (default: 8000)",
    )
    serve_parser.add_argument(
        "--config",
        default=None,
        help="Path to a YAML settings file (default: $MOOD_TRACKER_CONFIG)",
    )

    submit_parser = subparsers.add_parser("submit", help="Send a mood submission to a running service")
    submit_parser.add_argument("--email", required=True, help="Email address to submit")
    submit_parser.add_argument(
        "--sign",
        required=True,
        help="Horoscope sign ({})".format(", ".join(sign.code for sign in HOROSCOPE_SIGNS)),
    )
    submit_parser.add_argument("--mood", required=True, help="Free-text description of the current mood")
    submit_parser.add_argument(
        "--service-url",
        default=_DEFAULT_SERVICE_URL,
        help=f"Base URL of a running mood tracker service (default: {_DEFAULT_SERVICE_URL})",
    )

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "submit"}

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            if any(flag in args_list for flag in ("-h", "--help")):
                return parser.parse_args(args_list)
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _serve(*, host: str, port: int, config_path: Optional[str]) -> None:
    from mood_tracker.application import create_application
    from mood_tracker.config import ConfigurationError
    import uvicorn

    try:
        app = create_application(config_path=Path(config_path).expanduser() if config_path else None)
    except ConfigurationError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc

    if not app.state.settings.webhook_url:
        logger.warning("No webhook URL configured; submissions will be rejected until one is set")

    logger.info("Starting mood tracker on http://%s:%s", host, port)
    uvicorn.run(app, host=host, port=port, log_level="info")


def _submit(
    *,
    service_url: str,
    email: str,
    sign: str,
    mood: str,
    client: Optional[httpx.Client] = None,
) -> int:
    """Validate locally, send the submission and print the outcome."""

    try:
        validated = validate_submission({"email": email, "horoscopeSign": sign, "mood": mood})
    except SubmissionValidationError as exc:
        print(VALIDATION_MESSAGE)
        for error in exc.errors:
            print(f"  - {error.field or 'submission'}: {error.message}")
        return 1

    endpoint = service_url.rstrip("/") + "/api/submissions"
    payload = {
        "email": validated.email,
        "horoscopeSign": validated.horoscope_sign,
        "mood": validated.mood,
    }

    try:
        if client is None:
            response = httpx.post(endpoint, json=payload, timeout=_CLIENT_TIMEOUT)
        else:
            response = client.post(endpoint, json=payload)
    except httpx.HTTPError as exc:
        print(f"Failed to contact mood tracker service: {exc}")
        return 1

    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        body = {}

    message = body.get("message") or "Something went wrong. Please try again later."
    if response.status_code != 200:
        print(f"Error ({response.status_code}): {message}")
        for error in body.get("errors") or []:
            if isinstance(error, dict):
                print(f"  - {error.get('field') or 'submission'}: {error.get('message', '')}")
        return 1

    print(message)
    print(f"Submission id: {body.get('id')}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for CLI usage."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    args = _parse_args(argv)

    if args.command == "serve":
        _serve(host=args.host, port=args.port, config_path=args.config)
        return 0
    if args.command == "submit":
        return _submit(
            service_url=args.service_url,
            email=args.email,
            sign=args.sign,
            mood=args.mood,
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
