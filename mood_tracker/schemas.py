"""Submission schema shared by the JSON API, the HTML form and the CLI client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

MOOD_MAX_LENGTH = 500


@dataclass(frozen=True)
class HoroscopeSign:
    """A selectable zodiac sign."""

    code: str
    label: str


HOROSCOPE_SIGNS: Tuple[HoroscopeSign, ...] = (
    HoroscopeSign("aries", "♈ Aries (March 21 - April 19)"),
    HoroscopeSign("taurus", "♉ Taurus (April 20 - May 20)"),
    HoroscopeSign("gemini", "♊ Gemini (May 21 - June 20)"),
    HoroscopeSign("cancer", "♋ Cancer (June 21 - July 22)"),
    HoroscopeSign("leo", "♌ Leo (July 23 - August 22)"),
    HoroscopeSign("virgo", "♍ Virgo (August 23 - September 22)"),
    HoroscopeSign("libra", "♎ Libra (September 23 - October 22)"),
    HoroscopeSign("scorpio", "♏ Scorpio (October 23 - November 21)"),
    HoroscopeSign("sagittarius", "♐ Sagittarius (November 22 - December 21)"),
    HoroscopeSign("capricorn", "♑ Capricorn (December 22 - January 19)"),
    HoroscopeSign("aquarius", "♒ Aquarius (January 20 - February 18)"),
    HoroscopeSign("pisces", "♓ Pisces (February 19 - March 20)"),
)

HOROSCOPE_SIGN_CODES = frozenset(sign.code for sign in HOROSCOPE_SIGNS)

EMAIL_MESSAGE = "Please enter a valid email address"
SIGN_REQUIRED_MESSAGE = "Please select your horoscope sign"
SIGN_INVALID_MESSAGE = "Please select a valid horoscope sign"
MOOD_REQUIRED_MESSAGE = "Please describe your current mood"
MOOD_TOO_LONG_MESSAGE = "Mood description is too long"
BODY_MESSAGE = "Submission must be a JSON object"

# Python attribute and alias names both map to the field name used on the wire.
_WIRE_NAMES = {
    "email": "email",
    "horoscope_sign": "horoscopeSign",
    "horoscopeSign": "horoscopeSign",
    "mood": "mood",
}


class SubmissionInput(BaseModel):
    """Validated, normalised form input."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, frozen=True)

    email: str
    horoscope_sign: str = Field(alias="horoscopeSign", min_length=1)
    mood: str = Field(min_length=1, max_length=MOOD_MAX_LENGTH)

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        # Display-name forms such as "Name <addr>" are not bare addresses.
        if "<" in value or ">" in value:
            raise PydanticCustomError("email", EMAIL_MESSAGE)
        try:
            validated = validate_email(value, check_deliverability=False)
        except EmailNotValidError as exc:
            raise PydanticCustomError("email", EMAIL_MESSAGE) from exc
        return validated.normalized

    @field_validator("horoscope_sign")
    @classmethod
    def _normalise_sign(cls, value: str) -> str:
        lowered = value.lower()
        if lowered not in HOROSCOPE_SIGN_CODES:
            raise PydanticCustomError("horoscope_sign", SIGN_INVALID_MESSAGE)
        return lowered


@dataclass(frozen=True)
class FieldError:
    """A single validation failure, addressed by its wire field name."""

    field: Optional[str]
    message: str
    code: str

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"field": self.field, "message": self.message, "code": self.code}


class SubmissionValidationError(ValueError):
    """Raised when submitted data does not satisfy the submission schema."""

    def __init__(self, errors: List[FieldError]) -> None:
        self.errors = errors
        fields = ", ".join(error.field or "<body>" for error in errors)
        super().__init__(f"Invalid submission fields: {fields}")

    def errors_by_field(self) -> Dict[str, str]:
        """Return the first message reported for each field."""

        messages: Dict[str, str] = {}
        for error in self.errors:
            key = error.field or ""
            messages.setdefault(key, error.message)
        return messages

    def to_list(self) -> List[Dict[str, Optional[str]]]:
        return [error.to_dict() for error in self.errors]


def _field_message(field: Optional[str], error: Dict[str, Any]) -> str:
    kind = error.get("type", "")
    if field == "email":
        return EMAIL_MESSAGE
    if field == "horoscopeSign":
        if kind == "horoscope_sign":
            return str(error.get("msg") or SIGN_INVALID_MESSAGE)
        return SIGN_REQUIRED_MESSAGE
    if field == "mood":
        if kind == "string_too_long":
            return MOOD_TOO_LONG_MESSAGE
        return MOOD_REQUIRED_MESSAGE
    return BODY_MESSAGE


def _translate_error(error: Dict[str, Any]) -> FieldError:
    loc = error.get("loc") or ()
    field: Optional[str] = None
    if loc:
        field = _WIRE_NAMES.get(str(loc[0]), str(loc[0]))
    return FieldError(field=field, message=_field_message(field, error), code=str(error.get("type", "invalid")))


def validate_submission(data: Any) -> SubmissionInput:
    """Validate arbitrary input against the submission schema.

    Accepts both ``horoscopeSign`` and ``horoscope_sign`` for the sign. Raises
    :class:`SubmissionValidationError` listing every offending field.
    """

    if isinstance(data, SubmissionInput):
        return data
    try:
        return SubmissionInput.model_validate(data)
    except ValidationError as exc:
        raise SubmissionValidationError([_translate_error(error) for error in exc.errors()]) from exc


__all__ = [
    "FieldError",
    "HOROSCOPE_SIGNS",
    "HOROSCOPE_SIGN_CODES",
    "HoroscopeSign",
    "MOOD_MAX_LENGTH",
    "SubmissionInput",
    "SubmissionValidationError",
    "validate_submission",
]
