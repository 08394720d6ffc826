# contact_relay/lib/validation.py
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel

MAX_NAME_LENGTH = 100
MAX_MESSAGE_LENGTH = 1000

# one "@", a dot in the domain part, no whitespace anywhere
EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


class ContactFieldError(str, Enum):
    MISSING_FIELD = "MissingField"
    INVALID_NAME = "InvalidName"
    INVALID_EMAIL = "InvalidEmail"
    INVALID_MESSAGE = "InvalidMessage"


ERROR_MESSAGES = {
    ContactFieldError.MISSING_FIELD: "All fields are required",
    ContactFieldError.INVALID_NAME: "Invalid name",
    ContactFieldError.INVALID_EMAIL: "Invalid email",
    ContactFieldError.INVALID_MESSAGE: "Invalid message",
}


class ContactSubmission(BaseModel):
    name: str
    email: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    code: Optional[ContactFieldError] = None

    @property
    def error(self) -> Optional[str]:
        return ERROR_MESSAGES[self.code] if self.code else None


VALID = ValidationResult(is_valid=True)


def _invalid(code: ContactFieldError) -> ValidationResult:
    return ValidationResult(is_valid=False, code=code)


def _is_blank(value: Any) -> bool:
    # only null, false, "", 0 and NaN count as absent; [] and {} are present values
    if value is None or value is False or value == "":
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or value != value
    return False


def validate_contact(data: Any) -> ValidationResult:
    """Check a raw contact payload; the first failing check wins."""
    if not isinstance(data, dict):
        return _invalid(ContactFieldError.MISSING_FIELD)

    name = data.get("name")
    email = data.get("email")
    message = data.get("message")

    if _is_blank(name) or _is_blank(email) or _is_blank(message):
        return _invalid(ContactFieldError.MISSING_FIELD)

    if not isinstance(name, str) or len(name) > MAX_NAME_LENGTH:
        return _invalid(ContactFieldError.INVALID_NAME)

    if not isinstance(email, str) or not EMAIL_RE.fullmatch(email):
        return _invalid(ContactFieldError.INVALID_EMAIL)

    if not isinstance(message, str) or len(message) > MAX_MESSAGE_LENGTH:
        return _invalid(ContactFieldError.INVALID_MESSAGE)

    return VALID


def to_submission(data: dict) -> ContactSubmission:
    return ContactSubmission(name=data["name"], email=data["email"], message=data["message"])
