"""Registration form validation utilities."""
import re
from typing import Any, Iterable, Mapping, Optional, Set, Union

from src.models.registration import COURSE_OPTIONS, GENDER_OPTIONS, RegistrationForm

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PHONE_PATTERN = re.compile(r"[0-9]{10}")
PHONE_SEPARATORS = re.compile(r"[-\s]")

# Declared form order; decides which failing field gets focus.
FIELD_ORDER = ("fullName", "email", "phone", "gender", "course", "address")

FIELD_ERROR_MESSAGES = {
    "fullName": "Please enter your full name",
    "email": "Please enter a valid email address",
    "phone": "Please enter a valid 10-digit phone number",
    "gender": "Please select your gender",
    "course": "Please select a course",
    "address": "Please enter your address",
}

_SNAKE_CASE_KEYS = {
    "fullName": "full_name",
}


def is_blank(value: Any) -> bool:
    """Return True if value is missing or empty after trimming whitespace."""
    return value is None or not str(value).strip()


def normalize_phone(phone: str) -> str:
    """
    Strip hyphens and whitespace from a phone number.

    Example: "123-456 7890" → "1234567890"
    """
    return PHONE_SEPARATORS.sub("", "" if phone is None else str(phone))


def validate_email(email: str) -> bool:
    """
    Validate email address.

    Args:
        email: Email address to validate

    Returns:
        True if the address is non-empty and looks like local@domain.tld
    """
    if is_blank(email):
        return False
    return EMAIL_PATTERN.fullmatch(str(email)) is not None


def validate_phone(phone: str) -> bool:
    """
    Validate phone number.

    Args:
        phone: Phone number, hyphens and spaces allowed

    Returns:
        True if exactly 10 decimal digits remain after removing separators
    """
    if is_blank(phone):
        return False
    return PHONE_PATTERN.fullmatch(normalize_phone(phone)) is not None


def _field_value(form: Union[RegistrationForm, Mapping[str, Any]], field: str) -> Any:
    if isinstance(form, RegistrationForm):
        return getattr(form, _SNAKE_CASE_KEYS.get(field, field))
    if field in form:
        return form[field]
    return form.get(_SNAKE_CASE_KEYS.get(field, field))


def validate_registration(form: Union[RegistrationForm, Mapping[str, Any]]) -> Set[str]:
    """
    Validate registration form data.

    Args:
        form: RegistrationForm or mapping keyed by form field names
            (camelCase or snake_case)

    Returns:
        Set of failing field names; empty set means the form is valid.

    Behavior:
        - Every rule is checked, failures are collected rather than
          short-circuited
        - Missing or None values count as empty
        - Pure: no side effects
    """
    failures = set()

    if is_blank(_field_value(form, "fullName")):
        failures.add("fullName")

    if not validate_email(_field_value(form, "email")):
        failures.add("email")

    if not validate_phone(_field_value(form, "phone")):
        failures.add("phone")

    if _field_value(form, "gender") not in GENDER_OPTIONS:
        failures.add("gender")

    if _field_value(form, "course") not in COURSE_OPTIONS:
        failures.add("course")

    if is_blank(_field_value(form, "address")):
        failures.add("address")

    return failures


def first_invalid_field(failures: Iterable[str]) -> Optional[str]:
    """Return the first failing field in form order, or None if valid."""
    failing = set(failures)
    for field in FIELD_ORDER:
        if field in failing:
            return field
    return None
