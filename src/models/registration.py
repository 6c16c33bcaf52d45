"""Registration data model for course applications."""
from dataclasses import dataclass, replace
from typing import Any, Dict

from src.utils.date_utils import parse_iso

GENDER_OPTIONS = {
    "male": "Male",
    "female": "Female",
    "other": "Other",
}

COURSE_OPTIONS = {
    "web-development": "Web Development",
    "data-science": "Data Science",
    "mobile-app": "Mobile App Development",
    "ui-ux-design": "UI/UX Design",
    "digital-marketing": "Digital Marketing",
}

# Python attribute → persisted JSON key
JSON_KEYS = {
    "id": "id",
    "full_name": "fullName",
    "email": "email",
    "phone": "phone",
    "gender": "gender",
    "course": "course",
    "address": "address",
    "submitted_at": "submittedAt",
}

FORM_FIELDS = ("full_name", "email", "phone", "gender", "course", "address")


@dataclass
class RegistrationForm:
    """User-editable fields of the application form."""

    full_name: str = ""
    email: str = ""
    phone: str = ""
    gender: str = ""
    course: str = ""
    address: str = ""

    @classmethod
    def from_registration(cls, registration: "Registration") -> "RegistrationForm":
        """Pre-fill the form from a stored registration."""
        return cls(**{name: getattr(registration, name) for name in FORM_FIELDS})

    def to_dict(self) -> Dict[str, str]:
        """Form values keyed by JSON field name."""
        return {JSON_KEYS[name]: getattr(self, name) for name in FORM_FIELDS}


@dataclass
class Registration:
    """One applicant's submitted registration."""

    id: int
    full_name: str
    email: str
    phone: str
    gender: str
    course: str
    address: str
    submitted_at: str  # ISO 8601 format

    def __post_init__(self):
        """Validate registration data."""
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            raise ValueError(f"Registration id must be an integer: {self.id!r}")

        for name in FORM_FIELDS:
            if not isinstance(getattr(self, name), str):
                raise ValueError(f"Field {JSON_KEYS[name]} must be a string")

        # Raises ValueError on a malformed timestamp
        parse_iso(self.submitted_at)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Registration":
        """
        Build a registration from its persisted JSON object.

        Raises:
            ValueError: If a key is missing or a value has the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError("Registration data must be a dictionary")

        missing = [key for key in JSON_KEYS.values() if key not in data]
        if missing:
            raise ValueError(f"Missing required field: {missing[0]}")

        return cls(**{name: data[key] for name, key in JSON_KEYS.items()})

    def to_dict(self) -> Dict[str, Any]:
        """Persisted JSON representation."""
        return {key: getattr(self, name) for name, key in JSON_KEYS.items()}

    def with_form(self, form: RegistrationForm, submitted_at: str) -> "Registration":
        """Return a copy with form fields merged over this record, keeping the id."""
        values = {name: getattr(form, name) for name in FORM_FIELDS}
        return replace(self, submitted_at=submitted_at, **values)

    @property
    def gender_label(self) -> str:
        return GENDER_OPTIONS.get(self.gender, self.gender)

    @property
    def course_label(self) -> str:
        return COURSE_OPTIONS.get(self.course, self.course)
