"""Navigation signals passed from workflows to the page router."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from src.models.registration import Registration


class Destination(str, Enum):
    """Pages the router can show."""

    REGISTRATION = "registration"
    CONFIRMATION = "confirmation"
    SUBMISSIONS = "submissions"


@dataclass(frozen=True)
class EditRequest:
    """Payload asking the registration page to edit a stored record."""

    record: Registration


@dataclass(frozen=True)
class Navigation:
    """
    A requested page transition.

    payload travels with the transition and is handed to the target page
    once: a Registration for CONFIRMATION, an EditRequest for REGISTRATION.
    """

    destination: Destination
    payload: Optional[Any] = None
