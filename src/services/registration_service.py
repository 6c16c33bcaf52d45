"""Registration service: form workflow for creating and editing applications."""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable, List, Optional, Set

from src.models.registration import Registration, RegistrationForm
from src.services.navigation import Destination, EditRequest, Navigation
from src.services.record_store import HandoffSlot, RecordStore
from src.utils.date_utils import epoch_millis, now_utc, to_iso
from src.utils.exceptions import (
    NavigationPreconditionError,
    RecordNotFoundError,
    StorageError,
    ValidationError,
)
from src.utils.validation import FIELD_ORDER, first_invalid_field, validate_registration

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


@dataclass(frozen=True)
class InvalidPulse:
    """UI cue for a field that failed validation on a given submit attempt."""

    field: str
    attempt: int


@dataclass
class SubmitResult:
    """Outcome of a submit: either failures or a saved record plus navigation."""

    failures: Set[str] = field(default_factory=set)
    first_invalid: Optional[str] = None
    events: List[InvalidPulse] = field(default_factory=list)
    record: Optional[Registration] = None
    navigation: Optional[Navigation] = None

    @property
    def ok(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> None:
        """Raise ValidationError if the submit was rejected."""
        if self.failures:
            raise ValidationError(self.failures, self.first_invalid)


def next_registration_id(records: Iterable[Registration], moment: datetime) -> int:
    """
    Generate a new registration ID.

    Uses the creation time in epoch milliseconds, bumped past the largest
    existing ID so IDs stay unique and increasing even if the clock repeats
    or goes backwards.
    """
    candidate = epoch_millis(moment)
    existing = [record.id for record in records]
    if existing and candidate <= max(existing):
        candidate = max(existing) + 1
    return candidate


class RegistrationWorkflow:
    """
    Form state machine with Create and Edit modes.

    The workflow starts in Create mode; initialize() switches to Edit mode
    when an edit request is pending.
    """

    def __init__(self, store: RecordStore, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.clock = clock or now_utc
        self.mode = Mode.CREATE
        self.editing_id: Optional[int] = None
        self.form = RegistrationForm()
        self._attempts = 0

    @property
    def is_editing(self) -> bool:
        return self.mode == Mode.EDIT

    def initialize(self, edit_request: Optional[EditRequest] = None) -> RegistrationForm:
        """
        Prepare the form, consuming a pending edit request.

        Args:
            edit_request: Payload attached to the navigation, if any

        Returns:
            The form to render, pre-filled in Edit mode

        Behavior:
            - The editingSubmission slot is always cleared, so a request is
              applied at most once
            - An explicit edit_request wins over the stored slot
        """
        stored = self.store.take_handoff(HandoffSlot.EDITING_SUBMISSION)
        record = edit_request.record if edit_request is not None else stored

        if record is None:
            self.mode = Mode.CREATE
            self.editing_id = None
            self.form = RegistrationForm()
        else:
            self.mode = Mode.EDIT
            self.editing_id = record.id
            self.form = RegistrationForm.from_registration(record)
            logger.info("Editing registration %s", record.id)

        return self.form

    def switch_to_create(self) -> None:
        """Leave Edit mode, keeping the current form values."""
        self.mode = Mode.CREATE
        self.editing_id = None

    def cancel_edit(self) -> RegistrationForm:
        """Leave Edit mode and start over with an empty form."""
        self.switch_to_create()
        self.form = RegistrationForm()
        logger.info("Edit cancelled")
        return self.form

    def submit(self, form: RegistrationForm) -> SubmitResult:
        """
        Validate and save the form.

        Args:
            form: Submitted form values

        Returns:
            SubmitResult with failures (nothing saved) or the saved record
            and a navigation to the confirmation page

        Raises:
            RecordNotFoundError: In Edit mode, if the record was deleted
                meanwhile; nothing is written
            StorageError: If the collection cannot be saved; a failed
                lastSubmission write after a successful save is only logged
        """
        self.form = form
        failures = validate_registration(form)
        if failures:
            self._attempts += 1
            events = [
                InvalidPulse(field=name, attempt=self._attempts)
                for name in FIELD_ORDER
                if name in failures
            ]
            return SubmitResult(
                failures=failures,
                first_invalid=first_invalid_field(failures),
                events=events,
            )

        moment = self.clock()
        submitted_at = to_iso(moment)
        records = self.store.load_all()

        if self.is_editing:
            record = self._update(records, form, submitted_at)
        else:
            record = self._create(records, form, moment)

        try:
            self.store.set_handoff(HandoffSlot.LAST_SUBMISSION, record)
        except StorageError:
            # The record is saved; the navigation payload still carries it
            logger.exception("Failed to write last submission for registration %s", record.id)
        self.switch_to_create()

        return SubmitResult(
            record=record,
            navigation=Navigation(Destination.CONFIRMATION, payload=record),
        )

    def _create(self, records: List[Registration], form: RegistrationForm, moment: datetime) -> Registration:
        record = Registration(
            id=next_registration_id(records, moment),
            submitted_at=to_iso(moment),
            **vars(form),
        )
        self.store.save_all(records + [record])
        logger.info("Created registration %s", record.id)
        return record

    def _update(self, records: List[Registration], form: RegistrationForm, submitted_at: str) -> Registration:
        updated = None
        new_records = []
        for existing in records:
            if existing.id == self.editing_id:
                updated = existing.with_form(form, submitted_at)
                new_records.append(updated)
            else:
                new_records.append(existing)

        if updated is None:
            logger.warning("Registration %s no longer exists, update rejected", self.editing_id)
            raise RecordNotFoundError(self.editing_id)

        self.store.save_all(new_records)
        logger.info("Updated registration %s", updated.id)
        return updated


def take_last_submission(store: RecordStore, payload: Optional[Registration] = None) -> Registration:
    """
    Get the record to show on the confirmation page.

    Args:
        store: Record store holding the lastSubmission slot
        payload: Record attached to the navigation, if any

    Returns:
        The submitted registration

    Raises:
        NavigationPreconditionError: If there is nothing to confirm

    Behavior:
        - The lastSubmission slot is cleared either way
    """
    stored = store.take_handoff(HandoffSlot.LAST_SUBMISSION)
    record = payload if payload is not None else stored
    if record is None:
        raise NavigationPreconditionError("No submission to confirm")
    return record
