"""Listing service: browse, search, delete and hand off registrations for editing."""
import logging
from typing import Iterable, List

from src.models.registration import Registration
from src.services.navigation import Destination, EditRequest, Navigation
from src.services.record_store import HandoffSlot, RecordStore

logger = logging.getLogger(__name__)


def matches_term(record: Registration, term: str) -> bool:
    """
    Check whether any field of a registration contains the search term.

    Text fields are compared case-insensitively; phone is compared raw.
    """
    needle = term.lower()
    return (
        needle in record.full_name.lower()
        or needle in record.email.lower()
        or term in record.phone
        or needle in record.gender.lower()
        or needle in record.course.lower()
        or needle in record.address.lower()
    )


def filter_registrations(records: Iterable[Registration], term: str) -> List[Registration]:
    """
    Filter registrations by search term.

    Args:
        records: Full collection, in stored order
        term: Search text; blank matches everything

    Returns:
        Matching registrations in their original order
    """
    records = list(records)
    if not term or not term.strip():
        return records
    return [record for record in records if matches_term(record, term)]


class ListingWorkflow:
    """Search view over all stored registrations."""

    def __init__(self, store: RecordStore):
        self.store = store
        self.records: List[Registration] = []
        self.search_term = ""
        self.results: List[Registration] = []

    @property
    def total(self) -> int:
        return len(self.records)

    def load_all(self) -> List[Registration]:
        """Reload the collection and re-apply the current search term."""
        self.records = self.store.load_all()
        self.results = filter_registrations(self.records, self.search_term)
        return self.results

    def search(self, term: str) -> List[Registration]:
        """Filter the full collection by term."""
        self.search_term = term or ""
        self.results = filter_registrations(self.records, self.search_term)
        return self.results

    def delete(self, record_id: int) -> bool:
        """
        Delete a registration by ID.

        Returns:
            True if a record was removed, False if the ID was not found

        Raises:
            StorageError: If the reduced collection cannot be saved
        """
        self.records = self.store.load_all()
        remaining = [record for record in self.records if record.id != record_id]

        if len(remaining) == len(self.records):
            self.results = filter_registrations(self.records, self.search_term)
            logger.info("Registration %s not found, nothing deleted", record_id)
            return False

        self.store.save_all(remaining)
        self.records = remaining
        self.results = filter_registrations(self.records, self.search_term)
        logger.info("Deleted registration %s", record_id)
        return True

    def edit_request(self, record: Registration) -> Navigation:
        """Hand a registration to the form page for editing."""
        self.store.set_handoff(HandoffSlot.EDITING_SUBMISSION, record)
        return Navigation(Destination.REGISTRATION, payload=EditRequest(record))
