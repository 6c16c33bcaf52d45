"""Record store: persistence of registrations and hand-off slots."""
import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from src.models.registration import Registration
from src.services.storage_service import delete_file, load_json, lock_file, save_json
from src.utils.exceptions import StorageError

logger = logging.getLogger(__name__)

REGISTRATIONS_KEY = "registrations"


class HandoffSlot:
    """Names of the single-record transient slots."""

    LAST_SUBMISSION = "lastSubmission"
    EDITING_SUBMISSION = "editingSubmission"

    ALL = (LAST_SUBMISSION, EDITING_SUBMISSION)


def _check_slot(slot: str) -> None:
    if slot not in HandoffSlot.ALL:
        raise ValueError(f"Unknown hand-off slot: {slot}")


def _parse_records(data) -> List[Registration]:
    """
    Convert persisted JSON into registrations.

    Malformed items are logged and skipped so one bad entry does not hide
    the rest of the collection.

    Raises:
        ValueError: If the top level is not a JSON array
    """
    if not isinstance(data, list):
        raise ValueError("Registrations must be stored as a JSON array")

    records = []
    for index, item in enumerate(data):
        try:
            records.append(Registration.from_dict(item))
        except (ValueError, TypeError) as e:
            logger.warning("Skipping malformed registration at index %d: %s", index, e)
    return records


class RecordStore(ABC):
    """
    Persistence contract for registrations.

    Holds the ordered collection of records plus two read-once hand-off
    slots (see HandoffSlot).
    """

    @abstractmethod
    def load_all(self) -> List[Registration]:
        """Return all records in stored order; absent or corrupt data reads as []."""

    @abstractmethod
    def save_all(self, records: Iterable[Registration]) -> None:
        """
        Replace the stored collection.

        Raises:
            StorageError: If the write fails; the previous collection is kept
        """

    @abstractmethod
    def set_handoff(self, slot: str, record: Optional[Registration]) -> None:
        """Store a record in a hand-off slot, or clear it when record is None."""

    @abstractmethod
    def take_handoff(self, slot: str) -> Optional[Registration]:
        """Read a hand-off slot and clear it."""


class JsonFileRecordStore(RecordStore):
    """Record store keeping each key as a JSON file in a data directory."""

    def __init__(self, data_dir: str, backup: bool = True):
        self.data_dir = data_dir
        self.backup = backup

    def _path(self, key: str) -> str:
        return os.path.join(self.data_dir, f"{key}.json")

    def load_all(self) -> List[Registration]:
        file_path = self._path(REGISTRATIONS_KEY)
        try:
            return _parse_records(load_json(file_path))
        except FileNotFoundError:
            return []
        except (ValueError, TypeError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning("Ignoring corrupt registration data in %s: %s", file_path, e)
            return []
        except OSError as e:
            logger.error("Cannot read registrations from %s: %s", file_path, e)
            return []

    def save_all(self, records: Iterable[Registration]) -> None:
        file_path = self._path(REGISTRATIONS_KEY)
        data = [record.to_dict() for record in records]
        try:
            with lock_file(file_path):
                save_json(file_path, data, backup=self.backup)
        except (TypeError, ValueError) as e:
            logger.error("Cannot serialize registrations: %s", e)
            raise StorageError(f"Cannot serialize registrations: {e}") from e
        except OSError as e:
            logger.error("Failed to save registrations to %s: %s", file_path, e)
            raise StorageError(f"Failed to save registrations: {e}") from e

    def set_handoff(self, slot: str, record: Optional[Registration]) -> None:
        _check_slot(slot)
        file_path = self._path(slot)
        try:
            if record is None:
                delete_file(file_path)
            else:
                save_json(file_path, record.to_dict(), backup=False)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Cannot serialize {slot}: {e}") from e
        except OSError as e:
            logger.error("Failed to write %s: %s", file_path, e)
            raise StorageError(f"Failed to write {slot}: {e}") from e

    def take_handoff(self, slot: str) -> Optional[Registration]:
        _check_slot(slot)
        file_path = self._path(slot)
        try:
            data = load_json(file_path)
        except FileNotFoundError:
            return None
        except (ValueError, OSError) as e:
            logger.warning("Discarding unreadable %s: %s", slot, e)
            data = None

        try:
            delete_file(file_path)
        except OSError as e:
            logger.error("Failed to clear %s: %s", file_path, e)
            raise StorageError(f"Failed to clear {slot}: {e}") from e

        if data is None:
            return None
        try:
            return Registration.from_dict(data)
        except (ValueError, TypeError) as e:
            logger.warning("Discarding malformed %s: %s", slot, e)
            return None


class InMemoryRecordStore(RecordStore):
    """Dict-backed record store holding serialized JSON, for tests and previews."""

    def __init__(self):
        self.entries: Dict[str, str] = {}

    def _dump(self, key: str, data) -> None:
        try:
            self.entries[key] = json.dumps(data, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Cannot serialize {key}: {e}") from e

    def load_all(self) -> List[Registration]:
        raw = self.entries.get(REGISTRATIONS_KEY)
        if raw is None:
            return []
        try:
            return _parse_records(json.loads(raw))
        except (ValueError, TypeError) as e:
            logger.warning("Ignoring corrupt registration data: %s", e)
            return []

    def save_all(self, records: Iterable[Registration]) -> None:
        self._dump(REGISTRATIONS_KEY, [record.to_dict() for record in records])

    def set_handoff(self, slot: str, record: Optional[Registration]) -> None:
        _check_slot(slot)
        if record is None:
            self.entries.pop(slot, None)
        else:
            self._dump(slot, record.to_dict())

    def take_handoff(self, slot: str) -> Optional[Registration]:
        _check_slot(slot)
        raw = self.entries.pop(slot, None)
        if raw is None:
            return None
        try:
            return Registration.from_dict(json.loads(raw))
        except (ValueError, TypeError) as e:
            logger.warning("Discarding malformed %s: %s", slot, e)
            return None
