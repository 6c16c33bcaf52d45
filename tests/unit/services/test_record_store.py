"""Unit tests for record store implementations."""
import pytest
import json
import os
from src.models.registration import Registration, RegistrationForm
from src.services.record_store import HandoffSlot, InMemoryRecordStore, JsonFileRecordStore
from src.services.registration_service import RegistrationWorkflow
from src.utils.exceptions import StorageError


def make_record(record_id, name="Jo Lee", course="data-science"):
    return Registration(
        id=record_id,
        full_name=name,
        email="jo@x.com",
        phone="5551234567",
        gender="female",
        course=course,
        address="1 Rd",
        submitted_at="2026-10-18T09:30:00.123Z",
    )


@pytest.fixture(params=["file", "memory"])
def store(request, tmp_path):
    """Both store implementations share the same contract."""
    if request.param == "file":
        return JsonFileRecordStore(str(tmp_path / "data"))
    return InMemoryRecordStore()


class TestRecordStoreContract:
    """Behaviour every record store must provide."""

    def test_empty_store_loads_empty_list(self, store):
        """Absent data reads as an empty collection."""
        assert store.load_all() == []

    def test_save_then_load_preserves_order(self, store):
        """Records come back in the order they were saved."""
        records = [make_record(3), make_record(1), make_record(2)]
        store.save_all(records)
        assert [r.id for r in store.load_all()] == [3, 1, 2]

    def test_save_load_is_idempotent(self, store):
        """saving what was loaded does not change the collection."""
        store.save_all([make_record(1), make_record(2, name="Sam")])
        before = store.load_all()

        store.save_all(store.load_all())

        assert store.load_all() == before

    def test_take_handoff_reads_once(self, store):
        """A hand-off slot is cleared on read."""
        record = make_record(5)
        store.set_handoff(HandoffSlot.LAST_SUBMISSION, record)

        assert store.take_handoff(HandoffSlot.LAST_SUBMISSION) == record
        assert store.take_handoff(HandoffSlot.LAST_SUBMISSION) is None

    def test_handoff_slots_are_independent(self, store):
        """Writing one slot does not affect the other."""
        store.set_handoff(HandoffSlot.EDITING_SUBMISSION, make_record(7))

        assert store.take_handoff(HandoffSlot.LAST_SUBMISSION) is None
        assert store.take_handoff(HandoffSlot.EDITING_SUBMISSION).id == 7

    def test_set_handoff_none_clears_slot(self, store):
        """Setting None empties the slot."""
        store.set_handoff(HandoffSlot.EDITING_SUBMISSION, make_record(7))
        store.set_handoff(HandoffSlot.EDITING_SUBMISSION, None)

        assert store.take_handoff(HandoffSlot.EDITING_SUBMISSION) is None

    def test_unknown_slot_raises_error(self, store):
        """Only the two known slots are accepted."""
        with pytest.raises(ValueError, match="Unknown hand-off slot"):
            store.set_handoff("somethingElse", make_record(1))
        with pytest.raises(ValueError, match="Unknown hand-off slot"):
            store.take_handoff("somethingElse")

    def test_handoff_does_not_touch_collection(self, store):
        """Hand-off slots are stored apart from the collection."""
        store.save_all([make_record(1)])
        store.set_handoff(HandoffSlot.LAST_SUBMISSION, make_record(2))

        assert [r.id for r in store.load_all()] == [1]


class TestJsonFileRecordStore:
    """File-specific behaviour."""

    def test_persisted_layout(self, tmp_path):
        """Each key is its own JSON file using camelCase fields."""
        store = JsonFileRecordStore(str(tmp_path))
        store.save_all([make_record(1)])
        store.set_handoff(HandoffSlot.LAST_SUBMISSION, make_record(1))

        registrations = json.loads((tmp_path / "registrations.json").read_text(encoding="utf-8"))
        assert registrations[0]["fullName"] == "Jo Lee"
        assert registrations[0]["submittedAt"] == "2026-10-18T09:30:00.123Z"
        assert (tmp_path / "lastSubmission.json").exists()

    def test_durable_across_instances(self, tmp_path):
        """A new store on the same directory sees saved data."""
        JsonFileRecordStore(str(tmp_path)).save_all([make_record(1)])
        assert JsonFileRecordStore(str(tmp_path)).load_all()[0].id == 1

    @pytest.mark.parametrize("content", ["[{broken", "{\"id\": 1}", "[{\"id\": 1}]", ""])
    def test_corrupt_collection_loads_empty(self, tmp_path, content):
        """Unparseable or malformed data reads as empty instead of raising."""
        (tmp_path / "registrations.json").write_text(content, encoding="utf-8")
        assert JsonFileRecordStore(str(tmp_path)).load_all() == []

    def test_malformed_record_is_skipped(self, tmp_path):
        """One bad record does not hide the valid ones."""
        bad = dict(make_record(2, name="B").to_dict(), phone=1234567890)
        data = [make_record(1, name="A").to_dict(), bad]
        (tmp_path / "registrations.json").write_text(json.dumps(data), encoding="utf-8")

        assert [r.full_name for r in JsonFileRecordStore(str(tmp_path)).load_all()] == ["A"]

    def test_create_keeps_valid_records_beside_malformed_one(self, tmp_path):
        """Saving after a partly malformed load keeps the good records."""
        bad = dict(make_record(2, name="B").to_dict(), phone=1234567890)
        data = [make_record(1, name="A").to_dict(), bad]
        (tmp_path / "registrations.json").write_text(json.dumps(data), encoding="utf-8")
        store = JsonFileRecordStore(str(tmp_path), backup=False)

        RegistrationWorkflow(store).submit(RegistrationForm.from_registration(make_record(3, name="Jo Lee")))

        assert [r.full_name for r in store.load_all()] == ["A", "Jo Lee"]

    def test_corrupt_handoff_is_discarded(self, tmp_path):
        """A malformed slot reads as None and is cleared."""
        (tmp_path / "editingSubmission.json").write_text("{\"id\": 1}", encoding="utf-8")
        store = JsonFileRecordStore(str(tmp_path))

        assert store.take_handoff(HandoffSlot.EDITING_SUBMISSION) is None
        assert not (tmp_path / "editingSubmission.json").exists()

    def test_failed_write_keeps_previous_collection(self, tmp_path, monkeypatch):
        """A write error raises StorageError and leaves prior data intact."""
        store = JsonFileRecordStore(str(tmp_path))
        store.save_all([make_record(1)])

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("src.services.storage_service.os.replace", broken_replace)

        with pytest.raises(StorageError, match="Failed to save registrations"):
            store.save_all([make_record(1), make_record(2)])

        monkeypatch.undo()
        assert [r.id for r in store.load_all()] == [1]
        assert not any(name.startswith(".tmp_") for name in os.listdir(tmp_path))

    def test_backup_written_when_enabled(self, tmp_path):
        """The previous collection is copied to a .backup file."""
        store = JsonFileRecordStore(str(tmp_path), backup=True)
        store.save_all([make_record(1)])
        store.save_all([make_record(1), make_record(2)])

        backup = json.loads((tmp_path / "registrations.json.backup").read_text(encoding="utf-8"))
        assert [item["id"] for item in backup] == [1]

    def test_no_backup_when_disabled(self, tmp_path):
        """No .backup file is written when backups are off."""
        store = JsonFileRecordStore(str(tmp_path), backup=False)
        store.save_all([make_record(1)])
        store.save_all([make_record(2)])

        assert not (tmp_path / "registrations.json.backup").exists()


class TestInMemoryRecordStore:
    """In-memory fake specifics."""

    def test_corrupt_entry_loads_empty(self):
        """Corrupt stored text reads as an empty collection."""
        store = InMemoryRecordStore()
        store.entries["registrations"] = "not json"
        assert store.load_all() == []

    def test_serialization_failure_raises_storage_error(self):
        """Unserializable values surface as StorageError and keep prior data."""
        store = InMemoryRecordStore()
        store.save_all([make_record(1)])

        bad = make_record(2)
        bad.address = object()

        with pytest.raises(StorageError):
            store.save_all([bad])

        assert [r.id for r in store.load_all()] == [1]
