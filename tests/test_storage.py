"""
Tests for the bill history storage backends.

Both backends share semantics, so most flows run against each of them.
"""

import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from billsplitter.models.audit import AuditEventBuilder
from billsplitter.models.bill import Bill, Item, Person
from billsplitter.services.storage import (
    CorruptHistoryError,
    InMemoryAuditStorage,
    InMemoryBillStorage,
    JsonFileBillStorage,
    StorageError,
)
from billsplitter.services.storage.serialization import (
    bills_from_json,
    bills_to_json,
    merge_history,
)


def _bill(name: str, bill_id: str = None) -> Bill:
    data = dict(
        name=name,
        people=[Person(id="p1", name="Alice")],
        items=[Item(name="Pizza", price=Decimal("12.50"), currency_code="EUR", assigned_to=["p1"])],
        tax=Decimal("1.25"),
        created_at=datetime(2024, 3, 10, 19, 30, tzinfo=timezone.utc),
    )
    if bill_id:
        data["id"] = bill_id
    return Bill(**data)


@pytest.fixture(params=["memory", "json"])
def storage(request, tmp_path):
    if request.param == "memory":
        return InMemoryBillStorage(history_limit=3)
    return JsonFileBillStorage(tmp_path / "history.json", history_limit=3)


class TestSerialization:
    """Tests for history JSON helpers."""

    def test_round_trip_preserves_bill(self):
        bill = _bill("Dinner")
        [restored] = bills_from_json(bills_to_json([bill]))
        assert restored == bill
        assert isinstance(restored.created_at, datetime)
        assert restored.items[0].price == Decimal("12.50")

    def test_json_is_an_array(self):
        data = json.loads(bills_to_json([_bill("Dinner")]))
        assert isinstance(data, list)
        assert data[0]["name"] == "Dinner"

    def test_empty_text_is_empty_history(self):
        assert bills_from_json("") == []

    def test_invalid_json_is_corrupt(self):
        with pytest.raises(CorruptHistoryError):
            bills_from_json("{not json")

    def test_invalid_bill_is_corrupt(self):
        with pytest.raises(CorruptHistoryError):
            bills_from_json('[{"name": "Bad", "tax": "-1"}]')

    def test_merge_keeps_first_occurrence(self):
        old = _bill("Old", bill_id="same")
        new = _bill("New", bill_id="same")
        other = _bill("Other", bill_id="other")
        merged = merge_history([new], [old, other])
        assert [b.name for b in merged] == ["New", "Other"]

    def test_merge_limit(self):
        bills = [_bill(f"B{i}") for i in range(5)]
        assert len(merge_history(bills[:2], bills[2:], limit=3)) == 3


class TestBillHistoryStorage:
    """Flow tests run against every backend."""

    @pytest.mark.asyncio
    async def test_save_and_get(self, storage):
        bill = _bill("Dinner")
        assert await storage.save_bill(bill) is True
        assert await storage.get_bill(bill.id) == bill
        assert await storage.get_bill("missing") is None

    @pytest.mark.asyncio
    async def test_history_newest_first(self, storage):
        first = _bill("First")
        second = _bill("Second")
        await storage.save_bill(first)
        await storage.save_bill(second)
        assert [b.name for b in await storage.load_history()] == ["Second", "First"]

    @pytest.mark.asyncio
    async def test_resave_moves_to_front(self, storage):
        """Test saving an archived id again replaces it at the front."""
        bill = _bill("Dinner", bill_id="b1")
        await storage.save_bill(bill)
        await storage.save_bill(_bill("Lunch"))
        await storage.save_bill(_bill("Dinner again", bill_id="b1"))

        history = await storage.load_history()
        assert [b.name for b in history] == ["Dinner again", "Lunch"]

    @pytest.mark.asyncio
    async def test_history_limit_enforced(self, storage):
        for i in range(5):
            await storage.save_bill(_bill(f"Bill {i}"))
        history = await storage.load_history()
        assert [b.name for b in history] == ["Bill 4", "Bill 3", "Bill 2"]

    @pytest.mark.asyncio
    async def test_load_with_limit(self, storage):
        for i in range(3):
            await storage.save_bill(_bill(f"Bill {i}"))
        assert len(await storage.load_history(limit=1)) == 1

    @pytest.mark.asyncio
    async def test_delete(self, storage):
        bill = _bill("Dinner")
        await storage.save_bill(bill)
        assert await storage.delete_bill(bill.id) is True
        assert await storage.load_history() == []
        assert await storage.delete_bill(bill.id) is False

    @pytest.mark.asyncio
    async def test_export_import(self, storage):
        """Test imported bills go first and duplicates are dropped."""
        existing = _bill("Existing", bill_id="e1")
        await storage.save_bill(existing)

        payload = bills_to_json([_bill("Imported", bill_id="i1"), _bill("Stale copy", bill_id="e1")])
        added = await storage.import_json(payload)

        assert added == 1
        assert await storage.count_bills() == 2
        assert [b.name for b in await storage.load_history()] == ["Imported", "Stale copy"]

        exported = json.loads(await storage.export_json())
        assert [b["id"] for b in exported] == ["i1", "e1"]

    @pytest.mark.asyncio
    async def test_import_beyond_window(self, storage):
        """Test imports are not trimmed and only new ids count as added."""
        bills = [_bill(f"Bill {i}", bill_id=f"b{i}") for i in range(5)]
        assert await storage.import_json(bills_to_json(bills)) == 5
        assert await storage.count_bills() == 5
        assert len(await storage.load_history()) == 3

        # b4 is stored but outside the window
        assert await storage.import_json(bills_to_json([bills[4]])) == 0
        assert await storage.count_bills() == 5

    @pytest.mark.asyncio
    async def test_load_with_zero_limit(self, storage):
        """Test an explicit limit of 0 is honoured, not replaced by the window."""
        await storage.save_bill(_bill("Dinner"))
        assert await storage.load_history(limit=0) == []

    @pytest.mark.asyncio
    async def test_import_invalid_data(self, storage):
        with pytest.raises(CorruptHistoryError):
            await storage.import_json("[1, 2, 3]")

    @pytest.mark.asyncio
    async def test_empty_history(self, storage):
        assert await storage.load_history() == []
        assert json.loads(await storage.export_json()) == []


class TestJsonFileBillStorage:
    """Tests specific to the JSON file backend."""

    @pytest.mark.asyncio
    async def test_history_survives_new_instance(self, tmp_path):
        path = tmp_path / "history.json"
        bill = _bill("Dinner")
        await JsonFileBillStorage(path).save_bill(bill)

        reopened = JsonFileBillStorage(path)
        assert await reopened.get_bill(bill.id) == bill

    @pytest.mark.asyncio
    async def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "history.json"
        await JsonFileBillStorage(path).save_bill(_bill("Dinner"))
        assert path.exists()
        assert not path.with_name("history.json.tmp").exists()

    @pytest.mark.asyncio
    async def test_corrupt_file(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text("this is not json", encoding="utf-8")
        with pytest.raises(CorruptHistoryError):
            await JsonFileBillStorage(path).load_history()

    @pytest.mark.asyncio
    async def test_unreadable_path_raises_storage_error(self, tmp_path):
        """Test OS errors surface as StorageError once retries are exhausted."""
        with pytest.raises(StorageError, match="Could not read bill history"):
            await JsonFileBillStorage(tmp_path).load_history()

    def test_path_from_settings(self, monkeypatch, tmp_path):
        path = tmp_path / "configured.json"
        monkeypatch.setenv("BILLSPLIT_STORAGE_HISTORY_PATH", str(path))
        assert JsonFileBillStorage().path == path


class TestInMemoryAuditStorage:
    """Tests for the in-memory audit sink."""

    @pytest.mark.asyncio
    async def test_recent_events_newest_first(self):
        storage = InMemoryAuditStorage()
        first = AuditEventBuilder.bill_deleted(bill_id="b1")
        second = AuditEventBuilder.bill_deleted(bill_id="b2")
        await storage.append_event(first)
        await storage.append_event(second)

        recent = await storage.get_recent_events(limit=1)
        assert [e.entity_id for e in recent] == ["b2"]
        assert len(storage.events) == 2
