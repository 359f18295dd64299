# tests/test_ticket_store.py
"""Unit tests for the key-value ticket store."""

import json
import pytest
from unittest.mock import MagicMock
from datetime import datetime, timedelta, timezone
from sqlalchemy.exc import OperationalError
from ticket_parking.models.kv_entry import KeyValueEntry
from ticket_parking.schemas.ticket import Ticket, TicketStatus
from ticket_parking.services.errors import TicketStorageError
from ticket_parking.storage.ticket_store import TicketStore

ACTIVE = "@test:active"
HISTORY = "@test:history"
T0 = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)


def make_active(ticket_id="a-1"):
    return Ticket(id=ticket_id, parking_name="Marché Central", price_per_hour=150,
                  entry_time=T0, status=TicketStatus.ACTIVE)


def make_closed(ticket_id="c-1"):
    return make_active(ticket_id).closed(T0 + timedelta(minutes=95), 300)


class TestTicketStore:
    def test_missing_key_reads_empty(self, db):
        assert TicketStore(db).get(ACTIVE) == []

    def test_round_trip_keeps_every_field(self, db):
        tickets = [make_active(), make_closed()]
        store = TicketStore(db)

        assert store.set(ACTIVE, tickets) is True
        loaded = TicketStore(db).get(ACTIVE)

        assert loaded == tickets
        assert loaded[0].status == TicketStatus.ACTIVE
        assert loaded[0].exit_time is None and loaded[0].total_amount is None
        assert loaded[1].status == TicketStatus.CLOSED
        assert loaded[1].exit_time == T0 + timedelta(minutes=95)
        assert loaded[1].total_amount == 300

    def test_active_ticket_stored_without_exit_fields(self, db):
        TicketStore(db).set(ACTIVE, [make_active()])
        raw = json.loads(db.get(KeyValueEntry, ACTIVE).value)

        assert set(raw[0]) == {"id", "parkingName", "pricePerHour", "entryTime", "status"}
        assert raw[0]["status"] == "active"

    def test_set_overwrites_previous_value(self, db):
        store = TicketStore(db)
        store.set(ACTIVE, [make_active("a-1"), make_active("a-2")])
        store.set(ACTIVE, [make_active("a-2")])

        assert [t.id for t in store.get(ACTIVE)] == ["a-2"]

    def test_set_many_writes_both_keys(self, db):
        store = TicketStore(db)
        assert store.set_many({ACTIVE: [], HISTORY: [make_closed()]}) is True

        assert store.get(ACTIVE) == []
        assert [t.id for t in store.get(HISTORY)] == ["c-1"]

    def test_corrupt_payload_raises_storage_error(self, db):
        db.add(KeyValueEntry(key=ACTIVE, value="{not json"))
        db.commit()

        with pytest.raises(TicketStorageError):
            TicketStore(db).get(ACTIVE)

    def test_payload_breaking_invariants_is_rejected(self, db):
        record = make_active().model_dump(mode="json", by_alias=True, exclude_none=True)
        record["totalAmount"] = 100   # active tickets never carry an amount
        db.add(KeyValueEntry(key=ACTIVE, value=json.dumps([record])))
        db.commit()

        with pytest.raises(TicketStorageError):
            TicketStore(db).get(ACTIVE)

    def test_commit_failure_returns_false_and_rolls_back(self):
        db = MagicMock()
        db.get.return_value = None
        db.commit.side_effect = OperationalError("UPDATE", {}, Exception("disk I/O error"))

        assert TicketStore(db).set_many({ACTIVE: [], HISTORY: [make_closed()]}) is False
        db.rollback.assert_called_once()

    def test_read_failure_raises_storage_error(self):
        db = MagicMock()
        db.get.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))

        with pytest.raises(TicketStorageError):
            TicketStore(db).get(ACTIVE)
