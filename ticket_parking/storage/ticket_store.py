# ticket_parking/storage/ticket_store.py
"""
Key-value persistence for ticket collections.

Each collection (active, history) is a JSON array of camelCase ticket
records stored under its own key in the `kv_store` table. Optional fields
are omitted when empty, so an active ticket round-trips without
exitTime/totalAmount.

Contract:
  get(key)          → list of Ticket, [] if the key was never written
  set(key, tickets) → True on commit, False on failure
  set_many({...})   → writes several keys in ONE transaction (all or nothing)
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from pydantic import TypeAdapter, ValidationError

from ticket_parking.models.kv_entry import KeyValueEntry
from ticket_parking.schemas.ticket import Ticket
from ticket_parking.services.errors import TicketStorageError
from ticket_parking.utils.clock import utc_now
from ticket_parking.utils.logger import get_logger

logger = get_logger(__name__)

_TICKET_LIST = TypeAdapter(list[Ticket])


def encode_tickets(tickets) -> str:
    return _TICKET_LIST.dump_json(list(tickets), by_alias=True, exclude_none=True).decode("utf-8")


def decode_tickets(payload) -> list[Ticket]:
    return _TICKET_LIST.validate_json(payload)


class TicketStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> list[Ticket]:
        try:
            row = self.db.get(KeyValueEntry, key)
        except SQLAlchemyError as e:
            logger.error(f"[STORE] Read failed for {key}: {e}", exc_info=True)
            raise TicketStorageError(f"Could not read {key}") from e

        if row is None:
            return []
        try:
            return decode_tickets(row.value)
        except ValidationError as e:
            logger.error(f"[STORE] Corrupt payload under {key}: {e.error_count()} error(s)")
            raise TicketStorageError(f"Stored tickets under {key} are unreadable") from e

    def set(self, key: str, tickets) -> bool:
        return self.set_many({key: tickets})

    def set_many(self, collections: dict) -> bool:
        """Replace every given key's ticket list in a single commit."""
        now = utc_now()
        try:
            for key, tickets in collections.items():
                payload = encode_tickets(tickets)
                row = self.db.get(KeyValueEntry, key)
                if row is None:
                    self.db.add(KeyValueEntry(key=key, value=payload, updated_at=now))
                else:
                    row.value = payload
                    row.updated_at = now
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[STORE] Write failed for {sorted(collections)}: {e}", exc_info=True)
            return False
        return True
