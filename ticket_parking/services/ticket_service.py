# ticket_parking/services/ticket_service.py
"""
Ticket lifecycle: open → active → closed (terminal) → optionally deleted.

  - open_ticket   validates input, appends an active ticket to the active collection
  - close_ticket  bills the stay and moves the ticket active → history
  - delete_history_ticket removes a closed ticket from history (idempotent)

Both collections live in the key-value store (see storage/ticket_store.py).
Closing writes both collections in one transaction, so a ticket is never left
in neither collection. Failed writes raise TicketStorageError; nothing is retried.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ticket_parking.config import settings
from ticket_parking.schemas.ticket import Ticket, TicketStatus
from ticket_parking.services.billing import LiveCharge, current_due, duration, format_duration, price
from ticket_parking.services.errors import (
    TicketNotFoundError,
    TicketStorageError,
    TicketValidationError,
)
from ticket_parking.storage.ticket_store import TicketStore
from ticket_parking.utils.clock import ensure_utc, utc_now
from ticket_parking.utils.ids import generate_id
from ticket_parking.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class HistoryStats:
    total_tickets: int
    total_amount: int


def validate_new_ticket(parking_name, price_per_hour) -> tuple:
    """Return the cleaned (name, price) pair or raise TicketValidationError."""
    if not isinstance(parking_name, str) or not parking_name.strip():
        raise TicketValidationError("Parking name is required")

    if price_per_hour is None:
        price_per_hour = settings.DEFAULT_PRICE_PER_HOUR
    elif isinstance(price_per_hour, str):
        text = price_per_hour.strip()
        if not (text.isascii() and text.isdigit()):
            raise TicketValidationError(f"Price per hour must be a whole number, got {price_per_hour!r}")
        price_per_hour = int(text)
    elif isinstance(price_per_hour, bool) or not isinstance(price_per_hour, int):
        raise TicketValidationError(f"Price per hour must be a whole number, got {price_per_hour!r}")

    if price_per_hour <= 0:
        raise TicketValidationError("Price per hour must be greater than 0")
    return parking_name.strip(), price_per_hour


def _find(tickets, ticket_id: str) -> Optional[Ticket]:
    return next((t for t in tickets if t.id == ticket_id), None)


def open_ticket(db: Session, parking_name, price_per_hour=None,
                entry_time: Optional[datetime] = None,
                clock=utc_now, new_id=generate_id) -> Ticket:
    name, rate = validate_new_ticket(parking_name, price_per_hour)
    store = TicketStore(db)
    active = store.get(settings.ACTIVE_TICKETS_KEY)
    history = store.get(settings.HISTORY_TICKETS_KEY)

    ticket_id = new_id()
    if _find(active, ticket_id) or _find(history, ticket_id):
        raise TicketValidationError(f"Ticket id {ticket_id} is already in use")

    ticket = Ticket(
        id=ticket_id,
        parking_name=name,
        price_per_hour=rate,
        entry_time=ensure_utc(entry_time) if entry_time else clock(),
        status=TicketStatus.ACTIVE,
    )
    if not store.set(settings.ACTIVE_TICKETS_KEY, active + [ticket]):
        raise TicketStorageError(f"Could not save new ticket for {name}")

    logger.info(f"[OPEN] {ticket.id} | {name} | {rate} {settings.CURRENCY}/h | entry={ticket.entry_time.isoformat()}")
    return ticket


def close_ticket(db: Session, ticket_id: str,
                 exit_time: Optional[datetime] = None, clock=utc_now) -> Ticket:
    store = TicketStore(db)
    active = store.get(settings.ACTIVE_TICKETS_KEY)
    ticket = _find(active, ticket_id)
    if ticket is None:
        logger.warning(f"[CLOSE] {ticket_id} is not an active ticket")
        raise TicketNotFoundError(ticket_id)

    exit_time = ensure_utc(exit_time) if exit_time else clock()
    if exit_time < ticket.entry_time:
        raise TicketValidationError(
            f"Exit time {exit_time.isoformat()} is before entry time {ticket.entry_time.isoformat()}"
        )

    closed = ticket.closed(exit_time, price(ticket.entry_time, exit_time, ticket.price_per_hour))
    history = store.get(settings.HISTORY_TICKETS_KEY)
    if _find(history, ticket_id):
        # Ids are unique across both collections; never overwrite a billed record
        logger.error(f"[CLOSE] {ticket_id} is both active and in history — refusing to close")
        raise TicketStorageError(f"Ticket {ticket_id} already has a history record")

    moved = store.set_many({
        settings.ACTIVE_TICKETS_KEY: [t for t in active if t.id != ticket_id],
        settings.HISTORY_TICKETS_KEY: history + [closed],
    })
    if not moved:
        raise TicketStorageError(f"Could not close ticket {ticket_id}")

    minutes = duration(closed.entry_time, closed.exit_time)
    logger.info(
        f"[CLOSE] {ticket_id} | {closed.parking_name} | {format_duration(minutes)} "
        f"| {closed.total_amount} {settings.CURRENCY}"
    )
    return closed


def delete_history_ticket(db: Session, ticket_id: str) -> bool:
    """Remove a closed ticket from history. Returns False if it was already gone."""
    store = TicketStore(db)
    history = store.get(settings.HISTORY_TICKETS_KEY)
    remaining = [t for t in history if t.id != ticket_id]
    if len(remaining) == len(history):
        return False

    if not store.set(settings.HISTORY_TICKETS_KEY, remaining):
        raise TicketStorageError(f"Could not delete ticket {ticket_id}")
    logger.info(f"[DELETE] {ticket_id} removed from history")
    return True


def list_active_tickets(db: Session) -> list:
    return TicketStore(db).get(settings.ACTIVE_TICKETS_KEY)


def list_history_tickets(db: Session) -> list:
    return TicketStore(db).get(settings.HISTORY_TICKETS_KEY)


def get_active_ticket(db: Session, ticket_id: str) -> Ticket:
    ticket = _find(list_active_tickets(db), ticket_id)
    if ticket is None:
        raise TicketNotFoundError(ticket_id)
    return ticket


def live_charge(db: Session, ticket_id: str,
                reference_time: Optional[datetime] = None, clock=utc_now) -> LiveCharge:
    """Duration and amount due right now (or at `reference_time`) for an active ticket."""
    ticket = get_active_ticket(db, ticket_id)
    return current_due(ticket, ensure_utc(reference_time) if reference_time else clock())


def history_stats(db: Session) -> HistoryStats:
    history = list_history_tickets(db)
    return HistoryStats(
        total_tickets=len(history),
        total_amount=sum(t.total_amount or 0 for t in history),
    )
