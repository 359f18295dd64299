"""
Ticket endpoints — the presentation side of the lifecycle.
Sorting for display happens here, not in the service:
active tickets newest entry first, history newest exit first.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ticket_parking.config import settings
from ticket_parking.database import get_db
from ticket_parking.schemas.ticket import (
    HistoryStatsOut,
    Ticket,
    TicketClose,
    TicketCreate,
    TicketLiveOut,
)
from ticket_parking.services import ticket_service
from ticket_parking.utils.clock import ensure_utc, utc_now

router = APIRouter()


def get_clock():
    """Overridable time source (tests pin it with a FixedClock)."""
    return utc_now


@router.get("/tickets/active", response_model=list[Ticket], summary="List active tickets")
def list_active(db: Session = Depends(get_db)):
    tickets = ticket_service.list_active_tickets(db)
    return sorted(tickets, key=lambda t: t.entry_time, reverse=True)


@router.get("/tickets/active/{ticket_id}", response_model=Ticket, summary="Get one active ticket")
def get_active(ticket_id: str, db: Session = Depends(get_db)):
    return ticket_service.get_active_ticket(db, ticket_id)


@router.get("/tickets/active/{ticket_id}/live", response_model=TicketLiveOut,
            summary="Elapsed time and amount due")
def get_live(ticket_id: str, at: Optional[datetime] = None,
             db: Session = Depends(get_db), clock=Depends(get_clock)):
    """Recomputed on every call; poll it for a live display. Nothing is stored."""
    reference_time = ensure_utc(at) if at else clock()
    charge = ticket_service.live_charge(db, ticket_id, reference_time)
    return TicketLiveOut(
        ticket_id=ticket_id,
        reference_time=reference_time,
        duration_minutes=charge.duration_minutes,
        duration_text=charge.duration_text,
        amount_due=charge.amount_due,
        currency=settings.CURRENCY,
    )


@router.post("/tickets", response_model=Ticket, status_code=status.HTTP_201_CREATED,
             summary="Open a ticket")
def open_ticket(body: TicketCreate, db: Session = Depends(get_db), clock=Depends(get_clock)):
    return ticket_service.open_ticket(db, body.parking_name, body.price_per_hour, clock=clock)


@router.post("/tickets/{ticket_id}/close", response_model=Ticket, summary="Close a ticket")
def close_ticket(ticket_id: str, body: Optional[TicketClose] = None,
                 db: Session = Depends(get_db), clock=Depends(get_clock)):
    exit_time = body.exit_time if body else None
    return ticket_service.close_ticket(db, ticket_id, exit_time, clock=clock)


@router.get("/tickets/history", response_model=list[Ticket], summary="List closed tickets")
def list_history(db: Session = Depends(get_db)):
    tickets = ticket_service.list_history_tickets(db)
    return sorted(tickets, key=lambda t: t.exit_time, reverse=True)


@router.get("/tickets/history/stats", response_model=HistoryStatsOut, summary="History totals")
def get_history_stats(db: Session = Depends(get_db)):
    stats = ticket_service.history_stats(db)
    return HistoryStatsOut(total_tickets=stats.total_tickets, total_amount=stats.total_amount,
                           currency=settings.CURRENCY)


@router.delete("/tickets/history/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT,
               summary="Delete a closed ticket")
def delete_history(ticket_id: str, db: Session = Depends(get_db)):
    """Idempotent: deleting an unknown id still returns 204."""
    ticket_service.delete_history_ticket(db, ticket_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
