# ticket_parking/schemas/ticket.py
"""
Ticket record and the request/response shapes built around it.

`Ticket` is both the stored record (serialised with camelCase keys into the
key-value store) and the API output. Active tickets carry no exitTime or
totalAmount; closed tickets carry both.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field, StrictInt, StrictStr, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ticket_parking.utils.clock import ensure_utc


class TicketStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class _CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class Ticket(_CamelModel):
    id: str = Field(min_length=1)
    parking_name: str = Field(min_length=1)
    price_per_hour: int = Field(gt=0)
    entry_time: datetime
    status: TicketStatus = TicketStatus.ACTIVE
    exit_time: Optional[datetime] = None
    total_amount: Optional[int] = Field(default=None, ge=0)

    class Config:
        frozen = True

    @field_validator("entry_time", "exit_time")
    @classmethod
    def normalize_utc(cls, value):
        return ensure_utc(value) if value is not None else value

    @model_validator(mode="after")
    def check_status_fields(self):
        if self.status == TicketStatus.ACTIVE:
            if self.exit_time is not None or self.total_amount is not None:
                raise ValueError("active ticket cannot have exitTime or totalAmount")
        else:
            if self.exit_time is None or self.total_amount is None:
                raise ValueError("closed ticket requires exitTime and totalAmount")
            if self.exit_time < self.entry_time:
                raise ValueError("exitTime is before entryTime")
        return self

    def closed(self, exit_time: datetime, total_amount: int) -> "Ticket":
        """Closed copy of this ticket. The original is left untouched."""
        data = self.model_dump()
        data.update(status=TicketStatus.CLOSED, exit_time=exit_time, total_amount=total_amount)
        return Ticket.model_validate(data)


class TicketCreate(_CamelModel):
    parking_name: str
    price_per_hour: Optional[Union[StrictInt, StrictStr]] = None  # falls back to DEFAULT_PRICE_PER_HOUR


class TicketClose(_CamelModel):
    exit_time: Optional[datetime] = None               # defaults to now


class TicketLiveOut(_CamelModel):
    ticket_id: str
    reference_time: datetime
    duration_minutes: int
    duration_text: str
    amount_due: int
    currency: str


class HistoryStatsOut(_CamelModel):
    total_tickets: int
    total_amount: int
    currency: str
