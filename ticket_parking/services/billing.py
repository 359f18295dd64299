"""
Billing rules for parking tickets.

Pure functions over timestamps: elapsed minutes, a short human-readable
duration, and the fee under the rule that every started hour is billed in
full (1 min → 1 h, 60 min → 1 h, 61 min → 2 h).

Nothing here reads the clock; callers pass the reference time explicitly.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Optional

MINUTE = timedelta(minutes=1)
ZERO_DURATION_LABEL = "0min"


def duration(entry_time: datetime, reference_time: datetime) -> int:
    """Whole minutes from entry to reference time, floored (negative if reversed)."""
    return (reference_time - entry_time) // MINUTE


def format_duration(minutes: int) -> str:
    """'1h 30min', '45min', '2h'. Negative durations render as '0min'."""
    if minutes < 0:
        return ZERO_DURATION_LABEL
    hours, mins = divmod(minutes, 60)
    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if mins > 0 or hours == 0:
        parts.append(f"{mins}min")
    return " ".join(parts)


def billable_hours(minutes: int) -> int:
    # Clock skew can make minutes negative; never bill below zero
    return math.ceil(max(minutes, 0) / 60)


def price(entry_time: datetime, exit_time: datetime, price_per_hour: int) -> int:
    """Amount due for a stay, every started hour billed in full."""
    return billable_hours(duration(entry_time, exit_time)) * price_per_hour


def format_time(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """Clock time as '14h20' (zero padded), optionally shifted to `tz` first."""
    if tz is not None:
        value = value.astimezone(tz)
    return f"{value.hour:02d}h{value.minute:02d}"


@dataclass(frozen=True)
class LiveCharge:
    """Derived view of a ticket at a reference time. Never persisted."""
    duration_minutes: int
    duration_text: str
    amount_due: int


def current_due(ticket, reference_time: datetime) -> LiveCharge:
    """
    Elapsed time and amount due for `ticket` as of `reference_time`.
    Closed tickets are frozen at their exit time and report their final amount.
    """
    if ticket.exit_time is not None:
        reference_time = ticket.exit_time
    minutes = duration(ticket.entry_time, reference_time)
    return LiveCharge(
        duration_minutes=minutes,
        duration_text=format_duration(minutes),
        amount_due=price(ticket.entry_time, reference_time, ticket.price_per_hour),
    )
