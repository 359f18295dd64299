# tests/test_billing.py
"""Unit tests for the billing rules."""

import pytest
from datetime import datetime, timedelta, timezone
from ticket_parking.schemas.ticket import Ticket, TicketStatus
from ticket_parking.services.billing import (
    current_due,
    duration,
    format_duration,
    format_time,
    price,
)

ENTRY = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)


def after(minutes=0, seconds=0):
    return ENTRY + timedelta(minutes=minutes, seconds=seconds)


class TestDuration:
    def test_ninety_minutes(self):
        assert duration(ENTRY, after(90)) == 90

    def test_partial_minute_truncated(self):
        assert duration(ENTRY, after(4, seconds=59)) == 4

    def test_same_instant_is_zero(self):
        assert duration(ENTRY, ENTRY) == 0

    def test_reversed_times_floor_negative(self):
        assert duration(ENTRY, after(seconds=-30)) == -1
        assert duration(ENTRY, after(-90)) == -90


class TestFormatDuration:
    @pytest.mark.parametrize("minutes,expected", [
        (0, "0min"),
        (59, "59min"),
        (60, "1h"),
        (90, "1h 30min"),
        (125, "2h 5min"),
        (-5, "0min"),
    ])
    def test_labels(self, minutes, expected):
        assert format_duration(minutes) == expected


class TestPrice:
    @pytest.mark.parametrize("minutes,hours", [
        (0, 0), (1, 1), (59, 1), (60, 1), (61, 2), (120, 2),
    ])
    def test_every_started_hour_billed(self, minutes, hours):
        assert price(ENTRY, after(minutes), 100) == hours * 100

    def test_rate_applied(self):
        assert price(ENTRY, after(181), 250) == 4 * 250

    def test_seconds_do_not_start_an_hour(self):
        # 59s floors to 0 minutes
        assert price(ENTRY, after(seconds=59), 100) == 0

    def test_exit_before_entry_clamped_to_zero(self):
        assert price(ENTRY, after(-125), 100) == 0


class TestFormatTime:
    def test_zero_padded(self):
        assert format_time(datetime(2026, 3, 2, 9, 5, tzinfo=timezone.utc)) == "09h05"

    def test_converts_timezone(self):
        plus_one = timezone(timedelta(hours=1))
        assert format_time(datetime(2026, 3, 2, 14, 20, tzinfo=timezone.utc), plus_one) == "15h20"


class TestCurrentDue:
    def make_ticket(self, **overrides):
        data = dict(id="t-1", parking_name="Plateau", price_per_hour=100, entry_time=ENTRY)
        data.update(overrides)
        return Ticket(**data)

    def test_active_ticket_at_reference_time(self):
        charge = current_due(self.make_ticket(), after(61))
        assert charge.duration_minutes == 61
        assert charge.duration_text == "1h 1min"
        assert charge.amount_due == 200

    def test_closed_ticket_frozen_at_exit(self):
        ticket = self.make_ticket(status=TicketStatus.CLOSED, exit_time=after(30), total_amount=100)
        charge = current_due(ticket, after(600))
        assert charge.duration_minutes == 30
        assert charge.amount_due == 100
