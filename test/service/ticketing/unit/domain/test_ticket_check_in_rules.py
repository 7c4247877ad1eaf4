"""
Unit tests for Ticket issuance and the check-in admission rules

Test Focus:
1. Issued tickets copy the buyer identity and the line's event/ticket type
2. Rules are evaluated in order: deleted, event status, check-in window, already checked in
3. The check-in window opens exactly `lead` before the event start
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
import re

import pytest

from src.platform.exception.exceptions import (
    AlreadyCheckedInError,
    CheckinNotOpenError,
    EventNotActiveError,
    NotFoundError,
)
from src.service.ticketing.domain.entity.order_entity import OrderLine
from src.service.ticketing.domain.entity.ticket_entity import Ticket, TicketStatus
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.domain.value_object.code_generator import generate_ticket_code


LEAD = timedelta(minutes=60)
NOW = datetime(2026, 5, 1, 18, 0, tzinfo=timezone.utc)


@pytest.mark.unit
class TestTicketIssue:
    def test_issue_copies_buyer_and_line(self, buyer):
        line = OrderLine(
            id=101, order_id=10, ticket_type_id=21, event_id=31, price_per_ticket=Decimal('75')
        )

        ticket = Ticket.issue(
            order_line=line, buyer=buyer, unique_code='TKT-X', qr_code_url='qrcodes/TKT-X.png'
        )

        assert ticket.status == TicketStatus.ACTIVE
        assert ticket.order_line_id == 101
        assert ticket.event_id == 31
        assert ticket.ticket_type_id == 21
        assert ticket.user_id == buyer.id
        assert ticket.attendee_name == buyer.name
        assert ticket.attendee_email == buyer.email
        assert ticket.check_in_time is None

    def test_ticket_codes_are_unique(self):
        codes = {generate_ticket_code() for _ in range(200)}

        assert len(codes) == 200
        assert all(re.fullmatch(r'TKT-[0-9A-F-]{36}', code) for code in codes)


@pytest.mark.unit
class TestValidateCheckIn:
    def test_admitted_inside_window(self, make_ticket, make_event):
        # Given: event starts in 30 minutes, window opened 30 minutes ago
        event = make_event(starts_in=timedelta(minutes=30), now=NOW)

        # Then: no error
        make_ticket().validate_check_in(event=event, now=NOW, lead=LEAD)

    def test_window_opens_exactly_at_lead(self, make_ticket, make_event):
        event = make_event(starts_in=LEAD, now=NOW)

        make_ticket().validate_check_in(event=event, now=NOW, lead=LEAD)

    def test_too_early_reports_opening_instant(self, make_ticket, make_event):
        # Given: event starts in 2 hours
        event = make_event(starts_in=timedelta(hours=2), now=NOW)

        # When
        with pytest.raises(CheckinNotOpenError) as exc_info:
            make_ticket().validate_check_in(event=event, now=NOW, lead=LEAD)

        # Then: message names the opening instant (start - lead)
        assert (NOW + timedelta(hours=1)).isoformat() in exc_info.value.message

    def test_deleted_ticket_is_not_found(self, make_ticket, make_event):
        ticket = make_ticket(deleted_at=NOW)

        with pytest.raises(NotFoundError):
            ticket.validate_check_in(event=make_event(now=NOW), now=NOW, lead=LEAD)

    @pytest.mark.parametrize(
        'status', [EventStatus.DRAFT, EventStatus.CANCELED, EventStatus.COMPLETED]
    )
    def test_unpublished_event_rejects(self, make_ticket, make_event, status):
        event = make_event(status=status, now=NOW)

        with pytest.raises(EventNotActiveError):
            make_ticket().validate_check_in(event=event, now=NOW, lead=LEAD)

    def test_already_checked_in(self, make_ticket, make_event):
        first_scan = NOW - timedelta(minutes=5)
        ticket = make_ticket(status=TicketStatus.CHECKED_IN, check_in_time=first_scan)

        with pytest.raises(AlreadyCheckedInError) as exc_info:
            ticket.validate_check_in(event=make_event(now=NOW), now=NOW, lead=LEAD)

        assert first_scan.isoformat() in exc_info.value.message

    def test_event_status_is_checked_before_ticket_status(self, make_ticket, make_event):
        # Given: a checked-in ticket for a draft event
        ticket = make_ticket(status=TicketStatus.CHECKED_IN, check_in_time=NOW)
        event = make_event(status=EventStatus.DRAFT, now=NOW)

        # Then: the event rule wins
        with pytest.raises(EventNotActiveError):
            ticket.validate_check_in(event=event, now=NOW, lead=LEAD)

    def test_window_is_checked_before_ticket_status(self, make_ticket, make_event):
        ticket = make_ticket(status=TicketStatus.CHECKED_IN, check_in_time=NOW)
        event = make_event(starts_in=timedelta(hours=3), now=NOW)

        with pytest.raises(CheckinNotOpenError):
            ticket.validate_check_in(event=event, now=NOW, lead=LEAD)

    def test_check_in_records_admin_and_time(self, make_ticket):
        checked_in = make_ticket().check_in(admin_user_id=9, now=NOW)

        assert checked_in.status == TicketStatus.CHECKED_IN
        assert checked_in.check_in_time == NOW
        assert checked_in.checked_in_by_user_id == 9
