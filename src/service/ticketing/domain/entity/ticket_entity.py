from datetime import datetime, timedelta
from enum import StrEnum
from typing import Optional

import attrs

from src.platform.exception.exceptions import (
    AlreadyCheckedInError,
    CheckinNotOpenError,
    EventNotActiveError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.domain.entity.order_entity import OrderLine
from src.service.ticketing.domain.entity.user_entity import UserEntity


class TicketStatus(StrEnum):
    ACTIVE = 'active'
    CHECKED_IN = 'checked_in'


@attrs.define
class Ticket:
    unique_code: str
    order_line_id: int
    event_id: int
    ticket_type_id: int
    user_id: int
    attendee_name: str
    attendee_email: str
    qr_code_url: str
    status: TicketStatus = TicketStatus.ACTIVE
    id: Optional[int] = None
    check_in_time: Optional[datetime] = None
    checked_in_by_user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def issue(
        cls,
        *,
        order_line: OrderLine,
        buyer: UserEntity,
        unique_code: str,
        qr_code_url: str,
    ) -> 'Ticket':
        assert order_line.id is not None, 'Tickets are issued from persisted order lines'
        assert buyer.id is not None, 'Tickets are issued to persisted users'
        return cls(
            unique_code=unique_code,
            order_line_id=order_line.id,
            event_id=order_line.event_id,
            ticket_type_id=order_line.ticket_type_id,
            user_id=buyer.id,
            attendee_name=buyer.name,
            attendee_email=buyer.email,
            qr_code_url=qr_code_url,
            status=TicketStatus.ACTIVE,
        )

    @Logger.io
    def validate_check_in(self, *, event: EventEntity, now: datetime, lead: timedelta) -> None:
        """
        Admission rules, evaluated in order:

        1. ticket not soft-deleted -> NotFoundError
        2. event published -> EventNotActiveError
        3. now >= event start - lead -> CheckinNotOpenError (message carries the opening instant)
        4. ticket still active -> AlreadyCheckedInError
        """
        if self.deleted_at is not None:
            raise NotFoundError('Ticket not found.')

        if not event.is_published:
            raise EventNotActiveError(
                f'Check-in failed: event is not active (status: {event.status}).'
            )

        opens_at = event.check_in_opens_at(lead)
        if now < opens_at:
            raise CheckinNotOpenError(
                f'Check-in is not open yet. It opens at {opens_at.isoformat()}.'
            )

        if self.status == TicketStatus.CHECKED_IN:
            checked_at = self.check_in_time.isoformat() if self.check_in_time else 'an earlier time'
            raise AlreadyCheckedInError(f'Ticket was already checked in at {checked_at}.')

    @Logger.io
    def check_in(self, *, admin_user_id: int, now: datetime) -> 'Ticket':
        return attrs.evolve(
            self,
            status=TicketStatus.CHECKED_IN,
            check_in_time=now,
            checked_in_by_user_id=admin_user_id,
        )
