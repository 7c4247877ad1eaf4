from datetime import datetime, timedelta, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import AlreadyCheckedInError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.notification_kind import NotificationKind


class CheckInTicketUseCase:
    """
    Admit a ticket holder at the venue.

    The rules live in Ticket.validate_check_in; the final write is an atomic
    active -> checked_in update, so of two concurrent scans exactly one succeeds.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        notification_dispatcher: INotificationDispatcher,
        check_in_lead: Optional[timedelta] = None,
    ) -> None:
        self.uow = uow
        self.notification_dispatcher = notification_dispatcher
        self.check_in_lead = check_in_lead or timedelta(minutes=settings.CHECKIN_LEAD_MINUTES)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        notification_dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
    ) -> Self:
        return cls(uow=uow, notification_dispatcher=notification_dispatcher)

    @Logger.io
    async def execute(
        self, *, ticket_code: str, admin_user_id: int, now: Optional[datetime] = None
    ) -> Ticket:
        now = now or datetime.now(timezone.utc)

        async with self.uow:
            ticket = await self.uow.ticket_command_repo.get_by_code(unique_code=ticket_code)
            if not ticket:
                raise NotFoundError('Ticket not found.')
            assert ticket.id is not None

            event = await self.uow.event_query_repo.get_by_id(event_id=ticket.event_id)
            if not event:
                raise NotFoundError('Event not found.')

            ticket.validate_check_in(event=event, now=now, lead=self.check_in_lead)
            checked_in = ticket.check_in(admin_user_id=admin_user_id, now=now)

            applied = await self.uow.ticket_command_repo.mark_checked_in(
                ticket_id=ticket.id,
                checked_in_by_user_id=admin_user_id,
                check_in_time=now,
            )
            if not applied:
                current = await self.uow.ticket_command_repo.get_by_code(unique_code=ticket_code)
                checked_at = (
                    current.check_in_time.isoformat()
                    if current and current.check_in_time
                    else 'an earlier time'
                )
                raise AlreadyCheckedInError(f'Ticket was already checked in at {checked_at}.')

            await self.uow.commit()

        Logger.base.info(f'✅ [CHECKIN] {ticket_code} admitted by admin {admin_user_id}')

        try:
            await self.notification_dispatcher.notify(
                user_id=ticket.user_id,
                kind=NotificationKind.CHECKIN_SUCCESS,
                message=f"Your ticket {ticket_code} for '{event.name}' has been checked in.",
                event_id=event.id,
            )
        except Exception as e:
            # Check-in is already committed
            Logger.base.warning(f'🔕 [CHECKIN] Notification failed for {ticket_code}: {e}')

        return checked_in
