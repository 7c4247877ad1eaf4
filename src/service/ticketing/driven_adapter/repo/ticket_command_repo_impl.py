from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.ticketing.domain.entity.ticket_entity import Ticket, TicketStatus
from src.service.ticketing.driven_adapter.model.order_model import OrderItemModel
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel


class TicketCommandRepoImpl(ITicketCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create(self, *, ticket: Ticket) -> Ticket:
        ticket_model = TicketModel(
            unique_code=ticket.unique_code,
            order_item_id=ticket.order_line_id,
            event_id=ticket.event_id,
            ticket_type_id=ticket.ticket_type_id,
            user_id=ticket.user_id,
            attendee_name=ticket.attendee_name,
            attendee_email=ticket.attendee_email,
            qr_code_url=ticket.qr_code_url,
            status=ticket.status.value,
            created_at=ticket.created_at or datetime.now(timezone.utc),
        )
        self.session.add(ticket_model)
        await self.session.flush()
        return self._to_entity(ticket_model)

    @Logger.io
    async def get_by_code(self, *, unique_code: str) -> Optional[Ticket]:
        result = await self.session.execute(
            select(TicketModel)
            .where(TicketModel.unique_code == unique_code)
            .execution_options(populate_existing=True)
        )
        ticket_model = result.scalar_one_or_none()
        return self._to_entity(ticket_model) if ticket_model else None

    @Logger.io
    async def count_by_order(self, *, order_id: int) -> int:
        result = await self.session.execute(
            select(func.count(TicketModel.id))
            .join(OrderItemModel, OrderItemModel.id == TicketModel.order_item_id)
            .where(OrderItemModel.order_id == order_id)
        )
        return result.scalar_one()

    @Logger.io
    async def mark_checked_in(
        self, *, ticket_id: int, checked_in_by_user_id: int, check_in_time: datetime
    ) -> bool:
        result = await self.session.execute(
            update(TicketModel)
            .where(
                TicketModel.id == ticket_id,
                TicketModel.status == TicketStatus.ACTIVE.value,
                TicketModel.deleted_at.is_(None),
            )
            .values(
                status=TicketStatus.CHECKED_IN.value,
                check_in_time=check_in_time,
                checked_in_by_user_id=checked_in_by_user_id,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    @staticmethod
    def _to_entity(model: TicketModel) -> Ticket:
        return Ticket(
            id=model.id,
            unique_code=model.unique_code,
            order_line_id=model.order_item_id,
            event_id=model.event_id,
            ticket_type_id=model.ticket_type_id,
            user_id=model.user_id,
            attendee_name=model.attendee_name,
            attendee_email=model.attendee_email,
            qr_code_url=model.qr_code_url,
            status=TicketStatus(model.status),
            check_in_time=model.check_in_time,
            checked_in_by_user_id=model.checked_in_by_user_id,
            created_at=model.created_at,
            deleted_at=model.deleted_at,
        )
