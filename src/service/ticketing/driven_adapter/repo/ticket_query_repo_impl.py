from typing import Any, List, Optional, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.entity.order_entity import PaymentStatus
from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.model.order_model import OrderItemModel, OrderModel
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.model.ticket_type_model import TicketTypeModel


class TicketQueryRepoImpl(ITicketQueryRepo):
    """Ticket read models joined with their event, ticket type and order"""

    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    def _detail_query(self) -> Select:
        return (
            select(
                TicketModel,
                EventModel,
                TicketTypeModel.name,
                TicketTypeModel.price,
                OrderModel.order_code,
            )
            .join(EventModel, EventModel.id == TicketModel.event_id)
            .join(TicketTypeModel, TicketTypeModel.id == TicketModel.ticket_type_id)
            .join(OrderItemModel, OrderItemModel.id == TicketModel.order_item_id)
            .join(OrderModel, OrderModel.id == OrderItemModel.order_id)
            .where(TicketModel.deleted_at.is_(None))
        )

    @Logger.io
    async def get_detail_by_code(self, *, unique_code: str) -> Optional[dict]:
        result = await self.session.execute(
            self._detail_query().where(TicketModel.unique_code == unique_code)
        )
        row = result.first()
        return self._row_to_dict(row) if row else None

    @Logger.io
    async def list_paid(
        self, *, page: int, limit: int, user_id: Optional[int] = None
    ) -> Tuple[List[dict], int]:
        conditions = [
            TicketModel.deleted_at.is_(None),
            OrderModel.payment_status == PaymentStatus.PAID.value,
        ]
        if user_id is not None:
            conditions.append(TicketModel.user_id == user_id)

        count_result = await self.session.execute(
            select(func.count(TicketModel.id))
            .join(OrderItemModel, OrderItemModel.id == TicketModel.order_item_id)
            .join(OrderModel, OrderModel.id == OrderItemModel.order_id)
            .where(*conditions)
        )
        total = count_result.scalar_one()

        result = await self.session.execute(
            self._detail_query()
            .where(*conditions)
            .order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return [self._row_to_dict(row) for row in result.all()], total

    @staticmethod
    def _row_to_dict(row: Any) -> dict:
        ticket, event, ticket_type_name, ticket_type_price, order_code = row
        return {
            'id': ticket.id,
            'unique_code': ticket.unique_code,
            'status': ticket.status,
            'attendee_name': ticket.attendee_name,
            'attendee_email': ticket.attendee_email,
            'qr_code_url': ticket.qr_code_url,
            'check_in_time': ticket.check_in_time,
            'checked_in_by_user_id': ticket.checked_in_by_user_id,
            'user_id': ticket.user_id,
            'order_code': order_code,
            'created_at': ticket.created_at,
            'event': {
                'id': event.id,
                'name': event.name,
                'location': event.location,
                'start_time': event.start_time,
                'status': event.status,
            },
            'ticket_type': {
                'id': ticket.ticket_type_id,
                'name': ticket_type_name,
                'price': ticket_type_price,
            },
        }
