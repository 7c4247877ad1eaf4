from collections import defaultdict
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_order_query_repo import IOrderQueryRepo
from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.model.order_model import OrderItemModel, OrderModel
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.model.ticket_type_model import TicketTypeModel


class OrderQueryRepoImpl(IOrderQueryRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_detail_by_code(self, *, order_code: str) -> Optional[dict]:
        result = await self.session.execute(
            select(OrderModel)
            .where(OrderModel.order_code == order_code)
            .execution_options(populate_existing=True)
        )
        order_model = result.scalar_one_or_none()
        if not order_model:
            return None

        orders = await self._serialize([order_model])
        return orders[0]

    @Logger.io
    async def list_by_user(self, *, user_id: int, page: int, limit: int) -> Tuple[List[dict], int]:
        return await self._paginate(page=page, limit=limit, user_id=user_id)

    @Logger.io
    async def list_all(self, *, page: int, limit: int) -> Tuple[List[dict], int]:
        return await self._paginate(page=page, limit=limit)

    async def _paginate(
        self, *, page: int, limit: int, user_id: Optional[int] = None
    ) -> Tuple[List[dict], int]:
        conditions = [] if user_id is None else [OrderModel.user_id == user_id]

        count_result = await self.session.execute(
            select(func.count(OrderModel.id)).where(*conditions)
        )
        total = count_result.scalar_one()

        result = await self.session.execute(
            select(OrderModel)
            .where(*conditions)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return await self._serialize(result.scalars().all()), total

    async def _serialize(self, orders: Sequence[OrderModel]) -> List[dict]:
        if not orders:
            return []
        order_ids = [order.id for order in orders]

        items_result = await self.session.execute(
            select(OrderItemModel, TicketTypeModel.name, EventModel)
            .join(TicketTypeModel, TicketTypeModel.id == OrderItemModel.ticket_type_id)
            .join(EventModel, EventModel.id == OrderItemModel.event_id)
            .where(OrderItemModel.order_id.in_(order_ids))
            .order_by(OrderItemModel.id)
        )
        items_by_order: dict[int, list[dict]] = defaultdict(list)
        for item, ticket_type_name, event in items_result.all():
            items_by_order[item.order_id].append(
                {
                    'id': item.id,
                    'ticket_type_id': item.ticket_type_id,
                    'ticket_type_name': ticket_type_name,
                    'price_per_ticket': item.price_per_ticket,
                    'event': {
                        'id': event.id,
                        'name': event.name,
                        'location': event.location,
                        'start_time': event.start_time,
                    },
                }
            )

        tickets_result = await self.session.execute(
            select(TicketModel, OrderItemModel.order_id)
            .join(OrderItemModel, OrderItemModel.id == TicketModel.order_item_id)
            .where(OrderItemModel.order_id.in_(order_ids), TicketModel.deleted_at.is_(None))
            .order_by(TicketModel.id)
        )
        tickets_by_order: dict[int, list[dict]] = defaultdict(list)
        for ticket, order_id in tickets_result.all():
            tickets_by_order[order_id].append(
                {
                    'id': ticket.id,
                    'unique_code': ticket.unique_code,
                    'status': ticket.status,
                    'event_id': ticket.event_id,
                    'ticket_type_id': ticket.ticket_type_id,
                    'qr_code_url': ticket.qr_code_url,
                    'check_in_time': ticket.check_in_time,
                }
            )

        return [
            {
                'id': order.id,
                'order_code': order.order_code,
                'user_id': order.user_id,
                'total_amount': order.total_amount,
                'payment_status': order.payment_status,
                'payment_method': order.payment_method,
                'payment_gateway_reference': order.payment_gateway_reference,
                'ordered_at': order.ordered_at,
                'paid_at': order.paid_at,
                'created_at': order.created_at,
                'items': items_by_order.get(order.id, []),
                'tickets': tickets_by_order.get(order.id, []),
            }
            for order in orders
        ]
