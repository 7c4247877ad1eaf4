from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import DuplicatePurchaseError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_order_command_repo import IOrderCommandRepo
from src.service.ticketing.domain.entity.order_entity import Order, OrderLine, PaymentStatus
from src.service.ticketing.driven_adapter.model.order_model import (
    OrderEventClaimModel,
    OrderItemModel,
    OrderModel,
)


_CLAIM_CONSTRAINT_MARKERS = ('uq_order_event_claim_user_event', 'order_event_claim.')


class OrderCommandRepoImpl(IOrderCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create(self, *, order: Order) -> Order:
        now = datetime.now(timezone.utc)
        order_model = OrderModel(
            user_id=order.user_id,
            order_code=order.order_code,
            total_amount=order.total_amount,
            payment_status=order.payment_status.value,
            ordered_at=order.ordered_at or now,
            created_at=order.created_at or now,
            updated_at=order.updated_at or now,
            items=[
                OrderItemModel(
                    ticket_type_id=line.ticket_type_id,
                    event_id=line.event_id,
                    price_per_ticket=line.price_per_ticket,
                )
                for line in order.lines
            ],
        )
        self.session.add(order_model)
        await self.session.flush()

        self.session.add_all(
            [
                OrderEventClaimModel(
                    user_id=order.user_id, event_id=line.event_id, order_id=order_model.id
                )
                for line in order.lines
            ]
        )
        try:
            await self.session.flush()
        except IntegrityError as e:
            if any(marker in str(e.orig) for marker in _CLAIM_CONSTRAINT_MARKERS):
                raise DuplicatePurchaseError(
                    'You already have an active order for this event.'
                ) from e
            raise

        return self._to_entity(order_model)

    @Logger.io
    async def get_by_code(self, *, order_code: str) -> Optional[Order]:
        result = await self.session.execute(
            select(OrderModel)
            .where(OrderModel.order_code == order_code)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def has_active_order_for_event(self, *, user_id: int, event_id: int) -> bool:
        result = await self.session.execute(
            select(func.count(OrderItemModel.id))
            .join(OrderModel, OrderModel.id == OrderItemModel.order_id)
            .where(
                OrderModel.user_id == user_id,
                OrderItemModel.event_id == event_id,
                OrderModel.payment_status.in_(
                    [PaymentStatus.PENDING.value, PaymentStatus.PAID.value]
                ),
            )
        )
        return result.scalar_one() > 0

    @Logger.io
    async def compare_and_set_status(
        self,
        *,
        order_id: int,
        expected: PaymentStatus,
        new_status: PaymentStatus,
        payment_method: Optional[str] = None,
        gateway_reference: Optional[str] = None,
        paid_at: Optional[datetime] = None,
    ) -> bool:
        values: dict[str, Any] = {
            'payment_status': new_status.value,
            'updated_at': datetime.now(timezone.utc),
        }
        if payment_method is not None:
            values['payment_method'] = payment_method
        if gateway_reference is not None:
            values['payment_gateway_reference'] = gateway_reference
        if paid_at is not None:
            values['paid_at'] = paid_at

        result = await self.session.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.payment_status == expected.value)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def release_event_claims(self, *, order_id: int) -> None:
        await self.session.execute(
            delete(OrderEventClaimModel)
            .where(OrderEventClaimModel.order_id == order_id)
            .execution_options(synchronize_session=False)
        )

    @staticmethod
    def _to_entity(model: OrderModel) -> Order:
        return Order(
            id=model.id,
            user_id=model.user_id,
            order_code=model.order_code,
            total_amount=model.total_amount,
            payment_status=PaymentStatus(model.payment_status),
            payment_method=model.payment_method,
            payment_gateway_reference=model.payment_gateway_reference,
            ordered_at=model.ordered_at,
            paid_at=model.paid_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
            lines=[
                OrderLine(
                    id=item.id,
                    order_id=item.order_id,
                    ticket_type_id=item.ticket_type_id,
                    event_id=item.event_id,
                    price_per_ticket=item.price_per_ticket,
                )
                for item in model.items
            ],
        )
