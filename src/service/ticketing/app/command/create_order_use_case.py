from datetime import datetime, timezone
from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import (
    DomainError,
    DuplicatePurchaseError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.domain.entity.order_entity import Order, OrderLine


class CreateOrderUseCase:
    """
    Place an order for one ticket per requested ticket type.

    Flow (one transaction):
    1. Pre-checks per item: ticket type exists, sale window, one line per event,
       no live (pending/paid) order for the same event
    2. Reserve one ledger unit per line (atomic conditional update)
    3. Persist the pending order with its price-snapshotted lines and event claims

    Any failure rolls back every reservation made by this request.
    """

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def create_order(self, *, user_id: int, ticket_type_ids: List[int]) -> Order:
        """
        Raises:
            DomainError: Empty request or ticket type outside its sale window
            NotFoundError: Unknown or soft-deleted ticket type
            DuplicatePurchaseError: Same event twice, or an existing live order for the event
            InsufficientInventoryError: Ticket type without a quota
            SoldOutError: No units left
        """
        if not ticket_type_ids:
            raise DomainError('Order must contain at least one item.')

        now = datetime.now(timezone.utc)
        with self.tracer.start_as_current_span(
            'use_case.create_order',
            attributes={'user.id': user_id, 'order.item_count': len(ticket_type_ids)},
        ):
            async with self.uow:
                lines: List[OrderLine] = []
                seen_event_ids: set[int] = set()

                for ticket_type_id in ticket_type_ids:
                    ticket_type = await self.uow.inventory_ledger.get_ticket_type(
                        ticket_type_id=ticket_type_id
                    )
                    if not ticket_type:
                        raise NotFoundError(f'Ticket type {ticket_type_id} not found.')

                    ticket_type.validate_on_sale(now=now)

                    if ticket_type.event_id in seen_event_ids:
                        raise DuplicatePurchaseError(
                            'An order may not contain more than one ticket for the same event.'
                        )
                    seen_event_ids.add(ticket_type.event_id)

                    if await self.uow.order_command_repo.has_active_order_for_event(
                        user_id=user_id, event_id=ticket_type.event_id
                    ):
                        raise DuplicatePurchaseError(
                            'You already have an active order for this event.'
                        )

                    lines.append(
                        OrderLine(
                            ticket_type_id=ticket_type.id,
                            event_id=ticket_type.event_id,
                            price_per_ticket=ticket_type.price,
                        )
                    )

                order = Order.create(user_id=user_id, lines=lines)

                # Reservations only after every pre-check passed
                for line in lines:
                    await self.uow.inventory_ledger.reserve(ticket_type_id=line.ticket_type_id)

                created_order = await self.uow.order_command_repo.create(order=order)
                await self.uow.commit()

        Logger.base.info(
            f'🧾 [ORDER] Created {created_order.order_code} for user {user_id} '
            f'(total {created_order.total_amount})'
        )
        return created_order
