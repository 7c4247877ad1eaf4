from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import InvalidStateTransitionError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.domain.entity.order_entity import Order, PaymentStatus


class CancelOrderUseCase:
    """
    Cancel a pending order and give its inventory back.

    Status write, ledger releases and claim removal commit together.
    """

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, order_code: str, user_id: int) -> Order:
        async with self.uow:
            order = await self.uow.order_command_repo.get_by_code(order_code=order_code)
            if not order:
                raise NotFoundError('Order not found.')
            assert order.id is not None

            order.validate_owner(user_id=user_id, action='cancel')
            order.validate_can_be_cancelled()
            canceled_order = order.transition_to(PaymentStatus.CANCELED)

            applied = await self.uow.order_command_repo.compare_and_set_status(
                order_id=order.id,
                expected=PaymentStatus.PENDING,
                new_status=PaymentStatus.CANCELED,
            )
            if not applied:
                # A settlement committed between our read and the write
                raise InvalidStateTransitionError(
                    'Order was settled before it could be canceled.'
                )

            for line in order.lines:
                await self.uow.inventory_ledger.release(ticket_type_id=line.ticket_type_id)
            await self.uow.order_command_repo.release_event_claims(order_id=order.id)

            await self.uow.commit()

        Logger.base.info(f'🚫 [ORDER] Canceled {order_code}, released {len(order.lines)} unit(s)')
        return canceled_order
