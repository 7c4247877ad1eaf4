from datetime import datetime
from decimal import Decimal
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import InvalidStateTransitionError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.settle_order_use_case import SettleOrderUseCase
from src.service.ticketing.app.dto.settlement_result import CheckoutResult
from src.service.ticketing.app.query.upload_url import to_public_upload_url
from src.service.ticketing.domain.entity.order_entity import PaymentStatus
from src.service.ticketing.domain.value_object.payment_outcome import PaymentOutcome


class ManualCheckoutUseCase:
    """
    Owner-confirmed payment (cash, transfer, ...).

    Validation happens here; the state change goes through SettleOrderUseCase so a concurrent
    gateway callback cannot double-issue tickets. Paying an already paid order is a no-op.
    """

    def __init__(self, *, uow: AbstractUnitOfWork, settle_order: SettleOrderUseCase) -> None:
        self.uow = uow
        self.settle_order = settle_order

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        settle_order: SettleOrderUseCase = Depends(Provide[Container.settle_order_use_case]),
    ) -> Self:
        return cls(uow=uow, settle_order=settle_order)

    @Logger.io
    async def execute(
        self,
        *,
        order_code: str,
        user_id: int,
        payment_method: Optional[str],
        payment_amount: Optional[Decimal],
        transaction_reference: Optional[str] = None,
        payment_date: Optional[datetime] = None,
    ) -> CheckoutResult:
        """
        Raises:
            NotFoundError, ForbiddenError
            InvalidStateTransitionError: Order failed, expired or was canceled
            DomainError: Missing or non-positive amount
            InsufficientPaymentError: Amount below the order total
        """
        async with self.uow:
            order = await self.uow.order_command_repo.get_by_code(order_code=order_code)
            if not order:
                raise NotFoundError('Order not found.')

            order.validate_owner(user_id=user_id, action='check out')

            already_paid = order.payment_status == PaymentStatus.PAID
            if not already_paid:
                order.validate_can_transition_to(PaymentStatus.PAID)
                order.validate_payment_amount(payment_amount)

        if not already_paid:
            result = await self.settle_order.settle(
                order_code=order_code,
                outcome=PaymentOutcome.PAID,
                payment_method=payment_method or 'manual',
                reference=transaction_reference,
                paid_at=payment_date,
            )
            if not result.applied and result.order.payment_status != PaymentStatus.PAID:
                raise InvalidStateTransitionError(
                    f'Order is no longer pending (status: {result.order.payment_status}).'
                )
            already_paid = not result.applied

        async with self.uow:
            detail = await self.uow.order_query_repo.get_detail_by_code(order_code=order_code)
        assert detail is not None
        for ticket in detail['tickets']:
            ticket['qr_code_url'] = to_public_upload_url(ticket['qr_code_url'])

        if already_paid:
            Logger.base.info(f'♻️ [CHECKOUT] {order_code} was already paid')
        else:
            Logger.base.info(f'💵 [CHECKOUT] {order_code} paid manually by user {user_id}')
        return CheckoutResult(already_paid=already_paid, order=detail)
