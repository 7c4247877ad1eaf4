from datetime import datetime
from typing import List, Optional

from opentelemetry import trace

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.ticket_issuance_engine import TicketIssuanceEngine
from src.service.ticketing.app.dto.settlement_result import SettlementResult
from src.service.ticketing.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.ticketing.domain.entity.order_entity import Order, PaymentStatus
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.enum.notification_kind import NotificationKind
from src.service.ticketing.domain.value_object.payment_outcome import PaymentOutcome


class SettleOrderUseCase:
    """
    Single convergence point for manual checkout and gateway callbacks.

    Flow (one transaction):
    1. Load the order
    2. Compare-and-set payment_status pending -> target; zero rows means another settlement
       won, so return applied=False without side effects
    3. paid: issue one ticket per line
       failed/expired: release one ledger unit per line and drop the event claims
    4. Commit, then notify the buyer (best-effort)
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        issuance_engine: TicketIssuanceEngine,
        notification_dispatcher: INotificationDispatcher,
    ) -> None:
        self.uow = uow
        self.issuance_engine = issuance_engine
        self.notification_dispatcher = notification_dispatcher
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def settle(
        self,
        *,
        order_code: str,
        outcome: PaymentOutcome,
        payment_method: Optional[str] = None,
        reference: Optional[str] = None,
        paid_at: Optional[datetime] = None,
    ) -> SettlementResult:
        target_status = outcome.target_status
        assert target_status is not None, f'{outcome} does not settle an order'

        with self.tracer.start_as_current_span(
            'use_case.settle_order',
            attributes={'order.code': order_code, 'order.target_status': target_status.value},
        ):
            async with self.uow:
                order = await self.uow.order_command_repo.get_by_code(order_code=order_code)
                if not order:
                    raise NotFoundError('Order not found.')
                assert order.id is not None

                if order.payment_status.is_terminal:
                    Logger.base.info(
                        f'♻️ [SETTLE] {order_code} already {order.payment_status}, nothing to do'
                    )
                    return SettlementResult(applied=False, order=order)

                settled = order.transition_to(
                    target_status, payment_method=payment_method, gateway_reference=reference
                )
                if paid_at is not None and target_status == PaymentStatus.PAID:
                    settled.paid_at = paid_at

                applied = await self.uow.order_command_repo.compare_and_set_status(
                    order_id=order.id,
                    expected=PaymentStatus.PENDING,
                    new_status=target_status,
                    payment_method=settled.payment_method,
                    gateway_reference=settled.payment_gateway_reference,
                    paid_at=settled.paid_at,
                )
                if not applied:
                    current = await self.uow.order_command_repo.get_by_code(order_code=order_code)
                    Logger.base.info(f'♻️ [SETTLE] {order_code} was settled concurrently')
                    return SettlementResult(applied=False, order=current or order)

                tickets: List[Ticket] = []
                if target_status == PaymentStatus.PAID:
                    buyer = UserEntity.validate_user_exists(
                        await self.uow.user_query_repo.get_by_id(user_id=order.user_id)
                    )
                    tickets = await self.issuance_engine.issue(
                        uow=self.uow, order=settled, buyer=buyer
                    )
                elif target_status.releases_inventory:
                    for line in order.lines:
                        await self.uow.inventory_ledger.release(ticket_type_id=line.ticket_type_id)
                    await self.uow.order_command_repo.release_event_claims(order_id=order.id)

                await self.uow.commit()

        Logger.base.info(f'💳 [SETTLE] {order_code}: pending -> {target_status}')

        if target_status == PaymentStatus.PAID:
            await self._notify_purchase(order=settled, ticket_count=len(tickets))

        return SettlementResult(applied=True, order=settled, tickets=tickets)

    async def _notify_purchase(self, *, order: Order, ticket_count: int) -> None:
        try:
            await self.notification_dispatcher.notify(
                user_id=order.user_id,
                kind=NotificationKind.PURCHASE_SUCCESS,
                message=(
                    f'Payment for order {order.order_code} succeeded. '
                    f'{ticket_count} ticket(s) issued.'
                ),
                order_id=order.id,
            )
        except Exception as e:
            # Settlement is already committed
            Logger.base.warning(f'🔕 [SETTLE] Notification failed for {order.order_code}: {e}')
