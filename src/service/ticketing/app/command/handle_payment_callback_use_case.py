from typing import Any, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
import orjson

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.settle_order_use_case import SettleOrderUseCase
from src.service.ticketing.app.interface.i_payment_signature_verifier import (
    IPaymentSignatureVerifier,
)
from src.service.ticketing.domain.value_object.payment_outcome import (
    PaymentOutcome,
    map_gateway_status,
)


class HandlePaymentCallbackUseCase:
    """
    Gateway webhook.

    The gateway may deliver a callback more than once or out of order, so a callback for an
    order that already left `pending` is acknowledged without touching it.

    Never raises: every outcome, including internal failures, becomes an acknowledgment message
    so the sender has no reason to retry.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        settle_order: SettleOrderUseCase,
        signature_verifier: IPaymentSignatureVerifier,
    ) -> None:
        self.uow = uow
        self.settle_order = settle_order
        self.signature_verifier = signature_verifier

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        settle_order: SettleOrderUseCase = Depends(Provide[Container.settle_order_use_case]),
        signature_verifier: IPaymentSignatureVerifier = Depends(
            Provide[Container.payment_signature_verifier]
        ),
    ) -> Self:
        return cls(uow=uow, settle_order=settle_order, signature_verifier=signature_verifier)

    @Logger.io
    async def handle(self, *, body: bytes, signature: Optional[str]) -> str:
        if not self.signature_verifier.verify(body=body, signature=signature):
            Logger.base.warning('🔏 [CALLBACK] Rejected callback with invalid signature')
            return 'Callback processed (invalid signature).'

        payload = self._parse(body)
        if payload is None:
            Logger.base.error('📭 [CALLBACK] Payload is not a JSON object')
            return 'Callback processed (malformed payload).'

        order_code = payload.get('order_id')
        if not order_code:
            Logger.base.error('📭 [CALLBACK] Missing order identifier')
            return 'Callback processed (missing order identifier).'
        order_code = str(order_code)

        try:
            return await self._process(order_code=order_code, payload=payload)
        except CustomBaseError as e:
            Logger.base.error(f'💥 [CALLBACK] {order_code}: {e.message}')
        except Exception:
            Logger.base.exception(f'💥 [CALLBACK] Unexpected failure for {order_code}')
        return 'Callback processed (internal error).'

    async def _process(self, *, order_code: str, payload: dict[str, Any]) -> str:
        async with self.uow:
            order = await self.uow.order_command_repo.get_by_code(order_code=order_code)

        if not order:
            Logger.base.error(f'🔍 [CALLBACK] Order {order_code} not found')
            return f'Callback processed (order {order_code} not found).'

        if order.payment_status.is_terminal:
            Logger.base.warning(
                f'♻️ [CALLBACK] {order_code} already finalized (status: {order.payment_status})'
            )
            return 'Callback processed (order already finalized).'

        transaction_status = payload.get('transaction_status')
        mapping = map_gateway_status(transaction_status)
        if not mapping.recognised:
            Logger.base.warning(
                f'❓ [CALLBACK] Unhandled transaction status "{transaction_status}" for '
                f'{order_code}, settling as failed'
            )

        if mapping.outcome == PaymentOutcome.STILL_PENDING:
            Logger.base.info(f'⏳ [CALLBACK] {order_code} remains pending')
            return 'Callback processed (order remains pending).'

        reference = payload.get('transaction_id')
        result = await self.settle_order.settle(
            order_code=order_code,
            outcome=mapping.outcome,
            payment_method=str(payload.get('payment_type') or 'gateway'),
            reference=str(reference) if reference is not None else None,
        )
        if not result.applied:
            return 'Callback processed (order already finalized).'

        Logger.base.info(f'📨 [CALLBACK] {order_code} settled as {result.order.payment_status}')
        return 'Callback processed.'

    @staticmethod
    def _parse(body: bytes) -> Optional[dict[str, Any]]:
        try:
            payload = orjson.loads(body)
        except orjson.JSONDecodeError:
            return None
        return payload if isinstance(payload, dict) else None
