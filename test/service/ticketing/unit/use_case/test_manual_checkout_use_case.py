"""
Unit tests for ManualCheckoutUseCase

Test Focus:
1. Validation (owner, state, amount) runs before settlement
2. Successful checkout settles as paid and returns the detail with absolute QR URLs
3. Paying an already paid order is an idempotent no-op
"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import (
    DomainError,
    ForbiddenError,
    InsufficientPaymentError,
    InvalidStateTransitionError,
    NotFoundError,
)
from src.service.ticketing.app.command.manual_checkout_use_case import ManualCheckoutUseCase
from src.service.ticketing.app.command.settle_order_use_case import SettleOrderUseCase
from src.service.ticketing.app.dto.settlement_result import SettlementResult
from src.service.ticketing.domain.entity.order_entity import PaymentStatus
from src.service.ticketing.domain.value_object.payment_outcome import PaymentOutcome


ORDER_CODE = 'ORD-1700000000000-ABC123'


@pytest.mark.unit
class TestManualCheckoutUseCase:
    @pytest.fixture
    def settle_order(self):
        return AsyncMock(spec=SettleOrderUseCase)

    @pytest.fixture
    def use_case(self, uow, settle_order):
        uow.order_query_repo.get_detail_by_code.return_value = {
            'order_code': ORDER_CODE,
            'payment_status': 'paid',
            'tickets': [{'unique_code': 'TKT-1', 'qr_code_url': 'qrcodes/TKT-1.png'}],
        }
        return ManualCheckoutUseCase(uow=uow, settle_order=settle_order)

    @pytest.mark.asyncio
    async def test_successful_checkout(self, use_case, uow, settle_order, make_order):
        # Given: a pending order for 100.00 owned by user 2
        pending = make_order(prices=['100.00'])
        uow.order_command_repo.get_by_code.return_value = pending
        settle_order.settle.return_value = SettlementResult(
            applied=True, order=pending.transition_to(PaymentStatus.PAID)
        )

        # When
        result = await use_case.execute(
            order_code=ORDER_CODE,
            user_id=2,
            payment_method='transfer',
            payment_amount=Decimal('100.00'),
            transaction_reference='BANK-77',
        )

        # Then
        assert not result.already_paid
        settle_kwargs = settle_order.settle.await_args.kwargs
        assert settle_kwargs['outcome'] == PaymentOutcome.PAID
        assert settle_kwargs['payment_method'] == 'transfer'
        assert settle_kwargs['reference'] == 'BANK-77'
        qr_url = result.order['tickets'][0]['qr_code_url']
        assert qr_url.startswith('http') and qr_url.endswith('/uploads/qrcodes/TKT-1.png')

    @pytest.mark.asyncio
    async def test_method_defaults_to_manual(self, use_case, uow, settle_order, make_order):
        pending = make_order()
        uow.order_command_repo.get_by_code.return_value = pending
        settle_order.settle.return_value = SettlementResult(
            applied=True, order=pending.transition_to(PaymentStatus.PAID)
        )

        await use_case.execute(
            order_code=ORDER_CODE, user_id=2, payment_method=None, payment_amount=Decimal('100')
        )

        assert settle_order.settle.await_args.kwargs['payment_method'] == 'manual'

    @pytest.mark.asyncio
    async def test_insufficient_amount(self, use_case, uow, settle_order, make_order):
        uow.order_command_repo.get_by_code.return_value = make_order(prices=['100.00'])

        with pytest.raises(InsufficientPaymentError):
            await use_case.execute(
                order_code=ORDER_CODE,
                user_id=2,
                payment_method='cash',
                payment_amount=Decimal('99.99'),
            )

        settle_order.settle.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_amount(self, use_case, uow, settle_order, make_order):
        uow.order_command_repo.get_by_code.return_value = make_order()

        with pytest.raises(DomainError):
            await use_case.execute(
                order_code=ORDER_CODE, user_id=2, payment_method='cash', payment_amount=None
            )

        settle_order.settle.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_owner(self, use_case, uow, settle_order, make_order):
        uow.order_command_repo.get_by_code.return_value = make_order(user_id=2)

        with pytest.raises(ForbiddenError):
            await use_case.execute(
                order_code=ORDER_CODE,
                user_id=3,
                payment_method='cash',
                payment_amount=Decimal('100'),
            )

        settle_order.settle.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_order(self, use_case, uow):
        uow.order_command_repo.get_by_code.return_value = None

        with pytest.raises(NotFoundError):
            await use_case.execute(
                order_code='ORD-missing',
                user_id=2,
                payment_method='cash',
                payment_amount=Decimal('100'),
            )

    @pytest.mark.asyncio
    async def test_already_paid_is_idempotent(self, use_case, uow, settle_order, make_order):
        uow.order_command_repo.get_by_code.return_value = make_order(status=PaymentStatus.PAID)

        # Amount is not re-validated for a paid order
        result = await use_case.execute(
            order_code=ORDER_CODE, user_id=2, payment_method='cash', payment_amount=None
        )

        assert result.already_paid
        settle_order.settle.assert_not_awaited()

    @pytest.mark.parametrize(
        'status', [PaymentStatus.FAILED, PaymentStatus.EXPIRED, PaymentStatus.CANCELED]
    )
    @pytest.mark.asyncio
    async def test_finalized_unpaid_order(self, use_case, uow, settle_order, make_order, status):
        uow.order_command_repo.get_by_code.return_value = make_order(status=status)

        with pytest.raises(InvalidStateTransitionError):
            await use_case.execute(
                order_code=ORDER_CODE,
                user_id=2,
                payment_method='cash',
                payment_amount=Decimal('100'),
            )

        settle_order.settle.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_callback_failed_the_order_first(
        self, use_case, uow, settle_order, make_order
    ):
        # Given: a gateway callback settled the order as failed after our validation
        uow.order_command_repo.get_by_code.return_value = make_order()
        settle_order.settle.return_value = SettlementResult(
            applied=False, order=make_order(status=PaymentStatus.FAILED)
        )

        with pytest.raises(InvalidStateTransitionError):
            await use_case.execute(
                order_code=ORDER_CODE,
                user_id=2,
                payment_method='cash',
                payment_amount=Decimal('100'),
            )

    @pytest.mark.asyncio
    async def test_callback_paid_the_order_first(self, use_case, uow, settle_order, make_order):
        uow.order_command_repo.get_by_code.return_value = make_order()
        settle_order.settle.return_value = SettlementResult(
            applied=False, order=make_order(status=PaymentStatus.PAID)
        )

        result = await use_case.execute(
            order_code=ORDER_CODE, user_id=2, payment_method='cash', payment_amount=Decimal('100')
        )

        assert result.already_paid
