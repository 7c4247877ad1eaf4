"""
Unit tests for the Order aggregate

Test Focus:
1. Totals are exact decimal sums of the line prices
2. An order needs at least one line and at most one line per event
3. Order codes follow ORD-<epoch ms>-<6 hex>
4. pending is the only state with outgoing transitions
5. Payment amount validation (missing, non-positive, short, exact, over)
"""

from decimal import Decimal
import re

import pytest

from src.platform.exception.exceptions import (
    DomainError,
    DuplicatePurchaseError,
    ForbiddenError,
    InsufficientPaymentError,
    InvalidStateTransitionError,
)
from src.service.ticketing.domain.entity.order_entity import Order, OrderLine, PaymentStatus


def _line(*, ticket_type_id: int, event_id: int, price: str) -> OrderLine:
    return OrderLine(ticket_type_id=ticket_type_id, event_id=event_id, price_per_ticket=Decimal(price))


@pytest.mark.unit
class TestOrderCreate:
    def test_total_is_exact_decimal_sum(self):
        # Given: prices that are not exact in binary floating point
        lines = [
            _line(ticket_type_id=1, event_id=1, price='0.10'),
            _line(ticket_type_id=2, event_id=2, price='0.20'),
        ]

        # When
        order = Order.create(user_id=7, lines=lines)

        # Then
        assert order.total_amount == Decimal('0.30')
        assert order.payment_status == PaymentStatus.PENDING
        assert order.ordered_at is not None
        assert order.paid_at is None

    def test_order_code_format(self):
        order = Order.create(user_id=7, lines=[_line(ticket_type_id=1, event_id=1, price='50')])

        assert re.fullmatch(r'ORD-\d{13}-[0-9A-F]{6}', order.order_code)

    def test_order_codes_are_distinct(self):
        lines = [_line(ticket_type_id=1, event_id=1, price='50')]

        codes = {Order.create(user_id=7, lines=lines).order_code for _ in range(50)}

        assert len(codes) == 50

    def test_empty_order_is_rejected(self):
        with pytest.raises(DomainError):
            Order.create(user_id=7, lines=[])

    def test_two_lines_for_one_event_are_rejected(self):
        # Given: two ticket types of the same event
        lines = [
            _line(ticket_type_id=1, event_id=5, price='50'),
            _line(ticket_type_id=2, event_id=5, price='80'),
        ]

        # Then
        with pytest.raises(DuplicatePurchaseError):
            Order.create(user_id=7, lines=lines)


@pytest.mark.unit
class TestOrderTransitions:
    def test_pending_to_paid_stamps_paid_at(self, make_order):
        order = make_order()

        paid = order.transition_to(PaymentStatus.PAID, payment_method='cash')

        assert paid.payment_status == PaymentStatus.PAID
        assert paid.payment_method == 'cash'
        assert paid.paid_at is not None
        # The original instance is left untouched
        assert order.payment_status == PaymentStatus.PENDING

    @pytest.mark.parametrize(
        'target', [PaymentStatus.FAILED, PaymentStatus.EXPIRED, PaymentStatus.CANCELED]
    )
    def test_pending_to_releasing_state_leaves_paid_at_empty(self, make_order, target):
        settled = make_order().transition_to(target)

        assert settled.payment_status == target
        assert settled.paid_at is None
        assert target.releases_inventory

    @pytest.mark.parametrize(
        'terminal',
        [PaymentStatus.PAID, PaymentStatus.FAILED, PaymentStatus.EXPIRED, PaymentStatus.CANCELED],
    )
    @pytest.mark.parametrize('target', list(PaymentStatus))
    def test_terminal_states_have_no_exit(self, make_order, terminal, target):
        order = make_order(status=terminal)

        with pytest.raises(InvalidStateTransitionError):
            order.transition_to(target)

    def test_pending_cannot_move_to_pending(self, make_order):
        with pytest.raises(InvalidStateTransitionError):
            make_order().transition_to(PaymentStatus.PENDING)

    @pytest.mark.parametrize(
        'status', [PaymentStatus.PAID, PaymentStatus.FAILED, PaymentStatus.CANCELED]
    )
    def test_only_pending_orders_can_be_cancelled(self, make_order, status):
        with pytest.raises(InvalidStateTransitionError):
            make_order(status=status).validate_can_be_cancelled()

    def test_validate_owner(self, make_order):
        order = make_order(user_id=2)

        order.validate_owner(user_id=2, action='cancel')
        with pytest.raises(ForbiddenError):
            order.validate_owner(user_id=3, action='cancel')


@pytest.mark.unit
class TestPaymentAmount:
    @pytest.mark.parametrize('amount', [None, Decimal('0'), Decimal('-5'), Decimal('NaN')])
    def test_invalid_amounts(self, make_order, amount):
        with pytest.raises(DomainError) as exc_info:
            make_order(prices=['100.00']).validate_payment_amount(amount)

        assert not isinstance(exc_info.value, InsufficientPaymentError)

    def test_short_amount_is_insufficient(self, make_order):
        order = make_order(prices=['100.00', '50.00'])

        with pytest.raises(InsufficientPaymentError) as exc_info:
            order.validate_payment_amount(Decimal('149.99'))

        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize('amount', ['150.00', '150', '200.50'])
    def test_exact_or_larger_amount_is_accepted(self, make_order, amount):
        make_order(prices=['100.00', '50.00']).validate_payment_amount(Decimal(amount))
