from datetime import datetime, timezone
from decimal import Decimal
from enum import StrEnum
from typing import List, Optional

import attrs

from src.platform.exception.exceptions import (
    DomainError,
    DuplicatePurchaseError,
    ForbiddenError,
    InsufficientPaymentError,
    InvalidStateTransitionError,
)
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.domain.value_object.code_generator import generate_order_code


CENT = Decimal('0.01')


class PaymentStatus(StrEnum):
    PENDING = 'pending'
    PAID = 'paid'
    FAILED = 'failed'
    EXPIRED = 'expired'
    CANCELED = 'canceled'

    @property
    def is_terminal(self) -> bool:
        return self is not PaymentStatus.PENDING

    @property
    def releases_inventory(self) -> bool:
        return self in (PaymentStatus.FAILED, PaymentStatus.EXPIRED, PaymentStatus.CANCELED)


# Terminal states have no outgoing transitions
ALLOWED_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset(
        {
            PaymentStatus.PAID,
            PaymentStatus.FAILED,
            PaymentStatus.EXPIRED,
            PaymentStatus.CANCELED,
        }
    ),
}


@attrs.define
class OrderLine:
    ticket_type_id: int
    event_id: int
    price_per_ticket: Decimal
    id: Optional[int] = None
    order_id: Optional[int] = None


@attrs.define
class Order:
    user_id: int
    order_code: str
    total_amount: Decimal
    lines: List[OrderLine] = attrs.field(factory=list)
    payment_status: PaymentStatus = PaymentStatus.PENDING
    id: Optional[int] = None
    payment_method: Optional[str] = None
    payment_gateway_reference: Optional[str] = None
    ordered_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(cls, *, user_id: int, lines: List[OrderLine]) -> 'Order':
        """
        Build a new pending order from priced lines.

        Raises:
            DomainError: When no lines are given
            DuplicatePurchaseError: When two lines belong to the same event
        """
        if not lines:
            raise DomainError('Order must contain at least one item.')

        event_ids = [line.event_id for line in lines]
        if len(set(event_ids)) != len(event_ids):
            raise DuplicatePurchaseError(
                'An order may not contain more than one ticket for the same event.'
            )

        total = sum((line.price_per_ticket for line in lines), Decimal('0'))
        now = datetime.now(timezone.utc)
        return cls(
            user_id=user_id,
            order_code=generate_order_code(now),
            total_amount=total.quantize(CENT),
            lines=list(lines),
            payment_status=PaymentStatus.PENDING,
            ordered_at=now,
            created_at=now,
            updated_at=now,
        )

    def is_owned_by(self, user_id: int) -> bool:
        return self.user_id == user_id

    @Logger.io
    def validate_owner(self, *, user_id: int, action: str) -> None:
        if not self.is_owned_by(user_id):
            raise ForbiddenError(f'You do not have permission to {action} this order.')

    @Logger.io
    def validate_can_transition_to(self, new_status: PaymentStatus) -> None:
        if new_status not in ALLOWED_TRANSITIONS.get(self.payment_status, frozenset()):
            raise InvalidStateTransitionError(
                f'Order {self.order_code} cannot move from {self.payment_status} to {new_status}.'
            )

    @Logger.io
    def validate_can_be_cancelled(self) -> None:
        if self.payment_status != PaymentStatus.PENDING:
            raise InvalidStateTransitionError(
                f'Only pending orders can be canceled (current status: {self.payment_status}).'
            )

    @Logger.io
    def validate_payment_amount(self, amount: Optional[Decimal]) -> None:
        """
        Raises:
            DomainError: Amount missing or not positive
            InsufficientPaymentError: Amount below the order total (exact decimal comparison)
        """
        if amount is None or not amount.is_finite() or amount <= 0:
            raise DomainError('Invalid payment amount.')
        if amount < self.total_amount:
            raise InsufficientPaymentError(
                f'Payment amount {amount} is less than the order total {self.total_amount}.'
            )

    @Logger.io
    def transition_to(
        self,
        new_status: PaymentStatus,
        *,
        payment_method: Optional[str] = None,
        gateway_reference: Optional[str] = None,
    ) -> 'Order':
        self.validate_can_transition_to(new_status)
        now = datetime.now(timezone.utc)
        return attrs.evolve(
            self,
            payment_status=new_status,
            payment_method=payment_method or self.payment_method,
            payment_gateway_reference=gateway_reference or self.payment_gateway_reference,
            paid_at=now if new_status == PaymentStatus.PAID else self.paid_at,
            updated_at=now,
        )
