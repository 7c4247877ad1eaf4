from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.service.ticketing.domain.entity.order_entity import Order, PaymentStatus


class IOrderCommandRepo(ABC):
    """Repository interface for order writes. Always used inside a unit of work."""

    @abstractmethod
    async def create(self, *, order: Order) -> Order:
        """
        Persist the order, its lines, and one (user, event) claim per line.

        Raises:
            DuplicatePurchaseError: A non-terminal order already claims one of the events
        """
        pass

    @abstractmethod
    async def get_by_code(self, *, order_code: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def has_active_order_for_event(self, *, user_id: int, event_id: int) -> bool:
        """True when the user holds a pending or paid order with a line for the event"""
        pass

    @abstractmethod
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
        """
        Atomically move the order from `expected` to `new_status`.

        Returns:
            False when the order was no longer in `expected` (another writer got there first)
        """
        pass

    @abstractmethod
    async def release_event_claims(self, *, order_id: int) -> None:
        pass
