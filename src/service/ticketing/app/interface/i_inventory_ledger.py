from abc import ABC, abstractmethod
from typing import Optional

from src.service.ticketing.domain.entity.ticket_type_entity import TicketTypeEntity


class IInventoryLedger(ABC):
    """
    Per-ticket-type quota/sold counters.

    Implementations must make reserve() a single atomic compare-and-increment so that two
    concurrent reservations against the last unit cannot both succeed.
    """

    @abstractmethod
    async def get_ticket_type(self, *, ticket_type_id: int) -> Optional[TicketTypeEntity]:
        """Ticket type lookup; soft-deleted rows are reported as missing"""
        pass

    @abstractmethod
    async def reserve(self, *, ticket_type_id: int) -> int:
        """
        Returns:
            The new `sold` value

        Raises:
            NotFoundError: Ticket type missing or soft-deleted
            InsufficientInventoryError: Ticket type has no quota configured
            SoldOutError: sold == quota
        """
        pass

    @abstractmethod
    async def release(self, *, ticket_type_id: int) -> int:
        """
        Returns:
            The new `sold` value

        Raises:
            InternalError: The counter is already zero (a release without a reservation)
        """
        pass
