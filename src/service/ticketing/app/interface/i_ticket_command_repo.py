from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.service.ticketing.domain.entity.ticket_entity import Ticket


class ITicketCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, ticket: Ticket) -> Ticket:
        pass

    @abstractmethod
    async def get_by_code(self, *, unique_code: str) -> Optional[Ticket]:
        """Includes soft-deleted tickets; callers decide how to treat them"""
        pass

    @abstractmethod
    async def count_by_order(self, *, order_id: int) -> int:
        pass

    @abstractmethod
    async def mark_checked_in(
        self, *, ticket_id: int, checked_in_by_user_id: int, check_in_time: datetime
    ) -> bool:
        """
        Atomic active -> checked_in update.

        Returns:
            False when the ticket was not active anymore
        """
        pass
