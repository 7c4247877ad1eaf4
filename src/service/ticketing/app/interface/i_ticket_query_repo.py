from abc import ABC, abstractmethod
from typing import List, Optional, Tuple


class ITicketQueryRepo(ABC):
    @abstractmethod
    async def get_detail_by_code(self, *, unique_code: str) -> Optional[dict]:
        """Ticket with event and ticket type summary; soft-deleted tickets are excluded"""
        pass

    @abstractmethod
    async def list_paid(
        self, *, page: int, limit: int, user_id: Optional[int] = None
    ) -> Tuple[List[dict], int]:
        """Tickets of paid orders, newest first; all users when user_id is None"""
        pass
