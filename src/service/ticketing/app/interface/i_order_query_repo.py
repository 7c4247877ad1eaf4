from abc import ABC, abstractmethod
from typing import List, Optional, Tuple


class IOrderQueryRepo(ABC):
    """Repository interface for order read models"""

    @abstractmethod
    async def get_detail_by_code(self, *, order_code: str) -> Optional[dict]:
        """Order with lines (ticket type + event summary) and issued tickets"""
        pass

    @abstractmethod
    async def list_by_user(self, *, user_id: int, page: int, limit: int) -> Tuple[List[dict], int]:
        pass

    @abstractmethod
    async def list_all(self, *, page: int, limit: int) -> Tuple[List[dict], int]:
        pass
