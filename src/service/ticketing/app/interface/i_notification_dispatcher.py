from abc import ABC, abstractmethod
from typing import Optional

from src.service.ticketing.domain.enum.notification_kind import NotificationKind


class INotificationDispatcher(ABC):
    """Best-effort user notifications. Implementations log failures and never raise."""

    @abstractmethod
    async def notify(
        self,
        *,
        user_id: int,
        kind: NotificationKind,
        message: str,
        order_id: Optional[int] = None,
        event_id: Optional[int] = None,
    ) -> None:
        pass
