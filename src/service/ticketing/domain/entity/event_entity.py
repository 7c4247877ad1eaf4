from datetime import datetime, timedelta
from typing import Optional

import attrs

from src.service.ticketing.domain.enum.event_status import EventStatus


@attrs.define
class EventEntity:
    id: int
    name: str
    start_time: datetime
    status: EventStatus = EventStatus.DRAFT
    user_id: Optional[int] = None
    end_time: Optional[datetime] = None
    location: Optional[str] = None
    deleted_at: Optional[datetime] = None

    @property
    def is_published(self) -> bool:
        return self.status == EventStatus.PUBLISHED and self.deleted_at is None

    def check_in_opens_at(self, lead: timedelta) -> datetime:
        return self.start_time - lead
