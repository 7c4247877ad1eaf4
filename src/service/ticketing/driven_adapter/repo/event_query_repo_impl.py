from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.driven_adapter.model.event_model import EventModel


class EventQueryRepoImpl(IEventQueryRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, event_id: int) -> Optional[EventEntity]:
        # Soft-deleted events are returned too; EventEntity.is_published accounts for them
        result = await self.session.execute(select(EventModel).where(EventModel.id == event_id))
        event_model = result.scalar_one_or_none()
        if not event_model:
            return None

        return EventEntity(
            id=event_model.id,
            name=event_model.name,
            start_time=event_model.start_time,
            end_time=event_model.end_time,
            location=event_model.location,
            status=EventStatus(event_model.status),
            user_id=event_model.user_id,
            deleted_at=event_model.deleted_at,
        )
