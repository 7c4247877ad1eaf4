from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from src.platform.database.orm_db_setting import Database
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.ticketing.domain.enum.notification_kind import NotificationKind
from src.service.ticketing.driven_adapter.model.notification_model import NotificationModel


class NotificationDispatcherImpl(INotificationDispatcher):
    """
    Persists in-app notifications in their own transaction.

    Called after the business transaction has committed; a failure here is logged and dropped.
    """

    def __init__(self, *, database: Database) -> None:
        self.database = database

    async def notify(
        self,
        *,
        user_id: int,
        kind: NotificationKind,
        message: str,
        order_id: Optional[int] = None,
        event_id: Optional[int] = None,
    ) -> None:
        try:
            async with self.database.session() as session:
                session.add(
                    NotificationModel(
                        user_id=user_id,
                        type=kind.value,
                        message=message,
                        order_id=order_id,
                        event_id=event_id,
                    )
                )
                await session.commit()
        except SQLAlchemyError as e:
            Logger.base.warning(
                f'🔕 [NOTIFY] Dropped {kind.value} notification for user {user_id}: {e}'
            )
            return

        Logger.base.info(f'🔔 [NOTIFY] {kind.value} -> user {user_id}')
