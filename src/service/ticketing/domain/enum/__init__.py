"""Ticketing Domain Enums"""

from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.domain.enum.notification_kind import NotificationKind

__all__ = ['EventStatus', 'NotificationKind']
