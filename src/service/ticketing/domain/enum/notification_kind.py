from enum import StrEnum


class NotificationKind(StrEnum):
    PURCHASE_SUCCESS = 'purchase_success'
    EVENT_REMINDER = 'event_reminder'
    EVENT_CANCELED = 'event_canceled'
    CHECKIN_SUCCESS = 'checkin_success'
    GENERAL = 'general'
