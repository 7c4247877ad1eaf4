"""
Event status as stored on the event row.

Only PUBLISHED events admit attendees at check-in.
"""

from enum import StrEnum


class EventStatus(StrEnum):
    DRAFT = 'draft'
    PUBLISHED = 'published'
    CANCELED = 'canceled'
    COMPLETED = 'completed'
