from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class TicketEventSummary(BaseModel):
    id: int
    name: str
    location: Optional[str] = None
    start_time: datetime
    status: str


class TicketTypeSummary(BaseModel):
    id: int
    name: str
    price: Decimal


class TicketResponse(BaseModel):
    id: int
    unique_code: str
    status: str
    attendee_name: str
    attendee_email: str
    qr_code_url: Optional[str] = None
    check_in_time: Optional[datetime] = None
    checked_in_by_user_id: Optional[int] = None
    user_id: int
    order_code: str
    created_at: datetime
    event: TicketEventSummary
    ticket_type: TicketTypeSummary


class CheckInResponse(BaseModel):
    unique_code: str
    status: str
    check_in_time: datetime
    checked_in_by_user_id: int
