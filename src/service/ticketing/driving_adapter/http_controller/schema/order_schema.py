from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class OrderItemRequest(BaseModel):
    ticket_type_id: int = Field(gt=0)


class CreateOrderRequest(BaseModel):
    items: List[OrderItemRequest] = Field(min_length=1)

    model_config = {'json_schema_extra': {'example': {'items': [{'ticket_type_id': 1}]}}}


class CreateOrderResponse(BaseModel):
    order_code: str
    total_amount: Decimal


class ManualCheckoutRequest(BaseModel):
    payment_method: str = Field(min_length=1, max_length=100)
    payment_amount: Optional[Decimal] = None
    transaction_reference: Optional[str] = Field(default=None, max_length=255)
    payment_date: Optional[datetime] = None

    model_config = {
        'json_schema_extra': {
            'example': {
                'payment_method': 'cash',
                'payment_amount': '150000.00',
                'transaction_reference': 'CASH-001',
            }
        }
    }


class PaymentCallbackRequest(BaseModel):
    """Documentation only: the controller reads the raw body so the signature can be checked"""

    order_id: str
    transaction_status: str
    payment_type: Optional[str] = None
    transaction_id: Optional[str] = None


class OrderEventSummary(BaseModel):
    id: int
    name: str
    location: Optional[str] = None
    start_time: datetime


class OrderItemResponse(BaseModel):
    id: int
    ticket_type_id: int
    ticket_type_name: str
    price_per_ticket: Decimal
    event: OrderEventSummary


class OrderTicketResponse(BaseModel):
    id: int
    unique_code: str
    status: str
    event_id: int
    ticket_type_id: int
    qr_code_url: Optional[str] = None
    check_in_time: Optional[datetime] = None


class OrderResponse(BaseModel):
    id: int
    order_code: str
    user_id: int
    total_amount: Decimal
    payment_status: str
    payment_method: Optional[str] = None
    payment_gateway_reference: Optional[str] = None
    ordered_at: datetime
    paid_at: Optional[datetime] = None
    created_at: datetime
    items: List[OrderItemResponse] = []
    tickets: List[OrderTicketResponse] = []


class CancelOrderResponse(BaseModel):
    order_code: str
    payment_status: str
