"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.ticketing.app.command import (
    cancel_order_use_case,
    check_in_ticket_use_case,
    create_order_use_case,
    handle_payment_callback_use_case,
    manual_checkout_use_case,
)
from src.service.ticketing.app.query import (
    get_order_use_case,
    get_ticket_use_case,
    list_orders_use_case,
    list_paid_tickets_use_case,
)
from src.service.ticketing.driving_adapter.http_controller.auth import role_auth


WIRE_MODULES: list[ModuleType] = [
    create_order_use_case,
    cancel_order_use_case,
    manual_checkout_use_case,
    handle_payment_callback_use_case,
    check_in_ticket_use_case,
    get_order_use_case,
    list_orders_use_case,
    get_ticket_use_case,
    list_paid_tickets_use_case,
    role_auth,
]
