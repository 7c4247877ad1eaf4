from typing import List

import attrs

from src.service.ticketing.domain.entity.order_entity import Order
from src.service.ticketing.domain.entity.ticket_entity import Ticket


@attrs.frozen
class SettlementResult:
    """
    applied=False means the order had already left `pending`; nothing was written and no
    side effect ran.
    """

    applied: bool
    order: Order
    tickets: List[Ticket] = attrs.field(factory=list)


@attrs.frozen
class CheckoutResult:
    already_paid: bool
    order: dict
