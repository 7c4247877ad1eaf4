"""
Gateway transaction status -> internal settlement outcome.

The gateway may deliver any JSON value; anything unrecognised settles the order as failed.
"""

from enum import StrEnum
from typing import Any, Optional

import attrs

from src.service.ticketing.domain.entity.order_entity import PaymentStatus


class PaymentOutcome(StrEnum):
    PAID = 'paid'
    FAILED = 'failed'
    EXPIRED = 'expired'
    STILL_PENDING = 'still_pending'

    @property
    def target_status(self) -> Optional[PaymentStatus]:
        return _TARGET_STATUS.get(self)


_TARGET_STATUS: dict[PaymentOutcome, PaymentStatus] = {
    PaymentOutcome.PAID: PaymentStatus.PAID,
    PaymentOutcome.FAILED: PaymentStatus.FAILED,
    PaymentOutcome.EXPIRED: PaymentStatus.EXPIRED,
}

_GATEWAY_STATUS_MAP: dict[str, PaymentOutcome] = {
    'capture': PaymentOutcome.PAID,
    'settlement': PaymentOutcome.PAID,
    'deny': PaymentOutcome.FAILED,
    'cancel': PaymentOutcome.FAILED,
    'expire': PaymentOutcome.EXPIRED,
    'pending': PaymentOutcome.STILL_PENDING,
}


@attrs.frozen
class GatewayStatusMapping:
    outcome: PaymentOutcome
    recognised: bool


def map_gateway_status(transaction_status: Any) -> GatewayStatusMapping:
    key = transaction_status.strip().lower() if isinstance(transaction_status, str) else ''
    if key in _GATEWAY_STATUS_MAP:
        return GatewayStatusMapping(outcome=_GATEWAY_STATUS_MAP[key], recognised=True)
    return GatewayStatusMapping(outcome=PaymentOutcome.FAILED, recognised=False)
