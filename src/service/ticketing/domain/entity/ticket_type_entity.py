from datetime import datetime
from decimal import Decimal
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError


@attrs.define
class TicketTypeEntity:
    id: int
    event_id: int
    name: str
    price: Decimal
    quota: Optional[int] = None
    sold: int = 0
    sale_start_date: Optional[datetime] = None
    sale_end_date: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @property
    def remaining(self) -> Optional[int]:
        if self.quota is None:
            return None
        return self.quota - self.sold

    def validate_on_sale(self, *, now: datetime) -> None:
        """
        Raises:
            DomainError: When `now` falls outside the configured sale window
        """
        if self.sale_start_date and now < self.sale_start_date:
            raise DomainError(
                f"Sales for ticket type '{self.name}' open at {self.sale_start_date.isoformat()}."
            )
        if self.sale_end_date and now > self.sale_end_date:
            raise DomainError(
                f"Sales for ticket type '{self.name}' closed at {self.sale_end_date.isoformat()}."
            )
