from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base
from src.platform.types.utc_datetime import UtcDateTime


class TicketTypeModel(Base):
    __tablename__ = 'ticket_type'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('event.id'), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    quota: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    sold: Mapped[int] = mapped_column(Integer, default=0, server_default='0', nullable=False)
    sale_start_date: Mapped[Optional[datetime]] = mapped_column(UtcDateTime, nullable=True)
    sale_end_date: Mapped[Optional[datetime]] = mapped_column(UtcDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime, server_default=func.now(), nullable=False
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(UtcDateTime, nullable=True)

    # Last line of defence behind the ledger's conditional updates
    __table_args__ = (
        CheckConstraint('sold >= 0', name='ck_ticket_type_sold_non_negative'),
        CheckConstraint('quota IS NULL OR sold <= quota', name='ck_ticket_type_sold_within_quota'),
    )
