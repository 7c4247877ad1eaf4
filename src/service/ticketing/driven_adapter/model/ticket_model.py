from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base
from src.platform.types.utc_datetime import UtcDateTime


class TicketModel(Base):
    __tablename__ = 'ticket'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    unique_code: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    # At most one ticket per order line
    order_item_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('order_item.id'), nullable=False, unique=True
    )
    event_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('event.id'), nullable=False, index=True
    )
    ticket_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('ticket_type.id'), nullable=False
    )
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey('user.id'), nullable=False, index=True)
    attendee_name: Mapped[str] = mapped_column(String(255), nullable=False)
    attendee_email: Mapped[str] = mapped_column(String(255), nullable=False)
    qr_code_url: Mapped[str] = mapped_column(String(512), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='active', nullable=False)
    check_in_time: Mapped[Optional[datetime]] = mapped_column(UtcDateTime, nullable=True)
    checked_in_by_user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey('user.id'), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime, server_default=func.now(), nullable=False
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(UtcDateTime, nullable=True)
