from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import ForeignKey, Integer, Numeric, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.platform.database.orm_db_setting import Base
from src.platform.types.utc_datetime import UtcDateTime


class OrderModel(Base):
    __tablename__ = 'orders'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey('user.id'), nullable=False, index=True)
    order_code: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_status: Mapped[str] = mapped_column(
        String(20), default='pending', nullable=False, index=True
    )
    payment_method: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    payment_gateway_reference: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    ordered_at: Mapped[datetime] = mapped_column(
        UtcDateTime, server_default=func.now(), nullable=False
    )
    paid_at: Mapped[Optional[datetime]] = mapped_column(UtcDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        UtcDateTime, server_default=func.now(), onupdate=func.now(), nullable=False
    )

    items: Mapped[List['OrderItemModel']] = relationship(
        'OrderItemModel',
        back_populates='order',
        cascade='all, delete-orphan',
        order_by='OrderItemModel.id',
        lazy='selectin',
    )


class OrderItemModel(Base):
    __tablename__ = 'order_item'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('orders.id', ondelete='CASCADE'), nullable=False, index=True
    )
    ticket_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('ticket_type.id'), nullable=False, index=True
    )
    # Snapshot of ticket_type.event_id, used by duplicate-purchase checks
    event_id: Mapped[int] = mapped_column(Integer, ForeignKey('event.id'), nullable=False)
    price_per_ticket: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    order: Mapped['OrderModel'] = relationship('OrderModel', back_populates='items')


class OrderEventClaimModel(Base):
    """
    One row per (user, event) held by a pending or paid order.

    The unique constraint enforces "one live order per user per event" at the database level;
    rows are deleted when the order settles as failed/expired or is canceled.
    """

    __tablename__ = 'order_event_claim'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    event_id: Mapped[int] = mapped_column(Integer, nullable=False)
    order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('orders.id', ondelete='CASCADE'), nullable=False, index=True
    )

    __table_args__ = (UniqueConstraint('user_id', 'event_id', name='uq_order_event_claim_user_event'),)
