"""
Unit test configuration for ticketing service.

Overrides fixtures from the root conftest so unit tests need no database or HTTP client,
and provides a unit of work whose repositories are AsyncMocks.
"""

from collections.abc import Generator
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, List, Optional
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient
import pytest

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.app.interface.i_inventory_ledger import IInventoryLedger
from src.service.ticketing.app.interface.i_order_command_repo import IOrderCommandRepo
from src.service.ticketing.app.interface.i_order_query_repo import IOrderQueryRepo
from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.domain.entity.order_entity import Order, OrderLine, PaymentStatus
from src.service.ticketing.domain.entity.ticket_entity import Ticket, TicketStatus
from src.service.ticketing.domain.entity.ticket_type_entity import TicketTypeEntity
from src.service.ticketing.domain.entity.user_entity import UserEntity, UserRole
from src.service.ticketing.domain.enum.event_status import EventStatus


@pytest.fixture(autouse=True, scope='function')
def clean_database() -> Generator[None, None, None]:
    """No-op override for unit tests - no real database needed"""
    yield


@pytest.fixture(scope='session')
def client() -> Generator[MagicMock, None, None]:
    """Mock client for unit tests - prevents TestClient/lifespan from being created"""
    mock_client = MagicMock(spec=TestClient)
    yield mock_client


class FakeUnitOfWork(AbstractUnitOfWork):
    """Records commits/rollbacks; every repository is an AsyncMock of its interface"""

    def __init__(self) -> None:
        self.order_command_repo = AsyncMock(spec=IOrderCommandRepo)
        self.order_query_repo = AsyncMock(spec=IOrderQueryRepo)
        self.inventory_ledger = AsyncMock(spec=IInventoryLedger)
        self.ticket_command_repo = AsyncMock(spec=ITicketCommandRepo)
        self.ticket_query_repo = AsyncMock(spec=ITicketQueryRepo)
        self.event_query_repo = AsyncMock(spec=IEventQueryRepo)
        self.user_query_repo = AsyncMock(spec=IUserQueryRepo)
        self.commit_count = 0
        self.rollback_count = 0

    async def _commit(self) -> None:
        self.commit_count += 1

    async def rollback(self) -> None:
        self.rollback_count += 1


@pytest.fixture
def uow() -> FakeUnitOfWork:
    return FakeUnitOfWork()


@pytest.fixture
def buyer() -> UserEntity:
    return UserEntity(id=2, email='buyer@test.com', name='Test Buyer', role=UserRole.USER)


@pytest.fixture
def admin() -> UserEntity:
    return UserEntity(id=9, email='admin@test.com', name='Test Admin', role=UserRole.ADMIN)


@pytest.fixture
def make_order() -> Callable[..., Order]:
    def _make(
        *,
        status: PaymentStatus = PaymentStatus.PENDING,
        user_id: int = 2,
        prices: Optional[List[str]] = None,
        order_code: str = 'ORD-1700000000000-ABC123',
    ) -> Order:
        prices = prices or ['100.00']
        lines = [
            OrderLine(
                id=100 + i,
                order_id=10,
                ticket_type_id=20 + i,
                event_id=30 + i,
                price_per_ticket=Decimal(price),
            )
            for i, price in enumerate(prices)
        ]
        return Order(
            id=10,
            user_id=user_id,
            order_code=order_code,
            total_amount=sum((line.price_per_ticket for line in lines), Decimal('0')),
            lines=lines,
            payment_status=status,
            created_at=datetime.now(timezone.utc),
        )

    return _make


@pytest.fixture
def make_ticket_type() -> Callable[..., TicketTypeEntity]:
    def _make(
        *, id: int = 20, event_id: int = 30, price: str = '100.00', quota: Optional[int] = 10
    ) -> TicketTypeEntity:
        return TicketTypeEntity(
            id=id, event_id=event_id, name='Regular', price=Decimal(price), quota=quota
        )

    return _make


@pytest.fixture
def make_event() -> Callable[..., EventEntity]:
    def _make(
        *,
        status: EventStatus = EventStatus.PUBLISHED,
        starts_in: timedelta = timedelta(minutes=30),
        now: Optional[datetime] = None,
    ) -> EventEntity:
        now = now or datetime.now(timezone.utc)
        return EventEntity(id=30, name='Jazz Night', start_time=now + starts_in, status=status)

    return _make


@pytest.fixture
def make_ticket() -> Callable[..., Ticket]:
    def _make(
        *,
        status: TicketStatus = TicketStatus.ACTIVE,
        check_in_time: Optional[datetime] = None,
        deleted_at: Optional[datetime] = None,
    ) -> Ticket:
        return Ticket(
            id=500,
            unique_code='TKT-0000-TEST',
            order_line_id=100,
            event_id=30,
            ticket_type_id=20,
            user_id=2,
            attendee_name='Test Buyer',
            attendee_email='buyer@test.com',
            qr_code_url='qrcodes/TKT-0000-TEST.png',
            status=status,
            check_in_time=check_in_time,
            deleted_at=deleted_at,
        )

    return _make
