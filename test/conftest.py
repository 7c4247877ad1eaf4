"""
Test Configuration and Fixtures

This module provides:
- Early environment setup (SQLite database file, upload dir, log dir)
- Session-scoped TestClient running the real app lifespan
- Table cleanup between integration/api tests
- Sync seeding helpers bound to the same SQLite file

Architecture:
- Unit tests (test/**/unit/): Override fixtures with no-ops in their own conftest.py
- Integration and API tests: Use a real SQLite database through aiosqlite
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# settings is instantiated at import time and reads these variables
# =============================================================================
import os
from pathlib import Path
import tempfile


_TEST_TMP_DIR = Path(tempfile.mkdtemp(prefix='ticketing_test_'))
TEST_DB_PATH = _TEST_TMP_DIR / 'ticketing_test.db'


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{TEST_DB_PATH}'
    os.environ['UPLOAD_DIR'] = str(_TEST_TMP_DIR / 'uploads')
    os.environ['APP_BASE_URL'] = 'http://testserver'
    os.environ['SECRET_KEY'] = 'test_secret_key'
    os.environ['PAYMENT_CALLBACK_SECRET'] = ''

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from collections.abc import Callable, Generator  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Any, Optional  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import Engine, create_engine, event, func, insert, select  # noqa: E402

from src.platform.database.orm_db_setting import Base  # noqa: E402
from src.service.ticketing.domain.entity.user_entity import UserEntity, UserRole  # noqa: E402
from src.service.ticketing.driven_adapter.model import (  # noqa: E402
    EventModel,
    NotificationModel,
    OrderEventClaimModel,
    OrderItemModel,
    OrderModel,
    TicketModel,
    TicketTypeModel,
    UserModel,
)
from src.service.ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth  # noqa: E402


# =============================================================================
# Pytest Hooks
# =============================================================================
def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        markers = [m.name for m in item.iter_markers()]
        if 'unit' not in markers:
            item.fixturenames.insert(0, 'clean_database')


# =============================================================================
# Database
# =============================================================================
def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


@pytest.fixture(scope='session')
def sync_engine() -> Generator[Engine, None, None]:
    """Sync engine on the test database file, for seeding and assertions"""
    engine = create_engine(f'sqlite:///{TEST_DB_PATH}')
    event.listen(engine, 'connect', _enable_foreign_keys)
    Base.metadata.create_all(engine, checkfirst=True)
    yield engine
    engine.dispose()


@pytest.fixture(scope='function')
def clean_database(sync_engine: Engine) -> Generator[None, None, None]:
    _delete_all_rows(sync_engine)
    yield
    _delete_all_rows(sync_engine)


def _delete_all_rows(engine: Engine) -> None:
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


# =============================================================================
# Session-scoped Fixtures
# =============================================================================
@pytest.fixture(scope='session')
def client(sync_engine: Engine) -> Generator[Any, None, None]:
    from src.main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def clear_client_cookies(request: pytest.FixtureRequest) -> Generator[None, None, None]:
    # Skip for tests that don't use the HTTP client
    if 'api' not in [m.name for m in request.node.iter_markers()]:
        yield
        return
    client = request.getfixturevalue('client')
    client.cookies.clear()
    yield
    client.cookies.clear()


# =============================================================================
# Seeding
# =============================================================================
class Seeder:
    """Sync seeding and inspection helpers bound to the test database file"""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def _insert(self, table: Any, **values: Any) -> int:
        with self.engine.begin() as conn:
            result = conn.execute(insert(table).values(**values))
            return result.inserted_primary_key[0]  # type: ignore[index]

    # ---------------------------------------------------------------- seeding

    def user(self, *, email: str, name: str = 'Test User', role: str = 'user') -> UserEntity:
        user_id = self._insert(
            UserModel.__table__,
            email=email,
            name=name,
            role=role,
            is_active=True,
            created_at=datetime.now(timezone.utc),
        )
        return UserEntity(id=user_id, email=email, name=name, role=UserRole(role))

    def event(
        self,
        *,
        name: str = 'Jazz Night',
        status: str = 'published',
        start_time: Optional[datetime] = None,
        user_id: Optional[int] = None,
    ) -> int:
        return self._insert(
            EventModel.__table__,
            name=name,
            location='Main Hall',
            status=status,
            start_time=start_time or datetime.now(timezone.utc) + timedelta(days=7),
            user_id=user_id,
            created_at=datetime.now(timezone.utc),
        )

    def ticket_type(
        self,
        *,
        event_id: int,
        name: str = 'Regular',
        price: str = '100.00',
        quota: Optional[int] = 10,
        sold: int = 0,
        sale_start_date: Optional[datetime] = None,
        sale_end_date: Optional[datetime] = None,
    ) -> int:
        return self._insert(
            TicketTypeModel.__table__,
            event_id=event_id,
            name=name,
            price=Decimal(price),
            quota=quota,
            sold=sold,
            sale_start_date=sale_start_date,
            sale_end_date=sale_end_date,
            created_at=datetime.now(timezone.utc),
        )

    # ------------------------------------------------------------- inspection

    def sold(self, ticket_type_id: int) -> int:
        with self.engine.connect() as conn:
            return conn.execute(
                select(TicketTypeModel.sold).where(TicketTypeModel.id == ticket_type_id)
            ).scalar_one()

    def order_status(self, order_code: str) -> str:
        with self.engine.connect() as conn:
            return conn.execute(
                select(OrderModel.payment_status).where(OrderModel.order_code == order_code)
            ).scalar_one()

    def count(self, model: Any) -> int:
        with self.engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(model)).scalar_one()

    def count_orders(self) -> int:
        return self.count(OrderModel)

    def count_order_items(self) -> int:
        return self.count(OrderItemModel)

    def count_claims(self) -> int:
        return self.count(OrderEventClaimModel)

    def count_tickets(self) -> int:
        return self.count(TicketModel)

    def tickets(self) -> list[dict[str, Any]]:
        with self.engine.connect() as conn:
            rows = conn.execute(select(TicketModel.__table__).order_by(TicketModel.id))
            return [dict(row._mapping) for row in rows]

    def notifications(self) -> list[dict[str, Any]]:
        with self.engine.connect() as conn:
            rows = conn.execute(select(NotificationModel.__table__).order_by(NotificationModel.id))
            return [dict(row._mapping) for row in rows]


@pytest.fixture
def seed(sync_engine: Engine) -> Seeder:
    return Seeder(sync_engine)


@pytest.fixture
def auth_headers() -> Callable[[UserEntity], dict[str, str]]:
    def _headers(user: UserEntity) -> dict[str, str]:
        return {'Authorization': f'Bearer {JwtAuth().create_jwt_token(user)}'}

    return _headers
