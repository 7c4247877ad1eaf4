"""
Integration test fixtures for ticketing service.

Use cases run against the real SQLite test database through SqlAlchemyUnitOfWork;
rows are seeded and inspected through the sync `seed` helper from the root conftest.
"""

from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Callable, Optional

import pytest

from src.platform.config.core_setting import settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.exception.exceptions import RenderError
from src.service.ticketing.app.command.create_order_use_case import CreateOrderUseCase
from src.service.ticketing.app.command.settle_order_use_case import SettleOrderUseCase
from src.service.ticketing.app.command.ticket_issuance_engine import TicketIssuanceEngine
from src.service.ticketing.app.interface.i_qr_code_renderer import IQrCodeRenderer
from src.service.ticketing.driven_adapter.notification.notification_dispatcher_impl import (
    NotificationDispatcherImpl,
)
from src.service.ticketing.driven_adapter.qr.qrcode_renderer_impl import QrCodeRenderer


class FailingQrCodeRenderer(IQrCodeRenderer):
    """Renders the first `succeed` codes, then fails"""

    def __init__(self, *, succeed: int = 0) -> None:
        self.succeed = succeed
        self.rendered: list[str] = []

    async def render(self, *, code: str) -> str:
        if len(self.rendered) >= self.succeed:
            raise RenderError(f'Failed to render QR code for {code}: disk full')
        self.rendered.append(code)
        return f'qrcodes/{code}.png'


@pytest.fixture
async def database() -> AsyncGenerator[Database, None]:
    db = Database(url=settings.DATABASE_URL)
    yield db
    await db.dispose()


@pytest.fixture
def uow_factory(database: Database) -> Callable[[], SqlAlchemyUnitOfWork]:
    return lambda: SqlAlchemyUnitOfWork(database.session_maker)


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / 'uploads'


@pytest.fixture
def build_settle_order(
    uow_factory: Callable[[], SqlAlchemyUnitOfWork], database: Database, upload_dir: Path
) -> Callable[..., SettleOrderUseCase]:
    def _build(*, qr_renderer: Optional[IQrCodeRenderer] = None) -> SettleOrderUseCase:
        return SettleOrderUseCase(
            uow=uow_factory(),
            issuance_engine=TicketIssuanceEngine(
                qr_renderer=qr_renderer or QrCodeRenderer(upload_dir=str(upload_dir))
            ),
            notification_dispatcher=NotificationDispatcherImpl(database=database),
        )

    return _build


@pytest.fixture
def build_create_order(
    uow_factory: Callable[[], SqlAlchemyUnitOfWork],
) -> Callable[[], CreateOrderUseCase]:
    return lambda: CreateOrderUseCase(uow=uow_factory())


@pytest.fixture
def failing_renderer() -> type[FailingQrCodeRenderer]:
    return FailingQrCodeRenderer
