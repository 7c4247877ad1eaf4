"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.ticketing.app.command.settle_order_use_case import SettleOrderUseCase
from src.service.ticketing.app.command.ticket_issuance_engine import TicketIssuanceEngine
from src.service.ticketing.driven_adapter.notification.notification_dispatcher_impl import (
    NotificationDispatcherImpl,
)
from src.service.ticketing.driven_adapter.payment.hmac_signature_verifier_impl import (
    HmacSignatureVerifier,
)
from src.service.ticketing.driven_adapter.qr.qrcode_renderer_impl import QrCodeRenderer
from src.service.ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (event-loop-aware engine manager)
    database = providers.Singleton(Database)

    # A fresh unit of work per use case; each `async with` is one transaction
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork, session_factory=database.provided.session_maker
    )

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth)

    # Collaborators
    qr_code_renderer = providers.Singleton(
        QrCodeRenderer,
        upload_dir=config_service.provided.UPLOAD_DIR,
        subdir=config_service.provided.QR_CODE_SUBDIR,
    )
    notification_dispatcher = providers.Singleton(NotificationDispatcherImpl, database=database)
    payment_signature_verifier = providers.Singleton(
        HmacSignatureVerifier, secret=config_service.provided.PAYMENT_CALLBACK_SECRET
    )

    # Settlement (shared by manual checkout and the gateway callback)
    ticket_issuance_engine = providers.Singleton(
        TicketIssuanceEngine, qr_renderer=qr_code_renderer
    )
    settle_order_use_case = providers.Factory(
        SettleOrderUseCase,
        uow=unit_of_work,
        issuance_engine=ticket_issuance_engine,
        notification_dispatcher=notification_dispatcher,
    )


container = Container()


def setup() -> None:
    container.config_service()
    container.database()


async def cleanup() -> None:
    await container.database().dispose()
    container.reset_singletons()
