"""
FastAPI Application

Request-driven only: no consumers or background schedulers.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import cleanup, container, setup
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Ticketing] Starting up...')

    setup()
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Ticketing] Dependency injection wired')

    # SQLite (local/tests) has no migrations; Postgres uses alembic
    if settings.is_sqlite:
        await container.database().create_db_and_tables()
        Logger.base.info('🗄️ [Ticketing] SQLite tables ensured')

    Logger.base.info('✅ [Ticketing] Ready to serve requests')

    yield

    Logger.base.info('🛑 [Ticketing] Shutting down...')
    await cleanup()
    container.unwire()
    Logger.base.info('👋 [Ticketing] Shutdown complete')


app = create_app(
    lifespan=lifespan,
    description='Event ticketing core: orders, payment settlement, e-ticket issuance and check-in',
)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
