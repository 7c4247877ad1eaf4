"""
Unit of Work Pattern

Architecture:
- UoW owns the session lifecycle: every `async with uow:` block is one transaction
- Repositories are stateless and bound to the block's session when it opens
- Leaving the block without commit() rolls back
- Persistence failures inside the block surface as InternalError
"""

from __future__ import annotations

import abc
from types import TracebackType
from typing import TYPE_CHECKING, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.platform.exception.exceptions import InternalError
from src.platform.logging.loguru_io import Logger


if TYPE_CHECKING:
    from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
    from src.service.ticketing.app.interface.i_inventory_ledger import IInventoryLedger
    from src.service.ticketing.app.interface.i_order_command_repo import IOrderCommandRepo
    from src.service.ticketing.app.interface.i_order_query_repo import IOrderQueryRepo
    from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
    from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
    from src.service.ticketing.app.interface.i_user_query_repo import IUserQueryRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work for the ticketing service

    Usage:
        async with uow:
            order = await uow.order_command_repo.create(order=...)
            await uow.commit()
    """

    # Order repositories
    order_command_repo: IOrderCommandRepo
    order_query_repo: IOrderQueryRepo

    # Inventory
    inventory_ledger: IInventoryLedger

    # Ticket repositories
    ticket_command_repo: ITicketCommandRepo
    ticket_query_repo: ITicketQueryRepo

    # Lookups
    event_query_repo: IEventQueryRepo
    user_query_repo: IUserQueryRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.rollback()

    async def commit(self) -> None:
        """Commit the transaction"""
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> AbstractUnitOfWork:
        from src.service.ticketing.driven_adapter.repo.event_query_repo_impl import (
            EventQueryRepoImpl,
        )
        from src.service.ticketing.driven_adapter.repo.inventory_ledger_impl import (
            InventoryLedgerImpl,
        )
        from src.service.ticketing.driven_adapter.repo.order_command_repo_impl import (
            OrderCommandRepoImpl,
        )
        from src.service.ticketing.driven_adapter.repo.order_query_repo_impl import (
            OrderQueryRepoImpl,
        )
        from src.service.ticketing.driven_adapter.repo.ticket_command_repo_impl import (
            TicketCommandRepoImpl,
        )
        from src.service.ticketing.driven_adapter.repo.ticket_query_repo_impl import (
            TicketQueryRepoImpl,
        )
        from src.service.ticketing.driven_adapter.repo.user_query_repo_impl import (
            UserQueryRepoImpl,
        )

        self.session = self.session_factory()

        # Every repository shares the block's session (and transaction)
        self.order_command_repo = OrderCommandRepoImpl(session=self.session)
        self.order_query_repo = OrderQueryRepoImpl(session=self.session)
        self.inventory_ledger = InventoryLedgerImpl(session=self.session)
        self.ticket_command_repo = TicketCommandRepoImpl(session=self.session)
        self.ticket_query_repo = TicketQueryRepoImpl(session=self.session)
        self.event_query_repo = EventQueryRepoImpl(session=self.session)
        self.user_query_repo = UserQueryRepoImpl(session=self.session)

        return await super().__aenter__()

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        try:
            await super().__aexit__(exc_type, exc, tb)
        finally:
            if self.session is not None:
                await self.session.close()
                self.session = None

        if isinstance(exc, SQLAlchemyError):
            Logger.base.opt(exception=exc).error(
                f'🗄️ [UOW] Transaction rolled back: {type(exc).__name__}'
            )
            raise InternalError('A database error occurred. The operation was not applied.') from exc

    async def _commit(self) -> None:
        assert self.session is not None, 'commit() called outside of `async with uow`'
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
