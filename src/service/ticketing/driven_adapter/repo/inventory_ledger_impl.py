from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import (
    InsufficientInventoryError,
    InternalError,
    NotFoundError,
    SoldOutError,
)
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_inventory_ledger import IInventoryLedger
from src.service.ticketing.domain.entity.ticket_type_entity import TicketTypeEntity
from src.service.ticketing.driven_adapter.model.ticket_type_model import TicketTypeModel


class InventoryLedgerImpl(IInventoryLedger):
    """
    Ledger over ticket_type.sold.

    reserve/release are single conditional UPDATE ... RETURNING statements, so the check and the
    write happen under the row lock the database takes for the update. On Postgres a competing
    writer blocks and re-evaluates the WHERE clause after the winner commits; on SQLite the whole
    database is write-locked for the transaction.
    """

    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_ticket_type(self, *, ticket_type_id: int) -> Optional[TicketTypeEntity]:
        result = await self.session.execute(
            select(TicketTypeModel)
            .where(
                TicketTypeModel.id == ticket_type_id,
                TicketTypeModel.deleted_at.is_(None),
            )
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def reserve(self, *, ticket_type_id: int) -> int:
        result = await self.session.execute(
            update(TicketTypeModel)
            .where(
                TicketTypeModel.id == ticket_type_id,
                TicketTypeModel.deleted_at.is_(None),
                TicketTypeModel.quota.is_not(None),
                TicketTypeModel.sold < TicketTypeModel.quota,
            )
            .values(sold=TicketTypeModel.sold + 1)
            .returning(TicketTypeModel.sold)
            .execution_options(synchronize_session=False)
        )
        new_sold = result.scalar_one_or_none()
        if new_sold is not None:
            return new_sold

        # Nothing updated: explain why
        ticket_type = await self.get_ticket_type(ticket_type_id=ticket_type_id)
        if ticket_type is None:
            raise NotFoundError(f'Ticket type {ticket_type_id} not found.')
        if ticket_type.remaining is None:
            raise InsufficientInventoryError(
                f"Ticket type '{ticket_type.name}' does not have a defined quota."
            )
        raise SoldOutError(f"Tickets for '{ticket_type.name}' are sold out.")

    @Logger.io
    async def release(self, *, ticket_type_id: int) -> int:
        result = await self.session.execute(
            update(TicketTypeModel)
            .where(TicketTypeModel.id == ticket_type_id, TicketTypeModel.sold > 0)
            .values(sold=TicketTypeModel.sold - 1)
            .returning(TicketTypeModel.sold)
            .execution_options(synchronize_session=False)
        )
        new_sold = result.scalar_one_or_none()
        if new_sold is None:
            Logger.base.error(
                f'🧮 [LEDGER] Release without reservation for ticket type {ticket_type_id}'
            )
            raise InternalError('Inventory ledger is inconsistent. The operation was not applied.')
        return new_sold

    @staticmethod
    def _to_entity(model: TicketTypeModel) -> TicketTypeEntity:
        return TicketTypeEntity(
            id=model.id,
            event_id=model.event_id,
            name=model.name,
            price=model.price,
            quota=model.quota,
            sold=model.sold,
            sale_start_date=model.sale_start_date,
            sale_end_date=model.sale_end_date,
            deleted_at=model.deleted_at,
        )
