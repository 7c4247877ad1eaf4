from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.page import Page, PageRequest
from src.service.ticketing.app.query.upload_url import to_public_upload_url


class ListPaidTicketsUseCase:
    """Tickets belonging to paid orders, newest first"""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def list_paid_tickets(
        self, *, page_request: PageRequest, user_id: Optional[int] = None
    ) -> Page:
        """user_id=None lists every user's tickets"""
        async with self.uow:
            tickets, total = await self.uow.ticket_query_repo.list_paid(
                page=page_request.page, limit=page_request.limit, user_id=user_id
            )

        for ticket in tickets:
            ticket['qr_code_url'] = to_public_upload_url(ticket['qr_code_url'])
        return Page(
            items=tickets,
            total_items=total,
            current_page=page_request.page,
            limit=page_request.limit,
        )
