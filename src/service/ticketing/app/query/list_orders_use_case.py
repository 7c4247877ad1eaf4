from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.page import Page, PageRequest


class ListOrdersUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def list_user_orders(self, *, user_id: int, page_request: PageRequest) -> Page:
        async with self.uow:
            orders, total = await self.uow.order_query_repo.list_by_user(
                user_id=user_id, page=page_request.page, limit=page_request.limit
            )
        return Page(
            items=orders,
            total_items=total,
            current_page=page_request.page,
            limit=page_request.limit,
        )

    @Logger.io
    async def list_all_orders(self, *, page_request: PageRequest) -> Page:
        async with self.uow:
            orders, total = await self.uow.order_query_repo.list_all(
                page=page_request.page, limit=page_request.limit
            )
        return Page(
            items=orders,
            total_items=total,
            current_page=page_request.page,
            limit=page_request.limit,
        )
