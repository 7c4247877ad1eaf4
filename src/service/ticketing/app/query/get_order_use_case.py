from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.query.upload_url import to_public_upload_url
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.value_object.capability import Capability, has_capability


class GetOrderUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def get_order(self, *, order_code: str, current_user: UserEntity) -> dict:
        """Order with lines and issued tickets; owner or VIEW_ANY_ORDER only"""
        async with self.uow:
            order = await self.uow.order_query_repo.get_detail_by_code(order_code=order_code)

        if not order:
            raise NotFoundError('Order not found.')

        if order['user_id'] != current_user.id and not has_capability(
            current_user.role, Capability.VIEW_ANY_ORDER
        ):
            raise ForbiddenError('You do not have permission to view this order.')

        for ticket in order['tickets']:
            ticket['qr_code_url'] = to_public_upload_url(ticket['qr_code_url'])
        return order
