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


class GetTicketUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def get_ticket(self, *, ticket_code: str, current_user: UserEntity) -> dict:
        async with self.uow:
            ticket = await self.uow.ticket_query_repo.get_detail_by_code(unique_code=ticket_code)

        if not ticket:
            raise NotFoundError('Ticket not found.')

        if ticket['user_id'] != current_user.id and not has_capability(
            current_user.role, Capability.VIEW_ANY_TICKET
        ):
            raise ForbiddenError('You do not have permission to view this ticket.')

        ticket['qr_code_url'] = to_public_upload_url(ticket['qr_code_url'])
        return ticket
