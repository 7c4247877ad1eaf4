from typing import List

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_qr_code_renderer import IQrCodeRenderer
from src.service.ticketing.domain.entity.order_entity import Order
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.value_object.code_generator import generate_ticket_code


class TicketIssuanceEngine:
    """
    Turns the lines of an order that is becoming `paid` into tickets, one per line.

    Stateless: it works on the caller's unit of work, so tickets are written in the same
    transaction as the status change. A RenderError from the QR renderer propagates and the
    caller's transaction rolls back with it.
    """

    def __init__(self, *, qr_renderer: IQrCodeRenderer) -> None:
        self.qr_renderer = qr_renderer

    @Logger.io
    async def issue(
        self, *, uow: AbstractUnitOfWork, order: Order, buyer: UserEntity
    ) -> List[Ticket]:
        tickets: List[Ticket] = []
        for line in order.lines:
            unique_code = generate_ticket_code()
            qr_code_url = await self.qr_renderer.render(code=unique_code)

            ticket = Ticket.issue(
                order_line=line,
                buyer=buyer,
                unique_code=unique_code,
                qr_code_url=qr_code_url,
            )
            tickets.append(await uow.ticket_command_repo.create(ticket=ticket))

        Logger.base.info(f'🎫 [ISSUE] {len(tickets)} ticket(s) issued for order {order.order_code}')
        return tickets
