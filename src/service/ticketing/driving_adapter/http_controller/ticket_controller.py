from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.check_in_ticket_use_case import CheckInTicketUseCase
from src.service.ticketing.app.dto.page import PageRequest
from src.service.ticketing.app.query.get_ticket_use_case import GetTicketUseCase
from src.service.ticketing.app.query.list_paid_tickets_use_case import ListPaidTicketsUseCase
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.value_object.capability import Capability
from src.service.ticketing.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
    require_capability,
)
from src.service.ticketing.driving_adapter.http_controller.schema.common_schema import (
    ApiResponse,
    PaginationMeta,
)
from src.service.ticketing.driving_adapter.http_controller.schema.ticket_schema import (
    CheckInResponse,
    TicketResponse,
)


router = APIRouter()


@router.get('/my', response_model=ApiResponse[list[TicketResponse]])
@Logger.io
async def list_my_tickets(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    current_user: UserEntity = Depends(require_capability(Capability.VIEW_OWN_ORDERS)),
    use_case: ListPaidTicketsUseCase = Depends(ListPaidTicketsUseCase.depends),
) -> ApiResponse[list[TicketResponse]]:
    result = await use_case.list_paid_tickets(
        page_request=PageRequest.of(page=page, limit=limit), user_id=current_user.id or 0
    )
    return ApiResponse(
        status=status.HTTP_200_OK,
        message='Tickets retrieved successfully.',
        data=[TicketResponse.model_validate(ticket) for ticket in result.items],
        pagination=PaginationMeta.from_page(result),
    )


@router.get('/paid', response_model=ApiResponse[list[TicketResponse]])
@Logger.io
async def list_paid_tickets(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    current_user: UserEntity = Depends(require_capability(Capability.LIST_ALL_TICKETS)),
    use_case: ListPaidTicketsUseCase = Depends(ListPaidTicketsUseCase.depends),
) -> ApiResponse[list[TicketResponse]]:
    result = await use_case.list_paid_tickets(page_request=PageRequest.of(page=page, limit=limit))
    return ApiResponse(
        status=status.HTTP_200_OK,
        message='Paid tickets retrieved successfully.',
        data=[TicketResponse.model_validate(ticket) for ticket in result.items],
        pagination=PaginationMeta.from_page(result),
    )


@router.get('/{ticket_code}', response_model=ApiResponse[TicketResponse])
@Logger.io
async def get_ticket(
    ticket_code: str,
    current_user: UserEntity = Depends(get_current_user),
    use_case: GetTicketUseCase = Depends(GetTicketUseCase.depends),
) -> ApiResponse[TicketResponse]:
    ticket = await use_case.get_ticket(ticket_code=ticket_code, current_user=current_user)
    return ApiResponse(
        status=status.HTTP_200_OK,
        message='Ticket retrieved successfully.',
        data=TicketResponse.model_validate(ticket),
    )


@router.post('/{ticket_code}/check-in', response_model=ApiResponse[CheckInResponse])
@Logger.io
async def check_in_ticket(
    ticket_code: str,
    current_user: UserEntity = Depends(require_capability(Capability.CHECK_IN_TICKET)),
    use_case: CheckInTicketUseCase = Depends(CheckInTicketUseCase.depends),
) -> ApiResponse[CheckInResponse]:
    ticket = await use_case.execute(ticket_code=ticket_code, admin_user_id=current_user.id or 0)
    assert ticket.check_in_time is not None and ticket.checked_in_by_user_id is not None
    return ApiResponse(
        status=status.HTTP_200_OK,
        message='Ticket checked in successfully.',
        data=CheckInResponse(
            unique_code=ticket.unique_code,
            status=ticket.status.value,
            check_in_time=ticket.check_in_time,
            checked_in_by_user_id=ticket.checked_in_by_user_id,
        ),
    )
