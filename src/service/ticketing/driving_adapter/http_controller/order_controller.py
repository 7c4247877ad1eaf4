from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Request, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.cancel_order_use_case import CancelOrderUseCase
from src.service.ticketing.app.command.create_order_use_case import CreateOrderUseCase
from src.service.ticketing.app.command.handle_payment_callback_use_case import (
    HandlePaymentCallbackUseCase,
)
from src.service.ticketing.app.command.manual_checkout_use_case import ManualCheckoutUseCase
from src.service.ticketing.app.dto.page import PageRequest
from src.service.ticketing.app.query.get_order_use_case import GetOrderUseCase
from src.service.ticketing.app.query.list_orders_use_case import ListOrdersUseCase
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.value_object.capability import Capability
from src.service.ticketing.driving_adapter.http_controller.auth.role_auth import (
    require_capability,
)
from src.service.ticketing.driving_adapter.http_controller.schema.common_schema import (
    ApiResponse,
    PaginationMeta,
)
from src.service.ticketing.driving_adapter.http_controller.schema.order_schema import (
    CancelOrderResponse,
    CreateOrderRequest,
    CreateOrderResponse,
    ManualCheckoutRequest,
    OrderResponse,
    PaymentCallbackRequest,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post(
    '',
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[CreateOrderResponse],
)
@Logger.io
async def create_order(
    request: CreateOrderRequest,
    current_user: UserEntity = Depends(require_capability(Capability.PLACE_ORDER)),
    use_case: CreateOrderUseCase = Depends(CreateOrderUseCase.depends),
) -> ApiResponse[CreateOrderResponse]:
    with tracer.start_as_current_span('controller.create_order') as span:
        span.set_attribute('user.id', current_user.id or 0)

        order = await use_case.create_order(
            user_id=current_user.id or 0,
            ticket_type_ids=[item.ticket_type_id for item in request.items],
        )
        span.set_attribute('order.code', order.order_code)

        return ApiResponse(
            status=status.HTTP_201_CREATED,
            message='Order created successfully. Proceed to manual checkout when ready.',
            data=CreateOrderResponse(
                order_code=order.order_code, total_amount=order.total_amount
            ),
        )


@router.post(
    '/payment-callback',
    response_model=ApiResponse[None],
    openapi_extra={
        'requestBody': {
            'content': {'application/json': {'schema': PaymentCallbackRequest.model_json_schema()}},
            'required': True,
        }
    },
)
@Logger.io
async def payment_callback(
    request: Request,
    x_callback_signature: Optional[str] = Header(None, alias='X-Callback-Signature'),
    use_case: HandlePaymentCallbackUseCase = Depends(HandlePaymentCallbackUseCase.depends),
) -> ApiResponse[None]:
    """Gateway webhook: always acknowledged with 200 so the sender does not retry"""
    body = await request.body()
    message = await use_case.handle(body=body, signature=x_callback_signature)
    return ApiResponse(status=status.HTTP_200_OK, message=message)


@router.get('', response_model=ApiResponse[list[OrderResponse]])
@Logger.io
async def list_my_orders(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    current_user: UserEntity = Depends(require_capability(Capability.VIEW_OWN_ORDERS)),
    use_case: ListOrdersUseCase = Depends(ListOrdersUseCase.depends),
) -> ApiResponse[list[OrderResponse]]:
    result = await use_case.list_user_orders(
        user_id=current_user.id or 0, page_request=PageRequest.of(page=page, limit=limit)
    )
    return ApiResponse(
        status=status.HTTP_200_OK,
        message='Orders retrieved successfully.',
        data=[OrderResponse.model_validate(order) for order in result.items],
        pagination=PaginationMeta.from_page(result),
    )


@router.get('/all', response_model=ApiResponse[list[OrderResponse]])
@Logger.io
async def list_all_orders(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    current_user: UserEntity = Depends(require_capability(Capability.LIST_ALL_ORDERS)),
    use_case: ListOrdersUseCase = Depends(ListOrdersUseCase.depends),
) -> ApiResponse[list[OrderResponse]]:
    result = await use_case.list_all_orders(page_request=PageRequest.of(page=page, limit=limit))
    return ApiResponse(
        status=status.HTTP_200_OK,
        message='All orders retrieved successfully.',
        data=[OrderResponse.model_validate(order) for order in result.items],
        pagination=PaginationMeta.from_page(result),
    )


@router.get('/{order_code}', response_model=ApiResponse[OrderResponse])
@Logger.io
async def get_order(
    order_code: str,
    current_user: UserEntity = Depends(require_capability(Capability.VIEW_OWN_ORDERS)),
    use_case: GetOrderUseCase = Depends(GetOrderUseCase.depends),
) -> ApiResponse[OrderResponse]:
    order = await use_case.get_order(order_code=order_code, current_user=current_user)
    return ApiResponse(
        status=status.HTTP_200_OK,
        message='Order retrieved successfully.',
        data=OrderResponse.model_validate(order),
    )


@router.post('/{order_code}/cancel', response_model=ApiResponse[CancelOrderResponse])
@Logger.io
async def cancel_order(
    order_code: str,
    current_user: UserEntity = Depends(require_capability(Capability.PLACE_ORDER)),
    use_case: CancelOrderUseCase = Depends(CancelOrderUseCase.depends),
) -> ApiResponse[CancelOrderResponse]:
    order = await use_case.execute(order_code=order_code, user_id=current_user.id or 0)
    return ApiResponse(
        status=status.HTTP_200_OK,
        message='Order canceled successfully.',
        data=CancelOrderResponse(
            order_code=order.order_code, payment_status=order.payment_status.value
        ),
    )


@router.post('/{order_code}/checkout-manual', response_model=ApiResponse[OrderResponse])
@Logger.io
async def manual_checkout(
    order_code: str,
    request: ManualCheckoutRequest,
    current_user: UserEntity = Depends(require_capability(Capability.PLACE_ORDER)),
    use_case: ManualCheckoutUseCase = Depends(ManualCheckoutUseCase.depends),
) -> ApiResponse[OrderResponse]:
    with tracer.start_as_current_span('controller.manual_checkout') as span:
        span.set_attribute('order.code', order_code)
        span.set_attribute('user.id', current_user.id or 0)

        result = await use_case.execute(
            order_code=order_code,
            user_id=current_user.id or 0,
            payment_method=request.payment_method,
            payment_amount=request.payment_amount,
            transaction_reference=request.transaction_reference,
            payment_date=request.payment_date,
        )

        message = (
            'Order is already paid.'
            if result.already_paid
            else 'Manual checkout successful. Order marked as paid and tickets generated.'
        )
        return ApiResponse(
            status=status.HTTP_200_OK,
            message=message,
            data=OrderResponse.model_validate(result.order),
        )
