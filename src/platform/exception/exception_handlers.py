from typing import Any, Callable, Coroutine, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from src.platform.exception.exceptions import CustomBaseError, ErrorCode, InternalError
from src.platform.logging.loguru_io import Logger

# Type alias for exception handlers (compatible with Starlette's expected signature)
ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]


def _failure(
    *, status_code: int, message: str, code: str, data: Optional[Any] = None
) -> JSONResponse:
    content: dict[str, Any] = {
        'success': False,
        'status': status_code,
        'message': message,
        'code': code,
    }
    if data is not None:
        content['data'] = jsonable_encoder(data)
    return JSONResponse(status_code=status_code, content=content)


async def custom_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, CustomBaseError) else InternalError()
    return _failure(status_code=error.status_code, message=error.message, code=error.code)


async def value_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return _failure(
        status_code=status.HTTP_400_BAD_REQUEST, message=str(exc), code=ErrorCode.DOMAIN_ERROR
    )


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, RequestValidationError) else RequestValidationError([])
    return _failure(
        status_code=status.HTTP_400_BAD_REQUEST,
        message='Invalid request payload',
        code=ErrorCode.DOMAIN_ERROR,
        data=error.errors(),
    )


async def general_500_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    if not getattr(exc, '_has_logged', False):
        Logger.base.opt(exception=exc).error(
            f'💥 [HTTP] Unhandled error on {request.method} {request.url.path}'
        )
    return _failure(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message='Internal server error',
        code=ErrorCode.INTERNAL_ERROR,
    )


# Exception handler mapping
EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    CustomBaseError: custom_error_handler,
    ValueError: value_error_handler,
    RequestValidationError: validation_error_handler,
    Exception: general_500_exception_handler,  # Catch-all for unhandled exceptions
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
