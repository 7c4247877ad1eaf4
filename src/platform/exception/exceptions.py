from enum import StrEnum


class ErrorCode(StrEnum):
    DOMAIN_ERROR = 'DOMAIN_ERROR'
    NOT_FOUND = 'NOT_FOUND'
    UNAUTHORIZED = 'UNAUTHORIZED'
    FORBIDDEN = 'FORBIDDEN'
    INVALID_STATE_TRANSITION = 'INVALID_STATE_TRANSITION'
    SOLD_OUT = 'SOLD_OUT'
    INSUFFICIENT_INVENTORY = 'INSUFFICIENT_INVENTORY'
    DUPLICATE_PURCHASE = 'DUPLICATE_PURCHASE'
    INSUFFICIENT_PAYMENT = 'INSUFFICIENT_PAYMENT'
    EVENT_NOT_ACTIVE = 'EVENT_NOT_ACTIVE'
    CHECKIN_NOT_OPEN = 'CHECKIN_NOT_OPEN'
    ALREADY_CHECKED_IN = 'ALREADY_CHECKED_IN'
    RENDER_ERROR = 'RENDER_ERROR'
    INTERNAL_ERROR = 'INTERNAL_ERROR'


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    code: ErrorCode = ErrorCode.DOMAIN_ERROR

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class NotFoundError(CustomBaseError):
    code = ErrorCode.NOT_FOUND

    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class AuthenticationError(CustomBaseError):
    code = ErrorCode.UNAUTHORIZED

    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class ForbiddenError(CustomBaseError):
    code = ErrorCode.FORBIDDEN

    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class ConflictError(CustomBaseError):
    """Terminal state conflicts: retrying the same request will not help."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class InvalidStateTransitionError(ConflictError):
    code = ErrorCode.INVALID_STATE_TRANSITION


class SoldOutError(ConflictError):
    code = ErrorCode.SOLD_OUT


class InsufficientInventoryError(ConflictError):
    code = ErrorCode.INSUFFICIENT_INVENTORY


class DuplicatePurchaseError(ConflictError):
    code = ErrorCode.DUPLICATE_PURCHASE


class AlreadyCheckedInError(ConflictError):
    code = ErrorCode.ALREADY_CHECKED_IN


class InsufficientPaymentError(DomainError):
    code = ErrorCode.INSUFFICIENT_PAYMENT


class EventNotActiveError(DomainError):
    code = ErrorCode.EVENT_NOT_ACTIVE


class CheckinNotOpenError(DomainError):
    code = ErrorCode.CHECKIN_NOT_OPEN


class RenderError(CustomBaseError):
    code = ErrorCode.RENDER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message, 500)


class InternalError(CustomBaseError):
    code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str = 'Internal server error') -> None:
        super().__init__(message, 500)
