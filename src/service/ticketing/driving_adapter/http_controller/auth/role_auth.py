from typing import Awaitable, Callable, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Cookie, Depends, Header
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.value_object.capability import Capability, has_capability
from src.service.ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


AUTH_COOKIE_NAME = 'fastapiusersauth'


@inject
async def get_current_user(
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    token: Optional[str] = Cookie(None, alias=AUTH_COOKIE_NAME),
    authorization: Optional[str] = Header(None),
) -> UserEntity:
    """Identity from the auth cookie, falling back to an `Authorization: Bearer` header"""
    if not token and authorization:
        scheme, _, credentials = authorization.partition(' ')
        if scheme.lower() == 'bearer' and credentials:
            token = credentials.strip()
    return jwt_auth.get_current_user_info_from_jwt(token)


def require_capability(capability: Capability) -> Callable[..., Awaitable[UserEntity]]:
    async def _require(current_user: UserEntity = Depends(get_current_user)) -> UserEntity:
        tracer = trace.get_tracer(__name__)
        with tracer.start_as_current_span(
            'auth.require_capability',
            attributes={
                'user.id': current_user.id or 0,
                'user.role': current_user.role.value,
                'auth.capability': capability.value,
            },
        ):
            if not has_capability(current_user.role, capability):
                raise ForbiddenError("You don't have permission to perform this action.")
            return current_user

    return _require
