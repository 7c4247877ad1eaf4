"""
Stateless JWT identity

Tokens are issued elsewhere; the core only decodes them. create_jwt_token is kept for operators
and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError, ForbiddenError
from src.service.ticketing.domain.entity.user_entity import UserEntity, UserRole


IDENTITY_CLAIMS = ('user_id', 'email', 'name', 'role')


class JwtAuth:
    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.ttl = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    def create_jwt_token(self, user_entity: UserEntity) -> str:
        issued_at = datetime.now(timezone.utc)
        claims: Dict[str, Any] = {
            'sub': str(user_entity.id),
            'iat': issued_at,
            'exp': issued_at + self.ttl,
            'user_id': user_entity.id,
            'email': user_entity.email,
            'name': user_entity.name,
            'role': user_entity.role.value,
            'is_active': user_entity.is_active,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as e:
            raise AuthenticationError('Token has expired.') from e
        except jwt.PyJWTError as e:
            raise AuthenticationError('Invalid token.') from e

    def get_current_user_info_from_jwt(self, token: Optional[str]) -> UserEntity:
        """
        Rebuild the caller from the token claims alone; no user lookup is made.

        Raises:
            AuthenticationError: Missing, expired, or malformed token
            ForbiddenError: Token belongs to an inactive user
        """
        if not token:
            raise AuthenticationError('Not authenticated.')

        claims = self.decode_jwt_token(token)
        if any(not claims.get(name) for name in IDENTITY_CLAIMS) or claims.get('is_active') is None:
            raise AuthenticationError('Invalid token.')

        try:
            role = UserRole(claims['role'])
        except ValueError as e:
            raise AuthenticationError('Invalid token.') from e

        if not claims['is_active']:
            raise ForbiddenError('User is inactive.')

        return UserEntity(
            id=claims['user_id'],
            email=claims['email'],
            name=claims['name'],
            role=role,
            is_active=True,
        )
