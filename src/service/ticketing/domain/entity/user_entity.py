from datetime import datetime
from enum import Enum
from typing import Optional

import attrs

from src.platform.exception.exceptions import NotFoundError


class UserRole(str, Enum):
    USER = 'user'
    ADMIN = 'admin'


@attrs.define
class UserEntity:
    email: str = ''
    name: str = ''
    id: Optional[int] = None
    role: UserRole = UserRole.USER
    is_active: bool = True
    created_at: Optional[datetime] = None

    @staticmethod
    def validate_user_exists(user_entity: Optional['UserEntity']) -> 'UserEntity':
        if not user_entity:
            raise NotFoundError('User not found.')
        return user_entity
