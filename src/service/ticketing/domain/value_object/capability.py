from enum import StrEnum

from src.service.ticketing.domain.entity.user_entity import UserRole


class Capability(StrEnum):
    PLACE_ORDER = 'place_order'
    VIEW_OWN_ORDERS = 'view_own_orders'
    VIEW_ANY_ORDER = 'view_any_order'
    LIST_ALL_ORDERS = 'list_all_orders'
    VIEW_ANY_TICKET = 'view_any_ticket'
    LIST_ALL_TICKETS = 'list_all_tickets'
    CHECK_IN_TICKET = 'check_in_ticket'


ROLE_CAPABILITIES: dict[UserRole, frozenset[Capability]] = {
    UserRole.USER: frozenset({Capability.PLACE_ORDER, Capability.VIEW_OWN_ORDERS}),
    UserRole.ADMIN: frozenset(Capability),
}


def has_capability(role: UserRole, capability: Capability) -> bool:
    return capability in ROLE_CAPABILITIES.get(role, frozenset())
