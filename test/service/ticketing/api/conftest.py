"""API test helpers: place and pay orders through the HTTP surface."""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from fastapi.testclient import TestClient
import pytest

from src.service.ticketing.domain.entity.user_entity import UserEntity


ORDERS = '/api/orders'
TICKETS = '/api/tickets'


@pytest.fixture
def place_order(client: TestClient, auth_headers) -> Callable[..., dict[str, Any]]:
    def _place(user: UserEntity, *ticket_type_ids: int) -> dict[str, Any]:
        response = client.post(
            ORDERS,
            json={'items': [{'ticket_type_id': tid} for tid in ticket_type_ids]},
            headers=auth_headers(user),
        )
        assert response.status_code == 201, response.text
        return response.json()['data']

    return _place


@pytest.fixture
def paid_ticket(
    seed, client: TestClient, auth_headers, place_order
) -> Callable[..., tuple[UserEntity, dict[str, Any]]]:
    """Buyer with one paid order for a fresh event; returns (buyer, ticket)"""

    def _buy(
        *, email: str = 'holder@test.com', starts_in: Optional[timedelta] = None
    ) -> tuple[UserEntity, dict[str, Any]]:
        buyer = seed.user(email=email, name='Ticket Holder')
        event_id = seed.event(
            start_time=datetime.now(timezone.utc) + (starts_in or timedelta(days=7))
        )
        ticket_type_id = seed.ticket_type(event_id=event_id, price='80.00')
        order = place_order(buyer, ticket_type_id)

        response = client.post(
            f"{ORDERS}/{order['order_code']}/checkout-manual",
            json={'payment_method': 'cash', 'payment_amount': '80.00'},
            headers=auth_headers(buyer),
        )
        assert response.status_code == 200, response.text
        return buyer, response.json()['data']['tickets'][0]

    return _buy
