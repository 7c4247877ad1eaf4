"""
Integration tests for InventoryLedgerImpl on a real database

Test Focus:
1. reserve increments `sold` until the quota, then reports sold out
2. Ticket types without a quota cannot be reserved
3. release decrements `sold` and refuses to go below zero
"""

import pytest

from src.platform.exception.exceptions import (
    InsufficientInventoryError,
    InternalError,
    NotFoundError,
    SoldOutError,
)


@pytest.mark.integration
class TestInventoryLedger:
    async def _reserve(self, uow_factory, ticket_type_id: int) -> int:
        async with uow_factory() as uow:
            sold = await uow.inventory_ledger.reserve(ticket_type_id=ticket_type_id)
            await uow.commit()
        return sold

    async def _release(self, uow_factory, ticket_type_id: int) -> int:
        async with uow_factory() as uow:
            sold = await uow.inventory_ledger.release(ticket_type_id=ticket_type_id)
            await uow.commit()
        return sold

    async def test_reserve_until_sold_out(self, seed, uow_factory):
        # Given
        ticket_type_id = seed.ticket_type(event_id=seed.event(), quota=2)

        # When
        assert await self._reserve(uow_factory, ticket_type_id) == 1
        assert await self._reserve(uow_factory, ticket_type_id) == 2

        # Then
        with pytest.raises(SoldOutError):
            await self._reserve(uow_factory, ticket_type_id)
        assert seed.sold(ticket_type_id) == 2

    async def test_reserve_without_quota(self, seed, uow_factory):
        ticket_type_id = seed.ticket_type(event_id=seed.event(), quota=None)

        with pytest.raises(InsufficientInventoryError):
            await self._reserve(uow_factory, ticket_type_id)
        assert seed.sold(ticket_type_id) == 0

    async def test_reserve_unknown_type(self, uow_factory):
        with pytest.raises(NotFoundError):
            await self._reserve(uow_factory, 987654)

    async def test_uncommitted_reservation_is_rolled_back(self, seed, uow_factory):
        ticket_type_id = seed.ticket_type(event_id=seed.event(), quota=2)

        async with uow_factory() as uow:
            await uow.inventory_ledger.reserve(ticket_type_id=ticket_type_id)

        assert seed.sold(ticket_type_id) == 0

    async def test_release(self, seed, uow_factory):
        ticket_type_id = seed.ticket_type(event_id=seed.event(), quota=5, sold=3)

        assert await self._release(uow_factory, ticket_type_id) == 2
        assert seed.sold(ticket_type_id) == 2

    async def test_release_never_goes_negative(self, seed, uow_factory):
        ticket_type_id = seed.ticket_type(event_id=seed.event(), quota=5, sold=0)

        with pytest.raises(InternalError):
            await self._release(uow_factory, ticket_type_id)
        assert seed.sold(ticket_type_id) == 0
