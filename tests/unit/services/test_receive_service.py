import asyncio

import pytest
from sqlalchemy import func, select

from luxselle.core.exceptions import AlreadyReceivedError
from luxselle.models.activity_event import ActivityEvent
from luxselle.models.buying_list import BuyingListItem
from luxselle.models.product import Product
from luxselle.models.transaction import Transaction
from luxselle.repos.buying_list import BuyingListRepo
from luxselle.services.receive_service import ReceiveService


@pytest.fixture
async def pending_item(session_factory):
    async with session_factory() as session:
        item = await BuyingListRepo(session).create(
            {"brand": "Chanel", "model": "Classic Flap", "targetBuyPriceEur": 5000}
        )
        await session.commit()
        return item.id


async def count_rows(session_factory, model) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(model))


async def receive_outcome(session_factory, item_id: str) -> str:
    async with session_factory() as session:
        try:
            await ReceiveService(session).receive_item(item_id)
        except AlreadyReceivedError:
            return "already_received"
        return "ok"


async def test_concurrent_receives_commit_once(session_factory, pending_item):
    outcomes = await asyncio.gather(
        receive_outcome(session_factory, pending_item),
        receive_outcome(session_factory, pending_item),
    )

    assert sorted(outcomes) == ["already_received", "ok"]
    assert await count_rows(session_factory, Product) == 1
    assert await count_rows(session_factory, Transaction) == 1


async def test_receive_that_loses_the_race_writes_nothing(session_factory, pending_item):
    class InterleavedReceive(ReceiveService):
        async def _lock_item(self, item_id):
            item = await super()._lock_item(item_id)
            # another caller receives the item between our read and our update
            assert await receive_outcome(session_factory, item_id) == "ok"
            return item

    async with session_factory() as session:
        with pytest.raises(AlreadyReceivedError):
            await InterleavedReceive(session).receive_item(pending_item)

    assert await count_rows(session_factory, Product) == 1
    assert await count_rows(session_factory, Transaction) == 1
    async with session_factory() as session:
        events = await session.scalar(
            select(func.count()).select_from(ActivityEvent).where(ActivityEvent.event_type == "buylist_received")
        )
        item = await session.get(BuyingListItem, pending_item)
    assert events == 1
    assert item.status == "received"
