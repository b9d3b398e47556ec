"""
Converts a buying list item into owned inventory.

Everything in receive_item() is one unit of work: the product, the purchase
transaction, the activity event and the status flip are committed together
or rolled back together. The item is re-read inside that unit with a row
lock and the flip is a conditional update, so two concurrent receives of
the same item cannot both commit.
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.core.enums import (
    ActivityEventType,
    BuyingListStatus,
    DEFAULT_ORG_ID,
    ProductStatus,
    TransactionType,
)
from luxselle.core.exceptions import AlreadyReceivedError, NotFoundError
from luxselle.core.utils import round_money, utc_now
from luxselle.models.buying_list import BuyingListItem
from luxselle.models.product import Product
from luxselle.models.transaction import Transaction
from luxselle.repos.settings import SettingsRepo
from luxselle.schemas.buying_list import BuyingListItemRead, ReceiveResult
from luxselle.schemas.product import ProductRead
from luxselle.services.activity_logger import ActivityLogger

logger = logging.getLogger(__name__)


class ReceiveService:
    def __init__(self, db: AsyncSession, organisation_id: str = DEFAULT_ORG_ID, actor: str = "system"):
        self.db = db
        self.organisation_id = organisation_id
        self.actor = actor
        self.activity = ActivityLogger(db, organisation_id)
        self.settings_repo = SettingsRepo(db, organisation_id)

    async def _lock_item(self, item_id: str) -> BuyingListItem:
        result = await self.db.execute(
            select(BuyingListItem)
            .where(
                BuyingListItem.id == item_id,
                BuyingListItem.organisation_id == self.organisation_id,
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        item = result.scalar_one_or_none()
        if item is None:
            raise NotFoundError("Buying list item", item_id)
        if item.status == BuyingListStatus.RECEIVED.value:
            raise AlreadyReceivedError(item_id)
        return item

    async def _mark_received(self, item: BuyingListItem, now) -> None:
        result = await self.db.execute(
            update(BuyingListItem)
            .where(
                BuyingListItem.id == item.id,
                BuyingListItem.status != BuyingListStatus.RECEIVED.value,
            )
            .values(status=BuyingListStatus.RECEIVED.value, updated_at=now, updated_by=self.actor)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            # Lost the race to another receive of the same item
            raise AlreadyReceivedError(item.id)

    async def receive_item(self, item_id: str) -> ReceiveResult:
        """
        Receive a buying list item.

        Raises:
            NotFoundError: The item does not exist (nothing is written)
            AlreadyReceivedError: The item was already received (nothing is written)
        """
        try:
            item = await self._lock_item(item_id)
            effective = await self.settings_repo.get_effective()
            now = utc_now()

            product = Product(
                organisation_id=self.organisation_id,
                brand=item.brand,
                model=item.model,
                category=item.category or "",
                condition=item.condition or "",
                colour=item.colour or "",
                cost_price_eur=item.target_buy_price_eur,
                sell_price_eur=round_money(item.target_buy_price_eur * effective.receive_sell_markup),
                currency="EUR",
                status=ProductStatus.IN_STOCK.value,
                quantity=1,
                images=[],
                image_urls=[],
                notes=f"Received from buying list: {item_id}",
                created_at=now,
                updated_at=now,
                created_by=self.actor,
                updated_by=self.actor,
            )
            self.db.add(product)
            await self.db.flush()

            purchase = Transaction(
                organisation_id=self.organisation_id,
                type=TransactionType.PURCHASE.value,
                product_id=product.id,
                buying_list_item_id=item_id,
                amount_eur=item.target_buy_price_eur,
                occurred_at=now,
                notes=f"Purchase: {item.brand} {item.model}",
                created_by=self.actor,
                updated_by=self.actor,
            )
            self.db.add(purchase)
            await self.db.flush()

            await self.activity.log_activity(
                ActivityEventType.BUYLIST_RECEIVED,
                entity_type="buying_list_item",
                entity_id=item_id,
                payload={"brand": item.brand, "model": item.model, "productId": product.id},
                actor=self.actor,
            )

            await self._mark_received(item, now)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(item)
        await self.db.refresh(product)
        logger.info(f"Received buying list item {item_id} as product {product.id}")

        return ReceiveResult(
            buying_list_item=BuyingListItemRead.model_validate(item),
            product=ProductRead.model_validate(product),
        )
