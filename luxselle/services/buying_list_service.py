import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.core.enums import ActivityEventType, DEFAULT_ORG_ID
from luxselle.core.utils import models_to_schemas
from luxselle.repos.buying_list import BuyingListRepo
from luxselle.schemas.base import PageResponse
from luxselle.schemas.buying_list import BuyingListItemCreate, BuyingListItemRead, BuyingListItemUpdate
from luxselle.services.activity_logger import ActivityLogger

logger = logging.getLogger(__name__)


class BuyingListService:
    def __init__(self, db: AsyncSession, organisation_id: str = DEFAULT_ORG_ID, actor: str = "system"):
        self.db = db
        self.actor = actor
        self.repo = BuyingListRepo(db, organisation_id)
        self.activity = ActivityLogger(db, organisation_id)

    async def list_items(
        self,
        q: Optional[str] = None,
        status: Optional[str] = None,
        supplier_id: Optional[str] = None,
        sort: str = "createdAt",
        direction: str = "desc",
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> PageResponse[BuyingListItemRead]:
        items, next_cursor, total = await self.repo.page(
            q=q,
            status=status,
            supplier_id=supplier_id,
            sort=sort,
            direction=direction,
            limit=limit,
            cursor=cursor,
        )
        return PageResponse[BuyingListItemRead](
            data=models_to_schemas(items, BuyingListItemRead),
            next_cursor=next_cursor,
            total=total,
        )

    async def get_item(self, item_id: str) -> BuyingListItemRead:
        return BuyingListItemRead.model_validate(await self.repo.get_or_404(item_id))

    async def create_item(self, data: BuyingListItemCreate) -> BuyingListItemRead:
        try:
            item = await self.repo.create(data, actor=self.actor)
            await self.activity.log_activity(
                ActivityEventType.BUYLIST_ADDED,
                entity_type="buying_list_item",
                entity_id=item.id,
                payload={
                    "brand": item.brand,
                    "model": item.model,
                    "targetBuyPriceEur": item.target_buy_price_eur,
                    "sourceType": item.source_type,
                },
                actor=self.actor,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(item)
        return BuyingListItemRead.model_validate(item)

    async def update_item(self, item_id: str, patch: BuyingListItemUpdate) -> BuyingListItemRead:
        try:
            item = await self.repo.set(item_id, patch, actor=self.actor)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(item)
        return BuyingListItemRead.model_validate(item)

    async def delete_item(self, item_id: str) -> None:
        """Administrative delete."""
        await self.repo.get_or_404(item_id)
        await self.repo.remove(item_id)
        await self.db.commit()
        logger.info(f"Deleted buying list item {item_id}")
