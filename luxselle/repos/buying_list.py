from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select

from luxselle.models.buying_list import BuyingListItem
from luxselle.repos.base import BaseRepo
from luxselle.schemas.buying_list import BuyingListItemCreate

SORTABLE_FIELDS = {
    "createdAt": BuyingListItem.created_at,
    "updatedAt": BuyingListItem.updated_at,
    "targetBuyPriceEur": BuyingListItem.target_buy_price_eur,
    "brand": BuyingListItem.brand,
    "status": BuyingListItem.status,
}


class BuyingListRepo(BaseRepo[BuyingListItem]):
    model = BuyingListItem
    entity_name = "Buying list item"
    create_schema = BuyingListItemCreate

    async def page(
        self,
        q: Optional[str] = None,
        status: Optional[str] = None,
        supplier_id: Optional[str] = None,
        sort: str = "createdAt",
        direction: str = "desc",
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Tuple[List[BuyingListItem], Optional[str], int]:
        """
        Filtered, sorted page of items.

        The cursor is the opaque offset of the next page; it is None when
        there are no more rows.
        """
        query = self._scoped()
        if status:
            query = query.where(BuyingListItem.status == status)
        if supplier_id:
            query = query.where(BuyingListItem.supplier_id == supplier_id)
        if q:
            term = f"%{q.lower()}%"
            query = query.where(
                or_(
                    func.lower(BuyingListItem.brand).like(term),
                    func.lower(BuyingListItem.model).like(term),
                    func.lower(BuyingListItem.notes).like(term),
                )
            )

        total = await self.db.scalar(select(func.count()).select_from(query.subquery()))

        column = SORTABLE_FIELDS.get(sort, BuyingListItem.created_at)
        ordering = column.asc() if direction == "asc" else column.desc()
        offset = int(cursor) if cursor and cursor.isdigit() else 0

        result = await self.db.execute(
            query.order_by(ordering, BuyingListItem.id).offset(offset).limit(limit)
        )
        items = list(result.scalars().all())
        next_offset = offset + len(items)
        next_cursor = str(next_offset) if next_offset < (total or 0) else None
        return items, next_cursor, total or 0
