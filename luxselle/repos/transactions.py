from typing import List, Optional

from sqlalchemy import func, select

from luxselle.core.enums import TransactionType
from luxselle.models.product import Product
from luxselle.models.transaction import Transaction
from luxselle.repos.base import BaseRepo


class TransactionRepo(BaseRepo[Transaction]):
    model = Transaction
    entity_name = "Transaction"

    async def list_by_type(self, txn_type: TransactionType) -> List[Transaction]:
        result = await self.db.execute(self._scoped().where(Transaction.type == txn_type.value))
        return list(result.scalars().all())

    async def list_for_product(self, product_id: str) -> List[Transaction]:
        result = await self.db.execute(
            self._scoped()
            .where(Transaction.product_id == product_id)
            .order_by(Transaction.occurred_at.desc())
        )
        return list(result.scalars().all())

    async def average_purchase_for(self, brand: str, model: str) -> Optional[float]:
        """Average purchase amount paid for products of the same brand and model."""
        query = (
            select(func.avg(Transaction.amount_eur))
            .join(Product, Product.id == Transaction.product_id)
            .where(
                Transaction.organisation_id == self.organisation_id,
                Transaction.type == TransactionType.PURCHASE.value,
                func.lower(Product.brand) == brand.lower(),
                func.lower(Product.model) == model.lower(),
            )
        )
        avg = await self.db.scalar(query)
        return float(avg) if avg is not None else None
