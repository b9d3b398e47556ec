from typing import List, Optional

from sqlalchemy import func, or_

from luxselle.models.product import Product
from luxselle.repos.base import BaseRepo
from luxselle.schemas.product import ProductCreate


class ProductRepo(BaseRepo[Product]):
    model = Product
    entity_name = "Product"
    create_schema = ProductCreate

    async def search(
        self,
        q: Optional[str] = None,
        status: Optional[str] = None,
        brand: Optional[str] = None,
    ) -> List[Product]:
        query = self._scoped()
        if status:
            query = query.where(Product.status == status)
        if brand:
            query = query.where(func.lower(Product.brand) == brand.lower())
        if q:
            term = f"%{q.lower()}%"
            query = query.where(
                or_(
                    func.lower(Product.brand).like(term),
                    func.lower(Product.model).like(term),
                    func.lower(Product.title).like(term),
                    func.lower(Product.sku).like(term),
                )
            )
        result = await self.db.execute(query.order_by(Product.created_at.desc()))
        return list(result.scalars().all())
