"""
Purpose: The central service for managing the Product entity.

Provides standard CRUD operations plus the sell operation, which records a
sale Transaction, decrements stock and logs `product_sold` in one commit.
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.core.enums import ActivityEventType, DEFAULT_ORG_ID, ProductStatus, TransactionType
from luxselle.core.exceptions import InsufficientStockError
from luxselle.core.utils import models_to_schemas, round_money, utc_now
from luxselle.models.transaction import Transaction
from luxselle.repos.products import ProductRepo
from luxselle.schemas.product import ProductCreate, ProductRead, ProductSell, ProductUpdate
from luxselle.schemas.transaction import ProductSaleResult, TransactionRead
from luxselle.services.activity_logger import ActivityLogger

logger = logging.getLogger(__name__)


class ProductService:
    def __init__(self, db: AsyncSession, organisation_id: str = DEFAULT_ORG_ID, actor: str = "system"):
        self.db = db
        self.organisation_id = organisation_id
        self.actor = actor
        self.repo = ProductRepo(db, organisation_id)
        self.activity = ActivityLogger(db, organisation_id)

    async def list_products(
        self,
        q: Optional[str] = None,
        status: Optional[str] = None,
        brand: Optional[str] = None,
    ) -> List[ProductRead]:
        products = await self.repo.search(q=q, status=status, brand=brand)
        return models_to_schemas(products, ProductRead)

    async def get_product(self, product_id: str) -> ProductRead:
        """Raises NotFoundError if the product does not exist."""
        product = await self.repo.get_or_404(product_id)
        return ProductRead.model_validate(product)

    async def create_product(self, data: ProductCreate) -> ProductRead:
        try:
            product = await self.repo.create(data, actor=self.actor)
            await self.activity.log_activity(
                ActivityEventType.PRODUCT_CREATED,
                entity_type="product",
                entity_id=product.id,
                payload={"brand": product.brand, "model": product.model},
                actor=self.actor,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(product)
        return ProductRead.model_validate(product)

    async def update_product(self, product_id: str, patch: ProductUpdate) -> ProductRead:
        try:
            product = await self.repo.set(product_id, patch, actor=self.actor)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(product)
        return ProductRead.model_validate(product)

    async def delete_product(self, product_id: str) -> None:
        await self.repo.get_or_404(product_id)
        await self.repo.remove(product_id)
        await self.db.commit()

    async def sell_product(self, product_id: str, sale: ProductSell) -> ProductSaleResult:
        """
        Record a sale of `sale.quantity` units.

        Raises:
            NotFoundError: The product does not exist
            InsufficientStockError: Not enough units in stock
        """
        try:
            product = await self.repo.get_or_404(product_id)
            if product.status == ProductStatus.SOLD.value or product.quantity < sale.quantity:
                raise InsufficientStockError(
                    f"Insufficient stock: {product.quantity} available, {sale.quantity} requested"
                )

            now = utc_now()
            amount = sale.amount_eur if sale.amount_eur is not None else product.sell_price_eur * sale.quantity
            transaction = Transaction(
                organisation_id=self.organisation_id,
                type=TransactionType.SALE.value,
                product_id=product.id,
                amount_eur=round_money(amount),
                occurred_at=now,
                notes=sale.notes or f"Sale: {product.brand} {product.model}",
                created_by=self.actor,
                updated_by=self.actor,
            )
            self.db.add(transaction)

            product.quantity -= sale.quantity
            if product.quantity == 0:
                product.status = ProductStatus.SOLD.value
            product.updated_at = now
            product.updated_by = self.actor
            await self.db.flush()

            await self.activity.log_activity(
                ActivityEventType.PRODUCT_SOLD,
                entity_type="product",
                entity_id=product.id,
                payload={
                    "brand": product.brand,
                    "model": product.model,
                    "amountEur": transaction.amount_eur,
                    "transactionId": transaction.id,
                },
                actor=self.actor,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(product)
        await self.db.refresh(transaction)
        logger.info(f"Sold product {product_id} for {transaction.amount_eur} EUR")
        return ProductSaleResult(
            product=ProductRead.model_validate(product),
            transaction=TransactionRead.model_validate(transaction),
        )
