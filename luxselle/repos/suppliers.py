from typing import List, Optional

from sqlalchemy import func, select

from luxselle.models.supplier import Supplier, SupplierImportRecord, SupplierItem
from luxselle.repos.base import BaseRepo
from luxselle.schemas.supplier import SupplierCreate


class SupplierRepo(BaseRepo[Supplier]):
    model = Supplier
    entity_name = "Supplier"
    create_schema = SupplierCreate


class SupplierItemRepo(BaseRepo[SupplierItem]):
    model = SupplierItem
    entity_name = "Supplier item"

    async def for_supplier(self, supplier_id: str) -> List[SupplierItem]:
        result = await self.db.execute(
            self._scoped()
            .where(SupplierItem.supplier_id == supplier_id)
            .order_by(SupplierItem.created_at.desc())
        )
        return list(result.scalars().all())

    async def count_for_supplier(self, supplier_id: str) -> int:
        count = await self.db.scalar(
            select(func.count(SupplierItem.id)).where(
                SupplierItem.organisation_id == self.organisation_id,
                SupplierItem.supplier_id == supplier_id,
            )
        )
        return count or 0

    async def find_by_external_id(self, supplier_id: str, external_id: str) -> Optional[SupplierItem]:
        result = await self.db.execute(
            self._scoped().where(
                SupplierItem.supplier_id == supplier_id,
                SupplierItem.external_id == external_id,
            )
        )
        return result.scalars().first()


class SupplierImportRecordRepo(BaseRepo[SupplierImportRecord]):
    model = SupplierImportRecord
    entity_name = "Supplier import"

    async def exists(self, dedupe_id: str) -> bool:
        found = await self.db.scalar(
            select(func.count(SupplierImportRecord.id)).where(SupplierImportRecord.dedupe_id == dedupe_id)
        )
        return bool(found)
