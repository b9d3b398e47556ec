from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.core.enums import DEFAULT_ORG_ID
from luxselle.core.utils import models_to_schemas
from luxselle.repos.suppliers import SupplierItemRepo, SupplierRepo
from luxselle.schemas.supplier import SupplierCreate, SupplierItemRead, SupplierRead, SupplierUpdate


class SupplierService:
    def __init__(self, db: AsyncSession, organisation_id: str = DEFAULT_ORG_ID, actor: str = "system"):
        self.db = db
        self.actor = actor
        self.repo = SupplierRepo(db, organisation_id)
        self.items = SupplierItemRepo(db, organisation_id)

    async def list_suppliers(self) -> List[SupplierRead]:
        return models_to_schemas(await self.repo.list(), SupplierRead)

    async def get_supplier(self, supplier_id: str) -> SupplierRead:
        return SupplierRead.model_validate(await self.repo.get_or_404(supplier_id))

    async def create_supplier(self, data: SupplierCreate) -> SupplierRead:
        supplier = await self.repo.create(data, actor=self.actor)
        await self.db.commit()
        await self.db.refresh(supplier)
        return SupplierRead.model_validate(supplier)

    async def update_supplier(self, supplier_id: str, patch: SupplierUpdate) -> SupplierRead:
        supplier = await self.repo.set(supplier_id, patch, actor=self.actor)
        await self.db.commit()
        await self.db.refresh(supplier)
        return SupplierRead.model_validate(supplier)

    async def delete_supplier(self, supplier_id: str) -> None:
        await self.repo.get_or_404(supplier_id)
        await self.repo.remove(supplier_id)
        await self.db.commit()

    async def supplier_items(self, supplier_id: str) -> List[SupplierItemRead]:
        await self.repo.get_or_404(supplier_id)
        return models_to_schemas(await self.items.for_supplier(supplier_id), SupplierItemRead)

    async def all_items(self) -> List[SupplierItemRead]:
        return models_to_schemas(await self.items.list(), SupplierItemRead)
