import re
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, select

from luxselle.models.invoice import Invoice
from luxselle.repos.base import BaseRepo

INVOICE_NUMBER_RE = re.compile(r"^INV-(\d+)$")


class InvoiceRepo(BaseRepo[Invoice]):
    model = Invoice
    entity_name = "Invoice"

    async def next_invoice_number(self) -> str:
        """INV-0001, INV-0002, ...: one past the highest number issued so far."""
        result = await self.db.execute(
            select(Invoice.invoice_number).where(Invoice.organisation_id == self.organisation_id)
        )
        numbers = [int(m.group(1)) for m in (INVOICE_NUMBER_RE.match(n) for n in result.scalars()) if m]
        return f"INV-{max(numbers, default=0) + 1:04d}"

    async def number_taken(self, invoice_number: str) -> bool:
        result = await self.db.execute(self._scoped().where(Invoice.invoice_number == invoice_number))
        return result.scalars().first() is not None

    async def page(
        self,
        issued_from: Optional[datetime] = None,
        issued_to: Optional[datetime] = None,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Tuple[List[Invoice], Optional[str], int]:
        """Newest issued first; the cursor is the offset of the next page."""
        query = self._scoped()
        if issued_from:
            query = query.where(Invoice.issued_at >= issued_from)
        if issued_to:
            query = query.where(Invoice.issued_at <= issued_to)

        total = await self.db.scalar(select(func.count()).select_from(query.subquery())) or 0
        offset = int(cursor) if cursor and cursor.isdigit() else 0

        result = await self.db.execute(
            query.order_by(Invoice.issued_at.desc(), Invoice.id).offset(offset).limit(limit)
        )
        invoices = list(result.scalars().all())
        next_offset = offset + len(invoices)
        return invoices, (str(next_offset) if next_offset < total else None), total
