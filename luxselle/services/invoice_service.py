"""
Issues invoices.

Two body shapes are accepted on create: `fromSale: true` with a single
VAT-inclusive amount, which is split into net and VAT at the given or
organisation rate, or a list of net line items whose VAT is added on top.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.core.enums import ActivityEventType, DEFAULT_ORG_ID
from luxselle.core.exceptions import DuplicateInvoiceNumberError, ValidationError
from luxselle.core.utils import models_to_schemas, round_money, utc_now
from luxselle.repos.base import validation_details
from luxselle.repos.invoices import InvoiceRepo
from luxselle.repos.settings import SettingsRepo
from luxselle.schemas.base import PageResponse
from luxselle.schemas.invoice import InvoiceCreate, InvoiceFromSale, InvoiceLineItem, InvoiceRead
from luxselle.services.activity_logger import ActivityLogger
from luxselle.services.vat import vat_from_gross

logger = logging.getLogger(__name__)


def totals_for(line_items: List[InvoiceLineItem]) -> Dict[str, float]:
    subtotal = sum(item.amount_eur for item in line_items)
    vat = sum(item.amount_eur * item.vat_pct / 100 for item in line_items)
    return {
        "subtotal_eur": round_money(subtotal),
        "vat_eur": round_money(vat),
        "total_eur": round_money(subtotal + vat),
    }


class InvoiceService:
    def __init__(self, db: AsyncSession, organisation_id: str = DEFAULT_ORG_ID, actor: str = "system"):
        self.db = db
        self.actor = actor
        self.repo = InvoiceRepo(db, organisation_id)
        self.settings_repo = SettingsRepo(db, organisation_id)
        self.activity = ActivityLogger(db, organisation_id)

    async def list_invoices(
        self,
        issued_from: Optional[datetime] = None,
        issued_to: Optional[datetime] = None,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> PageResponse[InvoiceRead]:
        invoices, next_cursor, total = await self.repo.page(
            issued_from=issued_from, issued_to=issued_to, limit=limit, cursor=cursor
        )
        return PageResponse[InvoiceRead](
            data=models_to_schemas(invoices, InvoiceRead), next_cursor=next_cursor, total=total
        )

    async def get_invoice(self, invoice_id: str) -> InvoiceRead:
        return InvoiceRead.model_validate(await self.repo.get_or_404(invoice_id))

    async def _from_sale(self, data: InvoiceFromSale) -> Dict[str, Any]:
        rate = data.vat_pct
        if rate is None:
            rate = (await self.settings_repo.get_effective()).vat_rate_pct
        split = vat_from_gross(data.amount_eur, rate)
        line = InvoiceLineItem(
            description=data.description or "Sale",
            quantity=1,
            unit_price_eur=split.net_eur,
            vat_pct=rate,
            amount_eur=split.net_eur,
        )
        return {
            "invoice_number": await self.repo.next_invoice_number(),
            "customer_name": data.customer_name,
            "customer_email": data.customer_email,
            "line_items": [line.model_dump()],
            "subtotal_eur": split.net_eur,
            "vat_eur": split.vat_eur,
            "total_eur": split.gross_eur,
            "transaction_id": data.transaction_id,
            "product_id": data.product_id,
            "notes": data.notes,
        }

    async def _from_line_items(self, data: InvoiceCreate) -> Dict[str, Any]:
        if data.invoice_number:
            if await self.repo.number_taken(data.invoice_number):
                raise DuplicateInvoiceNumberError(data.invoice_number)
            number = data.invoice_number
        else:
            number = await self.repo.next_invoice_number()

        for item in data.line_items:
            if item.amount_eur is None:
                item.amount_eur = round_money(item.quantity * item.unit_price_eur)

        return {
            "invoice_number": number,
            "customer_name": data.customer_name,
            "customer_email": data.customer_email,
            "line_items": [item.model_dump() for item in data.line_items],
            **totals_for(data.line_items),
            "notes": data.notes,
        }

    async def create_invoice(self, payload: Dict[str, Any]) -> InvoiceRead:
        """
        Validate either body shape and issue the invoice.

        Raises:
            ValidationError: The body matches neither shape
            DuplicateInvoiceNumberError: An explicit invoice number is taken
        """
        from_sale = payload.get("fromSale", payload.get("from_sale")) is True
        try:
            data = (InvoiceFromSale if from_sale else InvoiceCreate).model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError("Invalid invoice body", validation_details(e))

        try:
            values = await self._from_sale(data) if from_sale else await self._from_line_items(data)
            values["issued_at"] = utc_now()
            record = await self.repo.create(values, actor=self.actor)
            await self.activity.log_activity(
                ActivityEventType.INVOICE_CREATED,
                entity_type="invoice",
                entity_id=record.id,
                payload={"invoiceNumber": record.invoice_number, "totalEur": record.total_eur},
                actor=self.actor,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(record)
        logger.info(f"Issued invoice {record.invoice_number} for EUR {record.total_eur}")
        return InvoiceRead.model_validate(record)
