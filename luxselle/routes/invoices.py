from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.dependencies import get_db
from luxselle.schemas.base import DataResponse, PageResponse
from luxselle.schemas.invoice import InvoiceRead
from luxselle.services.invoice_service import InvoiceService

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.get("", response_model=PageResponse[InvoiceRead])
async def list_invoices(
    issued_from: Optional[datetime] = Query(None, alias="from"),
    issued_to: Optional[datetime] = Query(None, alias="to"),
    limit: int = Query(50, ge=1, le=100),
    cursor: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    return await InvoiceService(db).list_invoices(
        issued_from=issued_from, issued_to=issued_to, limit=limit, cursor=cursor
    )


@router.post("", response_model=DataResponse[InvoiceRead], status_code=201)
async def create_invoice(payload: Dict[str, Any] = Body(...), db: AsyncSession = Depends(get_db)):
    """Create from a sale (`fromSale: true`, gross amount) or from net line items."""
    return {"data": await InvoiceService(db).create_invoice(payload)}


@router.get("/{invoice_id}", response_model=DataResponse[InvoiceRead])
async def get_invoice(invoice_id: str, db: AsyncSession = Depends(get_db)):
    return {"data": await InvoiceService(db).get_invoice(invoice_id)}
