from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.dependencies import get_db
from luxselle.repos.settings import SettingsRepo
from luxselle.schemas.base import DataResponse
from luxselle.schemas.vat import VatCalculateRequest, VatCalculation
from luxselle.services.vat import calculate_vat

router = APIRouter(prefix="/vat", tags=["vat"])


async def _resolve_rate(db: AsyncSession, rate_pct: Optional[float]) -> float:
    if rate_pct is not None:
        return rate_pct
    return (await SettingsRepo(db).get_effective()).vat_rate_pct


@router.get("/calculate", response_model=DataResponse[VatCalculation])
async def calculate_from_query(
    amount_eur: float = Query(..., alias="amountEur", ge=0),
    incl_vat: bool = Query(..., alias="inclVat"),
    rate_pct: Optional[float] = Query(None, alias="ratePct", ge=0, le=100),
    db: AsyncSession = Depends(get_db),
):
    rate = await _resolve_rate(db, rate_pct)
    return {"data": calculate_vat(amount_eur, incl_vat, rate)}


@router.post("/calculate", response_model=DataResponse[VatCalculation])
async def calculate_from_body(body: VatCalculateRequest, db: AsyncSession = Depends(get_db)):
    rate = await _resolve_rate(db, body.rate_pct)
    return {"data": calculate_vat(body.amount_eur, body.incl_vat, rate)}
