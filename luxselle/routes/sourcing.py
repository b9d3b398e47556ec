from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.core.enums import SourcingPriority, SourcingStatus
from luxselle.dependencies import get_db
from luxselle.schemas.base import DataResponse, ListResponse
from luxselle.schemas.sourcing import (
    NextStatuses,
    SourcingRequestCreate,
    SourcingRequestRead,
    SourcingRequestUpdate,
)
from luxselle.services.sourcing_service import SourcingService

router = APIRouter(prefix="/sourcing", tags=["sourcing"])


@router.get("", response_model=ListResponse[SourcingRequestRead])
async def list_requests(
    status: Optional[SourcingStatus] = None,
    priority: Optional[SourcingPriority] = None,
    db: AsyncSession = Depends(get_db),
):
    requests = await SourcingService(db).list_requests(
        status=status.value if status else None,
        priority=priority.value if priority else None,
    )
    return {"data": requests}


@router.post("", response_model=DataResponse[SourcingRequestRead], status_code=201)
async def create_request(data: SourcingRequestCreate, db: AsyncSession = Depends(get_db)):
    return {"data": await SourcingService(db).create_request(data)}


@router.get("/{request_id}", response_model=DataResponse[SourcingRequestRead])
async def get_request(request_id: str, db: AsyncSession = Depends(get_db)):
    return {"data": await SourcingService(db).get_request(request_id)}


@router.put("/{request_id}", response_model=DataResponse[SourcingRequestRead])
async def update_request(request_id: str, patch: SourcingRequestUpdate, db: AsyncSession = Depends(get_db)):
    return {"data": await SourcingService(db).update_request(request_id, patch)}


@router.get("/{request_id}/next-statuses", response_model=DataResponse[NextStatuses])
async def next_statuses(request_id: str, db: AsyncSession = Depends(get_db)):
    return {"data": await SourcingService(db).next_statuses(request_id)}


@router.delete("/{request_id}", status_code=204)
async def delete_request(request_id: str, db: AsyncSession = Depends(get_db)):
    await SourcingService(db).delete_request(request_id)
    return Response(status_code=204)
