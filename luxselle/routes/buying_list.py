from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.core.enums import BuyingListStatus
from luxselle.dependencies import get_db
from luxselle.schemas.base import DataResponse, PageResponse
from luxselle.schemas.buying_list import (
    BuyingListItemCreate,
    BuyingListItemRead,
    BuyingListItemUpdate,
    ReceiveResult,
)
from luxselle.services.buying_list_service import BuyingListService
from luxselle.services.receive_service import ReceiveService

router = APIRouter(prefix="/buying-list", tags=["buying-list"])


@router.get("", response_model=PageResponse[BuyingListItemRead])
async def list_items(
    q: Optional[str] = None,
    status: Optional[BuyingListStatus] = None,
    supplier: Optional[str] = None,
    sort: str = "createdAt",
    dir: Literal["asc", "desc"] = "desc",
    limit: int = Query(50, ge=1, le=200),
    cursor: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    return await BuyingListService(db).list_items(
        q=q,
        status=status.value if status else None,
        supplier_id=supplier,
        sort=sort,
        direction=dir,
        limit=limit,
        cursor=cursor,
    )


@router.post("", response_model=DataResponse[BuyingListItemRead], status_code=201)
async def create_item(data: BuyingListItemCreate, db: AsyncSession = Depends(get_db)):
    return {"data": await BuyingListService(db).create_item(data)}


@router.get("/{item_id}", response_model=DataResponse[BuyingListItemRead])
async def get_item(item_id: str, db: AsyncSession = Depends(get_db)):
    return {"data": await BuyingListService(db).get_item(item_id)}


@router.put("/{item_id}", response_model=DataResponse[BuyingListItemRead])
async def update_item(item_id: str, patch: BuyingListItemUpdate, db: AsyncSession = Depends(get_db)):
    return {"data": await BuyingListService(db).update_item(item_id, patch)}


@router.delete("/{item_id}", status_code=204)
async def delete_item(item_id: str, db: AsyncSession = Depends(get_db)):
    await BuyingListService(db).delete_item(item_id)
    return Response(status_code=204)


@router.post("/{item_id}/receive", response_model=DataResponse[ReceiveResult])
async def receive_item(item_id: str, db: AsyncSession = Depends(get_db)):
    """Convert the item into an in-stock product with its purchase transaction."""
    return {"data": await ReceiveService(db).receive_item(item_id)}
