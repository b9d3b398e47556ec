from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.core.enums import ProductStatus
from luxselle.dependencies import get_db
from luxselle.schemas.base import DataResponse, ListResponse
from luxselle.schemas.product import ProductCreate, ProductRead, ProductSell, ProductUpdate
from luxselle.schemas.transaction import ProductSaleResult
from luxselle.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=ListResponse[ProductRead])
async def list_products(
    q: Optional[str] = None,
    status: Optional[ProductStatus] = None,
    brand: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    products = await ProductService(db).list_products(q=q, status=status.value if status else None, brand=brand)
    return {"data": products}


@router.post("", response_model=DataResponse[ProductRead], status_code=201)
async def create_product(data: ProductCreate, db: AsyncSession = Depends(get_db)):
    return {"data": await ProductService(db).create_product(data)}


@router.get("/{product_id}", response_model=DataResponse[ProductRead])
async def get_product(product_id: str, db: AsyncSession = Depends(get_db)):
    return {"data": await ProductService(db).get_product(product_id)}


@router.put("/{product_id}", response_model=DataResponse[ProductRead])
async def update_product(product_id: str, patch: ProductUpdate, db: AsyncSession = Depends(get_db)):
    return {"data": await ProductService(db).update_product(product_id, patch)}


@router.delete("/{product_id}", status_code=204)
async def delete_product(product_id: str, db: AsyncSession = Depends(get_db)):
    await ProductService(db).delete_product(product_id)
    return Response(status_code=204)


@router.post("/{product_id}/sell", response_model=DataResponse[ProductSaleResult])
async def sell_product(product_id: str, sale: Optional[ProductSell] = None, db: AsyncSession = Depends(get_db)):
    return {"data": await ProductService(db).sell_product(product_id, sale or ProductSell())}
