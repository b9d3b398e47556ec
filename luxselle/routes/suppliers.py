import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.core.exceptions import ValidationError
from luxselle.dependencies import get_db
from luxselle.repos.base import validation_details
from luxselle.schemas.base import DataResponse, ListResponse
from luxselle.schemas.supplier import (
    ImportPreview,
    ImportResult,
    SupplierCreate,
    SupplierImportTemplate,
    SupplierItemRead,
    SupplierRead,
    SupplierUpdate,
)
from luxselle.services.supplier_import import SupplierImportService, preview_import_file
from luxselle.services.supplier_service import SupplierService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/suppliers", tags=["suppliers"])


def _parse_template(raw: Optional[str]) -> Optional[SupplierImportTemplate]:
    if not raw:
        return None
    try:
        return SupplierImportTemplate.model_validate(json.loads(raw))
    except json.JSONDecodeError:
        raise ValidationError("Validation error", [{"path": "template", "message": "Template must be valid JSON"}])
    except PydanticValidationError as e:
        raise ValidationError("Validation error", validation_details(e))


@router.get("", response_model=ListResponse[SupplierRead])
async def list_suppliers(db: AsyncSession = Depends(get_db)):
    return {"data": await SupplierService(db).list_suppliers()}


@router.post("", response_model=DataResponse[SupplierRead], status_code=201)
async def create_supplier(data: SupplierCreate, db: AsyncSession = Depends(get_db)):
    return {"data": await SupplierService(db).create_supplier(data)}


@router.get("/items/all", response_model=ListResponse[SupplierItemRead])
async def all_supplier_items(db: AsyncSession = Depends(get_db)):
    return {"data": await SupplierService(db).all_items()}


@router.post("/import/preview", response_model=DataResponse[ImportPreview])
async def preview_import(file: UploadFile = File(...)):
    content = await file.read()
    return {"data": preview_import_file(content, file.filename or "", file.content_type)}


@router.post("/import", response_model=DataResponse[ImportResult])
async def import_supplier_file(
    supplierId: str = Form(...),
    file: UploadFile = File(...),
    template: Optional[str] = Form(None),
    db: AsyncSession = Depends(get_db),
):
    """
    Import a supplier CSV/XLSX. `template` is an optional JSON-encoded
    column mapping; without it the supplier's stored template is used.
    """
    content = await file.read()
    logger.info(f"Supplier import upload: supplier={supplierId} file={file.filename} bytes={len(content)}")
    result = await SupplierImportService(db).import_upload(
        supplierId,
        content,
        file.filename or "",
        file.content_type,
        template=_parse_template(template),
    )
    return {"data": result}


@router.get("/{supplier_id}", response_model=DataResponse[SupplierRead])
async def get_supplier(supplier_id: str, db: AsyncSession = Depends(get_db)):
    return {"data": await SupplierService(db).get_supplier(supplier_id)}


@router.put("/{supplier_id}", response_model=DataResponse[SupplierRead])
async def update_supplier(supplier_id: str, patch: SupplierUpdate, db: AsyncSession = Depends(get_db)):
    return {"data": await SupplierService(db).update_supplier(supplier_id, patch)}


@router.delete("/{supplier_id}", status_code=204)
async def delete_supplier(supplier_id: str, db: AsyncSession = Depends(get_db)):
    await SupplierService(db).delete_supplier(supplier_id)
    return Response(status_code=204)


@router.get("/{supplier_id}/items", response_model=ListResponse[SupplierItemRead])
async def supplier_items(supplier_id: str, db: AsyncSession = Depends(get_db)):
    return {"data": await SupplierService(db).supplier_items(supplier_id)}
