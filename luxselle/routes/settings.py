from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.dependencies import get_db
from luxselle.repos.settings import SettingsRepo
from luxselle.schemas.base import DataResponse
from luxselle.schemas.settings import OrgSettingsRead, OrgSettingsUpdate

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=DataResponse[OrgSettingsRead])
async def get_settings_record(db: AsyncSession = Depends(get_db)):
    return {"data": await SettingsRepo(db).get_effective()}


@router.put("", response_model=DataResponse[OrgSettingsRead])
async def update_settings_record(patch: OrgSettingsUpdate, db: AsyncSession = Depends(get_db)):
    try:
        updated = await SettingsRepo(db).upsert(patch)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return {"data": updated}
