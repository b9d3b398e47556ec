from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.core.metrics import ErrorTracker
from luxselle.dependencies import get_ai_router, get_db, get_error_tracker
from luxselle.schemas.base import DataResponse, ListResponse
from luxselle.schemas.dashboard import DashboardKpis, ProfitSummary, SystemStatus
from luxselle.schemas.transaction import ActivityEventRead
from luxselle.services.ai.router import AiRouter
from luxselle.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/kpis", response_model=DataResponse[DashboardKpis])
async def kpis(response: Response, db: AsyncSession = Depends(get_db)):
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
    return {"data": await DashboardService(db).kpis()}


@router.get("/activity", response_model=ListResponse[ActivityEventRead])
async def activity(limit: int = Query(20, ge=1, le=200), db: AsyncSession = Depends(get_db)):
    return {"data": await DashboardService(db).recent_activity(limit)}


@router.get("/status", response_model=DataResponse[SystemStatus])
async def status(
    db: AsyncSession = Depends(get_db),
    ai_router: AiRouter = Depends(get_ai_router),
    tracker: ErrorTracker = Depends(get_error_tracker),
):
    return {"data": await DashboardService(db).status(ai_router, tracker)}


@router.get("/profit-summary", response_model=DataResponse[ProfitSummary])
async def profit_summary(db: AsyncSession = Depends(get_db)):
    return {"data": await DashboardService(db).profit_summary()}
