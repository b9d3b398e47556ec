from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.dependencies import get_ai_router, get_db
from luxselle.schemas.base import DataResponse
from luxselle.schemas.pricing import PricingAnalyseRequest, PricingAnalysis
from luxselle.services.ai.router import AiRouter
from luxselle.services.pricing import PricingService

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.post("/analyse", response_model=DataResponse[PricingAnalysis])
async def analyse(
    request: PricingAnalyseRequest,
    db: AsyncSession = Depends(get_db),
    ai_router: AiRouter = Depends(get_ai_router),
):
    return {"data": await PricingService(db, ai_router).analyse(request)}
