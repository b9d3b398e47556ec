"""
Orchestrates pricing analysis: runs the configured provider, applies the
target margin, looks up what was historically paid and stores the result
as an Evaluation.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.core.config import Settings, get_settings
from luxselle.core.enums import DEFAULT_ORG_ID
from luxselle.core.utils import round_money
from luxselle.repos.evaluations import EvaluationRepo
from luxselle.repos.settings import SettingsRepo
from luxselle.repos.transactions import TransactionRepo
from luxselle.schemas.pricing import PricingAnalyseRequest, PricingAnalysis
from luxselle.services.ai.router import AiRouter
from luxselle.services.pricing.providers import AiPricingProvider, MockPricingProvider, js_round

logger = logging.getLogger(__name__)


def max_buy_price(estimated_retail_eur: float, target_margin_pct: float) -> int:
    return js_round(estimated_retail_eur * (1 - target_margin_pct / 100))


class PricingService:
    def __init__(
        self,
        db: AsyncSession,
        router: AiRouter,
        organisation_id: str = DEFAULT_ORG_ID,
        settings: Settings = None,
        actor: str = "system",
    ):
        self.db = db
        self.organisation_id = organisation_id
        self.actor = actor
        self.settings = settings or get_settings()
        self.settings_repo = SettingsRepo(db, organisation_id, self.settings)
        self.transactions = TransactionRepo(db, organisation_id)
        self.evaluations = EvaluationRepo(db, organisation_id)

        if self.settings.PRICING_PROVIDER == "openai" and self.settings.OPENAI_API_KEY:
            self.provider = AiPricingProvider(router)
        else:
            self.provider = MockPricingProvider()

    async def analyse(self, request: PricingAnalyseRequest) -> PricingAnalysis:
        effective = await self.settings_repo.get_effective()
        estimate = await self.provider.analyse(request)

        margin = effective.target_margin_pct
        max_buy = max_buy_price(estimate.estimated_retail_eur, margin)
        history = await self.transactions.average_purchase_for(request.brand, request.model)
        history = round_money(history) if history is not None else None

        try:
            evaluation = await self.evaluations.create(
                {
                    "brand": request.brand,
                    "model": request.model,
                    "category": request.category,
                    "condition": request.condition,
                    "colour": request.colour,
                    "notes": request.notes,
                    "ask_price_eur": request.ask_price_eur,
                    "estimated_retail_eur": estimate.estimated_retail_eur,
                    "max_buy_price_eur": max_buy,
                    "history_avg_paid_eur": history,
                    "comps": [comp.model_dump() for comp in estimate.comps],
                    "confidence": estimate.confidence,
                    "provider": self.provider.name,
                },
                actor=self.actor,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            f"Pricing {request.brand} {request.model}: retail={estimate.estimated_retail_eur} "
            f"max_buy={max_buy} provider={self.provider.name}"
        )
        return PricingAnalysis(
            evaluation_id=evaluation.id,
            brand=request.brand,
            model=request.model,
            estimated_retail_eur=estimate.estimated_retail_eur,
            max_buy_price_eur=max_buy,
            history_avg_paid_eur=history,
            comps=estimate.comps,
            confidence=estimate.confidence,
            provider=self.provider.name,
            target_margin_pct=margin,
        )
