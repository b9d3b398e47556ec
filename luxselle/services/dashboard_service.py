# luxselle/services/dashboard_service.py
"""
Dashboard aggregates.

Computes the KPI tiles, recent activity, system status and profit summary
from products, buying list items, sourcing requests, jobs and transactions.
"""

import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.core.config import Settings, get_settings
from luxselle.core.enums import (
    BuyingListStatus,
    DEFAULT_ORG_ID,
    ProductStatus,
    SourcingStatus,
    TransactionType,
)
from luxselle.core.metrics import ErrorTracker
from luxselle.core.utils import models_to_schemas, round_money
from luxselle.models.buying_list import BuyingListItem
from luxselle.models.product import Product
from luxselle.models.sourcing_request import SourcingRequest
from luxselle.models.transaction import Transaction
from luxselle.repos.activity import ActivityEventRepo
from luxselle.repos.jobs import SystemJobRepo
from luxselle.repos.settings import SettingsRepo
from luxselle.schemas.dashboard import AiDiagnostics, DashboardKpis, ProfitSummary, SystemStatus
from luxselle.schemas.job import SystemJobRead
from luxselle.schemas.transaction import ActivityEventRead
from luxselle.services.ai.router import AiRouter

logger = logging.getLogger(__name__)


def _round_pct(value: float) -> float:
    return round(value * 10) / 10


class DashboardService:
    def __init__(self, db: AsyncSession, organisation_id: str = DEFAULT_ORG_ID, settings: Settings = None):
        self.db = db
        self.organisation_id = organisation_id
        self.settings = settings or get_settings()
        self.settings_repo = SettingsRepo(db, organisation_id, self.settings)
        self.activity = ActivityEventRepo(db, organisation_id)
        self.jobs = SystemJobRepo(db, organisation_id)

    async def _sum(self, expression, *criteria) -> float:
        value = await self.db.scalar(select(func.coalesce(func.sum(expression), 0)).where(*criteria))
        return float(value or 0)

    async def kpis(self) -> DashboardKpis:
        effective = await self.settings_repo.get_effective()
        in_stock = (Product.organisation_id == self.organisation_id, Product.status == ProductStatus.IN_STOCK.value)

        inventory_value = await self._sum(Product.cost_price_eur * Product.quantity, *in_stock)
        potential_value = await self._sum(Product.sell_price_eur * Product.quantity, *in_stock)
        pending_value = await self._sum(
            BuyingListItem.target_buy_price_eur,
            BuyingListItem.organisation_id == self.organisation_id,
            BuyingListItem.status.in_([BuyingListStatus.PENDING.value, BuyingListStatus.ORDERED.value]),
        )
        pipeline = await self._sum(
            SourcingRequest.budget,
            SourcingRequest.organisation_id == self.organisation_id,
            SourcingRequest.status.in_([SourcingStatus.OPEN.value, SourcingStatus.SOURCING.value]),
        )
        low_stock = await self.db.scalar(
            select(func.count(Product.id)).where(*in_stock, Product.quantity < effective.low_stock_threshold)
        )

        return DashboardKpis(
            total_inventory_value=round_money(inventory_value),
            total_inventory_potential_value=round_money(potential_value),
            pending_buy_list_value=round_money(pending_value),
            active_sourcing_pipeline=round_money(pipeline),
            low_stock_alerts=low_stock or 0,
        )

    async def recent_activity(self, limit: int = 20) -> List[ActivityEventRead]:
        return models_to_schemas(await self.activity.recent(limit), ActivityEventRead)

    async def status(self, router: AiRouter, tracker: ErrorTracker) -> SystemStatus:
        last_import = await self.jobs.latest("supplier_import")
        diagnostics = router.diagnostics()
        return SystemStatus(
            ai_routing_mode=diagnostics["routing_mode"],
            ai=AiDiagnostics(**diagnostics),
            store_backend=self.settings.store_backend,
            environment=self.settings.ENVIRONMENT,
            last_supplier_import=SystemJobRead.model_validate(last_import) if last_import else None,
            error_counts=tracker.stats(),
        )

    async def profit_summary(self) -> ProfitSummary:
        result = await self.db.execute(
            select(Product.cost_price_eur, Product.sell_price_eur).where(
                Product.organisation_id == self.organisation_id,
                Product.status == ProductStatus.SOLD.value,
            )
        )
        sold = result.all()
        items_sold = len(sold)
        total_cost = sum(cost for cost, _ in sold)
        sell_revenue = sum(sell for _, sell in sold)

        transaction_revenue = await self._sum(
            Transaction.amount_eur,
            Transaction.organisation_id == self.organisation_id,
            Transaction.type == TransactionType.SALE.value,
        )
        revenue = transaction_revenue if transaction_revenue > 0 else sell_revenue
        profit = revenue - total_cost
        margin_pct = (profit / revenue) * 100 if revenue > 0 else 0.0

        if items_sold:
            avg_margin_pct = sum(
                ((sell - cost) / sell) * 100 if sell > 0 else 0.0 for cost, sell in sold
            ) / items_sold
        else:
            avg_margin_pct = 0.0

        return ProfitSummary(
            total_cost=round_money(total_cost),
            total_revenue=round_money(revenue),
            total_profit=round_money(profit),
            margin_pct=_round_pct(margin_pct),
            items_sold=items_sold,
            avg_margin_pct=_round_pct(avg_margin_pct),
        )
