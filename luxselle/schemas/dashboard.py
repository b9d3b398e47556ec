from typing import Dict, Optional

from luxselle.schemas.base import ApiModel
from luxselle.schemas.job import SystemJobRead


class DashboardKpis(ApiModel):
    total_inventory_value: float
    total_inventory_potential_value: float
    pending_buy_list_value: float
    active_sourcing_pipeline: float
    low_stock_alerts: int


class ProfitSummary(ApiModel):
    total_cost: float
    total_revenue: float
    total_profit: float
    margin_pct: float
    items_sold: int
    avg_margin_pct: float


class AiDiagnostics(ApiModel):
    routing_mode: str
    providers: Dict[str, bool]
    healthy: Dict[str, bool]
    last_provider_by_task: Dict[str, Optional[str]]


class SystemStatus(ApiModel):
    ai_routing_mode: str
    ai: AiDiagnostics
    store_backend: str
    environment: str
    last_supplier_import: Optional[SystemJobRead] = None
    error_counts: Dict[str, int]
