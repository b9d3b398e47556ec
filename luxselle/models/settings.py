from sqlalchemy import Column, Float, Integer, String

from luxselle.database import Base
from luxselle.models.base import DocumentMixin


class OrgSettings(DocumentMixin, Base):
    """
    Per-organisation business settings. A missing row means the
    environment defaults from core.config apply.
    """
    __tablename__ = "org_settings"

    base_currency = Column(String(3), nullable=False, default="EUR")
    target_margin_pct = Column(Float, nullable=False)
    low_stock_threshold = Column(Integer, nullable=False)
    fx_usd_to_eur = Column(Float, nullable=False)
    vat_rate_pct = Column(Float, nullable=False, default=20.0)
    receive_sell_markup = Column(Float, nullable=False, default=1.5)
