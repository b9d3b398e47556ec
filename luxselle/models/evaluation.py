from sqlalchemy import Column, Float, String, Text, JSON

from luxselle.database import Base
from luxselle.models.base import DocumentMixin


class Evaluation(DocumentMixin, Base):
    """Stored result of a pricing analysis."""
    __tablename__ = "evaluations"

    brand = Column(String, nullable=False)
    model = Column(String, nullable=False)
    category = Column(String, nullable=False, default="")
    condition = Column(String, nullable=False, default="")
    colour = Column(String, nullable=False, default="")
    notes = Column(Text, nullable=False, default="")
    ask_price_eur = Column(Float, nullable=True)
    estimated_retail_eur = Column(Float, nullable=False)
    max_buy_price_eur = Column(Float, nullable=False)
    history_avg_paid_eur = Column(Float, nullable=True)
    comps = Column(JSON, nullable=False, default=list)
    confidence = Column(Float, nullable=False, default=0.0)
    provider = Column(String(16), nullable=False)
