from sqlalchemy import Column, Float, String, Text, JSON

from luxselle.database import Base
from luxselle.core.enums import BuyingListStatus
from luxselle.models.base import DocumentMixin


class BuyingListItem(DocumentMixin, Base):
    """
    A candidate purchase that has not yet become owned inventory.

    Status flow: pending -> ordered -> received, or cancelled.
    `received` is set only by the receive operation and is never left.
    """
    __tablename__ = "buying_list_items"

    source_type = Column(String(16), nullable=False)  # manual, evaluator, supplier
    supplier_id = Column(String(32), nullable=True, index=True)
    supplier_item_id = Column(String(32), nullable=True)
    evaluation_id = Column(String(32), nullable=True)

    brand = Column(String, nullable=False)
    model = Column(String, nullable=False)
    category = Column(String, nullable=False, default="")
    condition = Column(String, nullable=False, default="")
    colour = Column(String, nullable=False, default="")

    target_buy_price_eur = Column(Float, nullable=False)
    status = Column(String(16), nullable=False, default=BuyingListStatus.PENDING.value, index=True)
    notes = Column(Text, nullable=False, default="")

    # Landed-cost breakdown captured when the item was evaluated
    landed_cost_snapshot = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<BuyingListItem {self.id} {self.brand} {self.model} ({self.status})>"
