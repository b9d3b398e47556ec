from sqlalchemy import Column, DateTime, Float, String, Text

from luxselle.database import Base
from luxselle.models.base import DocumentMixin


class Transaction(DocumentMixin, Base):
    """
    Immutable financial ledger entry (purchase, sale, adjustment).
    """
    __tablename__ = "transactions"

    type = Column(String(16), nullable=False, index=True)
    product_id = Column(String(32), nullable=True, index=True)
    buying_list_item_id = Column(String(32), nullable=True, index=True)
    amount_eur = Column(Float, nullable=False)
    occurred_at = Column(DateTime(timezone=True), nullable=False)
    notes = Column(Text, nullable=False, default="")

    def __repr__(self):
        return f"<Transaction {self.id} {self.type} {self.amount_eur}>"
