"""Card inventory model."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from ..core.database import Base


class Card(Base):
    """A redeemable card key, optionally reserved for a pending order."""

    __tablename__ = "cards"

    card_id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(String)
    card_key = Column(String, nullable=False)
    is_used = Column(Boolean, nullable=False, default=False)
    # Plain column: used cards keep the id of the order that consumed them.
    reserved_order_id = Column(String, index=True)
    reserved_at = Column(DateTime)
    used_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
