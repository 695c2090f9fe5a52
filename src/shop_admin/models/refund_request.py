"""Customer refund request model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from ..core.database import Base


class RefundRequest(Base):
    """A customer's request to refund an order."""

    __tablename__ = "refund_requests"

    refund_request_id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String, ForeignKey("orders.order_id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String)
    reason = Column(Text)
    status = Column(String, nullable=False, default="pending")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
