"""Order domain model."""

import enum
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Enum as SAEnum, Integer, Numeric, String

from ..core.database import Base


class OrderStatus(str, enum.Enum):
    """Possible order states."""

    PENDING = "pending"
    PAID = "paid"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class Order(Base):
    """A checkout order fulfilled with a single card key."""

    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("points_used >= 0", name="orders_points_used_positive"),
    )

    order_id = Column(String, primary_key=True)
    product_id = Column(String)
    amount = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(
        SAEnum(OrderStatus, name="order_status", values_callable=lambda members: [m.value for m in members]),
        nullable=False,
        default=OrderStatus.PENDING,
    )
    email = Column(String)
    user_id = Column(String)
    points_used = Column(Integer, nullable=False, default=0)
    card_key = Column(String)
    paid_at = Column(DateTime)
    delivered_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
