"""SQLAlchemy models for the shop admin service."""

from .card import Card
from .login_user import LoginUser
from .order import Order, OrderStatus
from .refund_request import RefundRequest

__all__ = [
    "Card",
    "LoginUser",
    "Order",
    "OrderStatus",
    "RefundRequest",
]
