"""Pydantic schemas for admin order workflows."""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models import OrderStatus


class OrderRead(BaseModel):
    """Represents an order as shown in the admin panel."""

    model_config = ConfigDict(from_attributes=True)

    order_id: str
    product_id: Optional[str] = None
    amount: Decimal
    status: OrderStatus
    email: Optional[str] = None
    user_id: Optional[str] = None
    points_used: int = 0
    card_key: Optional[str] = None
    paid_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    created_at: datetime


class OrderEmailUpdate(BaseModel):
    """Incoming payload for changing an order's contact email."""

    email: Optional[str] = Field(None, description="New contact email; blank clears it.")


class BulkDeleteRequest(BaseModel):
    """Orders to delete together in one transaction."""

    order_ids: List[str] = Field(default_factory=list, description="Order ids; blank entries are ignored.")


class RefundVerificationRead(BaseModel):
    """Outcome of a gateway refund check."""

    model_config = ConfigDict(from_attributes=True)

    success: bool
    status: Optional[Any] = Field(None, description="Raw gateway status value.")
    msg: Optional[str] = None
    error: Optional[str] = None


class InvalidationLog(BaseModel):
    """Most recently invalidated view paths, oldest first."""

    paths: List[str]
