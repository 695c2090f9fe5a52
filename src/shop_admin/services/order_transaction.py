"""Typed access to the tables touched inside one order transaction."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Card, LoginUser, Order, OrderStatus, RefundRequest

logger = logging.getLogger(__name__)


class OrderTransaction:
    """Read, update and delete capabilities over orders, cards, points and refund requests.

    Wraps a session whose transaction is owned by the caller: nothing here
    commits or rolls back, so every change made through one instance lands or
    fails together.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def lock_order(self, order_id: str) -> Optional[Order]:
        """Load the order row, holding a row lock until the transaction ends."""

        stmt = select(Order).where(Order.order_id == order_id).with_for_update()
        return self.session.execute(stmt).scalar_one_or_none()

    def set_status(self, order: Order, status: OrderStatus, **timestamps) -> None:
        order.status = status
        for column, value in timestamps.items():
            setattr(order, column, value)
        self.session.flush()

    def credit_points(self, user_id: Optional[str], points: Optional[int]) -> bool:
        """Add ``points`` back to the user's balance. Returns whether a credit was issued."""

        if not user_id or not points or points <= 0:
            return False
        stmt = (
            update(LoginUser)
            .where(LoginUser.user_id == user_id)
            .values(points=LoginUser.points + points)
            .execution_options(synchronize_session=False)
        )
        self.session.execute(stmt)
        return True

    def release_card_reservations(self, order_id: str) -> int:
        """Clear reservations held for ``order_id`` on cards not yet used."""

        stmt = (
            update(Card)
            .where(Card.reserved_order_id == order_id, Card.is_used.is_(False))
            .values(reserved_order_id=None, reserved_at=None)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount

    def delete_refund_requests(self, order_id: str) -> int:
        """Remove refund requests for the order; failures are tolerated."""

        try:
            with self.session.begin_nested():
                stmt = delete(RefundRequest).where(RefundRequest.order_id == order_id)
                return self.session.execute(stmt).rowcount
        except SQLAlchemyError as exc:
            logger.debug("skipped refund request cleanup for %s: %s", order_id, exc)
            return 0

    def delete_order(self, order: Order) -> None:
        self.session.delete(order)
        self.session.flush()

    def refund_and_release(self, order: Order) -> None:
        """Compensate an order being withdrawn: return its points and free its cards.

        Points are only returned once: a cancelled order had them returned at
        cancellation time, and a refunded order is settled by the gateway.
        """

        if order.status not in (OrderStatus.CANCELLED, OrderStatus.REFUNDED):
            if self.credit_points(order.user_id, order.points_used):
                logger.info(
                    "credited %s points to user %s for order %s", order.points_used, order.user_id, order.order_id
                )
        released = self.release_card_reservations(order.order_id)
        if released:
            logger.info("released %s reserved card(s) for order %s", released, order.order_id)

    def delete_one(self, order_id: str) -> bool:
        """Withdraw and delete a single order. Returns False when it does not exist."""

        order = self.lock_order(order_id)
        if order is None:
            return False
        self.refund_and_release(order)
        self.delete_refund_requests(order_id)
        self.delete_order(order)
        return True
