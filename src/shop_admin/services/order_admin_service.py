"""Admin order lifecycle: payment, delivery, cancellation, deletion and refund checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..models import Order, OrderStatus
from ..utils.datetime import utcnow
from .admin_auth import AuthorizationGate
from .errors import GatewayError, InvalidArgument, NotFound, PreconditionFailed
from .order_transaction import OrderTransaction
from .payment_gateway import EpayGatewayClient
from .view_events import ADMIN_ORDERS_PATH, ViewInvalidationNotifier, admin_order_path, public_order_path

logger = logging.getLogger(__name__)

GATEWAY_SUCCESS_CODE = 1
GATEWAY_STATUS_REFUNDED = 0
GATEWAY_STATUS_PAID = 1


@dataclass
class RefundVerificationResult:
    """Renderable outcome of a gateway refund check."""

    success: bool
    status: Optional[Any] = None
    msg: Optional[str] = None
    error: Optional[str] = None


def _is_int(value: Any, expected: int) -> bool:
    # JSON true/false and floats must not pass for gateway codes.
    return type(value) is int and value == expected


def _require_order_id(order_id: Optional[str]) -> str:
    cleaned = (order_id or "").strip()
    if not cleaned:
        raise InvalidArgument("Missing order id")
    return cleaned


def normalize_order_ids(order_ids: Optional[Iterable[Any]]) -> List[str]:
    """Stringify and strip ids, dropping blanks."""

    cleaned = (str(value).strip() for value in (order_ids or []) if value is not None)
    return [value for value in cleaned if value]


def normalize_email(email: Optional[str]) -> Optional[str]:
    cleaned = (email or "").strip()
    return cleaned or None


class OrderLifecycleManager:
    """Guarded read-modify-write operations on orders.

    Every operation asks ``authorize`` first. Mutations run in a single
    transaction opened from ``session_factory``; views are invalidated only
    after that transaction commits.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        *,
        authorize: AuthorizationGate,
        notifier: ViewInvalidationNotifier,
        gateway: EpayGatewayClient,
    ) -> None:
        self._session_factory = session_factory
        self._authorize = authorize
        self._notifier = notifier
        self._gateway = gateway

    def _invalidate(self, *paths: str) -> None:
        for path in paths:
            self._notifier.invalidate(path)

    def _invalidate_order_views(self, order_id: str, *, public: bool = True) -> None:
        paths = [ADMIN_ORDERS_PATH, admin_order_path(order_id)]
        if public:
            paths.append(public_order_path(order_id))
        self._invalidate(*paths)

    # Reads

    def get_order(self, order_id: str) -> Order:
        self._authorize()
        order_id = _require_order_id(order_id)
        with self._session_factory() as session:
            order = session.get(Order, order_id)
            if order is None:
                raise NotFound("Order not found")
            session.expunge(order)
            return order

    def list_orders(
        self,
        *,
        status: Optional[OrderStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[Order]:
        """Return orders newest first, optionally filtered by status."""

        self._authorize()
        stmt = select(Order).order_by(Order.created_at.desc(), Order.order_id).offset(offset).limit(limit)
        if status is not None:
            stmt = stmt.where(Order.status == status)
        with self._session_factory() as session:
            orders = session.execute(stmt).scalars().all()
            session.expunge_all()
            return orders

    # Mutations

    def mark_paid(self, order_id: str) -> None:
        """Set the order paid, overwriting any earlier payment timestamp."""

        self._authorize()
        order_id = _require_order_id(order_id)
        with self._session_factory.begin() as session:
            tx = OrderTransaction(session)
            order = tx.lock_order(order_id)
            if order is not None:
                tx.set_status(order, OrderStatus.PAID, paid_at=utcnow())

        logger.info("order %s marked paid", order_id)
        self._invalidate_order_views(order_id)

    def mark_delivered(self, order_id: str) -> None:
        self._authorize()
        order_id = _require_order_id(order_id)
        with self._session_factory.begin() as session:
            tx = OrderTransaction(session)
            order = tx.lock_order(order_id)
            if order is None:
                raise NotFound("Order not found")
            if not order.card_key:
                raise PreconditionFailed("Missing card key; cannot mark delivered")
            tx.set_status(order, OrderStatus.DELIVERED, delivered_at=utcnow())

        logger.info("order %s marked delivered", order_id)
        self._invalidate_order_views(order_id)

    def cancel_order(self, order_id: str) -> None:
        """Cancel the order, returning redeemed points and releasing reserved cards.

        An order the gateway already refunded cannot be cancelled.
        """

        self._authorize()
        order_id = _require_order_id(order_id)
        with self._session_factory.begin() as session:
            tx = OrderTransaction(session)
            order = tx.lock_order(order_id)
            if order is None:
                tx.release_card_reservations(order_id)
            elif order.status == OrderStatus.REFUNDED:
                raise PreconditionFailed("Order already refunded; cannot cancel")
            else:
                tx.refund_and_release(order)
                tx.set_status(order, OrderStatus.CANCELLED)

        logger.info("order %s cancelled", order_id)
        self._invalidate_order_views(order_id)

    def update_order_email(self, order_id: str, email: Optional[str]) -> None:
        self._authorize()
        order_id = _require_order_id(order_id)
        with self._session_factory.begin() as session:
            order = OrderTransaction(session).lock_order(order_id)
            if order is not None:
                order.email = normalize_email(email)

        self._invalidate_order_views(order_id, public=False)

    def delete_order(self, order_id: str) -> None:
        self._authorize()
        order_id = _require_order_id(order_id)
        with self._session_factory.begin() as session:
            deleted = OrderTransaction(session).delete_one(order_id)

        if deleted:
            logger.info("order %s deleted", order_id)
        self._invalidate_order_views(order_id, public=False)

    def delete_orders(self, order_ids: Optional[Iterable[Any]]) -> None:
        """Delete several orders in one transaction; any failure keeps all of them."""

        self._authorize()
        ids = normalize_order_ids(order_ids)
        if not ids:
            return

        with self._session_factory.begin() as session:
            tx = OrderTransaction(session)
            deleted = sum(1 for order_id in ids if tx.delete_one(order_id))

        logger.info("bulk delete removed %s of %s order(s)", deleted, len(ids))
        self._invalidate(ADMIN_ORDERS_PATH)

    # Gateway reconciliation

    def verify_order_refund_status(self, order_id: str) -> RefundVerificationResult:
        """Ask the payment gateway whether the order was refunded.

        Gateway, transport and storage failures come back as ``success=False`` results.
        """

        self._authorize()
        order_id = _require_order_id(order_id)
        self._gateway.ensure_configured()

        try:
            data = self._gateway.query_order(order_id)
            if not _is_int(data.get("code"), GATEWAY_SUCCESS_CODE):
                return RefundVerificationResult(success=False, error=data.get("msg") or "Query failed")

            status = data.get("status")
            if _is_int(status, GATEWAY_STATUS_REFUNDED):
                self._mark_refunded(order_id)
                self._invalidate(ADMIN_ORDERS_PATH)
                return RefundVerificationResult(success=True, status=status, msg="Refunded (Verified)")
            if _is_int(status, GATEWAY_STATUS_PAID):
                return RefundVerificationResult(success=True, status=status, msg="Paid (Not Refunded)")
            return RefundVerificationResult(success=True, status=status, msg=f"Status: {status}")
        except (GatewayError, SQLAlchemyError) as exc:
            logger.warning("refund verification for order %s failed: %s", order_id, exc)
            return RefundVerificationResult(success=False, error=str(exc))

    def _mark_refunded(self, order_id: str) -> None:
        with self._session_factory.begin() as session:
            tx = OrderTransaction(session)
            order = tx.lock_order(order_id)
            if order is not None:
                tx.set_status(order, OrderStatus.REFUNDED)
        logger.info("order %s verified refunded by gateway", order_id)
