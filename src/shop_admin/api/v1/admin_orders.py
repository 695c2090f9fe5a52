"""Endpoints for admin order management."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...models import OrderStatus
from ...schemas import BulkDeleteRequest, InvalidationLog, OrderEmailUpdate, OrderRead, RefundVerificationRead
from ...services.admin_auth import AdminTokenGate
from ...services.errors import OrderAdminError
from ...services.order_admin_service import OrderLifecycleManager
from ...services.view_events import RecentInvalidations
from .deps import get_admin_gate, get_order_manager, get_recent_invalidations

router = APIRouter(prefix="/admin", tags=["admin-orders"])

_ERROR_RESPONSES = {
    400: {"description": "Missing order id"},
    401: {"description": "Admin token missing or invalid"},
}


def _http_error(exc: OrderAdminError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.detail)


@router.get(
    "/orders",
    response_model=List[OrderRead],
    summary="List orders",
    responses={401: _ERROR_RESPONSES[401]},
)
def list_orders(
    *,
    order_status: Optional[OrderStatus] = Query(None, alias="status", description="Only orders in this state"),
    limit: int = Query(50, ge=1, le=200, description="Maximum items to return"),
    offset: int = Query(0, ge=0, description="Items to skip for pagination"),
    manager: OrderLifecycleManager = Depends(get_order_manager),
) -> List[OrderRead]:
    """Return orders newest first."""

    try:
        orders = manager.list_orders(status=order_status, limit=limit, offset=offset)
    except OrderAdminError as exc:
        raise _http_error(exc) from exc
    return [OrderRead.model_validate(order) for order in orders]


@router.get(
    "/orders/{order_id}",
    response_model=OrderRead,
    summary="Get an order",
    responses={**_ERROR_RESPONSES, 404: {"description": "Order not found"}},
)
def get_order(order_id: str, manager: OrderLifecycleManager = Depends(get_order_manager)) -> OrderRead:
    try:
        return OrderRead.model_validate(manager.get_order(order_id))
    except OrderAdminError as exc:
        raise _http_error(exc) from exc


@router.post(
    "/orders/bulk-delete",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete several orders atomically",
    responses={401: _ERROR_RESPONSES[401]},
)
def bulk_delete_orders(
    payload: BulkDeleteRequest,
    manager: OrderLifecycleManager = Depends(get_order_manager),
) -> Response:
    """Delete every listed order, or none of them.

    Example request body::

        {
            "order_ids": ["ORD-1001", "ORD-1002"]
        }
    """

    try:
        manager.delete_orders(payload.order_ids)
    except OrderAdminError as exc:
        raise _http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/orders/{order_id}/paid",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Mark an order paid",
    responses=_ERROR_RESPONSES,
)
def mark_paid(order_id: str, manager: OrderLifecycleManager = Depends(get_order_manager)) -> Response:
    try:
        manager.mark_paid(order_id)
    except OrderAdminError as exc:
        raise _http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/orders/{order_id}/delivered",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Mark an order delivered",
    responses={
        **_ERROR_RESPONSES,
        404: {"description": "Order not found"},
        409: {"description": "Order has no card key"},
    },
)
def mark_delivered(order_id: str, manager: OrderLifecycleManager = Depends(get_order_manager)) -> Response:
    try:
        manager.mark_delivered(order_id)
    except OrderAdminError as exc:
        raise _http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/orders/{order_id}/cancel",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Cancel an order",
    responses=_ERROR_RESPONSES,
)
def cancel_order(order_id: str, manager: OrderLifecycleManager = Depends(get_order_manager)) -> Response:
    """Cancel the order, refunding redeemed points and releasing reserved cards."""

    try:
        manager.cancel_order(order_id)
    except OrderAdminError as exc:
        raise _http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/orders/{order_id}/email",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Change an order's contact email",
    responses=_ERROR_RESPONSES,
)
def update_order_email(
    order_id: str,
    payload: OrderEmailUpdate,
    manager: OrderLifecycleManager = Depends(get_order_manager),
) -> Response:
    try:
        manager.update_order_email(order_id, payload.email)
    except OrderAdminError as exc:
        raise _http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/orders/{order_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete an order",
    responses=_ERROR_RESPONSES,
)
def delete_order(order_id: str, manager: OrderLifecycleManager = Depends(get_order_manager)) -> Response:
    try:
        manager.delete_order(order_id)
    except OrderAdminError as exc:
        raise _http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/orders/{order_id}/verify-refund",
    response_model=RefundVerificationRead,
    summary="Check refund status with the payment gateway",
    responses={
        **_ERROR_RESPONSES,
        503: {"description": "Merchant credentials not configured"},
    },
)
def verify_refund(order_id: str, manager: OrderLifecycleManager = Depends(get_order_manager)) -> RefundVerificationRead:
    """Reconcile the order against the gateway.

    Gateway failures are reported in the body with ``success: false``.
    """

    try:
        result = manager.verify_order_refund_status(order_id)
    except OrderAdminError as exc:
        raise _http_error(exc) from exc
    return RefundVerificationRead.model_validate(result)


@router.get(
    "/invalidations",
    response_model=InvalidationLog,
    summary="Recently invalidated views",
    responses={401: _ERROR_RESPONSES[401]},
)
def recent_invalidations(
    gate: AdminTokenGate = Depends(get_admin_gate),
    history: RecentInvalidations = Depends(get_recent_invalidations),
) -> InvalidationLog:
    try:
        gate()
    except OrderAdminError as exc:
        raise _http_error(exc) from exc
    return InvalidationLog(paths=history.snapshot())
