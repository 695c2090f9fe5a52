"""Request-scoped dependencies for admin endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import sessionmaker

from ...core.config import Settings, get_settings
from ...core.database import get_session_factory
from ...services.admin_auth import AdminTokenGate
from ...services.order_admin_service import OrderLifecycleManager
from ...services.payment_gateway import EpayGatewayClient
from ...services.view_events import RecentInvalidations, ViewInvalidationNotifier


def get_notifier(request: Request) -> ViewInvalidationNotifier:
    return request.app.state.view_notifier


def get_recent_invalidations(request: Request) -> RecentInvalidations:
    return request.app.state.recent_invalidations


def get_gateway(settings: Settings = Depends(get_settings)) -> EpayGatewayClient:
    return EpayGatewayClient(
        settings.merchant_id,
        settings.merchant_key,
        pay_url=settings.pay_url,
        timeout=settings.gateway_timeout_seconds,
    )


def get_admin_gate(
    settings: Settings = Depends(get_settings),
    x_admin_token: Optional[str] = Header(None),
) -> AdminTokenGate:
    return AdminTokenGate(settings.admin_token, x_admin_token)


def get_order_manager(
    session_factory: sessionmaker = Depends(get_session_factory),
    gate: AdminTokenGate = Depends(get_admin_gate),
    notifier: ViewInvalidationNotifier = Depends(get_notifier),
    gateway: EpayGatewayClient = Depends(get_gateway),
) -> OrderLifecycleManager:
    """Assemble an order manager bound to the caller's admin token."""

    return OrderLifecycleManager(
        session_factory,
        authorize=gate,
        notifier=notifier,
        gateway=gateway,
    )
