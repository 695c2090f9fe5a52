"""Service layer exports."""

from . import (
	admin_auth,
	errors,
	order_admin_service,
	order_transaction,
	payment_gateway,
	view_events,
)

__all__ = [
	"admin_auth",
	"errors",
	"order_admin_service",
	"order_transaction",
	"payment_gateway",
	"view_events",
]
