"""Public schema exports."""

from .order import BulkDeleteRequest, InvalidationLog, OrderEmailUpdate, OrderRead, RefundVerificationRead

__all__ = [
	"BulkDeleteRequest",
	"InvalidationLog",
	"OrderEmailUpdate",
	"OrderRead",
	"RefundVerificationRead",
]
