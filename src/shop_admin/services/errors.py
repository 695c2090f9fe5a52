"""Exceptions raised by the order administration services."""

from __future__ import annotations


class OrderAdminError(Exception):
    """Raised when an admin order operation cannot proceed."""

    status_code = 400

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class Unauthorized(OrderAdminError):
    """The caller failed the admin check."""

    status_code = 401


class InvalidArgument(OrderAdminError):
    """A required identifier is missing or blank."""

    status_code = 400


class NotFound(OrderAdminError):
    """The referenced order does not exist."""

    status_code = 404


class PreconditionFailed(OrderAdminError):
    """The order is not in a state that allows the requested change."""

    status_code = 409


class ConfigurationError(OrderAdminError):
    """Required gateway credentials are not configured."""

    status_code = 503


class GatewayError(Exception):
    """The payment gateway could not be reached or returned an unreadable reply."""
