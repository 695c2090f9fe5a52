"""Admin authorization gate."""

from __future__ import annotations

import hmac
import logging
from typing import Callable, Optional

from .errors import Unauthorized

logger = logging.getLogger(__name__)

AuthorizationGate = Callable[[], None]


class AdminTokenGate:
    """Approve a call when the presented token matches the configured admin token.

    With no configured token every call is rejected.
    """

    def __init__(self, expected_token: Optional[str], presented_token: Optional[str]) -> None:
        self._expected = expected_token or ""
        self._presented = presented_token or ""

    def __call__(self) -> None:
        if not self._expected or not self._presented:
            logger.warning("admin check rejected: missing token")
            raise Unauthorized("Unauthorized")
        if not hmac.compare_digest(self._expected.encode(), self._presented.encode()):
            logger.warning("admin check rejected: token mismatch")
            raise Unauthorized("Unauthorized")
