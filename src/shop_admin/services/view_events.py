"""Post-commit view invalidation events."""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, List

logger = logging.getLogger(__name__)

ADMIN_ORDERS_PATH = "/admin/orders"

InvalidationListener = Callable[[str], None]


def admin_order_path(order_id: str) -> str:
    return f"{ADMIN_ORDERS_PATH}/{order_id}"


def public_order_path(order_id: str) -> str:
    return f"/order/{order_id}"


class ViewInvalidationNotifier:
    """Fan out invalidated view paths to subscribed listeners.

    Listeners run synchronously in subscription order. A failing listener is
    logged and skipped; the operation that emitted the event has already
    committed by then.
    """

    def __init__(self) -> None:
        self._listeners: List[InvalidationListener] = []

    def subscribe(self, listener: InvalidationListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: InvalidationListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def invalidate(self, path: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(path)
            except Exception:
                logger.exception("view invalidation listener failed for %s", path)


class RecentInvalidations:
    """Bounded record of the most recently invalidated paths, oldest first."""

    def __init__(self, maxlen: int = 100) -> None:
        self._paths: Deque[str] = deque(maxlen=maxlen)

    def __call__(self, path: str) -> None:
        logger.debug("view invalidated: %s", path)
        self._paths.append(path)

    def snapshot(self) -> List[str]:
        return list(self._paths)

    def clear(self) -> None:
        self._paths.clear()
