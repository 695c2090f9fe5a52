"""Client for the epay-style payment gateway's order status API."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import httpx

from .errors import ConfigurationError, GatewayError

logger = logging.getLogger(__name__)

DEFAULT_PAY_URL = "https://credit.linux.do/epay/pay/submit.php"
DEFAULT_API_URL = "https://credit.linux.do/epay/api.php"


def derive_api_url(pay_url: Optional[str]) -> str:
    """Map the payment submission URL onto the gateway's status API URL.

    ``.../pay/submit.php`` (or ``.../submit.php``) becomes ``.../api.php``.
    Paths that do not end up at ``api.php`` fall back to ``/epay/api.php`` on
    the same host; URLs that do not parse, or that httpx rejects, fall back to
    :data:`DEFAULT_API_URL`.
    """

    try:
        parts = urlsplit(pay_url or DEFAULT_PAY_URL)
    except ValueError:
        return DEFAULT_API_URL
    if not parts.scheme or not parts.netloc:
        return DEFAULT_API_URL

    path = parts.path.replace("/pay/submit.php", "/api.php").replace("/submit.php", "/api.php")
    api_url = f"{parts.scheme}://{parts.netloc}{path}"
    if not api_url.endswith("api.php"):
        api_url = f"{parts.scheme}://{parts.netloc}/epay/api.php"
    try:
        httpx.URL(api_url)
    except httpx.InvalidURL:
        return DEFAULT_API_URL
    return api_url


class EpayGatewayClient:
    """Query order state from the gateway. Each call is attempted exactly once."""

    def __init__(
        self,
        merchant_id: Optional[str],
        merchant_key: Optional[str],
        *,
        pay_url: Optional[str] = None,
        http_client: httpx.Client | None = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.merchant_id = merchant_id
        self.merchant_key = merchant_key
        self.api_url = derive_api_url(pay_url)
        self._http_client = http_client
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.merchant_id and self.merchant_key)

    def ensure_configured(self) -> None:
        if not self.configured:
            raise ConfigurationError("Missing merchant config")

    def query_order(self, order_id: str) -> Dict[str, Any]:
        """Return the gateway's JSON envelope for ``order_id``."""

        self.ensure_configured()
        params = {
            "act": "order",
            "pid": self.merchant_id,
            "key": self.merchant_key,
            "out_trade_no": order_id,
        }

        client = self._http_client or httpx.Client(timeout=self._timeout)
        owns_client = self._http_client is None
        try:
            response = client.get(self.api_url, params=params)
            payload = response.json()
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise GatewayError(str(exc) or exc.__class__.__name__) from exc
        except ValueError as exc:
            raise GatewayError(f"Invalid gateway response: {exc}") from exc
        finally:
            if owns_client:
                client.close()

        if not isinstance(payload, dict):
            raise GatewayError("Invalid gateway response: expected a JSON object")
        return payload
