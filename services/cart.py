# services/cart.py
import os
from typing import Any, Dict

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from storefront.logger import get_logger

logger = get_logger(__name__)

CART_BASE_URL = os.getenv("CART_BASE_URL", "http://localhost:3000").rstrip("/")
CART_TIMEOUT = float(os.getenv("CART_TIMEOUT", "30"))
CART_COUNT_RETRIES = int(os.getenv("CART_COUNT_RETRIES", "3"))

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class CartError(Exception):
    """The cart service answered but did not add the item."""


class CartClient:
    """
    Client for the storefront Ajax cart endpoints (/cart/add.js, /cart.js).
    """

    def __init__(
        self,
        base_url: str = CART_BASE_URL,
        session: requests.Session | None = None,
        timeout: float = CART_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def add_item(self, product_id: str, quantity: int = 1) -> Dict[str, Any]:
        """
        Add a product to the cart. Not retried: a repeated POST would add twice.
        """
        url = f"{self.base_url}/cart/add.js"
        body = {"items": [{"id": product_id, "quantity": quantity}]}
        logger.debug("POST %s %s", url, body)

        r = self.session.post(url, json=body, headers=JSON_HEADERS, timeout=self.timeout)
        data = r.json()

        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list) or not items:
            detail = data.get("description") if isinstance(data, dict) else None
            raise CartError(
                f"Cart rejected {product_id} (HTTP {r.status_code}): {detail or data!r}"
            )
        return data

    @retry(
        wait=wait_exponential_jitter(initial=1, max=10),
        stop=stop_after_attempt(CART_COUNT_RETRIES),
        retry=retry_if_exception_type(requests.RequestException),
        reraise=True,
    )
    def item_count(self) -> int:
        url = f"{self.base_url}/cart.js"
        r = self.session.get(url, headers={"Accept": "application/json"}, timeout=self.timeout)
        r.raise_for_status()
        cart = r.json()
        return int(cart["item_count"])
