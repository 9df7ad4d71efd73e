import os
from unittest.mock import Mock

import pytest

# Keep CLI output on stdout parseable; caplog still sees records
os.environ.setdefault("LOG_TO_STDOUT", "false")

from services.cart import CartClient
from storefront.manager import WishlistManager
from storefront.models import ProductDescriptor
from storefront.page import StorefrontPage
from storefront.pricing import Price
from storefront.storage import CookieMirror, MemoryStore, WishlistStorage

FIXED_NOW = "2024-01-10T12:00:00+00:00"

PAGE_HTML = """<html><head><title>Shop</title></head><body>
<div class="wishlist-dropdown-wrapper">
  <button class="wishlist-dropdown-trigger">Wishlist <span class="wishlist-count">0</span></button>
  <div class="wishlist-dropdown">
    <span class="wishlist-total-count"></span>
    <div class="wishlist-dropdown-items"></div>
    <div class="wishlist-empty-state">Your wishlist is empty</div>
  </div>
</div>
<button class="wishlist-button" data-product-id="123" data-product-title="Widget"
  data-product-image="/img/widget.png" data-product-url="/products/widget"
  data-product-price="150"><span class="heart">&#9829;</span></button>
<button class="wishlist-button" data-product-id="456" data-product-title="Gadget"
  data-product-image="/img/gadget.png" data-product-url="/products/gadget"
  data-product-price="19.99" data-product-price-unit="major"></button>
<div class="wishlist-page">
  <span class="wishlist-total-items"></span>
  <button class="clear-wishlist-btn">Clear all</button>
  <div class="wishlist-items-grid"></div>
  <div class="wishlist-empty-state" style="color: #999">Nothing saved yet</div>
</div>
<a class="cart-link">Cart (<span class="cart-count">0</span>)</a>
<footer class="site-footer">Footer</footer>
</body></html>
"""


def descriptor(product_id: str, title: str | None = None, price=None) -> ProductDescriptor:
    return ProductDescriptor(
        id=product_id,
        title=title or f"Product {product_id}",
        image=f"/img/{product_id}.png",
        url=f"/products/{product_id}",
        price=price if price is not None else Price.minor(1000),
    )


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def cookies():
    return CookieMirror()


@pytest.fixture
def storage(store, cookies):
    return WishlistStorage(store, cookies)


@pytest.fixture
def page():
    return StorefrontPage(PAGE_HTML)


@pytest.fixture
def cart():
    return Mock(spec=CartClient)


@pytest.fixture
def make_manager(storage, page, cart):
    def _make(confirm=False, **overrides):
        kwargs = dict(
            storage=storage,
            view=page,
            cart=cart,
            confirm=lambda message: confirm,
            clock=lambda: FIXED_NOW,
        )
        kwargs.update(overrides)
        return WishlistManager(**kwargs)

    return _make
