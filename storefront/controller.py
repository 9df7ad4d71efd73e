# storefront/controller.py
from bs4.element import Tag

from .logger import get_logger
from .manager import WishlistManager
from .page import StorefrontPage, closest

logger = get_logger(__name__)


class WishlistController:
    """Routes page clicks and visibility changes to the manager."""

    def __init__(self, manager: WishlistManager, page: StorefrontPage):
        self.manager = manager
        self.page = page

    def _product_id(self, target: Tag) -> str | None:
        holder = closest(target, "[data-product-id]")
        if holder is None:
            logger.debug("Click target has no data-product-id ancestor: %s", target)
            return None
        return holder.get("data-product-id")

    def click(self, target: Tag) -> None:
        button = closest(target, ".wishlist-button")
        if button is not None:
            try:
                self.manager.toggle(self.page.descriptor_from(button))
            except ValueError as e:
                logger.warning("Ignoring wishlist button click: %s", e)

        if closest(target, ".wishlist-dropdown-trigger") is not None:
            self.page.toggle_dropdown()

        if closest(target, ".remove-from-wishlist") is not None:
            product_id = self._product_id(target)
            if product_id:
                self.manager.remove(product_id)

        if closest(target, ".clear-wishlist-btn") is not None:
            self.manager.clear()

        if closest(target, ".add-to-cart-btn") is not None:
            product_id = self._product_id(target)
            if product_id:
                self.manager.add_to_cart(product_id)

        # Any click outside the dropdown closes it
        if closest(target, ".wishlist-dropdown-wrapper") is None:
            self.page.close_dropdown()

    def visibility_changed(self, hidden: bool) -> None:
        if not hidden:
            self.manager.reload()
