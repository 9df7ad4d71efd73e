# storefront/manager.py
import datetime
from typing import Callable, List, Optional

import pytz
import requests

from services.cart import CartClient, CartError

from .events import EventBus, WishlistUpdated
from .logger import get_logger
from .models import ProductDescriptor, WishlistEntry, normalize_id
from .storage import WishlistStorage

logger = get_logger(__name__)

CLEAR_PROMPT = "Are you sure you want to clear your entire wishlist?"


def now_utc_iso() -> str:
    return datetime.datetime.now(tz=pytz.UTC).isoformat()


def _decline(message: str) -> bool:
    return False


class WishlistManager:
    """
    Owns the wishlist for one page: mutations persist through storage,
    publish WishlistUpdated on the bus and refresh the view.

    The view is anything with refresh(entries), show_toast(message, kind)
    and set_cart_count(count); StorefrontPage is the HTML implementation.
    Without a view, toasts are only logged.
    """

    def __init__(
        self,
        storage: WishlistStorage,
        bus: Optional[EventBus] = None,
        view=None,
        cart: Optional[CartClient] = None,
        confirm: Callable[[str], bool] = _decline,
        clock: Callable[[], str] = now_utc_iso,
    ):
        self.storage = storage
        self.bus = bus if bus is not None else EventBus()
        self.view = view
        self.cart = cart
        self.confirm = confirm
        self.clock = clock

        self.wishlist: List[WishlistEntry] = self.load()
        self.refresh()

    # Persistence

    def load(self) -> List[WishlistEntry]:
        return self.storage.load()

    def save(self) -> bool:
        if not self.storage.save(self.wishlist):
            return False
        self.bus.publish(WishlistUpdated(wishlist=tuple(self.wishlist)))
        return True

    def reload(self) -> None:
        """Re-read durable storage, picking up writes from other tabs."""
        self.wishlist = self.load()
        self.refresh()

    # View

    def refresh(self) -> None:
        if self.view is not None:
            self.view.refresh(list(self.wishlist))

    def notify(self, message: str, kind: str = "info") -> None:
        if self.view is not None:
            self.view.show_toast(message, kind)
        else:
            logger.info("Notification (%s): %s", kind, message)

    # Queries

    def _index_of(self, product_id) -> int:
        try:
            product_id = normalize_id(product_id)
        except ValueError:
            return -1
        for i, entry in enumerate(self.wishlist):
            if entry.id == product_id:
                return i
        return -1

    def is_in_wishlist(self, product_id: str) -> bool:
        return self._index_of(product_id) > -1

    def get_wishlist(self) -> List[WishlistEntry]:
        return list(self.wishlist)

    # Mutations

    def _commit(self) -> None:
        self.save()
        self.refresh()

    def toggle(self, descriptor: ProductDescriptor) -> bool:
        """Add the product if absent, remove it if present. Returns True if added."""
        index = self._index_of(descriptor.id)
        if index > -1:
            del self.wishlist[index]
            added = False
        else:
            self.wishlist.insert(0, WishlistEntry.from_descriptor(descriptor, self.clock()))
            added = True

        self._commit()
        self.notify("Added to wishlist" if added else "Removed from wishlist", "success")
        return added

    def remove(self, product_id: str) -> None:
        index = self._index_of(product_id)
        if index == -1:
            return
        entry = self.wishlist.pop(index)
        self._commit()
        self.notify(f"{entry.title} removed from wishlist", "success")

    def clear(self) -> None:
        if not self.wishlist:
            return
        if not self.confirm(CLEAR_PROMPT):
            return
        self.wishlist = []
        self._commit()
        self.notify("Wishlist cleared", "success")

    def add_entry(self, descriptor: ProductDescriptor) -> bool:
        if self.is_in_wishlist(descriptor.id):
            return False
        self.wishlist.insert(0, WishlistEntry.from_descriptor(descriptor, self.clock()))
        self._commit()
        return True

    def remove_entry(self, product_id: str) -> bool:
        index = self._index_of(product_id)
        if index == -1:
            return False
        del self.wishlist[index]
        self._commit()
        return True

    # Cart

    def add_to_cart(self, product_id: str) -> bool:
        """Add one unit to the cart. The wishlist is left untouched either way."""
        if self.cart is None:
            logger.error("No cart client configured; cannot add %s to cart.", product_id)
            self.notify("Could not add to cart", "error")
            return False

        try:
            self.cart.add_item(product_id, quantity=1)
        except (CartError, requests.RequestException, ValueError) as e:
            logger.error("Add to cart error for %s: %s", product_id, e)
            self.notify("Could not add to cart", "error")
            return False

        self.notify("Added to cart!", "success")
        self.update_cart_count()
        return True

    def update_cart_count(self) -> None:
        try:
            count = self.cart.item_count()
        except (requests.RequestException, KeyError, TypeError, ValueError) as e:
            logger.error("Failed to refresh cart count: %s", e)
            return
        if self.view is not None:
            self.view.set_cart_count(count)
