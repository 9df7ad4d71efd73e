# storefront/events.py
from dataclasses import dataclass
from typing import Callable, List, Tuple

from .logger import get_logger
from .models import WishlistEntry

logger = get_logger(__name__)


@dataclass(frozen=True)
class WishlistUpdated:
    """Published after every successful save, carrying the full snapshot."""
    wishlist: Tuple[WishlistEntry, ...]


Listener = Callable[[WishlistUpdated], None]


class EventBus:
    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: WishlistUpdated) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.exception("Wishlist listener %r failed: %s", listener, e)
