# storefront/page.py
from typing import List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup
from bs4.element import Tag

from .logger import get_logger
from .models import ProductDescriptor, WishlistEntry
from . import render

logger = get_logger(__name__)


def closest(tag: Optional[Tag], selector: str) -> Optional[Tag]:
    """Nearest ancestor-or-self matching a CSS selector, like Element.closest()."""
    node = tag
    while isinstance(node, Tag) and not isinstance(node, BeautifulSoup):
        if node.css.match(selector):
            return node
        node = node.parent
    return None


def _add_class(tag: Tag, name: str) -> None:
    classes = list(tag.get("class", []))
    if name not in classes:
        classes.append(name)
    tag["class"] = classes


def _remove_class(tag: Tag, name: str) -> None:
    classes = [c for c in tag.get("class", []) if c != name]
    if classes:
        tag["class"] = classes
    elif "class" in tag.attrs:
        del tag["class"]


def _set_display(tag: Tag, value: str) -> None:
    decls = [
        d.strip()
        for d in tag.get("style", "").split(";")
        if d.strip() and d.split(":", 1)[0].strip().lower() != "display"
    ]
    decls.append(f"display: {value}")
    tag["style"] = "; ".join(decls) + ";"


def _replace_children(tag: Tag, html: str) -> None:
    tag.clear()
    if not html:
        return
    fragment = BeautifulSoup(html, "html.parser")
    for child in list(fragment.contents):
        tag.append(child.extract())


class StorefrontPage:
    """
    Storefront document the widget reads controls from and renders into.
    Every target is optional; absent ones are skipped.
    """

    def __init__(self, html: str):
        self.soup = BeautifulSoup(html, "html.parser")
        self.toasts: List[Tuple[str, str]] = []

    def html(self) -> str:
        return str(self.soup)

    def find(self, selector: str) -> Optional[Tag]:
        return self.soup.select_one(selector)

    def descriptor_from(self, button: Tag) -> ProductDescriptor:
        return ProductDescriptor.from_attributes(button.attrs)

    # Wishlist rendering

    def refresh(self, wishlist: Sequence[WishlistEntry]) -> None:
        self.update_buttons(wishlist)
        self.update_dropdown(wishlist)
        self.update_wishlist_page(wishlist)
        self.update_counters(len(wishlist))

    def update_buttons(self, wishlist: Sequence[WishlistEntry]) -> None:
        ids = render.ids_of(wishlist)
        for button in self.soup.select(".wishlist-button"):
            state = render.button_state(ids, button.get("data-product-id"))
            if state.active:
                _add_class(button, "active")
            else:
                _remove_class(button, "active")
            button["aria-label"] = state.label
            button["title"] = state.label

    def update_dropdown(self, wishlist: Sequence[WishlistEntry]) -> None:
        container = self.soup.select_one(".wishlist-dropdown-items")
        if container is None:
            return
        empty_state = self.soup.select_one(".wishlist-dropdown .wishlist-empty-state")

        model = render.dropdown_model(wishlist)
        if empty_state is not None:
            _set_display(empty_state, "block" if model.empty else "none")
        _replace_children(container, render.render_dropdown_items(model))

    def update_wishlist_page(self, wishlist: Sequence[WishlistEntry]) -> None:
        grid = self.soup.select_one(".wishlist-items-grid")
        if grid is None:
            # Not the wishlist page
            return
        empty_state = self.soup.select_one(".wishlist-page .wishlist-empty-state")
        clear_btn = self.soup.select_one(".clear-wishlist-btn")

        model = render.page_model(wishlist)
        if empty_state is not None:
            _set_display(empty_state, "flex" if model.empty else "none")
        if clear_btn is not None:
            _set_display(clear_btn, "none" if model.empty else "inline-block")
        _replace_children(grid, render.render_page_grid(model))

    def update_counters(self, count: int) -> None:
        text, hidden = render.compact_counter(count)
        for counter in self.soup.select(".wishlist-count"):
            counter.string = text
            if hidden:
                _add_class(counter, "hidden")
            else:
                _remove_class(counter, "hidden")

        for counter in self.soup.select(".wishlist-total-count, .wishlist-total-items"):
            counter.string = render.counter_text(count)

    # Other page affordances

    def set_cart_count(self, count: int) -> None:
        for counter in self.soup.select(".cart-count, #cart-count"):
            counter.string = str(count)

    def toggle_dropdown(self) -> None:
        dropdown = self.soup.select_one(".wishlist-dropdown-wrapper")
        if dropdown is None:
            return
        if "active" in dropdown.get("class", []):
            _remove_class(dropdown, "active")
        else:
            _add_class(dropdown, "active")

    def close_dropdown(self) -> None:
        dropdown = self.soup.select_one(".wishlist-dropdown-wrapper")
        if dropdown is None:
            return
        _remove_class(dropdown, "active")

    def show_toast(self, message: str, kind: str = "info") -> None:
        toast = self.soup.select_one(".wishlist-toast")
        if toast is None:
            toast = self.soup.new_tag("div")
            (self.soup.body or self.soup).append(toast)

            style = self.soup.new_tag("style")
            style.string = render.toast_css()
            (self.soup.head or self.soup).append(style)

        toast.string = message
        toast["class"] = ["wishlist-toast", kind, "show"]
        self.toasts.append((message, kind))
        logger.info("Toast (%s): %s", kind, message)
