# storefront/render.py
from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet, Sequence, Tuple

from jinja2 import Environment, FileSystemLoader

from .models import WishlistEntry
from .pricing import format_price

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
)

DROPDOWN_LIMIT = 5

ADD_LABEL = "Add to wishlist"
REMOVE_LABEL = "Remove from wishlist"


@dataclass(frozen=True)
class ButtonState:
    active: bool
    label: str


@dataclass(frozen=True)
class ItemView:
    id: str
    title: str
    image: str
    url: str
    price: str


@dataclass(frozen=True)
class DropdownModel:
    items: Tuple[ItemView, ...]
    empty: bool


@dataclass(frozen=True)
class PageModel:
    items: Tuple[ItemView, ...]
    empty: bool


def item_view(entry: WishlistEntry) -> ItemView:
    return ItemView(
        id=entry.id,
        title=entry.title,
        image=entry.image,
        url=entry.url,
        price=format_price(entry.price),
    )


def button_state(wishlist_ids: AbstractSet[str], product_id: str | None) -> ButtonState:
    if product_id is not None and product_id in wishlist_ids:
        return ButtonState(active=True, label=REMOVE_LABEL)
    return ButtonState(active=False, label=ADD_LABEL)


def dropdown_model(wishlist: Sequence[WishlistEntry], limit: int = DROPDOWN_LIMIT) -> DropdownModel:
    """Preview of the newest entries; empty reflects the whole wishlist."""
    return DropdownModel(
        items=tuple(item_view(e) for e in wishlist[:limit]),
        empty=not wishlist,
    )


def page_model(wishlist: Sequence[WishlistEntry]) -> PageModel:
    return PageModel(items=tuple(item_view(e) for e in wishlist), empty=not wishlist)


def counter_text(count: int) -> str:
    return f"{count} item{'' if count == 1 else 's'}"


def compact_counter(count: int) -> Tuple[str, bool]:
    """Text for the badge counter and whether it is hidden."""
    return str(count), count == 0


def render_dropdown_items(model: DropdownModel) -> str:
    if model.empty:
        return ""
    template = env.get_template("dropdown_items.html")
    return template.render(items=model.items)


def render_page_grid(model: PageModel) -> str:
    if model.empty:
        return ""
    template = env.get_template("page_grid.html")
    return template.render(items=model.items)


def toast_css() -> str:
    return (TEMPLATE_DIR / "toast_style.css").read_text(encoding="utf-8")


def ids_of(wishlist: Sequence[WishlistEntry]) -> AbstractSet[str]:
    return {e.id for e in wishlist}
