from storefront import render
from storefront.controller import WishlistController
from storefront.manager import WishlistManager
from storefront.models import WishlistEntry
from storefront.page import StorefrontPage, closest
from storefront.pricing import Price

from conftest import descriptor


def classes(tag):
    return tag.get("class", [])


# Render model


def test_counter_text_pluralizes():
    assert render.counter_text(0) == "0 items"
    assert render.counter_text(1) == "1 item"
    assert render.counter_text(7) == "7 items"


def test_compact_counter_hides_zero():
    assert render.compact_counter(0) == ("0", True)
    assert render.compact_counter(3) == ("3", False)


def test_button_state():
    assert render.button_state({"1"}, "1") == render.ButtonState(True, "Remove from wishlist")
    assert render.button_state({"1"}, "2") == render.ButtonState(False, "Add to wishlist")
    assert render.button_state({"1"}, None).active is False


def test_dropdown_model_is_bounded(make_manager):
    manager = make_manager()
    for i in range(20):
        manager.add_entry(descriptor(str(i)))

    model = render.dropdown_model(manager.get_wishlist())
    assert [item.id for item in model.items] == ["19", "18", "17", "16", "15"]
    assert model.empty is False
    assert len(render.page_model(manager.get_wishlist()).items) == 20


def test_item_view_formats_price():
    entries = [
        descriptor("1", price=Price.legacy("150")),
        descriptor("2", price=Price.major("50")),
    ]
    views = [render.item_view(WishlistEntry.from_descriptor(d, "now")) for d in entries]
    assert [v.price for v in views] == ["$1.50", "$50.00"]


# Page refresh


def test_initial_refresh_shows_empty_state(make_manager, page):
    make_manager()

    assert page.find(".wishlist-dropdown .wishlist-empty-state")["style"] == "display: block;"
    assert page.find(".wishlist-page .wishlist-empty-state")["style"] == "color: #999; display: flex;"
    assert page.find(".clear-wishlist-btn")["style"] == "display: none;"
    count = page.find(".wishlist-count")
    assert count.string == "0"
    assert "hidden" in classes(count)
    assert page.find(".wishlist-total-count").string == "0 items"
    assert page.find(".wishlist-total-items").string == "0 items"
    assert page.find(".wishlist-dropdown-items").contents == []
    assert page.find(".wishlist-items-grid").contents == []


def test_refresh_with_items(make_manager, page):
    manager = make_manager()
    manager.add_entry(descriptor("123", "Widget", price=Price.legacy("150")))

    button = page.find('.wishlist-button[data-product-id="123"]')
    assert "active" in classes(button)
    assert button["aria-label"] == "Remove from wishlist"
    assert button["title"] == "Remove from wishlist"

    other = page.find('.wishlist-button[data-product-id="456"]')
    assert "active" not in classes(other)
    assert other["aria-label"] == "Add to wishlist"

    preview = page.find(".wishlist-dropdown-items .wishlist-item-preview")
    assert preview["href"] == "/products/123"
    assert preview.find("h4").get_text() == "Widget"
    assert preview.find(class_="wishlist-item-price").get_text() == "$1.50"

    card = page.find('.wishlist-items-grid .wishlist-item-card[data-product-id="123"]')
    assert card.find(class_="remove-from-wishlist") is not None
    assert card.find(class_="add-to-cart-btn")["data-product-id"] == "123"
    assert card.find(class_="view-product-btn")["href"] == "/products/123"

    assert page.find(".wishlist-dropdown .wishlist-empty-state")["style"] == "display: none;"
    assert page.find(".clear-wishlist-btn")["style"] == "display: inline-block;"
    count = page.find(".wishlist-count")
    assert count.string == "1"
    assert "hidden" not in classes(count)
    assert page.find(".wishlist-total-items").string == "1 item"


def test_dropdown_renders_at_most_five(make_manager, page):
    manager = make_manager()
    for i in range(20):
        manager.add_entry(descriptor(str(i)))

    assert len(page.soup.select(".wishlist-dropdown-items .wishlist-item-preview")) == 5
    assert len(page.soup.select(".wishlist-items-grid .wishlist-item-card")) == 20
    assert page.find(".wishlist-total-count").string == "20 items"


def test_refresh_is_idempotent(make_manager, page):
    manager = make_manager()
    manager.add_entry(descriptor("1", price=Price.major("12.5")))
    manager.add_entry(descriptor("2"))

    first = page.html()
    manager.refresh()
    manager.refresh()
    assert page.html() == first


def test_text_is_escaped(make_manager, page):
    manager = make_manager()
    manager.add_entry(descriptor("1", "<b>Bold</b> & co"))

    title = page.find(".wishlist-item-details h4")
    assert title.find("b") is None
    assert title.get_text() == "<b>Bold</b> & co"


def test_missing_targets_are_skipped(storage):
    html = "<html><body><p>No widget here</p></body></html>"
    page = StorefrontPage(html)
    manager = WishlistManager(storage, view=page)
    manager.add_entry(descriptor("1"))
    assert page.html() == html


def test_toast_is_created_once(page):
    page.show_toast("Hello", "info")
    page.show_toast("Again", "error")

    toasts = page.soup.select(".wishlist-toast")
    assert len(toasts) == 1
    assert toasts[0].string == "Again"
    assert classes(toasts[0]) == ["wishlist-toast", "error", "show"]
    assert len(page.soup.head.find_all("style")) == 1
    assert page.toasts == [("Hello", "info"), ("Again", "error")]


def test_closest():
    page = StorefrontPage('<div class="a" data-x="1"><p><span id="s">x</span></p></div>')
    span = page.find("#s")
    assert closest(span, ".a")["data-x"] == "1"
    assert closest(span, "span") is span
    assert closest(span, ".missing") is None


# Controller


def test_click_heart_toggles(make_manager, page):
    manager = make_manager()
    controller = WishlistController(manager, page)

    controller.click(page.find('.wishlist-button[data-product-id="123"] .heart'))
    [entry] = manager.get_wishlist()
    assert (entry.id, entry.title, entry.price) == ("123", "Widget", Price.legacy("150"))
    assert entry.image == "/img/widget.png"
    assert page.toasts[-1] == ("Added to wishlist", "success")

    controller.click(page.find('.wishlist-button[data-product-id="123"]'))
    assert manager.get_wishlist() == []
    assert page.toasts[-1] == ("Removed from wishlist", "success")


def test_click_reads_price_unit(make_manager, page):
    manager = make_manager()
    WishlistController(manager, page).click(page.find('.wishlist-button[data-product-id="456"]'))
    assert manager.get_wishlist()[0].price == Price.major("19.99")


def test_click_button_without_product_id_is_ignored(storage):
    page = StorefrontPage('<button class="wishlist-button">?</button>')
    manager = WishlistManager(storage, view=page)
    WishlistController(manager, page).click(page.find(".wishlist-button"))
    assert manager.get_wishlist() == []


def test_dropdown_opens_and_closes(make_manager, page):
    controller = WishlistController(make_manager(), page)
    wrapper = page.find(".wishlist-dropdown-wrapper")

    controller.click(page.find(".wishlist-dropdown-trigger .wishlist-count"))
    assert "active" in classes(wrapper)

    controller.click(page.find(".wishlist-dropdown-items"))
    assert "active" in classes(wrapper)

    controller.click(page.find(".site-footer"))
    assert "active" not in classes(wrapper)

    controller.click(page.find(".wishlist-dropdown-trigger"))
    controller.click(page.find(".wishlist-dropdown-trigger"))
    assert "active" not in classes(wrapper)


def test_click_remove_in_grid(make_manager, page):
    manager = make_manager()
    manager.add_entry(descriptor("1", "Mug"))
    manager.add_entry(descriptor("2"))
    controller = WishlistController(manager, page)

    controller.click(page.find('.wishlist-item-card[data-product-id="1"] .remove-from-wishlist path'))
    assert [e.id for e in manager.get_wishlist()] == ["2"]
    assert page.toasts[-1] == ("Mug removed from wishlist", "success")


def test_click_clear(make_manager, page):
    manager = make_manager(confirm=True)
    manager.add_entry(descriptor("1"))
    WishlistController(manager, page).click(page.find(".clear-wishlist-btn"))
    assert manager.get_wishlist() == []


def test_click_add_to_cart(make_manager, page, cart):
    cart.add_item.return_value = {"items": [{"id": 2}]}
    cart.item_count.return_value = 1
    manager = make_manager()
    manager.add_entry(descriptor("2"))

    WishlistController(manager, page).click(page.find('.add-to-cart-btn[data-product-id="2"]'))
    cart.add_item.assert_called_once_with("2", quantity=1)
    assert page.find(".cart-count").string == "1"
    assert [e.id for e in manager.get_wishlist()] == ["2"]


def test_visibility_reloads_only_when_shown(make_manager, page, storage):
    manager = make_manager()
    controller = WishlistController(manager, page)
    other_tab = WishlistManager(storage)
    other_tab.add_entry(descriptor("elsewhere"))

    controller.visibility_changed(hidden=True)
    assert not manager.is_in_wishlist("elsewhere")

    controller.visibility_changed(hidden=False)
    assert manager.is_in_wishlist("elsewhere")
    assert page.find(".wishlist-count").string == "1"


def test_click_huge_price_keeps_page_usable(storage):
    page = StorefrontPage(
        '<div class="wishlist-items-grid"></div>'
        '<button class="wishlist-button" data-product-id="9" data-product-title="Yacht"'
        ' data-product-price="1e30"></button>'
    )
    manager = WishlistManager(storage, view=page)
    WishlistController(manager, page).click(page.find(".wishlist-button"))

    assert manager.is_in_wishlist("9")
    assert page.find(".wishlist-item-price").get_text() == "1e30"
    assert WishlistManager(storage, view=StorefrontPage(page.html())).is_in_wishlist("9")


def test_click_with_fractional_minor_price_is_ignored(storage):
    page = StorefrontPage(
        '<button class="wishlist-button" data-product-id="9"'
        ' data-product-price="19.99" data-product-price-unit="minor"></button>'
    )
    manager = WishlistManager(storage, view=page)
    WishlistController(manager, page).click(page.find(".wishlist-button"))
    assert manager.get_wishlist() == []
