import argparse
import json
import sys
from typing import List

from storefront.logger import get_logger
from storefront.storage import DB_PATH, MemoryStore, SqliteStore, WishlistStorage
from storefront.manager import WishlistManager
from storefront.page import StorefrontPage
from storefront.controller import WishlistController
from services.cart import CART_BASE_URL, CartClient

logger = get_logger(__name__)


def build_widget(html: str, args: argparse.Namespace) -> WishlistController:
    store = MemoryStore() if args.ephemeral else SqliteStore(args.db)
    page = StorefrontPage(html)
    manager = WishlistManager(
        WishlistStorage(store),
        view=page,
        cart=CartClient(args.cart_url),
        confirm=lambda message: args.yes,
    )
    return WishlistController(manager, page)


def _read(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _write(controller: WishlistController, out: str | None) -> None:
    html = controller.page.html()
    if not out:
        sys.stdout.write(html)
        return
    with open(out, "w", encoding="utf-8") as f:
        f.write(html)
    logger.info("Wrote page to %s", out)


def cmd_render(args: argparse.Namespace) -> int:
    controller = build_widget(_read(args.page), args)
    _write(controller, args.output)
    return 0


def cmd_click(args: argparse.Namespace) -> int:
    controller = build_widget(_read(args.page), args)
    target = controller.page.find(args.selector)
    if target is None:
        logger.error("No element matches %r in %s", args.selector, args.page)
        return 1
    controller.click(target)
    _write(controller, args.output)
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    store = MemoryStore() if args.ephemeral else SqliteStore(args.db)
    entries = WishlistStorage(store).load()
    json.dump([e.to_dict() for e in entries], sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


def cmd_admin(args: argparse.Namespace) -> int:
    from services.admin import run

    if args.port:
        run(args.port)
    else:
        run()
    return 0


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Storefront wishlist widget")
    parser.add_argument("--db", default=DB_PATH, help="wishlist database path")
    parser.add_argument("--ephemeral", action="store_true", help="keep the wishlist in memory only")
    parser.add_argument("--cart-url", default=CART_BASE_URL, help="storefront base URL for cart requests")
    parser.add_argument("--yes", action="store_true", help="answer yes to confirmation prompts")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("render", help="render the wishlist into a page")
    p.add_argument("page")
    p.add_argument("-o", "--output")
    p.set_defaults(func=cmd_render)

    p = sub.add_parser("click", help="click the first element matching a CSS selector")
    p.add_argument("page")
    p.add_argument("selector")
    p.add_argument("-o", "--output")
    p.set_defaults(func=cmd_click)

    p = sub.add_parser("show", help="print the stored wishlist as JSON")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("admin", help="run the admin backend")
    p.add_argument("--port", type=int, help="defaults to $PORT or 3001")
    p.set_defaults(func=cmd_admin)

    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception as e:
        logger.exception("Fatal widget error: %s", e)
        raise SystemExit(2)
