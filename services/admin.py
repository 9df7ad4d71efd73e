# services/admin.py
import os
from typing import Any, Dict, List

from flask import Blueprint, Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from storefront.logger import get_logger

logger = get_logger(__name__)

PORT = int(os.getenv("PORT", "3001"))

admin_bp = Blueprint("admin", __name__, url_prefix="/api")

# Mock data until the admin app has a real database

STATS: Dict[str, int] = {
    "totalUsers": 1542,
    "totalWishlists": 987,
    "totalWishlistItems": 4523,
    "activeUsers": 234,
}

CUSTOMER_WISHLISTS: List[Dict[str, Any]] = [
    {
        "id": "1",
        "customerName": "John Doe",
        "customerEmail": "john@example.com",
        "itemCount": 5,
        "lastUpdated": "2024-01-15",
        "items": [
            {
                "id": "prod-1",
                "title": "Wireless Headphones",
                "image": "https://via.placeholder.com/60",
                "price": "$99.99",
                "addedAt": "2024-01-10",
            },
            {
                "id": "prod-2",
                "title": "Smartphone Case",
                "image": "https://via.placeholder.com/60",
                "price": "$29.99",
                "addedAt": "2024-01-12",
            },
        ],
    },
    {
        "id": "2",
        "customerName": "Jane Smith",
        "customerEmail": "jane@example.com",
        "itemCount": 3,
        "lastUpdated": "2024-01-14",
        "items": [
            {
                "id": "prod-3",
                "title": "Running Shoes",
                "image": "https://via.placeholder.com/60",
                "price": "$129.99",
                "addedAt": "2024-01-08",
            },
        ],
    },
    {
        "id": "3",
        "customerName": "Guest User",
        "customerEmail": "guest@session.local",
        "itemCount": 2,
        "lastUpdated": "2024-01-16",
        "items": [
            {
                "id": "prod-4",
                "title": "Coffee Mug",
                "image": "https://via.placeholder.com/60",
                "price": "$19.99",
                "addedAt": "2024-01-16",
            },
        ],
    },
]

DEFAULT_SETTINGS: Dict[str, Any] = {
    "heartColor": "#e91e63",
    "heartColorActive": "#c2185b",
    "dropdownItems": 5,
    "wishlistPageUrl": "/pages/wishlist",
    "enableGuestWishlist": True,
    "enableWishlistSharing": False,
    "maxWishlistItems": 100,
}


@admin_bp.get("/stats")
def get_stats():
    return jsonify(STATS)


@admin_bp.get("/wishlists")
def get_wishlists():
    return jsonify(CUSTOMER_WISHLISTS)


@admin_bp.get("/settings")
def get_settings():
    return jsonify(DEFAULT_SETTINGS)


@admin_bp.post("/settings")
def save_settings():
    settings = request.get_json(silent=True)
    if not isinstance(settings, dict):
        return jsonify({"error": "Settings must be a JSON object"}), 400

    # Not persisted yet
    logger.info("Saving settings: %s", settings)
    return jsonify({"success": True, "settings": settings})


@admin_bp.post("/wishlist/customer")
def save_customer_wishlist():
    body = request.get_json(silent=True) or {}
    customer_id = body.get("customerId")
    wishlist_data = body.get("wishlistData")

    logger.info("Saving wishlist for customer %s: %s", customer_id, wishlist_data)
    return jsonify({"success": True})


def _json_errors(e):
    if isinstance(e, HTTPException):
        return jsonify({"error": e.name, "message": e.description}), e.code
    logger.exception("Server error: %s", e)
    return jsonify({"error": "Internal server error", "message": str(e)}), 500


def create_app() -> Flask:
    app = Flask(__name__)
    app.register_blueprint(admin_bp)
    app.register_error_handler(Exception, _json_errors)
    return app


def run(port: int = PORT) -> None:
    app = create_app()
    logger.info("Wishlist admin backend running on port %d", port)
    logger.info("Environment: %s", os.getenv("FLASK_ENV", "development"))
    app.run(host="0.0.0.0", port=port)
