# storefront/models.py
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from .pricing import Price


def normalize_id(product_id: Any) -> str:
    """Product ids are stored as non-empty strings; numeric Shopify ids are converted."""
    if isinstance(product_id, bool) or not isinstance(product_id, (str, int)):
        raise ValueError(f"Unusable product id: {product_id!r}")
    product_id = str(product_id).strip()
    if not product_id:
        raise ValueError("Product id is empty")
    return product_id


@dataclass(frozen=True)
class ProductDescriptor:
    """Product fields read off a wishlist control or supplied by another script."""
    id: str
    title: str = ""
    image: str = ""
    url: str = ""
    price: Price = Price.legacy("")

    def __post_init__(self):
        object.__setattr__(self, "id", normalize_id(self.id))

    @classmethod
    def from_attributes(cls, attrs: Mapping[str, Any]) -> "ProductDescriptor":
        """
        Build a descriptor from data-product-* attributes of a control.
        data-product-price-unit tags the price; without it the price is legacy.
        """
        product_id = attrs.get("data-product-id")
        if not product_id:
            raise ValueError("Control has no data-product-id")
        return cls(
            id=str(product_id),
            title=attrs.get("data-product-title") or "",
            image=attrs.get("data-product-image") or "",
            url=attrs.get("data-product-url") or "",
            price=Price.from_tagged(
                attrs.get("data-product-price") or "",
                attrs.get("data-product-price-unit"),
            ),
        )


@dataclass(frozen=True)
class WishlistEntry:
    """
    One remembered product. added_at is an ISO-8601 timestamp fixed at insertion.
    """
    id: str
    title: str
    image: str
    url: str
    price: Price
    added_at: str

    @classmethod
    def from_descriptor(cls, descriptor: ProductDescriptor, added_at: str) -> "WishlistEntry":
        return cls(
            id=descriptor.id,
            title=descriptor.title,
            image=descriptor.image,
            url=descriptor.url,
            price=descriptor.price,
            added_at=added_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "image": self.image,
            "url": self.url,
            "price": self.price.to_json(),
            "addedAt": self.added_at,
        }
        if self.price.tag:
            data["priceUnit"] = self.price.tag
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "WishlistEntry":
        if not isinstance(data, dict):
            raise ValueError(f"Wishlist entry must be an object, got {type(data).__name__}")
        try:
            product_id = normalize_id(data.get("id"))
        except ValueError:
            raise ValueError(f"Wishlist entry has no usable id: {data!r}")
        return cls(
            id=product_id,
            title=str(data.get("title") or ""),
            image=str(data.get("image") or ""),
            url=str(data.get("url") or ""),
            price=Price.from_tagged(data.get("price"), data.get("priceUnit")),
            added_at=str(data.get("addedAt") or ""),
        )
