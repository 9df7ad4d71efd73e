# services/__init__.py
from .cart import CartClient, CartError

__all__ = ["CartClient", "CartError"]
