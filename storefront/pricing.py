# storefront/pricing.py
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

MAJOR = "major"
MINOR = "minor"
DISPLAY = "display"
LEGACY = "legacy"

CURRENCY_SYMBOL = "$"

# Anything at or above this is not a shop price; also keeps quantize() within context precision
MAX_AMOUNT = Decimal("1e15")

# Leading numeric prefix, the way storefront scripts parse "150" or "19.99 USD"
_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass(frozen=True)
class Price:
    """
    A price carried together with the unit it is expressed in.

    Storefront markup historically emitted bare values ("150", 50) that
    could be either cents or dollars. Callers that know the unit build a
    tagged price with major()/minor()/display(); untagged values coming
    from stored wishlists or theme attributes are wrapped with legacy()
    and formatted with the old heuristic.
    """
    value: Any
    unit: str

    @classmethod
    def major(cls, amount) -> "Price":
        return cls(_to_decimal(amount), MAJOR)

    @classmethod
    def minor(cls, cents) -> "Price":
        amount = _to_decimal(cents)
        if amount != amount.to_integral_value():
            raise ValueError(f"Minor-unit price must be a whole number: {cents!r}")
        return cls(int(amount), MINOR)

    @classmethod
    def display(cls, text: str) -> "Price":
        return cls(str(text), DISPLAY)

    @classmethod
    def legacy(cls, raw) -> "Price":
        return cls(raw, LEGACY)

    @classmethod
    def from_tagged(cls, raw, unit: str | None) -> "Price":
        """Rebuild a price from a raw value and an optional unit tag."""
        if not unit:
            return cls.legacy(raw)
        unit = unit.strip().lower()
        if unit == MAJOR:
            return cls.major(raw)
        if unit == MINOR:
            return cls.minor(raw)
        if unit == DISPLAY:
            return cls.display(raw)
        raise ValueError(f"Unknown price unit: {unit!r}")

    def to_json(self):
        """Raw value as stored in the wishlist JSON array."""
        if self.unit == MAJOR:
            return str(self.value)
        return self.value

    @property
    def tag(self) -> str | None:
        return None if self.unit == LEGACY else self.unit


def _to_decimal(value) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"Not a numeric amount: {value!r}")
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Not a numeric amount: {value!r}")
    if not amount.is_finite() or abs(amount) >= MAX_AMOUNT:
        raise ValueError(f"Amount out of range: {value!r}")
    return amount


def format_amount(amount: Decimal) -> str:
    """en-US currency formatting: $1,234.50 and -$5.00."""
    try:
        amount = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Cannot format amount {amount!r}")
    sign = "-" if amount < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(amount):,.2f}"


def _format_legacy(raw) -> str:
    if not raw:
        return ""
    if isinstance(raw, str) and CURRENCY_SYMBOL in raw:
        return raw

    if isinstance(raw, bool):
        return ""
    try:
        if isinstance(raw, (int, float)):
            amount = _to_decimal(raw)
        else:
            m = _NUMBER_RE.match(str(raw))
            if not m:
                return str(raw)
            amount = _to_decimal(m.group(1))

        # Values above 100 are assumed to be cents
        if amount > 100:
            amount = amount / 100
        return format_amount(amount)
    except ValueError:
        return str(raw)


def format_price(price) -> str:
    """
    Format a Price (or a bare untagged value) for display.
    Amounts that cannot be formatted are shown as their raw text.
    """
    if not isinstance(price, Price):
        price = Price.legacy(price)

    if price.unit == DISPLAY:
        return price.value
    if price.unit == LEGACY:
        return _format_legacy(price.value)

    try:
        if price.unit == MAJOR:
            return format_amount(price.value)
        return format_amount(Decimal(price.value) / 100)
    except (ValueError, TypeError, InvalidOperation):
        return str(price.value)
