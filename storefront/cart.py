"""
Shopping cart engine.

A cart is an ordered list of lines. Each line holds a snapshot of the product
(and of the selected variation, if any) taken when it was first added, plus a
quantity that is always >= 1. Lines are identified by
(product id, variation id), where a variation id of None means "no variation";
any falsy variation id ("" included) is treated as None.
"""
# Standard Library
import copy
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

# Local Imports
from .store import CART_KEY_PREFIX, LocalMirror
from .utilities import _normalize_id, _to_decimal

logger = logging.getLogger(__name__)


def variation_key(variation_id) -> Optional[str]:
    return _normalize_id(variation_id)


@dataclass
class CartItem:
    product: Dict
    quantity: int = 1
    variation: Optional[Dict] = None

    @property
    def product_id(self) -> str:
        return str(self.product.get("id"))

    @property
    def variation_id(self) -> Optional[str]:
        return variation_key(self.variation.get("id")) if self.variation else None

    @property
    def unit_price(self) -> Decimal:
        if self.variation:
            return _to_decimal(self.variation.get("price"))
        return _to_decimal(self.product.get("price"))

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    def matches(self, product_id, variation_id) -> bool:
        return self.product_id == str(product_id) and self.variation_id == variation_key(variation_id)

    def as_dict(self):
        return {
            "product": self.product,
            "variation": self.variation,
            "quantity": self.quantity,
            "unit_price": str(self.unit_price),
            "subtotal": str(self.subtotal),
        }

    @classmethod
    def from_dict(cls, data):
        product = data["product"]
        if not isinstance(product, dict) or not product.get("id"):
            raise ValueError("cart line without a product id")
        variation = data.get("variation") or None
        if variation is not None and not isinstance(variation, dict):
            raise ValueError("cart line with a malformed variation")
        quantity = int(data.get("quantity", 1))
        if quantity < 1:
            raise ValueError("cart line with quantity below 1")
        return cls(product=product, quantity=quantity, variation=variation)


def compute_total(items: Iterable[CartItem]) -> Decimal:
    """Sum of line subtotals; a selected variation's price replaces the base price."""
    return sum((item.subtotal for item in items), Decimal("0"))


@dataclass
class Cart:
    items: List[CartItem] = field(default_factory=list)

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def count(self) -> int:
        """Total number of units (header badge)."""
        return sum(item.quantity for item in self.items)

    @property
    def total(self) -> Decimal:
        return compute_total(self.items)

    def find(self, product_id, variation_id=None) -> Optional[CartItem]:
        return next((item for item in self.items if item.matches(product_id, variation_id)), None)

    def add(self, product, variation=None) -> CartItem:
        """
        Merge into the existing (product, variation) line, keeping the snapshot
        captured on the first add, or append a fresh snapshot with quantity 1.
        """
        existing = self.find(product.get("id"), variation.get("id") if variation else None)
        if existing:
            existing.quantity += 1
            return existing
        item = CartItem(
            product=copy.deepcopy(product),
            quantity=1,
            variation=copy.deepcopy(variation) if variation else None,
        )
        self.items.append(item)
        return item

    def remove(self, product_id, variation_id=None) -> bool:
        before = len(self.items)
        self.items = [item for item in self.items if not item.matches(product_id, variation_id)]
        return len(self.items) != before

    def update_quantity(self, product_id, variation_id, quantity) -> Optional[CartItem]:
        if quantity < 1:
            self.remove(product_id, variation_id)
            return None
        item = self.find(product_id, variation_id)
        if item:
            item.quantity = quantity
        return item

    def clear(self):
        self.items = []

    def to_records(self):
        return [
            {"product": item.product, "variation": item.variation, "quantity": item.quantity}
            for item in self.items
        ]

    @classmethod
    def from_records(cls, records):
        if not isinstance(records, list):
            raise ValueError("cart payload must be a list")
        return cls(items=[CartItem.from_dict(rec) for rec in records])

    def as_dict(self):
        return {
            "items": [item.as_dict() for item in self.items],
            "count": self.count,
            "total": str(self.total),
        }


class CartStore:
    """Per-device carts in the local mirror; never written to the remote store."""

    def __init__(self, mirror=None):
        self.mirror = mirror or LocalMirror()

    @staticmethod
    def key(device_uuid) -> str:
        return f"{CART_KEY_PREFIX}:{device_uuid}"

    def load(self, device_uuid) -> Cart:
        records = self.mirror.read(self.key(device_uuid), [])
        try:
            return Cart.from_records(records)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Discarding malformed cart for device %s: %s", device_uuid, e)
            self.mirror.delete(self.key(device_uuid))
            return Cart()

    def save(self, device_uuid, cart: Cart):
        self.mirror.write(self.key(device_uuid), cart.to_records())

    def clear(self, device_uuid):
        self.mirror.delete(self.key(device_uuid))
