"""
Checkout hand-off: the order is "placed" by opening a WhatsApp chat with a
randomly chosen active customer-service contact, pre-filled with an itemized
order summary. No order record is created server side.
"""
# Standard Library
import re
import random
import logging
from dataclasses import dataclass, asdict
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Optional
from urllib.parse import quote

# Local Imports
from .cart import Cart, CartItem, compute_total
from .utilities import format_rupiah

logger = logging.getLogger(__name__)

WHATSAPP_BASE_URL = "https://wa.me"
REQUIRED_FIELDS = ("name", "address", "phone")

# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "-_.!~*'()"


class CheckoutError(Exception):
    pass


class EmptyCartError(CheckoutError):
    def __init__(self):
        super().__init__("Your cart is empty.")


class MissingCheckoutFieldsError(CheckoutError):
    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(f"Please complete your details: {', '.join(self.missing)}")


class NoActiveContactError(CheckoutError):
    def __init__(self):
        super().__init__("No customer service contact is active right now.")


@dataclass
class UserInfo:
    name: str = ""
    address: str = ""
    phone: str = ""

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        return cls(**{f: str(data.get(f) or "").strip() for f in REQUIRED_FIELDS})

    def missing_fields(self) -> List[str]:
        return [f for f in REQUIRED_FIELDS if not str(getattr(self, f) or "").strip()]


@dataclass
class OrderHandoff:
    message: str
    url: str
    contact: Dict

    def as_dict(self):
        return asdict(self)


def build_whatsapp_url(phone_number, message) -> str:
    digits = re.sub(r"\D", "", str(phone_number or ""))
    return f"{WHATSAPP_BASE_URL}/{digits}?text={quote(message, safe=_URI_COMPONENT_SAFE)}"


def pick_random_active_contact(contacts, rng=None) -> Dict:
    """Uniform pick among active contacts; raises NoActiveContactError when there are none."""
    active = [c for c in (contacts or []) if c.get("is_active") is True]
    if not active:
        raise NoActiveContactError()
    return (rng or random).choice(active)


def _order_line(item: CartItem, currency) -> str:
    name = item.product.get("name") or ""
    variation = f" ({item.variation.get('name')})" if item.variation else ""
    return f"- {name}{variation} x {item.quantity} = {format_rupiah(item.subtotal, currency)}"


def compose_order_message(
    items: Iterable[CartItem],
    user_info: UserInfo,
    contact: Dict,
    total: Optional[Decimal] = None,
    currency: str = "Rp",
) -> OrderHandoff:
    items = list(items)
    if total is None:
        total = compute_total(items)

    lines = [
        f"Halo {contact.get('name', '')}, saya ingin memesan.",
        f"Nama: {user_info.name}",
        f"Alamat: {user_info.address}",
        f"No HP: {user_info.phone}",
        "",
        "_Daftar Pesanan:_",
        "",
    ]
    lines.extend(_order_line(item, currency) for item in items)
    lines += [
        "",
        "---",
        "",
        f"Total Akhir: {format_rupiah(total, currency)}",
        "",
        "Mohon segera diproses, terima kasih!",
    ]
    message = "\n".join(lines)
    return OrderHandoff(
        message=message,
        url=build_whatsapp_url(contact.get("phone_number"), message),
        contact=contact,
    )


def compose_inquiry_link(contacts, site_name, rng=None) -> Optional[OrderHandoff]:
    """Floating-button inquiry; None when nobody is active (the button is hidden)."""
    try:
        contact = pick_random_active_contact(contacts, rng)
    except NoActiveContactError:
        return None
    message = (
        f"Halo {contact.get('name', '')}, saya pengunjung dari website {site_name}. "
        "Saya ingin bertanya mengenai produk Anda."
    )
    return OrderHandoff(
        message=message,
        url=build_whatsapp_url(contact.get("phone_number"), message),
        contact=contact,
    )


class CheckoutState(str, Enum):
    BROWSING = "browsing"
    FORM_OPEN = "form_open"
    ORDER_SENT = "order_sent"


class CheckoutFlow:
    """
    Browsing -> FormOpen (cart not empty) -> OrderSent (name, address, phone set).
    back() returns to Browsing without touching the cart. A rejected submit
    keeps the entered details on the flow.
    """

    def __init__(self, cart: Cart, rng=None, currency="Rp"):
        self.cart = cart
        self.rng = rng
        self.currency = currency
        self.state = CheckoutState.BROWSING
        self.user_info = UserInfo()
        self.handoff = None

    def open(self):
        if self.cart.is_empty:
            raise EmptyCartError()
        self.state = CheckoutState.FORM_OPEN
        return self.state

    def back(self):
        self.state = CheckoutState.BROWSING
        return self.state

    def submit(self, user_info: UserInfo, contacts) -> OrderHandoff:
        if self.state is not CheckoutState.FORM_OPEN:
            raise CheckoutError("Checkout form is not open.")
        self.user_info = user_info
        missing = user_info.missing_fields()
        if missing:
            raise MissingCheckoutFieldsError(missing)

        contact = pick_random_active_contact(contacts, self.rng)
        self.handoff = compose_order_message(
            self.cart.items, user_info, contact, self.cart.total, currency=self.currency
        )
        self.state = CheckoutState.ORDER_SENT
        logger.info("Order hand-off to CS %s with %d line(s)", contact.get("id"), len(self.cart))
        return self.handoff
