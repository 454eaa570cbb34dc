# Standard Library
from decimal import Decimal

# Local Imports
from .utilities import _to_decimal

RELATED_LIMIT = 4
PRICE_BAND = (Decimal("0.9"), Decimal("1.2"))


def _in_price_band(price, focal_price) -> bool:
    low, high = PRICE_BAND
    return focal_price * low <= price <= focal_price * high


def related_products(focal, catalog, limit=RELATED_LIMIT):
    """
    Up to `limit` related products for `focal`, in strict tier order:
      1) same category, price within [0.9x, 1.2x] of the focal price
      2) same category, anything else
      3) other category, price within the band
    A product lands in the first tier it qualifies for only. Catalog order is
    kept inside each tier; no scoring, no shuffling, no padding.
    """
    if not focal or not catalog:
        return []

    focal_id = focal.get("id")
    focal_category = focal.get("category")
    focal_price = _to_decimal(focal.get("price"))

    same_band, same_other, other_band = [], [], []
    for product in catalog:
        if product.get("id") == focal_id:
            continue
        price = _to_decimal(product.get("price"))
        in_band = _in_price_band(price, focal_price)
        if product.get("category") == focal_category:
            (same_band if in_band else same_other).append(product)
        elif in_band:
            other_band.append(product)

    return (same_band + same_other + other_band)[:limit]
