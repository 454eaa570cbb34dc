"""
Record <-> model mapping.

Records are the plain dicts that travel between the API, the local mirror and
the pure-Python engines (cart, recommendations, social proof). Prices are
kept as Decimal strings so they survive JSON round-trips exactly.
"""
from django.db import IntegrityError

from .models import (
    ADMIN_CONFIG_ID,
    SETTINGS_ID,
    AdminCredentials,
    CSContact,
    Product,
    SiteSettings,
    Testimonial,
    Variation,
)
from .utilities import (
    _as_bool,
    _decimal_str,
    _now,
    _to_decimal,
    _to_int,
    _to_optional_decimal,
    datetime_to_ms,
    ms_to_datetime,
)

MEDIA_KINDS = ("image", "video")

DEFAULT_SETTINGS = {
    "site_name": "LuminaGoods",
    "logo_url": "",
    "favicon_url": "",
    "theme_color": "Green",
    "theme_font": "Default",
    "hero_image": "https://images.unsplash.com/photo-1441986300917-64674bd600d8?auto=format&fit=crop&q=80&w=2000",
    "hero_title": "Elegance in Every Detail.",
    "hero_subtitle": (
        "Discover premium goods curated for those who appreciate high-quality "
        "craftsmanship and modern minimalist design."
    ),
    "footer_description": (
        "Crafting a seamless shopping experience for the modern aesthetic. "
        "Your one-stop shop for premium, artisanal UMKM goods."
    ),
    "about_header_title": "",
    "about_header_desc": "",
    "about_section_title": "",
    "about_section_desc": "",
    "about_section_image": "",
    "contact_email": "",
    "contact_phone": "",
    "contact_address": "",
    "instagram_url": "",
    "tiktok_url": "",
    "facebook_url": "",
    "youtube_url": "",
    "promo_label": "",
    "promo_title": "",
    "promo_subtitle": "",
    "promo_end_at": None,
    "social_proof_enabled": False,
    "social_proof_names": "",
    "social_proof_product_ids": [],
}

DEFAULT_CS_CONTACTS = [
    {"id": "1", "name": "Admin CS", "phone_number": "6281234567890", "is_active": True},
]


# --------------------------
# Media
# --------------------------

def clean_media(val, default_type="image"):
    """Return {"type", "url"} or None when there is no usable URL."""
    if isinstance(val, str):
        url, kind = val.strip(), default_type
    elif isinstance(val, dict):
        url = (val.get("url") or "").strip()
        kind = (val.get("type") or default_type).strip().lower()
    else:
        return None
    if not url:
        return None
    if kind not in MEDIA_KINDS:
        kind = default_type
    return {"type": kind, "url": url}


def clean_gallery(val):
    if not isinstance(val, list):
        return []
    return [m for m in (clean_media(item) for item in val) if m]


# --------------------------
# Products
# --------------------------

def serialize_variation(v: Variation):
    return {
        "id": v.variation_id,
        "name": v.name,
        "price": _decimal_str(v.price),
        "original_price": _decimal_str(v.original_price),
        "stock": int(v.stock or 0),
    }


def serialize_product(p: Product):
    cover = clean_media(p.cover_media) or {"type": "image", "url": ""}
    return {
        "id": p.product_id,
        "name": p.name,
        "description": p.description or "",
        "price": _decimal_str(p.price),
        "original_price": _decimal_str(p.original_price),
        "category": p.category or "",
        "image": cover["url"],
        "cover_media": cover,
        "gallery": clean_gallery(p.gallery),
        "variations": [serialize_variation(v) for v in p.variations.all()],
        "is_featured": bool(p.is_featured),
        "created_at": datetime_to_ms(p.created_at),
        "order": p.order,
    }


def upsert_product(record):
    """
    Primary-key upsert of a product record and a full replace of its variations.
    Raises IntegrityError instead of moving another product's variation.
    """
    defaults = {
        "name": record.get("name") or "",
        "description": record.get("description") or "",
        "price": _to_decimal(record.get("price")),
        "original_price": _to_optional_decimal(record.get("original_price")),
        "category": record.get("category") or "",
        "cover_media": clean_media(record.get("cover_media")) or {"type": "image", "url": ""},
        "gallery": clean_gallery(record.get("gallery")),
        "is_featured": _as_bool(record.get("is_featured")),
        "order": max(0, _to_int(record.get("order"), 0)),
    }
    created_at = ms_to_datetime(record.get("created_at"))
    if created_at:
        defaults["created_at"] = created_at

    product, _ = Product.objects.update_or_create(product_id=record["id"], defaults=defaults)

    var_ids = [var["id"] for var in record.get("variations") or []]
    if Variation.objects.filter(variation_id__in=var_ids).exclude(product=product).exists():
        raise IntegrityError(f"Product {record['id']}: variation ids belong to another product")

    keep_ids = []
    for idx, var in enumerate(record.get("variations") or []):
        Variation.objects.update_or_create(
            variation_id=var["id"],
            defaults={
                "product": product,
                "name": var.get("name") or "",
                "price": _to_decimal(var.get("price")),
                "original_price": _to_optional_decimal(var.get("original_price")),
                "stock": max(0, _to_int(var.get("stock"), 0)),
                "order": idx,
            },
        )
        keep_ids.append(var["id"])
    Variation.objects.filter(product=product).exclude(variation_id__in=keep_ids).delete()
    return product


# --------------------------
# CS contacts
# --------------------------

def serialize_contact(c: CSContact):
    return {
        "id": c.contact_id,
        "name": c.name,
        "phone_number": c.phone_number,
        "is_active": bool(c.is_active),
    }


def upsert_contact(record):
    obj, _ = CSContact.objects.update_or_create(
        contact_id=record["id"],
        defaults={
            "name": record.get("name") or "",
            "phone_number": record.get("phone_number") or "",
            "is_active": _as_bool(record.get("is_active"), default=True),
        },
    )
    return obj


# --------------------------
# Testimonials
# --------------------------

def serialize_testimonial(t: Testimonial):
    return {
        "id": t.testimonial_id,
        "image_url": t.image_url or "",
        "customer_name": t.customer_name or "",
        "description": t.description or "",
        "is_active": bool(t.is_active),
        "order": t.order,
    }


def upsert_testimonial(record):
    obj, _ = Testimonial.objects.update_or_create(
        testimonial_id=record["id"],
        defaults={
            "image_url": record.get("image_url") or "",
            "customer_name": record.get("customer_name") or "",
            "description": record.get("description") or "",
            "is_active": _as_bool(record.get("is_active"), default=True),
            "order": max(0, _to_int(record.get("order"), 0)),
        },
    )
    return obj


# --------------------------
# Site settings (singleton)
# --------------------------

def clean_settings(data):
    """Keep known keys only, coerced to the stored types."""
    out = {}
    for key, default in DEFAULT_SETTINGS.items():
        if key not in data:
            continue
        val = data.get(key)
        if key == "promo_end_at":
            out[key] = _to_int(val, None) if val not in (None, "") else None
        elif key == "social_proof_enabled":
            out[key] = _as_bool(val)
        elif key == "social_proof_product_ids":
            out[key] = [str(x) for x in val if str(x).strip()] if isinstance(val, list) else []
        else:
            out[key] = "" if val is None else str(val)
    return out


def serialize_settings(s: SiteSettings):
    return {key: getattr(s, key) for key in DEFAULT_SETTINGS}


def upsert_settings(record):
    obj, _ = SiteSettings.objects.update_or_create(
        setting_id=SETTINGS_ID,
        defaults=clean_settings(record),
    )
    return obj


# --------------------------
# Admin credentials (singleton)
# --------------------------

def serialize_credentials(c: AdminCredentials):
    return {"username": c.username, "password_hash": c.password_hash}


def upsert_credentials(record):
    obj, _ = AdminCredentials.objects.update_or_create(
        config_id=ADMIN_CONFIG_ID,
        defaults={
            "username": record.get("username") or "",
            "password_hash": record.get("password_hash") or "",
            "updated_at": _now(),
        },
    )
    return obj
