# Standard Library
import logging
from decimal import Decimal, InvalidOperation

# Django
from django.core.exceptions import ValidationError

# Django REST Framework
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

# Utilities / Local
from .permissions import FrontendOnlyPermission, StoreAdminPermission
from .recommendations import related_products
from .serializers import clean_gallery, clean_media
from .store import product_repository
from .utilities import (
    _as_bool,
    _decimal_str,
    _now_ms,
    _normalize_id,
    _parse_payload,
    _to_int,
    generate_record_id,
)

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "General"

# -----------------------
# Helpers
# -----------------------


def _parse_price(value, label, optional=False):
    """
    Blank -> 0 (or None when optional). Anything else must be a finite,
    non-negative number. An optional price of 0 also means "none".
    """
    if value is None or str(value).strip() == "":
        return None if optional else Decimal("0")
    try:
        dec = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{label} must be a number.")
    if not dec.is_finite() or dec < 0:
        raise ValidationError(f"{label} must be a finite, non-negative number.")
    if optional and dec == 0:
        return None
    return dec


def _prepare_variations(raw):
    variations = []
    seen = set()
    for var in raw if isinstance(raw, list) else []:
        if not isinstance(var, dict):
            continue
        name = (var.get("name") or "").strip()
        if not name:
            raise ValidationError("Every variation needs a name.")
        vid = _normalize_id(var.get("id")) or generate_record_id("v")
        if vid in seen:
            raise ValidationError(f"Variation id '{vid}' is used twice.")
        seen.add(vid)
        variations.append({
            "id": vid,
            "name": name,
            "price": str(_parse_price(var.get("price"), f"Price of '{name}'")),
            "original_price": _decimal_str(
                _parse_price(var.get("original_price"), f"Original price of '{name}'", optional=True)
            ),
            "stock": max(0, _to_int(var.get("stock"), 0)),
        })
    return variations


def prepare_product_record(data, existing=None, catalog=()):
    """
    Normalize an admin product payload into a record.

    At least one variation is required; the product's price and
    original_price always mirror the first variation. Existing products keep
    their created_at. A variation id already used by another product in
    catalog is rejected.
    """
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationError("Field 'name' is required.")

    variations = _prepare_variations(data.get("variations"))
    if not variations:
        raise ValidationError("At least one variation is required.")

    cover = clean_media(data.get("cover_media") or data.get("image"))
    if cover is None:
        cover = {"type": "image", "url": ""}

    existing = existing or {}
    product_id = _normalize_id(data.get("id")) or existing.get("id") or generate_record_id("p")
    taken = {
        v.get("id"): p.get("id")
        for p in catalog if p.get("id") != product_id
        for v in p.get("variations") or []
    }
    for var in variations:
        if var["id"] in taken:
            raise ValidationError(
                f"Variation id '{var['id']}' already belongs to product '{taken[var['id']]}'."
            )

    return {
        "id": product_id,
        "name": name,
        "description": data.get("description") or "",
        "price": variations[0]["price"],
        "original_price": variations[0]["original_price"],
        "category": (data.get("category") or "").strip() or DEFAULT_CATEGORY,
        "image": cover["url"],
        "cover_media": cover,
        "gallery": clean_gallery(data.get("gallery")),
        "variations": variations,
        "is_featured": _as_bool(data.get("is_featured")),
        "created_at": existing.get("created_at") or _to_int(data.get("created_at"), None) or _now_ms(),
        "order": max(0, _to_int(data.get("order"), existing.get("order") or 0)),
    }


def _product_or_404(product_id):
    product = product_repository().get(product_id)
    if product is None:
        return None, Response({"error": "Product not found"}, status=status.HTTP_404_NOT_FOUND)
    return product, None


# -----------------------
# API Views
# -----------------------

class ShowProductsAPIView(APIView):
    """GET /api/products/[?featured=1][&category=...]"""
    permission_classes = [FrontendOnlyPermission]

    def get(self, request):
        products = product_repository().all()

        if _as_bool(request.query_params.get("featured")):
            products = [p for p in products if p.get("is_featured")]
        category = (request.query_params.get("category") or "").strip()
        if category:
            products = [p for p in products if p.get("category") == category]

        return Response(products, status=status.HTTP_200_OK)


class ShowSpecificProductAPIView(APIView):
    permission_classes = [FrontendOnlyPermission]

    def get(self, request, product_id):
        product, error = _product_or_404(product_id)
        if error:
            return error
        return Response(product, status=status.HTTP_200_OK)


class RelatedProductsAPIView(APIView):
    permission_classes = [FrontendOnlyPermission]

    def get(self, request, product_id):
        catalog = product_repository().all()
        focal = next((p for p in catalog if p.get("id") == product_id), None)
        if focal is None:
            return Response({"error": "Product not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(related_products(focal, catalog), status=status.HTTP_200_OK)


class SaveProductAPIView(APIView):
    """POST /api/admin/products/ (create, or update when "id" matches)"""
    permission_classes = [StoreAdminPermission]

    def post(self, request):
        data = _parse_payload(request)
        repo = product_repository()
        catalog = repo.all()
        pid = _normalize_id(data.get("id"))
        existing = next((p for p in catalog if p.get("id") == pid), None) if pid else None

        try:
            record = prepare_product_record(data, existing=existing, catalog=catalog)
        except ValidationError as e:
            return Response({"error": " ".join(e.messages)}, status=status.HTTP_400_BAD_REQUEST)

        repo.save(record)
        logger.info("Product %s %s", record["id"], "updated" if existing else "created")
        return Response(
            {"success": True, "product_id": record["id"], "product": record},
            status=status.HTTP_200_OK if existing else status.HTTP_201_CREATED,
        )


class DeleteProductAPIView(APIView):
    permission_classes = [StoreAdminPermission]

    def delete(self, request, product_id):
        repo = product_repository()
        if repo.get(product_id) is None:
            return Response({"error": "Product not found"}, status=status.HTTP_404_NOT_FOUND)
        repo.delete(product_id)
        logger.info("Product %s deleted", product_id)
        return Response({"success": True, "message": "Product deleted"}, status=status.HTTP_200_OK)
