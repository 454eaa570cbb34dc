# storefront/testimonials.py
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .permissions import FrontendOnlyPermission, StoreAdminPermission, admin_claims
from .store import testimonial_repository
from .utilities import (
    _as_bool,
    _normalize_id,
    _parse_payload,
    _to_int,
    generate_record_id,
)

logger = logging.getLogger(__name__)


def _sorted(testimonials):
    return sorted(testimonials, key=lambda t: _to_int(t.get("order"), 0))


# --------------------------
# 1) SHOW (list)
# GET /api/testimonials/[?all=1]
# ?all=1 is honoured for a logged-in admin only.
# --------------------------
class ShowTestimonialsAPIView(APIView):
    permission_classes = [FrontendOnlyPermission]

    def get(self, request):
        include_all = _as_bool(request.query_params.get("all"), default=False)
        if include_all and admin_claims(request) is None:
            include_all = False

        data = _sorted(testimonial_repository().all())
        if not include_all:
            data = [t for t in data if t.get("is_active")]
        return Response(data, status=status.HTTP_200_OK)


# --------------------------
# 2) SAVE (create or update)
# POST /api/admin/testimonials/
# Fields: id?, image_url (required), customer_name, description, is_active, order
# --------------------------
class SaveTestimonialAPIView(APIView):
    permission_classes = [StoreAdminPermission]

    def post(self, request):
        data = _parse_payload(request)
        repo = testimonial_repository()

        tid = _normalize_id(data.get("id"))
        existing = repo.get(tid) if tid else None
        existing = existing or {}
        image_url = (data.get("image_url") or existing.get("image_url") or "").strip()
        if not image_url:
            return Response({"error": "image_url is required"}, status=status.HTTP_400_BAD_REQUEST)

        record = {
            "id": tid or generate_record_id("t"),
            "image_url": image_url,
            "customer_name": (data.get("customer_name", existing.get("customer_name")) or "").strip(),
            "description": (data.get("description", existing.get("description")) or "").strip(),
            "is_active": _as_bool(data.get("is_active"), default=existing.get("is_active", True)),
            "order": max(0, _to_int(data.get("order"), existing.get("order", 0))),
        }
        repo.save(record)
        return Response(
            {"success": True, "testimonial": record},
            status=status.HTTP_200_OK if existing else status.HTTP_201_CREATED,
        )


# --------------------------
# 3) DELETE
# DELETE /api/admin/testimonials/<id>/
# --------------------------
class DeleteTestimonialAPIView(APIView):
    permission_classes = [StoreAdminPermission]

    def delete(self, request, testimonial_id):
        repo = testimonial_repository()
        if repo.get(testimonial_id) is None:
            return Response({"error": "Testimonial not found"}, status=status.HTTP_404_NOT_FOUND)
        repo.delete(testimonial_id)
        return Response({"success": True}, status=status.HTTP_200_OK)
