# storefront/contacts.py
import re
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .permissions import StoreAdminPermission
from .store import contact_repository
from .utilities import _as_bool, _normalize_id, _parse_payload, generate_record_id

logger = logging.getLogger(__name__)


class CSContactsAPIView(APIView):
    """
    GET    /api/admin/cs-contacts/          list
    POST   /api/admin/cs-contacts/          upsert {id?, name, phone_number, is_active}
    DELETE /api/admin/cs-contacts/<id>/     remove
    """
    permission_classes = [StoreAdminPermission]

    def get(self, request, **kwargs):
        return Response(contact_repository().all(), status=status.HTTP_200_OK)

    def post(self, request, **kwargs):
        data = _parse_payload(request)
        name = (data.get("name") or "").strip()
        phone = re.sub(r"\D", "", str(data.get("phone_number") or ""))
        if not name or not phone:
            return Response({"error": "name and phone_number are required"}, status=status.HTTP_400_BAD_REQUEST)

        repo = contact_repository()
        cid = _normalize_id(data.get("id"))
        existing = repo.get(cid) if cid else None
        record = {
            "id": cid or generate_record_id("cs"),
            "name": name,
            "phone_number": phone,
            "is_active": _as_bool(data.get("is_active"), default=True),
        }
        repo.save(record)
        logger.info("CS contact %s saved (active=%s)", record["id"], record["is_active"])
        return Response(
            {"success": True, "contact": record},
            status=status.HTTP_200_OK if existing else status.HTTP_201_CREATED,
        )

    def delete(self, request, contact_id=None):
        contact_id = _normalize_id(contact_id or _parse_payload(request).get("id"))
        if not contact_id:
            return Response({"error": "id is required"}, status=status.HTTP_400_BAD_REQUEST)
        repo = contact_repository()
        if repo.get(contact_id) is None:
            return Response({"error": "Contact not found"}, status=status.HTTP_404_NOT_FOUND)
        repo.delete(contact_id)
        return Response({"success": True}, status=status.HTTP_200_OK)
