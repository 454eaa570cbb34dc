# storefront/permissions.py
import logging

from django.conf import settings
from rest_framework.permissions import BasePermission
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken

logger = logging.getLogger(__name__)

ADMIN_SCOPE = "store_admin"


class FrontendOnlyPermission(BasePermission):
    """Storefront endpoints; open when no FRONTEND_KEY is configured."""

    def has_permission(self, request, view):
        key = getattr(settings, "FRONTEND_KEY", "")
        if not key:
            return True
        return request.headers.get("X-Frontend-Key") == key


def admin_claims(request):
    """Return the validated access-token payload, or None."""
    header = request.headers.get("Authorization") or ""
    scheme, _, raw = header.partition(" ")
    if scheme.lower() != "bearer" or not raw.strip():
        return None
    try:
        token = AccessToken(raw.strip())
    except TokenError as e:
        logger.info("Rejected admin token: %s", e)
        return None
    if token.get("scope") != ADMIN_SCOPE:
        return None
    return token.payload


class StoreAdminPermission(BasePermission):
    message = "Admin login required."

    def has_permission(self, request, view):
        return admin_claims(request) is not None
