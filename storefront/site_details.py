# ---- SITE SETTINGS APIS ----
import logging

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status

from .permissions import FrontendOnlyPermission, StoreAdminPermission
from .store import site_settings_service
from .utilities import _now_ms, _parse_payload, _to_int

logger = logging.getLogger(__name__)

THEME_COLORS = {
    "Green": "#13ec13",
    "Blue": "#2563eb",
    "Neutral": "#404040",
    "Orange": "#f97316",
    "Rose": "#f43f5e",
    "Violet": "#8b5cf6",
    "Yellow": "#facc15",
}

FONT_THEMES = {
    "Default": {"heading": "Inter", "body": "Inter"},
    "Display 1": {"heading": "Playfair Display", "body": "Inter"},
    "Display 2": {"heading": "Playfair Display", "body": "Plus Jakarta Sans"},
    "Bold": {"heading": "Fraunces", "body": "Space Grotesk"},
    "Aesthetic 1": {"heading": "EB Garamond", "body": "Carme"},
    "Aesthetic 2": {"heading": "EB Garamond", "body": "Inter"},
}

DEFAULT_COLOR = "Green"
DEFAULT_FONT = "Default"


def resolve_theme(theme_color, theme_font):
    color = theme_color if theme_color in THEME_COLORS else DEFAULT_COLOR
    font = theme_font if theme_font in FONT_THEMES else DEFAULT_FONT
    return {
        "color": color,
        "primary": THEME_COLORS[color],
        "font": font,
        "heading_font": FONT_THEMES[font]["heading"],
        "body_font": FONT_THEMES[font]["body"],
    }


def promo_time_left(end_at_ms, now_ms=None):
    """Countdown to the promotion end; all zeros once it has passed (or is unset)."""
    now_ms = _now_ms() if now_ms is None else now_ms
    end = _to_int(end_at_ms, None)
    remaining = max(0, (end - now_ms) // 1000) if end is not None else 0
    days, rem = divmod(remaining, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)
    return {"days": days, "hours": hours, "minutes": minutes, "seconds": seconds}


def public_settings(current, now_ms=None):
    return {
        **current,
        "theme": resolve_theme(current.get("theme_color"), current.get("theme_font")),
        "show_promotion": bool((current.get("promo_title") or "").strip()),
        "promo_time_left": promo_time_left(current.get("promo_end_at"), now_ms),
    }


# --------------------------
# GET /api/settings/
# --------------------------
class ShowSiteSettingsAPIView(APIView):
    permission_classes = [FrontendOnlyPermission]

    def get(self, request):
        current = site_settings_service().load()
        return Response(public_settings(current), status=status.HTTP_200_OK)


# --------------------------
# POST /api/admin/settings/
# Partial update; unknown keys are ignored.
# --------------------------
class SaveSiteSettingsAPIView(APIView):
    permission_classes = [StoreAdminPermission]

    def post(self, request):
        data = _parse_payload(request)
        if not isinstance(data, dict) or not data:
            return Response({"error": "No settings provided"}, status=status.HTTP_400_BAD_REQUEST)

        service = site_settings_service()
        saved = service.save(data)
        logger.info("Site settings updated: %s", ", ".join(sorted(k for k in data if k in saved)))
        return Response({"success": True, "settings": public_settings(saved)}, status=status.HTTP_200_OK)
