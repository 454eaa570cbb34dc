import logging

from django.conf import settings
from django.http import JsonResponse
from django.middleware.csrf import get_token
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_protect, ensure_csrf_cookie
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from .permissions import ADMIN_SCOPE, StoreAdminPermission
from .store import credential_service
from .utilities import _parse_payload

logger = logging.getLogger(__name__)

COOKIE_NAME = "refresh_token"
COOKIE_PATH = "/api/admin/"
COOKIE_SECURE = not settings.DEBUG
COOKIE_SAMESITE = "Lax"
COOKIE_MAX_AGE = 7 * 24 * 60 * 60


def issue_admin_tokens(username):
    refresh = RefreshToken()
    refresh["scope"] = ADMIN_SCOPE
    refresh["username"] = username
    return refresh


def _set_refresh_cookie(response, refresh):
    response.set_cookie(
        COOKIE_NAME, str(refresh),
        max_age=COOKIE_MAX_AGE,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite=COOKIE_SAMESITE,
        path=COOKIE_PATH,
    )


@ensure_csrf_cookie
def csrf(request):
    """
    GET /api/csrf/ -> sets csrftoken cookie and returns it as JSON.
    Call once before the cookie-based refresh/logout POSTs.
    """
    return JsonResponse({"csrfToken": get_token(request)})


# --------------------------
# POST /api/admin/login/
# --------------------------
class AdminLoginAPIView(APIView):
    permission_classes = ()

    def post(self, request):
        data = _parse_payload(request)
        username = (data.get("username") or "").strip()
        password = data.get("password") or ""
        if not username or not password:
            return Response({"success": False, "error": "Username and password are required"},
                            status=status.HTTP_400_BAD_REQUEST)

        if not credential_service().verify(username, password):
            logger.warning("Failed admin login for %r", username)
            return Response({"success": False, "error": "Invalid credentials"}, status=status.HTTP_401_UNAUTHORIZED)

        refresh = issue_admin_tokens(username)
        res = Response({"success": True, "access": str(refresh.access_token), "username": username}, status=status.HTTP_200_OK)
        _set_refresh_cookie(res, refresh)
        logger.info("Admin %r logged in", username)
        return res


# --------------------------
# POST /api/admin/token/refresh/
# Returns {"access": "..."} using the HttpOnly cookie (X-CSRFToken header required).
# --------------------------
@method_decorator(csrf_protect, name="post")
class AdminTokenRefreshAPIView(APIView):
    permission_classes = ()

    def post(self, request):
        raw = request.COOKIES.get(COOKIE_NAME)
        if not raw:
            return Response({"error": "No session."}, status=status.HTTP_401_UNAUTHORIZED)
        try:
            refresh = RefreshToken(raw)
        except TokenError as e:
            return Response({"error": str(e)}, status=status.HTTP_401_UNAUTHORIZED)
        if refresh.get("scope") != ADMIN_SCOPE:
            return Response({"error": "No session."}, status=status.HTTP_401_UNAUTHORIZED)
        return Response({"access": str(refresh.access_token)}, status=status.HTTP_200_OK)


@method_decorator(csrf_protect, name="post")
class LogoutView(APIView):
    permission_classes = ()

    def post(self, request):
        r = Response({"detail": "Logged out"})
        r.delete_cookie(COOKIE_NAME, path=COOKIE_PATH)
        return r


# --------------------------
# POST /api/admin/credentials/
# --------------------------
class ChangeCredentialsAPIView(APIView):
    permission_classes = [StoreAdminPermission]

    def post(self, request):
        data = _parse_payload(request)
        try:
            result = credential_service().change(data.get("username"), data.get("password"))
        except ValueError as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        logger.info("Admin credentials changed (username %r)", result["username"])
        return Response({"success": True, **result}, status=status.HTTP_200_OK)
