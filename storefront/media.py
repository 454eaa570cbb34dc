"""
Media uploads go straight from the client to ImageKit. This backend only hands
out short-lived signed tickets; it never receives the file bytes.
"""
# Standard Library
import os
import hmac
import time
import hashlib
import logging
import secrets

# Third-party
import requests
from PIL import Image as PILImage, UnidentifiedImageError

# Django
from django.conf import settings

# Django REST Framework
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

# Local Imports
from .permissions import StoreAdminPermission

logger = logging.getLogger(__name__)

IMAGEKIT_UPLOAD_URL = "https://upload.imagekit.io/api/v1/files/upload"
DEFAULT_TICKET_TTL = 30 * 60  # seconds
_DEFAULT_TIMEOUT = 60

_VIDEO_EXTENSIONS = {".mp4", ".mov", ".webm", ".m4v", ".avi", ".mkv"}


class MediaUploadError(Exception):
    pass


class UploadConfigError(MediaUploadError):
    pass


def sign_upload_ticket(private_key, token=None, expire=None, ttl=DEFAULT_TICKET_TTL, now=None):
    """
    token: random 16 bytes as hex (unless supplied)
    expire: unix seconds, now + ttl (unless supplied)
    signature: hex HMAC-SHA1 of token + expire, keyed with the private key
    """
    if not private_key:
        raise UploadConfigError("ImageKit private key is not configured on the server.")
    token = token or secrets.token_hex(16)
    if expire in (None, ""):
        expire = int(now if now is not None else time.time()) + int(ttl)
    expire = int(expire)
    signature = hmac.new(
        private_key.encode("utf-8"),
        f"{token}{expire}".encode("utf-8"),
        hashlib.sha1,
    ).hexdigest()
    return {"token": token, "expire": expire, "signature": signature}


class LocalTicketProvider:
    def __init__(self, private_key, ttl=DEFAULT_TICKET_TTL):
        self.private_key = private_key
        self.ttl = ttl

    def __call__(self):
        return sign_upload_ticket(self.private_key, ttl=self.ttl)


class RemoteTicketProvider:
    """Fetch a ticket from the /api/upload-auth/ endpoint of a running backend."""

    def __init__(self, auth_url, session=None, headers=None, timeout=_DEFAULT_TIMEOUT):
        self.auth_url = auth_url
        self.session = session or requests.Session()
        self.headers = headers or {}
        self.timeout = timeout

    def __call__(self):
        try:
            resp = self.session.get(self.auth_url, headers=self.headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error("Upload ticket request failed: %s", e)
            raise MediaUploadError("Could not obtain upload permission from the server.") from e
        if not resp.ok:
            try:
                detail = resp.json().get("error")
            except ValueError:
                detail = None
            logger.error("Upload ticket rejected (%s): %s", resp.status_code, detail)
            raise MediaUploadError(detail or "Could not obtain upload permission from the server.")
        return resp.json()


def detect_media(file_obj, file_name="", content_type=""):
    """
    "image" when Pillow can decode it, "video" for video content types or
    extensions; anything else is rejected.
    """
    content_type = (content_type or "").split(";")[0].strip().lower()
    ext = os.path.splitext(file_name or getattr(file_obj, "name", "") or "")[-1].lower()
    if content_type.startswith("video/") or ext in _VIDEO_EXTENSIONS:
        return "video"

    pos = file_obj.tell() if hasattr(file_obj, "tell") else None
    try:
        img = PILImage.open(file_obj)
        img.verify()
        return "image"
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise MediaUploadError(f"Unsupported media file: {file_name or 'upload'}") from e
    finally:
        if pos is not None:
            file_obj.seek(pos)


class ImageKitUploader:
    def __init__(self, public_key, ticket_provider, session=None, upload_url=IMAGEKIT_UPLOAD_URL,
                 timeout=_DEFAULT_TIMEOUT):
        self.public_key = public_key
        self.ticket_provider = ticket_provider
        self.session = session or requests.Session()
        self.upload_url = upload_url
        self.timeout = timeout

    def upload(self, file_obj, file_name=None, on_progress=None):
        """
        Returns ImageKit's response: url, fileId, name, size, filePath,
        plus "type" ("image" or "video") for use as cover/gallery media.
        """
        if not self.public_key:
            raise UploadConfigError("ImageKit public key is not configured.")

        ticket = self.ticket_provider()
        file_name = file_name or getattr(file_obj, "name", "") or f"media_{int(time.time() * 1000)}"
        file_name = os.path.basename(file_name)
        kind = detect_media(file_obj, file_name, getattr(file_obj, "content_type", ""))

        if on_progress:
            on_progress(0)
        try:
            resp = self.session.post(
                self.upload_url,
                files={"file": (file_name, file_obj)},
                data={
                    "fileName": file_name,
                    "publicKey": self.public_key,
                    "signature": ticket["signature"],
                    "expire": str(ticket["expire"]),
                    "token": ticket["token"],
                    "useUniqueFileName": "true",
                },
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error("Media upload network error: %s", e)
            raise MediaUploadError("Network error while uploading media.") from e

        if not (200 <= resp.status_code < 300):
            logger.error("Media upload failed (%s): %s", resp.status_code, resp.text[:200])
            raise MediaUploadError(resp.text or f"Upload failed (status {resp.status_code})")
        try:
            result = resp.json()
        except ValueError as e:
            raise MediaUploadError("Invalid response from the media host.") from e
        result["type"] = kind

        if on_progress:
            on_progress(100)
        return result


def default_uploader(auth_url=None, **kwargs):
    """Uploader wired from settings; signs locally unless an auth endpoint is given."""
    provider = RemoteTicketProvider(auth_url) if auth_url else LocalTicketProvider(
        settings.IMAGEKIT_PRIVATE_KEY, ttl=settings.UPLOAD_TICKET_TTL
    )
    return ImageKitUploader(settings.IMAGEKIT_PUBLIC_KEY, provider, **kwargs)


# --------------------------
# GET /api/upload-auth/
# --------------------------
class UploadAuthAPIView(APIView):
    permission_classes = [StoreAdminPermission]

    def get(self, request):
        try:
            ticket = sign_upload_ticket(
                settings.IMAGEKIT_PRIVATE_KEY,
                token=request.query_params.get("token"),
                expire=request.query_params.get("expire"),
                ttl=settings.UPLOAD_TICKET_TTL,
            )
        except UploadConfigError as e:
            logger.error("Upload ticket requested but no private key is configured")
            return Response({"error": str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        except ValueError:
            return Response({"error": "expire must be an integer"}, status=status.HTTP_400_BAD_REQUEST)
        return Response(ticket, status=status.HTTP_200_OK)

