"""
"Someone just bought ..." popups.

Purely cosmetic: the picker returns None whenever the feature is off or not
configured, and the scheduler then never arms a timer.
"""
# Standard Library
import random
import functools
import logging
import threading

# Django REST Framework
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

# Local Imports
from .permissions import FrontendOnlyPermission
from .store import product_repository, site_settings_service

logger = logging.getLogger(__name__)

INITIAL_DELAY = 5.0  # seconds
DISPLAY_DURATION = 6.0
NEXT_INTERVAL_RANGE = (15.0, 40.0)

TIME_AGO_LABELS = (
    "Baru saja",
    "1 menit yang lalu",
    "3 menit yang lalu",
    "5 menit yang lalu",
    "10 menit yang lalu",
    "30 menit yang lalu",
)


def parse_name_pool(text):
    if not text:
        return []
    return [line.strip() for line in str(text).splitlines() if line.strip()]


def eligible_products(settings, products):
    allowed = [str(pid) for pid in (settings.get("social_proof_product_ids") or [])]
    if not allowed:
        return list(products or [])
    allowed_set = set(allowed)
    return [p for p in (products or []) if str(p.get("id")) in allowed_set]


def pick_social_proof(settings, products, rng=None):
    if not settings or not settings.get("social_proof_enabled"):
        return None
    names = parse_name_pool(settings.get("social_proof_names"))
    candidates = eligible_products(settings, products)
    if not names or not candidates:
        return None

    rng = rng or random
    product = rng.choice(candidates)
    return {
        "name": rng.choice(names),
        "product_id": product.get("id"),
        "product_name": product.get("name") or "",
        "product_image": product.get("image") or (product.get("cover_media") or {}).get("url") or "",
        "time_ago": rng.choice(TIME_AGO_LABELS),
    }


class SocialProofScheduler:
    """
    show -> dwell -> hide -> random wait -> show ...

    Exactly one timer is armed at a time. cancel() disarms it and starts a new
    generation: callbacks armed before it are no-ops even after a restart.
    """

    def __init__(
        self,
        settings,
        products,
        on_show,
        on_hide,
        rng=None,
        timer_factory=threading.Timer,
        initial_delay=INITIAL_DELAY,
        display_duration=DISPLAY_DURATION,
        interval_range=NEXT_INTERVAL_RANGE,
    ):
        self.settings = settings or {}
        self.products = products or []
        self.on_show = on_show
        self.on_hide = on_hide
        self.rng = rng or random.Random()
        self.timer_factory = timer_factory
        self.initial_delay = initial_delay
        self.display_duration = display_duration
        self.interval_range = interval_range
        self.current = None
        self._timer = None
        self._lock = threading.Lock()
        self._active = False
        self._generation = 0

    @property
    def enabled(self):
        return bool(self.settings.get("social_proof_enabled")) and bool(
            parse_name_pool(self.settings.get("social_proof_names"))
        )

    @property
    def running(self):
        return self._active

    def start(self):
        if not self.enabled:
            logger.debug("Social proof disabled; scheduler not started")
            return False
        with self._lock:
            if self._active:
                return True
            self._active = True
            self._arm(self.initial_delay, self._show)
        return True

    def cancel(self):
        with self._lock:
            self._active = False
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self.current = None

    def _arm(self, delay, fn):
        timer = self.timer_factory(delay, functools.partial(fn, self._generation))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _live(self, generation):
        return self._active and generation == self._generation

    def _show(self, generation):
        with self._lock:
            if not self._live(generation):
                return
            self.current = pick_social_proof(self.settings, self.products, self.rng)
            if self.current is None:
                self._active = False
                self._timer = None
                return
            notification = self.current
            self._arm(self.display_duration, self._hide)
        self.on_show(notification)

    def _hide(self, generation):
        with self._lock:
            if not self._live(generation):
                return
            self.current = None
            self._arm(self.rng.uniform(*self.interval_range), self._show)
        self.on_hide()


# --------------------------
# GET /api/social-proof/
# One pick plus the timings; the browser runs its own timers.
# --------------------------
class SocialProofAPIView(APIView):
    permission_classes = [FrontendOnlyPermission]

    def get(self, request):
        current = site_settings_service().current
        notification = pick_social_proof(current, product_repository().all()) if current.get(
            "social_proof_enabled") else None
        return Response(
            {
                "enabled": notification is not None,
                "notification": notification,
                "initial_delay": INITIAL_DELAY,
                "display_duration": DISPLAY_DURATION,
                "next_interval_range": list(NEXT_INTERVAL_RANGE),
            },
            status=status.HTTP_200_OK,
        )
