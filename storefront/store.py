"""
Two-tier persistence: the remote store (the SQL database behind the ORM) is
authoritative, the local mirror (Django cache, JSON values) is written first
on every change and is the read-of-record whenever the remote store fails.

No locks and no conflict detection: the last writer wins.
"""
# Standard Library
import copy
import json
import logging

# Django
from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.core.cache import caches
from django.core.serializers.json import DjangoJSONEncoder
from django.db import DatabaseError, transaction
from django.utils.crypto import constant_time_compare

# Local Imports
from .models import (
    ADMIN_CONFIG_ID,
    SETTINGS_ID,
    AdminCredentials,
    CSContact,
    Product,
    SiteSettings,
    Testimonial,
)
from .serializers import (
    DEFAULT_CS_CONTACTS,
    DEFAULT_SETTINGS,
    clean_settings,
    serialize_contact,
    serialize_credentials,
    serialize_product,
    serialize_settings,
    serialize_testimonial,
    upsert_contact,
    upsert_credentials,
    upsert_product,
    upsert_settings,
    upsert_testimonial,
)

logger = logging.getLogger(__name__)

# Local cache key namespace
PRODUCTS_KEY = "lumina_products"
CS_KEY = "lumina_cs_contacts"
TESTIMONIALS_KEY = "lumina_testimonials"
SITE_SETTINGS_KEY = "lumina_site_settings"
ADMIN_KEY = "lumina_admin_creds"
CART_KEY_PREFIX = "lumina_cart"

DEV_FALLBACK_PASSWORD = "admin123"


class LocalMirror:
    """JSON values in a Django cache; corrupt entries are dropped on read."""

    def __init__(self, cache=None):
        self._cache = cache if cache is not None else caches[getattr(settings, "STORE_CACHE_ALIAS", "default")]

    def read(self, key, default=None):
        raw = self._cache.get(key)
        if raw is None:
            return copy.deepcopy(default)
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding corrupt local cache entry %r", key)
            self._cache.delete(key)
            return copy.deepcopy(default)

    def write(self, key, value):
        self._cache.set(key, json.dumps(value, cls=DjangoJSONEncoder), timeout=None)

    def delete(self, key):
        self._cache.delete(key)


class CollectionRepository:
    """
    Products / CS contacts / testimonials.

    Records are dicts keyed by "id". Writes hit the mirror first, then a
    primary-key upsert on the remote store; remote failures are logged and
    never reach the caller.
    """

    def __init__(self, name, cache_key, queryset, serialize, upsert, model, default=None, mirror=None):
        self.name = name
        self.cache_key = cache_key
        self._queryset = queryset
        self._serialize = serialize
        self._upsert = upsert
        self._model = model
        self.default = default if default is not None else []
        self.mirror = mirror or LocalMirror()

    def _remote_all(self):
        return [self._serialize(obj) for obj in self._queryset()]

    def all(self):
        try:
            records = self._remote_all()
        except DatabaseError as e:
            logger.warning("Remote store unavailable for %s, using local cache: %s", self.name, e)
            return self._cached()
        self.mirror.write(self.cache_key, records)
        return records

    def _cached(self):
        records = self.mirror.read(self.cache_key, self.default)
        if not isinstance(records, list):
            logger.warning("Ignoring malformed local cache entry %r", self.cache_key)
            self.mirror.delete(self.cache_key)
            return copy.deepcopy(self.default)
        return records

    def get(self, record_id):
        for rec in self.all():
            if rec.get("id") == record_id:
                return rec
        return None

    def save(self, record):
        current = self.mirror.read(self.cache_key, None)
        if not isinstance(current, list):
            try:
                current = self._remote_all()
            except DatabaseError:
                current = []
        idx = next((i for i, r in enumerate(current) if r.get("id") == record["id"]), None)
        if idx is None:
            current.append(record)
        else:
            current[idx] = record
        self.mirror.write(self.cache_key, current)

        try:
            with transaction.atomic():
                self._upsert(record)
        except DatabaseError:
            logger.exception("Remote save failed for %s %s; kept in local cache", self.name, record.get("id"))
        return record

    def delete(self, record_id):
        current = self.mirror.read(self.cache_key, None)
        if isinstance(current, list):
            self.mirror.write(self.cache_key, [r for r in current if r.get("id") != record_id])

        try:
            with transaction.atomic():
                self._model.objects.filter(pk=record_id).delete()
        except DatabaseError:
            logger.exception("Remote delete failed for %s %s", self.name, record_id)


class SingletonRepository:
    """One fixed-id row (site settings, admin credentials)."""

    def __init__(self, name, record_id, cache_key, model, serialize, upsert, defaults, mirror=None):
        self.name = name
        self.record_id = record_id
        self.cache_key = cache_key
        self._model = model
        self._serialize = serialize
        self._upsert = upsert
        self.defaults = defaults
        self.mirror = mirror or LocalMirror()

    def _fallback(self):
        cached = self.mirror.read(self.cache_key, None)
        if isinstance(cached, dict):
            return cached
        if cached is not None:
            self.mirror.delete(self.cache_key)
        return copy.deepcopy(self.defaults)

    def get(self):
        try:
            obj = self._model.objects.filter(pk=self.record_id).first()
        except DatabaseError as e:
            logger.warning("Remote store unavailable for %s, using local cache: %s", self.name, e)
            return self._fallback()
        if obj is None:
            return self._fallback()
        record = self._serialize(obj)
        self.mirror.write(self.cache_key, record)
        return record

    def save(self, record):
        self.mirror.write(self.cache_key, record)
        try:
            with transaction.atomic():
                self._upsert(record)
        except DatabaseError:
            logger.exception("Remote save failed for %s; kept in local cache", self.name)
        return record


class SiteSettingsService:
    """
    Process-wide appearance settings. Loaded once, saved explicitly.
    """

    def __init__(self, repository):
        self.repository = repository
        self._current = None

    def load(self):
        stored = self.repository.get() or {}
        self._current = {**DEFAULT_SETTINGS, **clean_settings(stored)}
        return self._current

    @property
    def current(self):
        if self._current is None:
            self.load()
        return self._current

    def save(self, changes):
        merged = {**self.current, **clean_settings(changes or {})}
        self.repository.save(merged)
        self._current = merged
        return merged

    def reset(self):
        self._current = None


class CredentialService:
    """
    Admin login check against the stored singleton.
    Passwords are hashed with Django's hashers; the plain value is never stored.

    With nothing stored, the first use seeds ADMIN_USERNAME/ADMIN_PASSWORD.
    An unset password seeds the development fallback only when
    allow_dev_fallback is on (DEBUG); otherwise admin login stays disabled.
    """

    def __init__(self, repository, default_username="admin", default_password="", allow_dev_fallback=False):
        self.repository = repository
        self.default_username = default_username
        self.default_password = default_password
        self.allow_dev_fallback = allow_dev_fallback

    def _record(self):
        rec = self.repository.get() or {}
        if rec.get("username") and rec.get("password_hash"):
            return rec

        password = self.default_password
        if not password:
            if not self.allow_dev_fallback:
                logger.error("No admin credentials stored and ADMIN_PASSWORD is not set; admin login is disabled")
                return None
            logger.warning(
                "ADMIN_PASSWORD is not set; seeding user %r with the development password (DEBUG only)",
                self.default_username,
            )
            password = DEV_FALLBACK_PASSWORD
        else:
            logger.warning("No admin credentials stored; seeding user %r from configuration", self.default_username)

        rec = {"username": self.default_username, "password_hash": make_password(password)}
        self.repository.save(rec)
        return rec

    @property
    def username(self):
        rec = self._record()
        return rec["username"] if rec else None

    def verify(self, username, password):
        if not username or not password:
            return False
        rec = self._record()
        if rec is None:
            return False
        name_ok = constant_time_compare(str(username), rec["username"])
        return check_password(password, rec["password_hash"]) and name_ok

    def change(self, username, password):
        username = (username or "").strip()
        if not username or not password:
            raise ValueError("username and password are required")
        rec = {"username": username, "password_hash": make_password(password)}
        self.repository.save(rec)
        return {"username": username}


# --------------------------
# Factories
# --------------------------

def product_repository(mirror=None):
    return CollectionRepository(
        name="products",
        cache_key=PRODUCTS_KEY,
        queryset=lambda: Product.objects.prefetch_related("variations").all(),
        serialize=serialize_product,
        upsert=upsert_product,
        model=Product,
        mirror=mirror,
    )


def contact_repository(mirror=None):
    return CollectionRepository(
        name="cs_contacts",
        cache_key=CS_KEY,
        queryset=lambda: CSContact.objects.all(),
        serialize=serialize_contact,
        upsert=upsert_contact,
        model=CSContact,
        default=DEFAULT_CS_CONTACTS,
        mirror=mirror,
    )


def testimonial_repository(mirror=None):
    return CollectionRepository(
        name="testimonials",
        cache_key=TESTIMONIALS_KEY,
        queryset=lambda: Testimonial.objects.all(),
        serialize=serialize_testimonial,
        upsert=upsert_testimonial,
        model=Testimonial,
        mirror=mirror,
    )


def settings_repository(mirror=None):
    return SingletonRepository(
        name="site_settings",
        record_id=SETTINGS_ID,
        cache_key=SITE_SETTINGS_KEY,
        model=SiteSettings,
        serialize=serialize_settings,
        upsert=upsert_settings,
        defaults=DEFAULT_SETTINGS,
        mirror=mirror,
    )


def credentials_repository(mirror=None):
    return SingletonRepository(
        name="admin_credentials",
        record_id=ADMIN_CONFIG_ID,
        cache_key=ADMIN_KEY,
        model=AdminCredentials,
        serialize=serialize_credentials,
        upsert=upsert_credentials,
        defaults={},
        mirror=mirror,
    )


def site_settings_service(mirror=None):
    return SiteSettingsService(settings_repository(mirror))


def credential_service(mirror=None):
    return CredentialService(
        credentials_repository(mirror),
        default_username=getattr(settings, "ADMIN_USERNAME", "admin"),
        default_password=getattr(settings, "ADMIN_PASSWORD", ""),
        allow_dev_fallback=settings.DEBUG,
    )
