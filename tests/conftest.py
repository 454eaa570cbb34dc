import random

import pytest
from django.core.cache import caches
from rest_framework.test import APIClient

from storefront.auth_views import issue_admin_tokens
from storefront.store import LocalMirror, product_repository


@pytest.fixture(autouse=True)
def _isolated_store(settings):
    settings.FRONTEND_KEY = ""
    settings.IMAGEKIT_PUBLIC_KEY = "public_test"
    settings.IMAGEKIT_PRIVATE_KEY = "private_test"
    settings.ADMIN_USERNAME = "admin"
    settings.ADMIN_PASSWORD = "admin123"
    caches["default"].clear()
    yield
    caches["default"].clear()


@pytest.fixture
def mirror():
    return LocalMirror()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_client():
    client = APIClient()
    token = issue_admin_tokens("admin").access_token
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


@pytest.fixture
def device_client():
    client = APIClient()
    client.credentials(HTTP_X_DEVICE_UUID="device-123")
    return client


@pytest.fixture
def rng():
    return random.Random(42)


def make_product(pid, category="Shoes", price="100000", name=None, variations=None, **extra):
    record = {
        "id": pid,
        "name": name or f"Product {pid}",
        "description": "",
        "price": str(price),
        "original_price": None,
        "category": category,
        "image": f"https://cdn.example.com/{pid}.jpg",
        "cover_media": {"type": "image", "url": f"https://cdn.example.com/{pid}.jpg"},
        "gallery": [],
        "variations": variations or [],
        "is_featured": False,
        "created_at": 1700000000000,
        "order": 0,
    }
    record.update(extra)
    return record


@pytest.fixture
def shirt():
    return make_product(
        "p-shirt",
        category="Apparel",
        price="50000",
        name="Shirt",
        variations=[
            {"id": "v-m", "name": "M", "price": "50000", "original_price": None, "stock": 3},
            {"id": "v-l", "name": "L", "price": "50000", "original_price": None, "stock": 5},
        ],
    )


@pytest.fixture
def saved_shirt(db, shirt):
    product_repository().save(shirt)
    return shirt


class FakeTimer:
    """threading.Timer stand-in; tests fire callbacks by hand."""

    created = []

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function()


@pytest.fixture
def fake_timer():
    FakeTimer.created = []
    yield FakeTimer
    FakeTimer.created = []
