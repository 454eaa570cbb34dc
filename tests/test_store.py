from unittest import mock

import pytest
from django.db import DatabaseError, IntegrityError, transaction

from storefront.models import AdminCredentials, Product, SiteSettings, Variation
from storefront.serializers import DEFAULT_CS_CONTACTS, DEFAULT_SETTINGS, upsert_product
from storefront.store import (
    PRODUCTS_KEY,
    SITE_SETTINGS_KEY,
    contact_repository,
    credential_service,
    product_repository,
    site_settings_service,
)

from conftest import make_product


def _broken(*args, **kwargs):
    raise DatabaseError("remote store is down")


@pytest.mark.django_db
def test_save_writes_mirror_and_remote(shirt, mirror):
    repo = product_repository(mirror)
    repo.save(shirt)

    assert mirror.read(PRODUCTS_KEY)[0]["id"] == "p-shirt"
    product = Product.objects.get(pk="p-shirt")
    assert [v.variation_id for v in product.variations.all()] == ["v-m", "v-l"]
    assert repo.get("p-shirt")["variations"][1]["name"] == "L"


@pytest.mark.django_db
def test_save_replaces_variations(saved_shirt):
    repo = product_repository()
    updated = dict(saved_shirt, variations=[saved_shirt["variations"][1]])
    repo.save(updated)
    assert list(Variation.objects.values_list("variation_id", flat=True)) == ["v-l"]


@pytest.mark.django_db
def test_remote_failure_on_save_keeps_local_copy(shirt, mirror):
    repo = product_repository(mirror)
    repo._upsert = _broken
    repo.save(shirt)

    assert not Product.objects.exists()
    assert mirror.read(PRODUCTS_KEY)[0]["name"] == "Shirt"


@pytest.mark.django_db
def test_remote_failure_on_read_falls_back_to_mirror(saved_shirt):
    repo = product_repository()
    repo.all()
    with mock.patch.object(repo, "_remote_all", side_effect=DatabaseError("down")):
        assert [p["id"] for p in repo.all()] == ["p-shirt"]


@pytest.mark.django_db
def test_remote_failure_without_cache_gives_default(mirror):
    repo = contact_repository(mirror)
    with mock.patch.object(repo, "_remote_all", side_effect=DatabaseError("down")):
        assert repo.all() == DEFAULT_CS_CONTACTS


@pytest.mark.django_db
def test_corrupt_mirror_entry_is_discarded(mirror):
    repo = product_repository(mirror)
    mirror._cache.set(PRODUCTS_KEY, "{{{")
    with mock.patch.object(repo, "_remote_all", side_effect=DatabaseError("down")):
        assert repo.all() == []
    assert mirror._cache.get(PRODUCTS_KEY) is None


@pytest.mark.django_db
def test_delete_removes_both_tiers(saved_shirt, mirror):
    repo = product_repository(mirror)
    repo.all()
    repo.delete("p-shirt")
    assert not Product.objects.filter(pk="p-shirt").exists()
    assert mirror.read(PRODUCTS_KEY) == []
    assert not Variation.objects.exists()


@pytest.mark.django_db
def test_settings_defaults_and_merge():
    service = site_settings_service()
    assert service.current["site_name"] == DEFAULT_SETTINGS["site_name"]

    saved = service.save({"site_name": "Toko Kita", "promo_end_at": "1700000000000", "bogus": 1})
    assert saved["site_name"] == "Toko Kita"
    assert saved["promo_end_at"] == 1700000000000
    assert "bogus" not in saved
    assert SiteSettings.objects.get().site_name == "Toko Kita"

    fresh = site_settings_service()
    assert fresh.current["hero_title"] == DEFAULT_SETTINGS["hero_title"]
    assert fresh.current["site_name"] == "Toko Kita"


@pytest.mark.django_db
def test_settings_fall_back_to_mirror(mirror):
    site_settings_service(mirror).save({"site_name": "Cached"})
    service = site_settings_service(mirror)
    with mock.patch.object(SiteSettings.objects, "filter", side_effect=DatabaseError("down")):
        assert service.load()["site_name"] == "Cached"
    assert mirror.read(SITE_SETTINGS_KEY)["site_name"] == "Cached"


@pytest.mark.django_db
def test_credentials_are_seeded_hashed_and_changeable():
    service = credential_service()
    assert service.verify("admin", "admin123")
    stored = AdminCredentials.objects.get()
    assert stored.password_hash != "admin123"

    assert not service.verify("admin", "wrong")
    assert not service.verify("someone", "admin123")

    service.change("owner", "s3cret!")
    assert service.verify("owner", "s3cret!")
    assert not service.verify("admin", "admin123")

    with pytest.raises(ValueError):
        service.change("", "x")


@pytest.mark.django_db
def test_unset_admin_password_disables_login_outside_debug(settings):
    settings.ADMIN_PASSWORD = ""
    settings.DEBUG = False
    service = credential_service()
    with mock.patch("storefront.store.logger") as log:
        assert not service.verify("admin", "admin123")
        assert service.username is None
    assert log.error.called
    assert not AdminCredentials.objects.exists()


@pytest.mark.django_db
def test_unset_admin_password_seeds_dev_fallback_in_debug(settings):
    settings.ADMIN_PASSWORD = ""
    settings.DEBUG = True
    with mock.patch("storefront.store.logger") as log:
        assert credential_service().verify("admin", "admin123")
    assert log.warning.called
    assert AdminCredentials.objects.exists()


@pytest.mark.django_db
def test_upsert_refuses_to_move_a_variation_between_products():
    repo = product_repository()
    repo.save(make_product("p-a", variations=[{"id": "v1", "name": "One", "price": "10"}]))

    with pytest.raises(IntegrityError):
        with transaction.atomic():
            upsert_product(make_product("p-b", variations=[{"id": "v1", "name": "Taken", "price": "20"}]))

    assert Variation.objects.get(variation_id="v1").product_id == "p-a"
    assert not Product.objects.filter(product_id="p-b").exists()


@pytest.mark.django_db
def test_product_record_shape(saved_shirt):
    record = product_repository().get("p-shirt")
    assert record["price"] == "50000.00"
    assert record["image"] == record["cover_media"]["url"]
    assert record["created_at"] == 1700000000000
    assert make_product("x")["variations"] == []
