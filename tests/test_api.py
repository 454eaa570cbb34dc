from urllib.parse import unquote

import pytest

from storefront.models import Product, Variation
from storefront.store import contact_repository, product_repository

from conftest import make_product

pytestmark = pytest.mark.django_db


@pytest.fixture
def active_contact():
    record = {"id": "cs-1", "name": "Sari", "phone_number": "6281234567890", "is_active": True}
    contact_repository().save(record)
    return record


# --------------------------
# Catalog
# --------------------------

def test_product_list_and_detail(api_client, saved_shirt):
    product_repository().save(make_product("p-mug", category="Home", price="40000", is_featured=True))

    res = api_client.get("/api/products/")
    assert res.status_code == 200
    assert {p["id"] for p in res.json()} == {"p-shirt", "p-mug"}

    featured = api_client.get("/api/products/", {"featured": "1"}).json()
    assert [p["id"] for p in featured] == ["p-mug"]

    detail = api_client.get("/api/products/p-shirt/")
    assert detail.status_code == 200
    assert detail.json()["name"] == "Shirt"
    assert api_client.get("/api/products/nope/").status_code == 404


def test_related_products_endpoint(api_client):
    repo = product_repository()
    for rec in (
        make_product("A", "shoes", 100, order=0),
        make_product("B", "shoes", 110, order=1),
        make_product("C", "shoes", 500, order=2),
        make_product("D", "bags", 105, order=3),
    ):
        repo.save(rec)
    res = api_client.get("/api/products/A/related/")
    assert res.status_code == 200
    assert [p["id"] for p in res.json()] == ["B", "C", "D"]


def test_frontend_key_is_enforced_when_configured(api_client, settings, saved_shirt):
    settings.FRONTEND_KEY = "k"
    assert api_client.get("/api/products/").status_code == 403
    assert api_client.get("/api/products/", HTTP_X_FRONTEND_KEY="k").status_code == 200


def test_admin_product_save_syncs_first_variation(api_client, admin_client):
    payload = {
        "name": "Scarf",
        "category": "Apparel",
        "cover_media": {"type": "video", "url": "https://cdn.example.com/scarf.mp4"},
        "variations": [
            {"name": "Silk", "price": "150000", "original_price": "200000", "stock": 2},
            {"name": "Cotton", "price": "90000", "stock": 5},
        ],
    }
    assert api_client.post("/api/admin/products/", payload, format="json").status_code == 403

    res = admin_client.post("/api/admin/products/", payload, format="json")
    assert res.status_code == 201
    product = res.json()["product"]
    assert product["price"] == "150000"
    assert product["original_price"] == "200000"
    assert product["cover_media"]["type"] == "video"
    assert all(v["id"] for v in product["variations"])

    stored = product_repository().get(product["id"])
    assert stored["price"] == "150000.00"
    assert [v["name"] for v in stored["variations"]] == ["Silk", "Cotton"]

    payload.update(id=product["id"], name="Scarf II")
    res = admin_client.post("/api/admin/products/", payload, format="json")
    assert res.status_code == 200
    assert res.json()["product"]["created_at"] == product["created_at"]


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "", "variations": [{"name": "One", "price": "1"}]},
        {"name": "No variations", "variations": []},
        {"name": "Unnamed variation", "variations": [{"name": "", "price": "1"}]},
    ],
)
def test_admin_product_save_validation(admin_client, payload):
    res = admin_client.post("/api/admin/products/", payload, format="json")
    assert res.status_code == 400
    assert "error" in res.json()


def test_admin_product_category_defaults_to_general(admin_client):
    res = admin_client.post(
        "/api/admin/products/", {"name": "Mug", "category": "  ", "variations": [{"name": "One", "price": "1"}]},
        format="json",
    )
    assert res.status_code == 201
    assert res.json()["product"]["category"] == "General"
    assert product_repository().get(res.json()["product_id"])["category"] == "General"


@pytest.mark.parametrize("price", ["NaN", "Infinity", "-1", "abc"])
def test_admin_product_rejects_bad_prices(admin_client, price):
    payload = {"name": "Mug", "variations": [{"name": "One", "price": price}]}
    res = admin_client.post("/api/admin/products/", payload, format="json")
    assert res.status_code == 400
    assert "error" in res.json()

    payload["variations"][0].update(price="10", original_price=price)
    assert admin_client.post("/api/admin/products/", payload, format="json").status_code == 400

    assert product_repository().all() == []
    assert not Product.objects.exists()


def test_variation_id_stays_with_its_product(admin_client):
    first = {"id": "p-a", "name": "A", "variations": [{"id": "v1", "name": "One", "price": "10"}]}
    assert admin_client.post("/api/admin/products/", first, format="json").status_code == 201

    second = {"id": "p-b", "name": "B", "variations": [{"id": "v1", "name": "Taken", "price": "20"}]}
    res = admin_client.post("/api/admin/products/", second, format="json")
    assert res.status_code == 400
    assert "p-a" in res.json()["error"]
    assert product_repository().get("p-b") is None
    assert Variation.objects.get(variation_id="v1").product_id == "p-a"
    assert [v["id"] for v in product_repository().get("p-a")["variations"]] == ["v1"]

    dup = {"id": "p-c", "name": "C", "variations": [{"id": "v9", "name": "X"}, {"id": "v9", "name": "Y"}]}
    assert admin_client.post("/api/admin/products/", dup, format="json").status_code == 400

    first["name"] = "A renamed"
    assert admin_client.post("/api/admin/products/", first, format="json").status_code == 200


def test_admin_product_delete(admin_client, saved_shirt):
    assert admin_client.delete("/api/admin/products/p-shirt/").status_code == 200
    assert product_repository().get("p-shirt") is None
    assert admin_client.delete("/api/admin/products/p-shirt/").status_code == 404


# --------------------------
# Cart & checkout
# --------------------------

def test_cart_requires_device(api_client):
    assert api_client.get("/api/cart/").status_code == 400


def test_add_update_remove(device_client, saved_shirt):
    res = device_client.post("/api/cart/add/", {"product_id": "p-shirt", "variation_id": "v-l"}, format="json")
    assert res.status_code == 200
    assert res.json()["is_cart_open"] is True
    device_client.post("/api/cart/add/", {"product_id": "p-shirt", "variation_id": "v-l"}, format="json")

    cart = device_client.get("/api/cart/").json()
    assert cart["count"] == 2
    assert len(cart["items"]) == 1
    assert cart["total"] == "100000.00"

    res = device_client.post(
        "/api/cart/update/", {"product_id": "p-shirt", "variation_id": "v-l", "quantity": 5}, format="json"
    )
    assert res.json()["count"] == 5

    res = device_client.post("/api/cart/update/", {"product_id": "p-shirt", "variation_id": "v-l", "quantity": 0},
                             format="json")
    assert res.json()["items"] == []

    device_client.post("/api/cart/add/", {"product_id": "p-shirt"}, format="json")
    res = device_client.post("/api/cart/remove/", {"product_id": "p-shirt", "variation_id": ""}, format="json")
    assert res.json()["count"] == 0


def test_add_unknown_product_or_variation(device_client, saved_shirt):
    assert device_client.post("/api/cart/add/", {"product_id": "nope"}, format="json").status_code == 404
    res = device_client.post("/api/cart/add/", {"product_id": "p-shirt", "variation_id": "v-xl"}, format="json")
    assert res.status_code == 404


def test_carts_are_per_device(api_client, device_client, saved_shirt):
    device_client.post("/api/cart/add/", {"product_id": "p-shirt"}, format="json")
    other = api_client.get("/api/cart/", HTTP_X_DEVICE_UUID="someone-else").json()
    assert other["count"] == 0


def test_clear_cart(device_client, saved_shirt):
    device_client.post("/api/cart/add/", {"product_id": "p-shirt"}, format="json")
    assert device_client.post("/api/cart/clear/").json()["count"] == 0
    assert device_client.get("/api/cart/").json()["count"] == 0


def test_checkout_empty_cart(device_client, active_contact):
    res = device_client.post("/api/checkout/", {"name": "A", "address": "B", "phone": "C"}, format="json")
    assert res.status_code == 400


def test_checkout_missing_fields(device_client, saved_shirt, active_contact):
    device_client.post("/api/cart/add/", {"product_id": "p-shirt"}, format="json")
    res = device_client.post("/api/checkout/", {"name": "Andi"}, format="json")
    assert res.status_code == 400
    assert res.json()["missing"] == ["address", "phone"]
    assert device_client.get("/api/cart/").json()["count"] == 1


def test_checkout_without_active_contact(device_client, saved_shirt):
    contact_repository().save({"id": "cs-x", "name": "Off", "phone_number": "62800", "is_active": False})
    device_client.post("/api/cart/add/", {"product_id": "p-shirt"}, format="json")
    res = device_client.post("/api/checkout/", {"name": "A", "address": "B", "phone": "C"}, format="json")
    assert res.status_code == 409


def test_checkout_hands_off_and_clears_cart(device_client, saved_shirt, active_contact):
    for _ in range(2):
        device_client.post("/api/cart/add/", {"product_id": "p-shirt", "variation_id": "v-l"}, format="json")
    res = device_client.post(
        "/api/checkout/", {"name": "Andi", "address": "Jl. Merdeka 1", "phone": "0812"}, format="json"
    )
    assert res.status_code == 200
    body = res.json()
    assert body["state"] == "order_sent"
    assert body["whatsapp_url"].startswith("https://wa.me/6281234567890?text=")
    message = unquote(body["whatsapp_url"].split("?text=", 1)[1])
    assert "Shirt (L) x 2" in message
    assert "Total Akhir: Rp 100.000" in message
    assert device_client.get("/api/cart/").json()["count"] == 0


def test_inquiry_link(api_client, active_contact):
    body = api_client.get("/api/inquiry-link/").json()
    assert body["available"] is True
    assert "LuminaGoods" in body["message"]

    contact_repository().save(dict(active_contact, is_active=False))
    assert api_client.get("/api/inquiry-link/").json() == {"available": False}


# --------------------------
# CS contacts
# --------------------------

def test_cs_contacts_crud(api_client, admin_client):
    assert api_client.get("/api/admin/cs-contacts/").status_code == 403

    res = admin_client.post(
        "/api/admin/cs-contacts/", {"name": "Dewi", "phone_number": "+62 811-222"}, format="json"
    )
    assert res.status_code == 201
    contact = res.json()["contact"]
    assert contact["phone_number"] == "62811222"
    assert contact["is_active"] is True

    assert admin_client.post("/api/admin/cs-contacts/", {"name": "X"}, format="json").status_code == 400
    assert [c["id"] for c in admin_client.get("/api/admin/cs-contacts/").json()] == [contact["id"]]

    assert admin_client.delete(f"/api/admin/cs-contacts/{contact['id']}/").status_code == 200
    assert admin_client.get("/api/admin/cs-contacts/").json() == []
    assert admin_client.delete(f"/api/admin/cs-contacts/{contact['id']}/").status_code == 404


# --------------------------
# Testimonials
# --------------------------

def test_testimonials(api_client, admin_client):
    shown = admin_client.post(
        "/api/admin/testimonials/",
        {"customer_name": "Rina", "image_url": "https://cdn.example.com/t1.jpg", "order": 2},
        format="json",
    ).json()["testimonial"]
    hidden = admin_client.post(
        "/api/admin/testimonials/",
        {"customer_name": "Budi", "image_url": "https://cdn.example.com/t2.jpg", "is_active": False, "order": 1},
        format="json",
    ).json()["testimonial"]

    public = api_client.get("/api/testimonials/", {"all": "1"}).json()
    assert [t["id"] for t in public] == [shown["id"]]

    everything = admin_client.get("/api/testimonials/", {"all": "1"}).json()
    assert [t["id"] for t in everything] == [hidden["id"], shown["id"]]

    assert admin_client.post("/api/admin/testimonials/", {"customer_name": "Tanpa Foto"}, format="json").status_code == 400
    assert admin_client.delete(f"/api/admin/testimonials/{hidden['id']}/").status_code == 200
    assert admin_client.delete(f"/api/admin/testimonials/{hidden['id']}/").status_code == 404


def test_testimonial_needs_only_an_image(admin_client):
    res = admin_client.post("/api/admin/testimonials/", {"image_url": "https://cdn/x.jpg"}, format="json")
    assert res.status_code == 201
    saved = res.json()["testimonial"]
    assert saved["customer_name"] == ""
    assert saved["description"] == ""
    assert saved["is_active"] is True

    res = admin_client.post("/api/admin/testimonials/", {"id": saved["id"], "order": 3}, format="json")
    assert res.status_code == 200
    assert res.json()["testimonial"]["image_url"] == "https://cdn/x.jpg"


# --------------------------
# Site settings & social proof
# --------------------------

def test_public_settings(api_client):
    body = api_client.get("/api/settings/").json()
    assert body["site_name"] == "LuminaGoods"
    assert body["theme"]["primary"] == "#13ec13"
    assert body["theme"]["heading_font"] == "Inter"
    assert body["show_promotion"] is False
    assert body["promo_time_left"] == {"days": 0, "hours": 0, "minutes": 0, "seconds": 0}


def test_admin_settings_update(api_client, admin_client):
    assert api_client.post("/api/admin/settings/", {"site_name": "X"}, format="json").status_code == 403

    res = admin_client.post(
        "/api/admin/settings/",
        {"site_name": "Toko Kita", "theme_color": "Violet", "theme_font": "Bold", "promo_title": "Flash Sale"},
        format="json",
    )
    assert res.status_code == 200

    body = api_client.get("/api/settings/").json()
    assert body["site_name"] == "Toko Kita"
    assert body["theme"] == {
        "color": "Violet",
        "primary": "#8b5cf6",
        "font": "Bold",
        "heading_font": "Fraunces",
        "body_font": "Space Grotesk",
    }
    assert body["show_promotion"] is True
    assert admin_client.post("/api/admin/settings/", {}, format="json").status_code == 400


def test_social_proof_endpoint(api_client, admin_client, saved_shirt):
    body = api_client.get("/api/social-proof/").json()
    assert body["enabled"] is False
    assert body["notification"] is None

    admin_client.post(
        "/api/admin/settings/",
        {"social_proof_enabled": True, "social_proof_names": "Rina\nDewi", "social_proof_product_ids": ["p-shirt"]},
        format="json",
    )
    body = api_client.get("/api/social-proof/").json()
    assert body["enabled"] is True
    assert body["notification"]["product_id"] == "p-shirt"
    assert body["initial_delay"] == 5.0
    assert body["next_interval_range"] == [15.0, 40.0]
