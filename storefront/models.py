from decimal import Decimal

from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone

SETTINGS_ID = "main_settings"
ADMIN_CONFIG_ID = "admin_config"


def _default_cover():
    return {"type": "image", "url": ""}


# === PRODUCT SYSTEM ===
class Product(models.Model):
    product_id = models.CharField(primary_key=True, max_length=100)
    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    original_price = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    category = models.CharField(max_length=100, blank=True, default="", db_index=True)

    # {"type": "image"|"video", "url": "..."}
    cover_media = models.JSONField(default=_default_cover)
    # ordered list of cover_media-shaped objects
    gallery = models.JSONField(default=list, blank=True)

    is_featured = models.BooleanField(default=False, db_index=True)
    order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["order", "created_at"]

    def __str__(self):
        return self.name

    @property
    def cover_url(self) -> str:
        try:
            return (self.cover_media or {}).get("url") or ""
        except AttributeError:
            return ""


class Variation(models.Model):
    """
    Priced/stocked sub-option of a Product (size, color, ...).
    Deleting the product deletes its variations.
    """
    variation_id = models.CharField(primary_key=True, max_length=100)
    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="variations",
        db_index=True,
    )
    name = models.CharField(max_length=255, blank=True, default="")
    price = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    original_price = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    stock = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    order = models.PositiveIntegerField(default=0, db_index=True)

    class Meta:
        ordering = ["order", "variation_id"]
        indexes = [
            models.Index(fields=["product", "order"], name="variation_product_order_idx"),
        ]

    def __str__(self):
        return f"{self.name} :: {self.product_id}"


# === CUSTOMER SERVICE ===
class CSContact(models.Model):
    contact_id = models.CharField(primary_key=True, max_length=100)
    name = models.CharField(max_length=255)
    phone_number = models.CharField(max_length=30)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at", "contact_id"]
        verbose_name = "CS Contact"

    def __str__(self):
        return f"{self.name} ({self.phone_number})"


class Testimonial(models.Model):
    """
    Customer testimonial shown on the home page.
    The image is usually a screenshot of a chat, hosted on the media CDN.
    """
    testimonial_id = models.CharField(primary_key=True, max_length=100)
    image_url = models.URLField(max_length=1000)
    customer_name = models.CharField(max_length=255, blank=True, default="")
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True, db_index=True)
    order = models.PositiveIntegerField(default=0, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["order", "-created_at"]

    def __str__(self):
        return self.customer_name or self.testimonial_id


# === SINGLETONS ===
class SiteSettings(models.Model):
    """
    Hard singleton for appearance and content settings, keyed by "main_settings".
    """
    setting_id = models.CharField(primary_key=True, max_length=100, default=SETTINGS_ID)

    # Branding / theme
    site_name = models.CharField(max_length=255, blank=True, default="LuminaGoods")
    logo_url = models.CharField(max_length=1000, blank=True, default="")
    favicon_url = models.CharField(max_length=1000, blank=True, default="")
    theme_color = models.CharField(max_length=50, blank=True, default="Green")
    theme_font = models.CharField(max_length=50, blank=True, default="Default")

    # Hero / footer
    hero_image = models.CharField(max_length=1000, blank=True, default="")
    hero_title = models.CharField(max_length=255, blank=True, default="")
    hero_subtitle = models.TextField(blank=True, default="")
    footer_description = models.TextField(blank=True, default="")

    # About page
    about_header_title = models.CharField(max_length=255, blank=True, default="")
    about_header_desc = models.TextField(blank=True, default="")
    about_section_title = models.CharField(max_length=255, blank=True, default="")
    about_section_desc = models.TextField(blank=True, default="")
    about_section_image = models.CharField(max_length=1000, blank=True, default="")

    # Contact & social media
    contact_email = models.CharField(max_length=255, blank=True, default="")
    contact_phone = models.CharField(max_length=50, blank=True, default="")
    contact_address = models.TextField(blank=True, default="")
    instagram_url = models.CharField(max_length=1000, blank=True, default="")
    tiktok_url = models.CharField(max_length=1000, blank=True, default="")
    facebook_url = models.CharField(max_length=1000, blank=True, default="")
    youtube_url = models.CharField(max_length=1000, blank=True, default="")

    # Promotion window
    promo_label = models.CharField(max_length=255, blank=True, default="")
    promo_title = models.CharField(max_length=255, blank=True, default="")
    promo_subtitle = models.TextField(blank=True, default="")
    promo_end_at = models.BigIntegerField(null=True, blank=True, help_text="Epoch milliseconds")

    # Social proof popup
    social_proof_enabled = models.BooleanField(default=False)
    social_proof_names = models.TextField(blank=True, default="", help_text="One name per line")
    social_proof_product_ids = models.JSONField(default=list, blank=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Site Settings"
        verbose_name_plural = "Site Settings"

    def __str__(self):
        return self.site_name or "Site Settings"


class AdminCredentials(models.Model):
    """
    Singleton admin login, keyed by "admin_config".
    Only a password hash is stored (django.contrib.auth.hashers).
    """
    config_id = models.CharField(primary_key=True, max_length=100, default=ADMIN_CONFIG_ID)
    username = models.CharField(max_length=150)
    password_hash = models.CharField(max_length=255)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Admin Credentials"
        verbose_name_plural = "Admin Credentials"

    def __str__(self):
        return self.username
