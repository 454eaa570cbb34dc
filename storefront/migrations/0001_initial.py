from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import storefront.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("product_id", models.CharField(max_length=100, primary_key=True, serialize=False)),
                ("name", models.CharField(db_index=True, max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("original_price", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ("category", models.CharField(blank=True, db_index=True, default="", max_length=100)),
                ("cover_media", models.JSONField(default=storefront.models._default_cover)),
                ("gallery", models.JSONField(blank=True, default=list)),
                ("is_featured", models.BooleanField(db_index=True, default=False)),
                ("order", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["order", "created_at"],
            },
        ),
        migrations.CreateModel(
            name="CSContact",
            fields=[
                ("contact_id", models.CharField(max_length=100, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("phone_number", models.CharField(max_length=30)),
                ("is_active", models.BooleanField(db_index=True, default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["created_at", "contact_id"],
                "verbose_name": "CS Contact",
            },
        ),
        migrations.CreateModel(
            name="Testimonial",
            fields=[
                ("testimonial_id", models.CharField(max_length=100, primary_key=True, serialize=False)),
                ("image_url", models.URLField(max_length=1000)),
                ("customer_name", models.CharField(blank=True, default="", max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("is_active", models.BooleanField(db_index=True, default=True)),
                ("order", models.PositiveIntegerField(db_index=True, default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["order", "-created_at"],
            },
        ),
        migrations.CreateModel(
            name="SiteSettings",
            fields=[
                ("setting_id", models.CharField(default="main_settings", max_length=100, primary_key=True, serialize=False)),
                ("site_name", models.CharField(blank=True, default="LuminaGoods", max_length=255)),
                ("logo_url", models.CharField(blank=True, default="", max_length=1000)),
                ("favicon_url", models.CharField(blank=True, default="", max_length=1000)),
                ("theme_color", models.CharField(blank=True, default="Green", max_length=50)),
                ("theme_font", models.CharField(blank=True, default="Default", max_length=50)),
                ("hero_image", models.CharField(blank=True, default="", max_length=1000)),
                ("hero_title", models.CharField(blank=True, default="", max_length=255)),
                ("hero_subtitle", models.TextField(blank=True, default="")),
                ("footer_description", models.TextField(blank=True, default="")),
                ("about_header_title", models.CharField(blank=True, default="", max_length=255)),
                ("about_header_desc", models.TextField(blank=True, default="")),
                ("about_section_title", models.CharField(blank=True, default="", max_length=255)),
                ("about_section_desc", models.TextField(blank=True, default="")),
                ("about_section_image", models.CharField(blank=True, default="", max_length=1000)),
                ("contact_email", models.CharField(blank=True, default="", max_length=255)),
                ("contact_phone", models.CharField(blank=True, default="", max_length=50)),
                ("contact_address", models.TextField(blank=True, default="")),
                ("instagram_url", models.CharField(blank=True, default="", max_length=1000)),
                ("tiktok_url", models.CharField(blank=True, default="", max_length=1000)),
                ("facebook_url", models.CharField(blank=True, default="", max_length=1000)),
                ("youtube_url", models.CharField(blank=True, default="", max_length=1000)),
                ("promo_label", models.CharField(blank=True, default="", max_length=255)),
                ("promo_title", models.CharField(blank=True, default="", max_length=255)),
                ("promo_subtitle", models.TextField(blank=True, default="")),
                ("promo_end_at", models.BigIntegerField(blank=True, help_text="Epoch milliseconds", null=True)),
                ("social_proof_enabled", models.BooleanField(default=False)),
                ("social_proof_names", models.TextField(blank=True, default="", help_text="One name per line")),
                ("social_proof_product_ids", models.JSONField(blank=True, default=list)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Site Settings",
                "verbose_name_plural": "Site Settings",
            },
        ),
        migrations.CreateModel(
            name="AdminCredentials",
            fields=[
                ("config_id", models.CharField(default="admin_config", max_length=100, primary_key=True, serialize=False)),
                ("username", models.CharField(max_length=150)),
                ("password_hash", models.CharField(max_length=255)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Admin Credentials",
                "verbose_name_plural": "Admin Credentials",
            },
        ),
        migrations.CreateModel(
            name="Variation",
            fields=[
                ("variation_id", models.CharField(max_length=100, primary_key=True, serialize=False)),
                ("name", models.CharField(blank=True, default="", max_length=255)),
                ("price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("original_price", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ("stock", models.IntegerField(default=0, validators=[django.core.validators.MinValueValidator(0)])),
                ("order", models.PositiveIntegerField(db_index=True, default=0)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="variations",
                        to="storefront.product",
                    ),
                ),
            ],
            options={
                "ordering": ["order", "variation_id"],
                "indexes": [models.Index(fields=["product", "order"], name="variation_product_order_idx")],
            },
        ),
    ]
