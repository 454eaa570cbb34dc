from django.contrib import admin
from .models import AdminCredentials, CSContact, Product, SiteSettings, Testimonial, Variation


class VariationInline(admin.TabularInline):
    model = Variation
    extra = 0
    fields = ("variation_id", "name", "price", "original_price", "stock", "order")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("product_id", "name", "category", "price", "is_featured", "order", "cover_url")
    list_filter = ("category", "is_featured")
    search_fields = ("product_id", "name")
    inlines = [VariationInline]


@admin.register(CSContact)
class CSContactAdmin(admin.ModelAdmin):
    list_display = ("contact_id", "name", "phone_number", "is_active")
    list_filter = ("is_active",)


@admin.register(Testimonial)
class TestimonialAdmin(admin.ModelAdmin):
    list_display = ("testimonial_id", "customer_name", "is_active", "order")
    list_filter = ("is_active",)


admin.site.register(SiteSettings)
admin.site.register(AdminCredentials, readonly_fields=("password_hash",))
