from django.urls import path

from .contacts import CSContactsAPIView
from .media import UploadAuthAPIView
from .order_cart import (
    AddToCartAPIView,
    CheckoutAPIView,
    ClearCartAPIView,
    InquiryLinkAPIView,
    RemoveCartItemAPIView,
    ShowCartAPIView,
    UpdateCartItemAPIView,
)
from .product import (
    DeleteProductAPIView,
    RelatedProductsAPIView,
    SaveProductAPIView,
    ShowProductsAPIView,
    ShowSpecificProductAPIView,
)
from .site_details import SaveSiteSettingsAPIView, ShowSiteSettingsAPIView
from .social_proof import SocialProofAPIView
from .testimonials import DeleteTestimonialAPIView, SaveTestimonialAPIView, ShowTestimonialsAPIView

urlpatterns = [
    # Catalog
    path("products/", ShowProductsAPIView.as_view(), name="show_products"),
    path("products/<str:product_id>/", ShowSpecificProductAPIView.as_view(), name="show_product"),
    path("products/<str:product_id>/related/", RelatedProductsAPIView.as_view(), name="related_products"),
    path("admin/products/", SaveProductAPIView.as_view(), name="save_product"),
    path("admin/products/<str:product_id>/", DeleteProductAPIView.as_view(), name="delete_product"),

    # Cart & checkout
    path("cart/", ShowCartAPIView.as_view(), name="show_cart"),
    path("cart/add/", AddToCartAPIView.as_view(), name="add_to_cart"),
    path("cart/update/", UpdateCartItemAPIView.as_view(), name="update_cart_item"),
    path("cart/remove/", RemoveCartItemAPIView.as_view(), name="remove_cart_item"),
    path("cart/clear/", ClearCartAPIView.as_view(), name="clear_cart"),
    path("checkout/", CheckoutAPIView.as_view(), name="checkout"),
    path("inquiry-link/", InquiryLinkAPIView.as_view(), name="inquiry_link"),

    # CS contacts
    path("admin/cs-contacts/", CSContactsAPIView.as_view(), name="cs_contacts"),
    path("admin/cs-contacts/<str:contact_id>/", CSContactsAPIView.as_view(), name="cs_contact_detail"),

    # Testimonials
    path("testimonials/", ShowTestimonialsAPIView.as_view(), name="show_testimonials"),
    path("admin/testimonials/", SaveTestimonialAPIView.as_view(), name="save_testimonial"),
    path("admin/testimonials/<str:testimonial_id>/", DeleteTestimonialAPIView.as_view(), name="delete_testimonial"),

    # Site settings, social proof, media
    path("settings/", ShowSiteSettingsAPIView.as_view(), name="show_settings"),
    path("admin/settings/", SaveSiteSettingsAPIView.as_view(), name="save_settings"),
    path("social-proof/", SocialProofAPIView.as_view(), name="social_proof"),
    path("upload-auth/", UploadAuthAPIView.as_view(), name="upload_auth"),
]
