"""
URL configuration for backend project.
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('django-admin/', admin.site.urls),

    # Storefront + back office API routes
    path('api/', include('storefront.urls')),

    # Admin auth endpoints (access in JSON, refresh via HttpOnly cookie)
    path('', include('storefront.auth_urls')),
]
