from django.urls import path
from .auth_views import (
    AdminLoginAPIView,
    AdminTokenRefreshAPIView,
    ChangeCredentialsAPIView,
    LogoutView,
    csrf,
)

urlpatterns = [
    path("api/csrf/", csrf, name="csrf"),
    path("api/admin/login/", AdminLoginAPIView.as_view(), name="admin_login"),
    path("api/admin/token/refresh/", AdminTokenRefreshAPIView.as_view(), name="admin_token_refresh"),
    path("api/admin/logout/", LogoutView.as_view(), name="admin_logout"),
    path("api/admin/credentials/", ChangeCredentialsAPIView.as_view(), name="admin_credentials"),
]
