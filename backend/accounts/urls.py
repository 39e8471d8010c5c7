# accounts/urls.py
"""
URL configuration for accounts/auth API.

Endpoints:
- /auth/ - Authentication (register, login, refresh, logout, me)
- /access-level/ - Current user's access level
- /admin/users/ - User access administration
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    AccessLevelView,
    AdminUserAccessLevelView,
    AdminUserListView,
    LoginView,
    LogoutView,
    MeView,
    RegisterView,
)

app_name = "accounts"

urlpatterns = [
    # ==========================================================================
    # Authentication
    # ==========================================================================
    path("auth/register/", RegisterView.as_view(), name="register"),
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("auth/me/", MeView.as_view(), name="me"),

    # ==========================================================================
    # Access levels
    # ==========================================================================
    path("access-level/", AccessLevelView.as_view(), name="access-level"),
    path("admin/users/", AdminUserListView.as_view(), name="admin-user-list"),
    path("admin/users/<int:pk>/access-level/", AdminUserAccessLevelView.as_view(), name="admin-user-access-level"),
]
