"""Main API URL router for /api/v1/."""
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from api.auth_views import (
    CookieTokenObtainPairView,
    CookieTokenRefreshView,
    CSRFTokenAPIView,
    LogoutAPIView,
)
from api.v1 import views as v1_views
from targets import target_views

router = DefaultRouter()
router.register(r"sales-targets", target_views.SalesTargetViewSet, basename="sales-target")

urlpatterns = [
    path("", include(router.urls)),
    # Auth
    path("auth/token/", CookieTokenObtainPairView.as_view(), name="token-obtain"),
    path("auth/token/refresh/", CookieTokenRefreshView.as_view(), name="token-refresh"),
    path("auth/logout/", LogoutAPIView.as_view(), name="logout"),
    path("auth/csrf/", CSRFTokenAPIView.as_view(), name="csrf"),
    path("auth/me/", v1_views.MeView.as_view(), name="me"),
    # Navigation
    path("navigation/sidebar/", v1_views.SidebarView.as_view(), name="sidebar"),
]
