"""Authentication API views with HttpOnly JWT cookies."""

import logging
from datetime import timedelta

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.middleware import csrf
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import ensure_csrf_cookie
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from api.v1.serializers import CustomTokenObtainPairSerializer

logger = logging.getLogger("indana")


class SafeScopedRateThrottle(ScopedRateThrottle):
    """Scoped throttle with a strict fallback when the scope has no rate."""

    def get_rate(self):
        try:
            return super().get_rate()
        except ImproperlyConfigured:
            logger.warning("Throttle scope '%s' not configured, applying strict default 5/min.", self.scope)
            return "5/min"


def _cookie_options() -> dict:
    return {
        "httponly": True,
        "secure": getattr(settings, "JWT_AUTH_COOKIE_SECURE", not settings.DEBUG),
        "samesite": getattr(settings, "JWT_AUTH_COOKIE_SAMESITE", "Lax"),
        "path": getattr(settings, "JWT_AUTH_COOKIE_PATH", "/"),
        "domain": getattr(settings, "JWT_AUTH_COOKIE_DOMAIN", None),
    }


def _seconds(delta: timedelta) -> int:
    return int(delta.total_seconds())


def _set_auth_cookies(response: Response, *, access: str, refresh: str | None) -> None:
    options = _cookie_options()
    response.set_cookie(
        getattr(settings, "JWT_AUTH_COOKIE", "access_token"),
        access,
        max_age=_seconds(settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"]),
        **options,
    )
    if refresh:
        response.set_cookie(
            getattr(settings, "JWT_AUTH_REFRESH_COOKIE", "refresh_token"),
            refresh,
            max_age=_seconds(settings.SIMPLE_JWT["REFRESH_TOKEN_LIFETIME"]),
            **options,
        )


def _clear_auth_cookies(response: Response) -> None:
    path = getattr(settings, "JWT_AUTH_COOKIE_PATH", "/")
    domain = getattr(settings, "JWT_AUTH_COOKIE_DOMAIN", None)
    for name in (
        getattr(settings, "JWT_AUTH_COOKIE", "access_token"),
        getattr(settings, "JWT_AUTH_REFRESH_COOKIE", "refresh_token"),
    ):
        response.delete_cookie(name, path=path, domain=domain)


class CookieTokenObtainPairView(TokenObtainPairView):
    """POST /api/v1/auth/token/ - email + password login, sets auth cookies."""

    serializer_class = CustomTokenObtainPairSerializer
    throttle_classes = [SafeScopedRateThrottle]
    throttle_scope = "auth_burst"
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        validated = serializer.validated_data

        body = {"user": validated["user"]}
        if getattr(settings, "JWT_RETURN_TOKENS_IN_BODY", False):
            body.update({"access": validated["access"], "refresh": validated["refresh"]})

        response = Response(body, status=status.HTTP_200_OK)
        _set_auth_cookies(response, access=validated["access"], refresh=validated["refresh"])
        logger.info("User %s signed in", validated["user"]["email"])
        return response


class CookieTokenRefreshView(TokenRefreshView):
    """POST /api/v1/auth/token/refresh/ - body token or refresh cookie."""

    throttle_classes = [SafeScopedRateThrottle]
    throttle_scope = "auth_sustained"
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        payload = request.data.copy()
        if not payload.get("refresh"):
            cookie_token = request.COOKIES.get(
                getattr(settings, "JWT_AUTH_REFRESH_COOKIE", "refresh_token")
            )
            if cookie_token:
                payload["refresh"] = cookie_token

        serializer = self.get_serializer(data=payload)
        serializer.is_valid(raise_exception=True)
        validated = serializer.validated_data

        access = validated["access"]
        refresh = validated.get("refresh", payload.get("refresh"))
        body = {"detail": "Token diperbarui."}
        if getattr(settings, "JWT_RETURN_TOKENS_IN_BODY", False):
            body.update({"access": access, "refresh": refresh})

        response = Response(body, status=status.HTTP_200_OK)
        _set_auth_cookies(response, access=access, refresh=refresh)
        return response


class LogoutAPIView(APIView):
    """POST /api/v1/auth/logout/ - blacklist the refresh token, clear cookies."""

    permission_classes = [permissions.AllowAny]

    def post(self, request):
        raw_refresh = request.data.get("refresh") or request.COOKIES.get(
            getattr(settings, "JWT_AUTH_REFRESH_COOKIE", "refresh_token")
        )
        if raw_refresh:
            try:
                RefreshToken(raw_refresh).blacklist()
            except TokenError as exc:
                logger.info("Logout with unusable refresh token: %s", exc)

        response = Response(status=status.HTTP_204_NO_CONTENT)
        _clear_auth_cookies(response)
        return response


@method_decorator(ensure_csrf_cookie, name="dispatch")
class CSRFTokenAPIView(APIView):
    """GET /api/v1/auth/csrf/ - return a CSRF token and set its cookie."""

    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return Response({"csrfToken": csrf.get_token(request)}, status=status.HTTP_200_OK)
