"""JWT authentication read from the ``Authorization`` header or a cookie."""

from django.conf import settings
from django.middleware.csrf import CsrfViewMiddleware
from rest_framework import exceptions
from rest_framework.request import Request
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError


def _access_cookie_name() -> str:
    return getattr(settings, "JWT_AUTH_COOKIE", "access_token")


class CookieJWTAuthentication(JWTAuthentication):
    """Bearer header first, then the HttpOnly access cookie set at login.

    A bad bearer token is a hard 401. A bad cookie is ignored so that
    ``AllowAny`` views (token refresh, logout) still run once the access
    cookie has expired. Cookie-authenticated requests must pass CSRF.
    """

    def _enforce_csrf(self, request: Request) -> None:
        check = CsrfViewMiddleware(lambda req: None)
        check.process_request(request._request)
        reason = check.process_view(request._request, None, (), {})
        if reason:
            raise exceptions.PermissionDenied(f"CSRF Failed: {reason}")

    def _from_header(self, request: Request):
        header = self.get_header(request)
        if header is None:
            return None
        raw_token = self.get_raw_token(header)
        if raw_token is None:
            return None
        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token

    def _from_cookie(self, request: Request):
        raw_token = request.COOKIES.get(_access_cookie_name())
        if not raw_token:
            return None
        try:
            validated_token = self.get_validated_token(raw_token)
        except (InvalidToken, TokenError):
            return None
        self._enforce_csrf(request)
        return self.get_user(validated_token), validated_token

    def authenticate(self, request: Request):
        return self._from_header(request) or self._from_cookie(request)
